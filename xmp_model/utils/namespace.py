"""
namespace.py
Description: Static schema registry for XMP metadata
    This module maps namespace prefixes to their URIs and lists the known
    properties of each schema together with the value shape they are declared with.
Author: Eric Hiss (GitHub: EricRollei)
Contact: [eric@historic.camera, eric@rollei.us]
Version: 1.0.0
Date: [March 2025]
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.

Dual License:
1. Non-Commercial Use: This software is licensed under the terms of the
   Creative Commons Attribution-NonCommercial 4.0 International License.
   To view a copy of this license, visit http://creativecommons.org/licenses/by-nc/4.0/

2. Commercial Use: For commercial use, a separate license is required.
   Please contact Eric Hiss at [eric@historic.camera, eric@rollei.us] for licensing options.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED,
INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A
PARTICULAR PURPOSE AND NONINFRINGEMENT.

Dependencies:

"""
# xmp_model/utils/namespace.py
import re
from typing import Dict, Optional

from ..models.values import ValueShape

# Prefixes of the most commonly edited schemas
XMP_PREFIX_DUBLIN_CORE = 'dc'
XMP_PREFIX_XMP_BASIC = 'xmp'
XMP_PREFIX_XMP_RIGHTS = 'xmpRights'
XMP_PREFIX_PHOTOSHOP = 'photoshop'

# Syntax namespaces
X_NS = 'adobe:ns:meta/'
RDF_NS = 'http://www.w3.org/1999/02/22-rdf-syntax-ns#'
XML_NS = 'http://www.w3.org/XML/1998/namespace'

# Base of prefixes made up for namespaces that arrive without a usable one
GENERATED_PREFIX = 'ext'

# ElementTree keeps ns0, ns1, ... for prefixes of its own
_ELEMENTTREE_PREFIX = re.compile(r'^ns\d+$')

_S = ValueShape.SCALAR
_SEQ = ValueShape.ORDERED
_BAG = ValueShape.UNORDERED
_ALT = ValueShape.LANG_ALT
_STRUCT = ValueShape.STRUCTURE


class NamespaceManager:
    """Manages the XMP namespaces and schemas known to the model"""

    # Namespaces that only carry packet syntax, never properties
    SYNTAX_NAMESPACES = {
        'x': X_NS,
        'rdf': RDF_NS,
    }

    NAMESPACES = {
        'dc': 'http://purl.org/dc/elements/1.1/',
        'xmp': 'http://ns.adobe.com/xap/1.0/',
        'xmpRights': 'http://ns.adobe.com/xap/1.0/rights/',
        'xmpMM': 'http://ns.adobe.com/xap/1.0/mm/',
        'xmpBJ': 'http://ns.adobe.com/xap/1.0/bj/',
        'xmpTPg': 'http://ns.adobe.com/xap/1.0/t/pg/',
        'xmpDM': 'http://ns.adobe.com/xmp/1.0/DynamicMedia/',
        'pdf': 'http://ns.adobe.com/pdf/1.3/',
        'photoshop': 'http://ns.adobe.com/photoshop/1.0/',
        'crs': 'http://ns.adobe.com/camera-raw-settings/1.0/',
        'tiff': 'http://ns.adobe.com/tiff/1.0/',
        'exif': 'http://ns.adobe.com/exif/1.0/',
        'aux': 'http://ns.adobe.com/exif/1.0/aux/',
        'Iptc4xmpCore': 'http://iptc.org/std/Iptc4xmpCore/1.0/xmlns/',
        'mwg-rs': 'http://www.metadataworkinggroup.com/schemas/regions/',
        'mwg-kw': 'http://www.metadataworkinggroup.com/schemas/keywords/',
        # Structure field namespaces
        'stEvt': 'http://ns.adobe.com/xap/1.0/sType/ResourceEvent#',
        'stRef': 'http://ns.adobe.com/xap/1.0/sType/ResourceRef#',
        'stDim': 'http://ns.adobe.com/xap/1.0/sType/Dimensions#',
        'stArea': 'http://ns.adobe.com/xmp/sType/Area#',
        'stJob': 'http://ns.adobe.com/xap/1.0/sType/Job#',
        'xmpG': 'http://ns.adobe.com/xap/1.0/g/',
        'xmpGImg': 'http://ns.adobe.com/xap/1.0/g/img/',
    }

    # Known properties per schema and the shape each is declared with
    SCHEMAS: Dict[str, Dict[str, ValueShape]] = {
        'dc': {
            'contributor': _BAG, 'coverage': _S, 'creator': _SEQ, 'date': _SEQ,
            'description': _ALT, 'format': _S, 'identifier': _S, 'language': _BAG,
            'publisher': _BAG, 'relation': _BAG, 'rights': _ALT, 'source': _S,
            'subject': _BAG, 'title': _ALT, 'type': _BAG,
        },
        'xmp': {
            'Advisory': _BAG, 'BaseURL': _S, 'CreateDate': _S, 'CreatorTool': _S,
            'Identifier': _BAG, 'Label': _S, 'MetadataDate': _S, 'ModifyDate': _S,
            'Nickname': _S, 'Rating': _S, 'Thumbnails': _STRUCT,
        },
        'xmpRights': {
            'Certificate': _S, 'Marked': _S, 'Owner': _BAG, 'UsageTerms': _ALT,
            'WebStatement': _S,
        },
        'xmpMM': {
            'DerivedFrom': _STRUCT, 'DocumentID': _S, 'History': _STRUCT,
            'Ingredients': _STRUCT, 'InstanceID': _S, 'ManagedFrom': _STRUCT,
            'Manager': _S, 'ManageTo': _S, 'ManageUI': _S, 'ManagerVariant': _S,
            'OriginalDocumentID': _S, 'RenditionClass': _S, 'RenditionParams': _S,
            'VersionID': _S, 'Versions': _STRUCT,
        },
        'xmpBJ': {
            'JobRef': _STRUCT,
        },
        'xmpTPg': {
            'Colorants': _STRUCT, 'Fonts': _STRUCT, 'MaxPageSize': _STRUCT,
            'NPages': _S, 'PlateNames': _SEQ,
        },
        'xmpDM': {
            'album': _S, 'artist': _S, 'composer': _S, 'duration': _STRUCT,
            'genre': _S, 'trackNumber': _S,
        },
        'pdf': {
            'Keywords': _S, 'PDFVersion': _S, 'Producer': _S, 'Trapped': _S,
        },
        'photoshop': {
            'AuthorsPosition': _S, 'CaptionWriter': _S, 'Category': _S, 'City': _S,
            'ColorMode': _S, 'Country': _S, 'Credit': _S, 'DateCreated': _S,
            'DocumentAncestors': _BAG, 'Headline': _S, 'History': _S,
            'ICCProfile': _S, 'Instructions': _S, 'Source': _S, 'State': _S,
            'SupplementalCategories': _BAG, 'TextLayers': _STRUCT,
            'TransmissionReference': _S, 'Urgency': _S,
        },
        'crs': {
            'Version': _S, 'WhiteBalance': _S, 'Temperature': _S, 'Tint': _S,
            'Exposure': _S, 'Shadows': _S, 'Brightness': _S, 'Contrast': _S,
            'Saturation': _S, 'Sharpness': _S, 'HasCrop': _S, 'HasSettings': _S,
            'RawFileName': _S, 'ToneCurve': _SEQ, 'ToneCurveName': _S,
        },
        'tiff': {
            'Artist': _S, 'BitsPerSample': _SEQ, 'Compression': _S, 'Copyright': _ALT,
            'DateTime': _S, 'ImageDescription': _ALT, 'ImageLength': _S,
            'ImageWidth': _S, 'Make': _S, 'Model': _S, 'Orientation': _S,
            'PhotometricInterpretation': _S, 'PlanarConfiguration': _S,
            'PrimaryChromaticities': _SEQ, 'ReferenceBlackWhite': _SEQ,
            'ResolutionUnit': _S, 'SamplesPerPixel': _S, 'Software': _S,
            'TransferFunction': _SEQ, 'WhitePoint': _SEQ, 'XResolution': _S,
            'YCbCrCoefficients': _SEQ, 'YCbCrPositioning': _S,
            'YCbCrSubSampling': _SEQ, 'YResolution': _S,
        },
        'exif': {
            'ApertureValue': _S, 'BrightnessValue': _S, 'CFAPattern': _STRUCT,
            'ColorSpace': _S, 'ComponentsConfiguration': _SEQ,
            'CompressedBitsPerPixel': _S, 'Contrast': _S, 'CustomRendered': _S,
            'DateTimeDigitized': _S, 'DateTimeOriginal': _S,
            'DeviceSettingDescription': _STRUCT, 'DigitalZoomRatio': _S,
            'ExifVersion': _S, 'ExposureBiasValue': _S, 'ExposureIndex': _S,
            'ExposureMode': _S, 'ExposureProgram': _S, 'ExposureTime': _S,
            'FileSource': _S, 'Flash': _STRUCT, 'FlashEnergy': _S,
            'FlashpixVersion': _S, 'FNumber': _S, 'FocalLength': _S,
            'FocalLengthIn35mmFilm': _S, 'FocalPlaneResolutionUnit': _S,
            'FocalPlaneXResolution': _S, 'FocalPlaneYResolution': _S,
            'GainControl': _S, 'GPSAltitude': _S, 'GPSAltitudeRef': _S,
            'GPSLatitude': _S, 'GPSLongitude': _S, 'GPSMapDatum': _S,
            'GPSTimeStamp': _S, 'GPSVersionID': _S, 'ImageUniqueID': _S,
            'ISOSpeedRatings': _SEQ, 'LightSource': _S, 'MaxApertureValue': _S,
            'MeteringMode': _S, 'OECF': _STRUCT, 'PixelXDimension': _S,
            'PixelYDimension': _S, 'RelatedSoundFile': _S, 'Saturation': _S,
            'SceneCaptureType': _S, 'SceneType': _S, 'SensingMethod': _S,
            'Sharpness': _S, 'ShutterSpeedValue': _S, 'SpatialFrequencyResponse': _STRUCT,
            'SpectralSensitivity': _S, 'SubjectArea': _SEQ, 'SubjectDistance': _S,
            'SubjectDistanceRange': _S, 'SubjectLocation': _SEQ,
            'UserComment': _ALT, 'WhiteBalance': _S,
        },
        'aux': {
            'Firmware': _S, 'FlashCompensation': _S, 'ImageNumber': _S,
            'Lens': _S, 'LensID': _S, 'LensInfo': _S, 'OwnerName': _S,
            'SerialNumber': _S,
        },
        'Iptc4xmpCore': {
            'CountryCode': _S, 'CreatorContactInfo': _STRUCT, 'IntellectualGenre': _S,
            'Location': _S, 'Scene': _BAG, 'SubjectCode': _BAG,
        },
        'mwg-rs': {
            'Regions': _STRUCT,
        },
        'mwg-kw': {
            'Keywords': _STRUCT,
        },
    }

    @classmethod
    def get_uri(cls, prefix: str) -> Optional[str]:
        """
        Look up the namespace URI of a registered prefix

        Args:
            prefix: Namespace prefix, e.g. "dc"

        Returns:
            str or None: Namespace URI if the prefix is registered
        """
        return cls.NAMESPACES.get(prefix)

    @classmethod
    def get_prefix(cls, uri: str) -> Optional[str]:
        """Find the registered prefix for a namespace URI"""
        for prefix, ns_uri in cls.NAMESPACES.items():
            if ns_uri == uri:
                return prefix
        return None

    @classmethod
    def is_known_namespace(cls, prefix: str) -> bool:
        return prefix in cls.NAMESPACES

    @classmethod
    def is_reserved_prefix(cls, prefix: str) -> bool:
        """Prefixes taken by packet syntax or the serializer, never by properties"""
        return (prefix in cls.SYNTAX_NAMESPACES or prefix.lower().startswith('xml')
                or _ELEMENTTREE_PREFIX.match(prefix) is not None)

    @classmethod
    def is_known_property(cls, prefix: str, name: str) -> bool:
        return name in cls.SCHEMAS.get(prefix, {})

    @classmethod
    def get_property_shape(cls, prefix: str, name: str) -> Optional[ValueShape]:
        """
        Get the declared shape of a property

        Args:
            prefix: Namespace prefix
            name: Property name

        Returns:
            ValueShape or None: Declared shape, None for unknown properties
        """
        return cls.SCHEMAS.get(prefix, {}).get(name)
