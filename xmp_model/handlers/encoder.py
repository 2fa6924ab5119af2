"""
encoder.py
Description: Encoder serializing a property store into an XMP packet.
    Builds the x:xmpmeta / rdf:RDF tree with one rdf:Description per schema,
    indents it and wraps it in xpacket processing instructions with padding
    so the packet can later be updated in place.
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
# xmp_model/handlers/encoder.py
import itertools
import xml.etree.ElementTree as ET
from typing import Dict, Optional

from .base import BaseHandler
from ..models.store import PropertyKey, PropertyStore
from ..models.values import (
    LanguageAlternative,
    OpaqueValue,
    OrderedList,
    PropertyValue,
    Scalar,
    UnorderedList,
    XmlNode,
)
from ..utils.namespace import GENERATED_PREFIX, NamespaceManager, RDF_NS, X_NS, XML_NS
from ..utils.xml_tools import XMLTools

DEFAULT_TOOLKIT = 'xmp_model 1.0.0'
DEFAULT_PADDING = 2048


class PacketEncoder(BaseHandler):
    """Encoder for XMP packets"""

    def __init__(self, padding: int = DEFAULT_PADDING, writable: bool = True,
                 toolkit: Optional[str] = DEFAULT_TOOLKIT, indent: str = "  ",
                 debug: bool = False):
        """
        Initialize the encoder

        Args:
            padding: Bytes of whitespace reserved for in-place updates
            writable: Whether the trailer marks the packet as writable
            toolkit: Value of the x:xmptk attribute, omitted if empty
            indent: Indentation string for the serialized tree
            debug: Whether to enable debug logging
        """
        super().__init__(debug=debug)
        self.padding = padding
        self.writable = writable
        self.toolkit = toolkit
        self.indent = indent

    def encode(self, store: PropertyStore) -> bytes:
        """
        Serialize a store into a complete packet

        The store is not modified.

        Args:
            store: Property store to serialize

        Returns:
            bytes: UTF-8 encoded packet including header, padding and trailer
        """
        namespaces = self._collect_namespaces(store)

        xmpmeta = ET.Element(XMLTools.clark(X_NS, 'xmpmeta'))
        if self.toolkit:
            xmpmeta.set(XMLTools.clark(X_NS, 'xmptk'), self.toolkit)
        rdf = ET.SubElement(xmpmeta, XMLTools.clark(RDF_NS, 'RDF'))

        groups = itertools.groupby(store.items(), key=lambda item: item[0].prefix)
        described = False
        for _, items in groups:
            description = self._create_description(rdf, store.about)
            for key, value in items:
                self._add_property(description, key, value, store)
            described = True
        if not described:
            self._create_description(rdf, store.about)

        XMLTools.indent_xml(xmpmeta, indent=self.indent)
        body = XMLTools.to_string(xmpmeta, namespaces)

        start, end = XMLTools.create_xmp_wrapper(self.writable)
        packet = start + body + '\n' + XMLTools.make_padding(self.padding) + end
        self.log(f"Encoded {len(store)} properties into {len(packet)} characters", level="DEBUG")
        return packet.encode('utf-8')

    def _create_description(self, rdf: ET.Element, about: str) -> ET.Element:
        return ET.SubElement(rdf, XMLTools.clark(RDF_NS, 'Description'),
                             {XMLTools.clark(RDF_NS, 'about'): about})

    def _collect_namespaces(self, store: PropertyStore) -> Dict[str, str]:
        """
        Build the namespace URI to prefix map for every URI the packet uses

        Returns:
            dict: URI to prefix, ready for XMLTools.to_string
        """
        namespaces = {uri: prefix for prefix, uri in NamespaceManager.SYNTAX_NAMESPACES.items()}
        used = set()
        for key, value in store.items():
            used.add(store.namespace_uri(key.prefix))
            namespaces.setdefault(store.namespace_uri(key.prefix), key.prefix)
            if isinstance(value, OpaqueValue):
                used.update(value.node.namespaces())

        prefixes = set(namespaces.values())
        generated = itertools.count(1)
        for uri in sorted(used):
            if uri in namespaces or uri == XML_NS:
                continue
            prefix = store.prefix_for_uri(uri)
            while prefix is None or prefix in prefixes:
                prefix = f'{GENERATED_PREFIX}{next(generated)}'
            namespaces[uri] = prefix
            prefixes.add(prefix)
        return namespaces

    def _add_property(self, description: ET.Element, key: PropertyKey,
                      value: PropertyValue, store: PropertyStore) -> None:
        if isinstance(value, OpaqueValue):
            self._sanitize_node(value.node, key).to_element(description)
            return

        elem = ET.SubElement(description, XMLTools.clark(store.namespace_uri(key.prefix), key.name))
        if isinstance(value, Scalar):
            elem.text = self._clean(value.text, key)
        elif isinstance(value, LanguageAlternative):
            container = ET.SubElement(elem, XMLTools.clark(RDF_NS, 'Alt'))
            for lang, text in value:
                item = ET.SubElement(container, XMLTools.clark(RDF_NS, 'li'),
                                     {XMLTools.clark(XML_NS, 'lang'): lang})
                item.text = self._clean(text, key)
        elif isinstance(value, (OrderedList, UnorderedList)):
            container = ET.SubElement(elem, XMLTools.clark(RDF_NS, value.shape.value))
            for text in value:
                item = ET.SubElement(container, XMLTools.clark(RDF_NS, 'li'))
                item.text = self._clean(text, key)
        else:
            raise TypeError(f"Cannot encode {type(value).__name__} for {key.qualified_name}")

    def _clean(self, text: Optional[str], key: PropertyKey) -> Optional[str]:
        if not text:
            return text
        clean, removed = XMLTools.sanitize_text(text)
        if removed:
            self.log(f"Removed {removed} characters not allowed in XML from {key.qualified_name}",
                     level="WARNING")
        return clean

    def _sanitize_node(self, node: XmlNode, key: PropertyKey) -> XmlNode:
        return XmlNode(tag=node.tag,
                       attrib=tuple((name, self._clean(value, key)) for name, value in node.attrib),
                       text=self._clean(node.text, key),
                       children=tuple(self._sanitize_node(child, key) for child in node.children),
                       tail=self._clean(node.tail, key))


def encode(store: PropertyStore, **kwargs) -> bytes:
    """Encode a store with a default encoder"""
    return PacketEncoder(**kwargs).encode(store)
