"""
parser.py
Description: Parser turning serialized XMP packets into a property store.
    Handles the xpacket wrapper (strictly or leniently), tokenizes the RDF body
    with defusedxml and maps each property element onto one of the value shapes.
    Markup the shapes cannot express is kept verbatim as an opaque value.
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
- defusedxml: Safe tokenizing of untrusted packets

"""
# xmp_model/handlers/parser.py
import io
import os
import xml.etree.ElementTree as ET
from typing import Dict, List, NamedTuple, Optional, Set, Tuple, Union

import defusedxml.ElementTree as DefusedET
from defusedxml import DefusedXmlException

from .base import BaseHandler
from ..models.store import PropertyKey, PropertyStore
from ..models.values import (
    CONTAINER_CLASSES,
    X_DEFAULT,
    LanguageAlternative,
    OpaqueValue,
    PropertyValue,
    Scalar,
    XmlNode,
)
from ..utils.error_handling import (
    ErrorRecovery,
    FramingError,
    InvalidKeyError,
    MalformedError,
    ParseWarning,
    WarningKind,
)
from ..utils.namespace import GENERATED_PREFIX, NamespaceManager, RDF_NS, XML_NS
from ..utils.xml_tools import PACKET_ID, XPACKET_END, XMLTools

RDF_RDF = XMLTools.clark(RDF_NS, 'RDF')
RDF_DESCRIPTION = XMLTools.clark(RDF_NS, 'Description')
RDF_LI = XMLTools.clark(RDF_NS, 'li')
XML_LANG = XMLTools.clark(XML_NS, 'lang')

DEFAULT_MAX_PACKET_SIZE = 16 * 1024 * 1024

_UTF8_BOM = b'\xef\xbb\xbf'

Source = Union[str, os.PathLike, bytes, bytearray, memoryview]


class ParseResult(NamedTuple):
    """Store produced by one parse together with its warnings"""

    store: PropertyStore
    warnings: List[ParseWarning]


class _ParseState:
    """Bookkeeping for a single parse call"""

    def __init__(self, store: PropertyStore, declared: Dict[str, str]):
        self.store = store
        self.declared = declared
        self.warnings: List[ParseWarning] = []
        self.seen: Set[PropertyKey] = set()
        self.announced: Set[str] = set()

    def warn(self, kind: WarningKind, key: Optional[Tuple[str, str]], message: str) -> None:
        self.warnings.append(ParseWarning(kind, key, message))


class PacketParser(BaseHandler):
    """Parser for XMP packets"""

    def __init__(self, strict: bool = True, debug: bool = False,
                 max_packet_size: int = DEFAULT_MAX_PACKET_SIZE):
        """
        Initialize the parser

        Args:
            strict: Require the buffer to hold exactly one wrapped packet
            debug: Whether to enable debug logging
            max_packet_size: Maximum number of bytes a packet may span
        """
        super().__init__(debug=debug)
        self.strict = strict
        self.max_packet_size = max_packet_size

    def parse(self, source: Source, length: Optional[int] = None,
              strict: Optional[bool] = None,
              namespaces: Optional[Dict[str, str]] = None) -> ParseResult:
        """
        Parse a packet into a fresh property store

        Args:
            source: File path, or a bytes-like buffer holding the packet
            length: Number of buffer bytes to consume (all if None)
            strict: Override the parser's framing mode for this call
            namespaces: Foreign prefix to URI bindings to reuse for unknown namespaces

        Returns:
            ParseResult: (store, warnings)

        Raises:
            FramingError: If no packet can be located
            MalformedError: If the packet markup cannot be tokenized
        """
        strict = self.strict if strict is None else strict
        data = self._read_source(source, length)
        self.log(f"Parsing {len(data)} bytes ({'strict' if strict else 'lenient'})", level="DEBUG")

        store = PropertyStore()
        for prefix, uri in (namespaces or {}).items():
            store.register_foreign_namespace(prefix, uri)

        framing_warnings: List[ParseWarning] = []
        start, end = self._locate_packet(data, strict, framing_warnings)
        root, declared = self._tokenize(data[start:end])

        state = _ParseState(store, declared)
        state.warnings.extend(framing_warnings)

        rdf = root if root.tag == RDF_RDF else root.find(f'.//{RDF_RDF}')
        if rdf is None:
            raise MalformedError("Packet contains no rdf:RDF element")

        for description in rdf.findall(RDF_DESCRIPTION):
            self._parse_description(description, state)

        for warning in state.warnings:
            self.log(str(warning), level="WARNING")
        self.log(f"Parsed {len(store)} properties", level="DEBUG")
        return ParseResult(store, state.warnings)

    def parse_file(self, filepath: Union[str, os.PathLike],
                   strict: Optional[bool] = None) -> ParseResult:
        """Parse the packet held in a file"""
        return self.parse(filepath, strict=strict)

    def parse_buffer(self, buffer: Union[bytes, bytearray, memoryview],
                     length: Optional[int] = None,
                     strict: Optional[bool] = None) -> ParseResult:
        """Parse the first length bytes of a buffer"""
        if isinstance(buffer, str):
            buffer = buffer.encode('utf-8')
        return self.parse(buffer, length=length, strict=strict)

    # -- framing --------------------------------------------------------------

    def _read_source(self, source: Source, length: Optional[int]) -> bytes:
        if length is not None and length < 0:
            raise ValueError(f"Length must not be negative: {length}")

        if isinstance(source, (str, os.PathLike)):
            with open(source, 'rb') as f:
                return f.read() if length is None else f.read(length)

        try:
            view = memoryview(source).cast('B')
        except TypeError as e:
            raise TypeError(f"Cannot parse a packet from {type(source).__name__}") from e
        if length is not None:
            view = view[:length]
        return view.tobytes()

    def _locate_packet(self, data: bytes, strict: bool,
                       warnings: List[ParseWarning]) -> Tuple[int, int]:
        """
        Find the byte range of the packet

        Returns:
            tuple: (start, end) offsets of the data handed to the tokenizer
        """
        limit = self.max_packet_size
        span = XMLTools.find_packet(data, limit)

        if strict:
            if span is None:
                raise FramingError(f"No complete xpacket wrapper within {limit} bytes")
            leading = data[:span[0]]
            if leading.startswith(_UTF8_BOM):
                leading = leading[len(_UTF8_BOM):]
            if leading.strip():
                raise FramingError(f"{len(leading)} bytes precede the xpacket header")
            if data[span[1]:].strip(b' \t\r\n\x00'):
                raise FramingError("Data follows the xpacket trailer")
            self._check_wrapper(data[span[0]:span[1]])
            return span

        if span is not None:
            if span[0]:
                self.log(f"Skipped {span[0]} bytes before the xpacket header", level="DEBUG")
            return span

        span = ErrorRecovery.recover_framing(self, {
            'data': data,
            'limit': limit,
            'error_type': 'FramingError',
        })
        if span is None:
            raise FramingError("No XMP packet found")
        warnings.append(ParseWarning(WarningKind.MISSING_WRAPPER, None,
                                     "xpacket wrapper missing, read bare metadata element"))
        return span

    def _check_wrapper(self, packet: bytes) -> None:
        header_end = packet.find(b'?>')
        header = XMLTools.parse_pi_attributes(packet[:header_end].decode('utf-8', 'replace'))
        if header.get('id') != PACKET_ID:
            raise FramingError(f"Unexpected xpacket id: {header.get('id')!r}")

        trailer = XMLTools.parse_pi_attributes(
            packet[packet.rfind(XPACKET_END):].decode('utf-8', 'replace'))
        if trailer.get('end') not in ('r', 'w'):
            raise FramingError(f"Unexpected xpacket end marker: {trailer.get('end')!r}")

    # -- tokenizing -----------------------------------------------------------

    def _tokenize(self, packet: bytes) -> Tuple[ET.Element, Dict[str, str]]:
        """
        Build the element tree of the packet body

        Returns:
            tuple: (root element, namespace URI to document prefix map)
        """
        declared: Dict[str, str] = {}
        root = None
        try:
            for event, item in DefusedET.iterparse(io.BytesIO(packet),
                                                   events=('start-ns', 'start')):
                if event == 'start-ns':
                    prefix, uri = item
                    if prefix:
                        declared.setdefault(uri, prefix)
                elif root is None:
                    root = item
        except ET.ParseError as e:
            raise MalformedError(f"Packet markup is not well-formed: {e}") from e
        except DefusedXmlException as e:
            raise MalformedError(f"Packet uses forbidden XML constructs: {e!r}") from e

        if root is None:
            raise MalformedError("Packet contains no elements")
        return root, declared

    # -- properties -----------------------------------------------------------

    def _parse_description(self, description: ET.Element, state: _ParseState) -> None:
        for attr_name, attr_value in description.attrib.items():
            uri, local_name = XMLTools.get_namespace_from_tag(attr_name)
            if uri == RDF_NS:
                if local_name == 'about' and attr_value and not state.store.about:
                    state.store.about = attr_value
                continue
            if uri == XML_NS:
                continue
            key = self._resolve_key(uri, local_name, state)
            if key is not None:
                self._store_value(key, Scalar(attr_value), state)

        for child in description:
            uri, local_name = XMLTools.get_namespace_from_tag(child.tag)
            key = self._resolve_key(uri, local_name, state)
            if key is None:
                continue
            value = self._parse_property(child, key, state)
            if isinstance(value, OpaqueValue):
                self._register_node_namespaces(value.node, state)
            self._store_value(key, value, state)

    def _resolve_key(self, uri: Optional[str], local_name: str,
                     state: _ParseState) -> Optional[PropertyKey]:
        """Map a namespace URI and local name onto a store key"""
        if uri is None or uri in NamespaceManager.SYNTAX_NAMESPACES.values() or uri == XML_NS:
            state.warn(WarningKind.UNSUPPORTED_PROPERTY, None,
                       f"Ignoring property {local_name!r} outside a schema namespace")
            return None

        prefix = NamespaceManager.get_prefix(uri)
        if prefix is not None:
            if not NamespaceManager.is_known_property(prefix, local_name):
                state.warn(WarningKind.UNKNOWN_PROPERTY, (prefix, local_name),
                           f"Unknown property {prefix}:{local_name}")
            return PropertyKey(prefix, local_name)

        prefix = state.store.prefix_for_uri(uri)
        if prefix is None:
            prefix = self._choose_prefix(uri, state)
            state.store.register_foreign_namespace(prefix, uri)
        if uri not in state.announced:
            state.announced.add(uri)
            state.warn(WarningKind.UNKNOWN_NAMESPACE, (prefix, local_name),
                       f"Unknown namespace {uri} kept under prefix {prefix!r}")
        return PropertyKey(prefix, local_name)

    def _choose_prefix(self, uri: str, state: _ParseState) -> str:
        candidate = state.declared.get(uri)
        if (candidate and XMLTools.is_ncname(candidate)
                and not NamespaceManager.is_reserved_prefix(candidate)
                and state.store.namespace_uri(candidate) is None):
            return candidate
        index = 1
        while state.store.namespace_uri(f'{GENERATED_PREFIX}{index}') is not None:
            index += 1
        return f'{GENERATED_PREFIX}{index}'

    def _register_node_namespaces(self, node: XmlNode, state: _ParseState) -> None:
        """Record foreign namespaces used inside an opaque value"""
        for uri in sorted(node.namespaces()):
            if uri in NamespaceManager.SYNTAX_NAMESPACES.values() or uri == XML_NS:
                continue
            if state.store.prefix_for_uri(uri) is None:
                state.store.register_foreign_namespace(self._choose_prefix(uri, state), uri)

    def _parse_property(self, elem: ET.Element, key: PropertyKey,
                        state: _ParseState) -> PropertyValue:
        children = list(elem)
        if not children:
            if elem.attrib:
                # Qualifiers and resource references
                return OpaqueValue(XmlNode.from_element(elem))
            return Scalar(elem.text or '')

        if len(children) == 1 and not elem.attrib and not (elem.text or '').strip():
            value = self._parse_container(children[0], key, state)
            if value is not None:
                return value
        return OpaqueValue(XmlNode.from_element(elem))

    def _parse_container(self, container: ET.Element, key: PropertyKey,
                         state: _ParseState) -> Optional[PropertyValue]:
        """
        Read an rdf:Seq, rdf:Bag or rdf:Alt of literal items

        Returns:
            PropertyValue or None: None when the container holds anything richer
        """
        uri, local_name = XMLTools.get_namespace_from_tag(container.tag)
        value_class = CONTAINER_CLASSES.get(local_name) if uri == RDF_NS else None
        if value_class is None or container.attrib or (container.text or '').strip():
            return None

        items = []
        for item in container:
            if item.tag != RDF_LI or len(item) or (item.tail or '').strip():
                return None
            attrib = dict(item.attrib)
            lang = attrib.pop(XML_LANG, None)
            if attrib or (lang is not None and value_class is not LanguageAlternative):
                return None
            items.append((lang, item.text or ''))

        if value_class is LanguageAlternative:
            return self._build_alternative(items, key, state)
        return value_class(text for _, text in items)

    def _build_alternative(self, items: List[Tuple[Optional[str], str]], key: PropertyKey,
                           state: _ParseState) -> LanguageAlternative:
        entries = []
        seen = set()
        for lang, text in items:
            lang = lang or X_DEFAULT
            if lang.lower() in seen:
                state.warn(WarningKind.DUPLICATE_LANGUAGE, key,
                           f"Dropping duplicate language {lang!r} of {key.qualified_name}")
                continue
            seen.add(lang.lower())
            entries.append((lang, text))

        if entries and X_DEFAULT not in seen:
            state.warn(WarningKind.MISSING_DEFAULT_LANGUAGE, key,
                       f"{key.qualified_name} has no x-default entry, using {entries[0][0]!r}")
            entries.insert(0, (X_DEFAULT, entries[0][1]))
        return LanguageAlternative(tuple(entries))

    def _store_value(self, key: PropertyKey, value: PropertyValue, state: _ParseState) -> None:
        if key in state.seen:
            state.warn(WarningKind.DUPLICATE_PROPERTY, key,
                       f"{key.qualified_name} appears more than once, keeping the last value")
        declared_shape = NamespaceManager.get_property_shape(*key)
        if declared_shape is not None and declared_shape != value.shape:
            state.warn(WarningKind.SHAPE_MISMATCH, key,
                       f"{key.qualified_name} is declared {declared_shape.value}, "
                       f"found {value.shape.value}")
        try:
            state.store.set_raw(key, value)
        except InvalidKeyError as e:
            state.warn(WarningKind.UNSUPPORTED_PROPERTY, key, f"Ignoring {key.qualified_name}: {e}")
            return
        state.seen.add(key)


def parse_file(filepath: Union[str, os.PathLike], strict: bool = False) -> ParseResult:
    """
    Parse the packet held in a file with a default parser

    Files are often whole media files with the packet embedded, so the
    packet is searched for unless strict is set.
    """
    return PacketParser(strict=strict).parse_file(filepath)


def parse_buffer(buffer: Union[bytes, bytearray, memoryview], length: Optional[int] = None,
                 strict: bool = True) -> ParseResult:
    """
    Parse a buffer with a default parser

    A buffer is expected to hold the packet alone, as handed over by a
    container reader, so foreign bytes are rejected unless strict is unset.
    """
    return PacketParser(strict=strict).parse_buffer(buffer, length)
