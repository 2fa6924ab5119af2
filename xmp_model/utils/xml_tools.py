# xmp_model/utils/xml_tools.py
import re
import xml.etree.ElementTree as ET
from typing import Dict, Optional, Tuple
from xml.sax.saxutils import escape, unescape

# Fixed packet id from the XMP specification
PACKET_ID = 'W5M0MpCehiHzreSzNTczkc9d'

XPACKET_BEGIN = b'<?xpacket begin='
XPACKET_END = b'<?xpacket end='

_TEXT_ENTITIES = {'\r': '&#13;'}
_UNESCAPE_ENTITIES = {'&quot;': '"', '&apos;': "'",
                      '&#10;': '\n', '&#13;': '\r', '&#9;': '\t', '&#09;': '\t'}

# Characters XML 1.0 cannot carry, even as character references
_ILLEGAL_XML_CHARS = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')

_NCNAME = re.compile(r'^[^\W\d][\w.\-]*$')

_PI_ATTRIBUTE = re.compile(r'(\w+)\s*=\s*(["\'])(.*?)\2', re.DOTALL)


class XMLTools:
    """XML processing utilities for XMP packets"""

    @staticmethod
    def indent_xml(elem: ET.Element, level: int = 0, indent: str = "  ") -> None:
        """
        Format XML with proper indentation for readability

        Only whitespace between elements is touched, literal text is left alone.

        Args:
            elem: The XML element to indent
            level: Current indentation level
            indent: Indentation string (default: two spaces)
        """
        i = "\n" + level * indent
        if len(elem):
            if not elem.text or not elem.text.strip():
                elem.text = i + indent
            if not elem.tail or not elem.tail.strip():
                elem.tail = i
            for child in elem:
                XMLTools.indent_xml(child, level + 1, indent)
            # Last child closes back to this element's level
            if not child.tail or not child.tail.strip():
                child.tail = i
        else:
            if level and (not elem.tail or not elem.tail.strip()):
                elem.tail = i

    @staticmethod
    def create_xmp_wrapper(writable: bool = True) -> Tuple[str, str]:
        """
        Create XMP packet wrappers

        Args:
            writable: Whether the end marker allows in-place updates

        Returns:
            tuple: (start_wrapper, end_wrapper)
        """
        start = f'<?xpacket begin="\ufeff" id="{PACKET_ID}"?>\n'
        end = f'<?xpacket end="{"w" if writable else "r"}"?>'
        return start, end

    @staticmethod
    def make_padding(size: int, line_length: int = 100) -> str:
        """Whitespace padding of exactly size characters, in lines"""
        if size <= 0:
            return ''
        line = ' ' * (line_length - 1) + '\n'
        lines, rest = divmod(size, line_length)
        return line * lines + (' ' * (rest - 1) + '\n' if rest else '')

    @staticmethod
    def find_packet(data: bytes, limit: int, start: int = 0) -> Optional[Tuple[int, int]]:
        """
        Locate a complete packet wrapper

        Args:
            data: Raw bytes to search
            limit: Maximum number of bytes a packet may span
            start: Offset to begin searching at

        Returns:
            tuple or None: (start, end) offsets covering both processing instructions
        """
        begin = data.find(XPACKET_BEGIN, start)
        if begin < 0:
            return None
        trailer = data.find(XPACKET_END, begin, begin + limit)
        if trailer < 0:
            return None
        close = data.find(b'?>', trailer, begin + limit)
        if close < 0:
            return None
        return begin, close + 2

    @staticmethod
    def parse_pi_attributes(text: str) -> Dict[str, str]:
        """Read the pseudo-attributes of a processing instruction"""
        return {name: XMLTools.unescape_text(value)
                for name, _, value in _PI_ATTRIBUTE.findall(text)}

    @staticmethod
    def escape_text(text: str) -> str:
        """Escape character data the way to_string writes it"""
        return escape(text, _TEXT_ENTITIES)

    @staticmethod
    def unescape_text(text: str) -> str:
        """Reverse escape_text and the escaping of attribute values"""
        return unescape(text, _UNESCAPE_ENTITIES)

    @staticmethod
    def sanitize_text(text: str) -> Tuple[str, int]:
        """
        Remove characters that cannot appear in an XML 1.0 document

        Returns:
            tuple: (clean_text, number_of_removed_characters)
        """
        return _ILLEGAL_XML_CHARS.subn('', text)

    @staticmethod
    def is_ncname(name: str) -> bool:
        """Check that name can be used as an unprefixed XML name"""
        return bool(name) and _NCNAME.match(name) is not None

    @staticmethod
    def clark(uri: str, local_name: str) -> str:
        return f'{{{uri}}}{local_name}'

    @staticmethod
    def get_namespace_from_tag(tag: str) -> Tuple[Optional[str], str]:
        """
        Split a Clark-notation tag

        Args:
            tag: The XML tag (possibly with namespace)

        Returns:
            tuple: (namespace_uri or None, local_name)
        """
        if tag.startswith('{'):
            uri, local_name = tag[1:].split('}', 1)
            return uri, local_name
        return None, tag

    @staticmethod
    def to_string(root: ET.Element, namespaces: Dict[str, str]) -> str:
        """
        Serialize an element tree with fixed prefixes

        Args:
            root: Root element
            namespaces: Namespace URI to prefix map covering every URI in the tree

        Returns:
            str: Serialized XML with the namespace declarations on the root element
        """
        # Register namespaces with ElementTree
        for uri, prefix in namespaces.items():
            ET.register_namespace(prefix, uri)
        xml_str = ET.tostring(root, encoding='unicode', method='xml')
        # ElementTree writes carriage returns in character data as is
        return xml_str.replace('\r', '&#13;')
