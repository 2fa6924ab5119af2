"""Tests for the XML helpers."""

import unittest
import xml.etree.ElementTree as ET

from xmp_model.utils.xml_tools import PACKET_ID, XMLTools


class TestEscaping(unittest.TestCase):
    SAMPLES = [
        "plain",
        "Tom & Jerry <3",
        "a > b && c < d",
        "&amp; is already an entity",
        "line one\nline two\r\n\ttabbed",
        'quotes " and \'',
        "  leading and trailing  ",
        "]]> end of cdata",
    ]

    def test_text_escape_pair(self):
        for sample in self.SAMPLES:
            self.assertEqual(XMLTools.unescape_text(XMLTools.escape_text(sample)), sample)

    def test_parser_reads_back_escaped_text(self):
        for sample in self.SAMPLES:
            element = ET.fromstring(f"<a>{XMLTools.escape_text(sample)}</a>")
            self.assertEqual(element.text, sample)

    def test_serialized_text_matches_escape_text(self):
        for sample in self.SAMPLES:
            element = ET.Element("a")
            element.text = sample
            self.assertEqual(XMLTools.to_string(element, {}), f"<a>{XMLTools.escape_text(sample)}</a>")

    def test_parser_reads_back_serialized_attributes(self):
        for sample in self.SAMPLES:
            if "\t" in sample:
                continue
            element = ET.Element("{urn:t}a", {"{urn:t}v": sample})
            parsed = ET.fromstring(XMLTools.to_string(element, {"urn:t": "t"}))
            self.assertEqual(parsed.get("{urn:t}v"), sample)

    def test_sanitize_removes_illegal_characters(self):
        self.assertEqual(XMLTools.sanitize_text("a\x00b\x1fc\ttab"), ("abc\ttab", 2))
        self.assertEqual(XMLTools.sanitize_text("clean"), ("clean", 0))


class TestPacketHelpers(unittest.TestCase):
    def test_wrapper(self):
        start, end = XMLTools.create_xmp_wrapper()
        self.assertIn(PACKET_ID, start)
        self.assertIn("\ufeff", start)
        self.assertEqual(end, '<?xpacket end="w"?>')
        self.assertEqual(XMLTools.create_xmp_wrapper(writable=False)[1], '<?xpacket end="r"?>')

    def test_padding_is_exact(self):
        for size in (0, 1, 99, 100, 101, 2048):
            padding = XMLTools.make_padding(size)
            self.assertEqual(len(padding), size)
            self.assertEqual(padding.strip(), "")

    def test_find_packet(self):
        data = b'JUNK<?xpacket begin="" id="x"?><a/><?xpacket end="w"?>TAIL'
        start, end = XMLTools.find_packet(data, 1000)
        self.assertEqual(data[start:end], b'<?xpacket begin="" id="x"?><a/><?xpacket end="w"?>')

    def test_find_packet_is_bounded(self):
        data = b'<?xpacket begin=""?>' + b" " * 100 + b'<?xpacket end="w"?>'
        self.assertIsNone(XMLTools.find_packet(data, 50))
        self.assertIsNone(XMLTools.find_packet(b"no packet here", 50))

    def test_parse_pi_attributes(self):
        attributes = XMLTools.parse_pi_attributes(f"<?xpacket begin='\ufeff' id=\"{PACKET_ID}\"?>")
        self.assertEqual(attributes, {"begin": "\ufeff", "id": PACKET_ID})


class TestNames(unittest.TestCase):
    def test_ncname(self):
        for name in ("title", "CreatorTool", "_private", "mwg-rs", "a.b", "émotion"):
            self.assertTrue(XMLTools.is_ncname(name), name)
        for name in ("", "1st", "dc:title", "has space", "-dash"):
            self.assertFalse(XMLTools.is_ncname(name), name)

    def test_clark_round_trip(self):
        tag = XMLTools.clark("urn:x", "local")
        self.assertEqual(tag, "{urn:x}local")
        self.assertEqual(XMLTools.get_namespace_from_tag(tag), ("urn:x", "local"))
        self.assertEqual(XMLTools.get_namespace_from_tag("bare"), (None, "bare"))


class TestSerialization(unittest.TestCase):
    def test_to_string_declares_namespaces_on_root(self):
        root = ET.Element("{urn:b}root")
        child = ET.SubElement(root, "{urn:a}child", {"{http://www.w3.org/XML/1998/namespace}lang": "en"})
        child.text = "x < y"
        ET.SubElement(root, "{urn:b}empty")
        text = XMLTools.to_string(root, {"urn:b": "b", "urn:a": "a"})
        self.assertEqual(
            text,
            '<b:root xmlns:a="urn:a" xmlns:b="urn:b">'
            '<a:child xml:lang="en">x &lt; y</a:child><b:empty /></b:root>',
        )

    def test_to_string_replaces_earlier_registrations(self):
        XMLTools.to_string(ET.Element("{urn:old}root"), {"urn:old": "p"})
        text = XMLTools.to_string(ET.Element("{urn:new}root"), {"urn:new": "p"})
        self.assertEqual(text, '<p:root xmlns:p="urn:new" />')

    def test_carriage_returns_survive_reparsing(self):
        root = ET.Element("{urn:a}root")
        root.text = "one\r\ntwo\rthree"
        text = XMLTools.to_string(root, {"urn:a": "a"})
        self.assertNotIn("\r", text)
        self.assertEqual(ET.fromstring(text).text, "one\r\ntwo\rthree")

    def test_indent_leaves_literal_text_alone(self):
        root = ET.fromstring("<r><a>  keep  </a><b><c>x</c></b></r>")
        XMLTools.indent_xml(root)
        self.assertEqual(root.find("a").text, "  keep  ")
        self.assertEqual(root.find("b/c").text, "x")
        self.assertEqual(root.text, "\n  ")


if __name__ == "__main__":
    unittest.main()
