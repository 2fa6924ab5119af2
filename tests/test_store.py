"""Tests for the property store."""

import json
import unittest
import xml.etree.ElementTree as ET

from xmp_model.models.store import PropertyKey, PropertyStore
from xmp_model.models.values import (
    LanguageAlternative,
    OpaqueValue,
    OrderedList,
    Scalar,
    UnorderedList,
    XmlNode,
)
from xmp_model.utils.error_handling import InvalidKeyError

GIMP_NS = "http://www.gimp.org/xmp/"


class TestScalarAccess(unittest.TestCase):
    def setUp(self):
        self.store = PropertyStore()

    def test_absent_key_returns_none(self):
        self.assertIsNone(self.store.get_scalar_view("dc", "title"))
        self.assertIsNone(self.store.get_raw_value("dc", "title"))
        self.assertIsNone(self.store.get_scalar_view("nope", "title"))

    def test_set_scalar(self):
        self.assertTrue(self.store.set_scalar("dc", "format", "image/png"))
        self.assertEqual(self.store.get_scalar_view("dc", "format"), "image/png")
        self.assertEqual(self.store.get_raw_value("dc", "format"), Scalar("image/png"))

    def test_invalid_keys_leave_store_unchanged(self):
        self.store.set_scalar("dc", "format", "image/png")
        self.assertFalse(self.store.set_scalar("unknown", "format", "x"))
        self.assertFalse(self.store.set_scalar("", "format", "x"))
        self.assertFalse(self.store.set_scalar("dc", "", "x"))
        self.assertFalse(self.store.set_scalar("dc", "1st", "x"))
        self.assertFalse(self.store.set_scalar("dc", "has space", "x"))
        self.assertFalse(self.store.set_scalar("dc", "format", None))
        self.assertEqual(len(self.store), 1)
        self.assertEqual(self.store.get_scalar_view("dc", "format"), "image/png")

    def test_set_scalar_replaces_any_shape(self):
        self.store.set_raw(("dc", "title"), LanguageAlternative.from_text("old"))
        self.store.set_raw(("dc", "creator"), OrderedList(["Wilber", "Wilma"]))
        self.store.set_scalar("dc", "title", "new")
        self.store.set_scalar("dc", "creator", "Wilber")
        self.assertEqual(self.store.get_raw_value("dc", "title"), Scalar("new"))
        self.assertEqual(self.store.get_raw_value("dc", "creator"), Scalar("Wilber"))


class TestRawAccess(unittest.TestCase):
    def setUp(self):
        self.store = PropertyStore()

    def test_set_raw_keeps_shape(self):
        self.store.set_raw(PropertyKey("dc", "subject"), UnorderedList(["a", "b"]))
        self.assertEqual(self.store.get_raw_value("dc", "subject"), UnorderedList(["a", "b"]))

    def test_set_raw_rejects_plain_values(self):
        with self.assertRaises(TypeError):
            self.store.set_raw(("dc", "format"), "image/png")

    def test_set_raw_rejects_invalid_keys(self):
        with self.assertRaises(InvalidKeyError):
            self.store.set_raw(("nope", "format"), Scalar("x"))
        with self.assertRaises(ValueError):
            self.store.set_raw(("dc", ""), Scalar("x"))
        self.assertTrue(self.store.is_empty())

    def test_opaque_value_must_match_key(self):
        node = XmlNode.from_element(ET.fromstring('<source xmlns="http://purl.org/dc/elements/1.1/"/>'))
        with self.assertRaises(InvalidKeyError):
            self.store.set_raw(("dc", "relation"), OpaqueValue(node))
        self.store.set_raw(("dc", "source"), OpaqueValue(node))
        self.assertIn(("dc", "source"), self.store)

    def test_remove(self):
        self.store.set_scalar("dc", "format", "x")
        self.store.remove(("dc", "format"))
        self.store.remove(("dc", "format"))
        self.assertTrue(self.store.is_empty())


class TestForeignNamespaces(unittest.TestCase):
    def setUp(self):
        self.store = PropertyStore()

    def test_register_and_use(self):
        self.store.register_foreign_namespace("GIMP", GIMP_NS)
        self.assertTrue(self.store.set_scalar("GIMP", "Platform", "Linux"))
        self.assertEqual(self.store.namespace_uri("GIMP"), GIMP_NS)
        self.assertEqual(self.store.prefix_for_uri(GIMP_NS), "GIMP")

    def test_reserved_and_bound_prefixes_rejected(self):
        with self.assertRaises(InvalidKeyError):
            self.store.register_foreign_namespace("rdf", GIMP_NS)
        with self.assertRaises(InvalidKeyError):
            self.store.register_foreign_namespace("xmlfoo", GIMP_NS)
        with self.assertRaises(InvalidKeyError):
            self.store.register_foreign_namespace("dc", GIMP_NS)
        with self.assertRaises(InvalidKeyError):
            self.store.register_foreign_namespace("GIMP", "")
        self.assertEqual(self.store.foreign_namespaces, {})

    def test_registering_same_binding_twice(self):
        self.store.register_foreign_namespace("GIMP", GIMP_NS)
        self.store.register_foreign_namespace("GIMP", GIMP_NS)
        with self.assertRaises(InvalidKeyError):
            self.store.register_foreign_namespace("GIMP", "urn:other")

    def test_registry_uri_cannot_get_a_second_prefix(self):
        with self.assertRaises(InvalidKeyError):
            self.store.register_foreign_namespace("mydc", "http://purl.org/dc/elements/1.1/")
        self.assertEqual(self.store.foreign_namespaces, {})
        self.assertFalse(self.store.set_scalar("mydc", "title", "x"))

    def test_foreign_uri_cannot_get_a_second_prefix(self):
        self.store.register_foreign_namespace("a", "http://example.com/ns/")
        with self.assertRaises(InvalidKeyError):
            self.store.register_foreign_namespace("b", "http://example.com/ns/")
        self.assertEqual(self.store.foreign_namespaces, {"a": "http://example.com/ns/"})

    def test_elementtree_prefixes_rejected(self):
        for prefix in ("ns0", "ns12"):
            with self.assertRaises(InvalidKeyError):
                self.store.register_foreign_namespace(prefix, GIMP_NS)
        self.store.register_foreign_namespace("nsx", GIMP_NS)


class TestContainerProtocol(unittest.TestCase):
    def setUp(self):
        self.store = PropertyStore()
        self.store.set_scalar("xmp", "CreatorTool", "GIMP")
        self.store.set_scalar("dc", "format", "image/png")
        self.store.set_raw(("dc", "creator"), OrderedList(["Wilber"]))

    def test_keys_grouped_by_prefix_then_name(self):
        self.assertEqual(
            [key.qualified_name for key in self.store.keys()],
            ["dc:creator", "dc:format", "xmp:CreatorTool"],
        )
        self.assertEqual(list(self.store), self.store.keys())

    def test_has_schema(self):
        self.assertTrue(self.store.has_schema("dc"))
        self.assertFalse(self.store.has_schema("photoshop"))

    def test_clear(self):
        self.store.about = "uuid:1"
        self.store.clear()
        self.assertTrue(self.store.is_empty())
        self.assertEqual(self.store.about, "")

    def test_update_merges_and_overrides(self):
        other = PropertyStore()
        other.register_foreign_namespace("GIMP", GIMP_NS)
        other.set_scalar("GIMP", "Platform", "Linux")
        other.set_scalar("dc", "format", "image/jpeg")
        other.about = "uuid:2"

        self.store.update(other)
        self.assertEqual(len(self.store), 4)
        self.assertEqual(self.store.get_scalar_view("dc", "format"), "image/jpeg")
        self.assertEqual(self.store.get_scalar_view("GIMP", "Platform"), "Linux")
        self.assertEqual(self.store.about, "uuid:2")

    def test_update_with_conflicting_prefix_changes_nothing(self):
        self.store.register_foreign_namespace("GIMP", GIMP_NS)
        other = PropertyStore()
        other.register_foreign_namespace("GIMP", "urn:other")
        other.set_scalar("GIMP", "Platform", "Linux")
        with self.assertRaises(InvalidKeyError):
            self.store.update(other)
        self.assertEqual(len(self.store), 3)
        self.assertEqual(self.store.namespace_uri("GIMP"), GIMP_NS)

    def test_update_with_second_prefix_for_uri_changes_nothing(self):
        self.store.register_foreign_namespace("GIMP", GIMP_NS)
        other = PropertyStore()
        other.register_foreign_namespace("gimp2", GIMP_NS)
        other.set_scalar("gimp2", "Platform", "Linux")
        with self.assertRaises(InvalidKeyError):
            self.store.update(other)
        self.assertEqual(len(self.store), 3)
        self.assertEqual(self.store.foreign_namespaces, {"GIMP": GIMP_NS})

    def test_to_dict_and_json(self):
        data = self.store.to_dict()
        self.assertEqual(data["dc:creator"], {"shape": "Seq", "value": ["Wilber"]})
        self.assertEqual(data["dc:format"], {"shape": "scalar", "value": ["image/png"]})
        self.assertEqual(json.loads(self.store.to_json()), data)


if __name__ == "__main__":
    unittest.main()
