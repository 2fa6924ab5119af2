"""
values.py
Description: Typed property values for the XMP model.
    An XMP property is either a scalar literal, an ordered (Seq) or unordered (Bag)
    list of literals, a language alternative (Alt), or a structure the shape model
    does not cover, which is kept as an opaque XML node tree.
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
# xmp_model/models/values.py
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

# Language tag of the mandatory default entry of a language alternative
X_DEFAULT = 'x-default'


class ValueShape(Enum):
    """Shapes a property value can take"""
    SCALAR = 'scalar'
    ORDERED = 'Seq'
    UNORDERED = 'Bag'
    LANG_ALT = 'Alt'
    STRUCTURE = 'structure'


class PropertyValue:
    """Base class for all property values"""

    shape: ValueShape = None

    def to_raw_list(self) -> List[str]:
        """
        Flatten the value into the list of strings an editor displays

        Returns:
            list: Scalar text, list items, or alternating language tags and texts
        """
        raise NotImplementedError("Subclasses must implement to_raw_list")


@dataclass(frozen=True)
class Scalar(PropertyValue):
    """A single literal value"""

    text: str
    shape = ValueShape.SCALAR

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise TypeError(f"Scalar text must be a string, got {type(self.text).__name__}")

    def to_raw_list(self) -> List[str]:
        return [self.text]


@dataclass(frozen=True)
class _ListValue(PropertyValue):
    items: Tuple[str, ...] = ()

    def __post_init__(self):
        if isinstance(self.items, str):
            raise TypeError("List items must be an iterable of strings, not a string")
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, str):
                raise TypeError(f"List items must be strings, got {type(item).__name__}")
        object.__setattr__(self, 'items', items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __getitem__(self, index: int) -> str:
        return self.items[index]

    def to_raw_list(self) -> List[str]:
        return list(self.items)


@dataclass(frozen=True)
class OrderedList(_ListValue):
    """An RDF Seq: order of the items is significant"""

    shape = ValueShape.ORDERED


@dataclass(frozen=True)
class UnorderedList(_ListValue):
    """An RDF Bag: item order carries no meaning but is kept stable"""

    shape = ValueShape.UNORDERED


@dataclass(frozen=True)
class LanguageAlternative(PropertyValue):
    """
    An RDF Alt of language-tagged texts

    Once any entry exists, exactly one of them is tagged "x-default".
    Language tags compare case-insensitively.
    """

    entries: Tuple[Tuple[str, str], ...] = ()
    shape = ValueShape.LANG_ALT

    def __post_init__(self):
        raw = self.entries.items() if isinstance(self.entries, dict) else self.entries
        entries = []
        seen: Set[str] = set()
        for lang, text in raw:
            if not isinstance(lang, str) or not lang:
                raise ValueError("Language tags must be non-empty strings")
            if not isinstance(text, str):
                raise TypeError(f"Alternative texts must be strings, got {type(text).__name__}")
            if lang.lower() in seen:
                raise ValueError(f"Duplicate language tag: {lang}")
            seen.add(lang.lower())
            entries.append((lang, text))
        if entries and X_DEFAULT not in seen:
            raise ValueError("A language alternative needs an x-default entry")
        object.__setattr__(self, 'entries', tuple(entries))

    @classmethod
    def from_text(cls, text: str) -> 'LanguageAlternative':
        """Create an alternative holding only a default text"""
        return cls(((X_DEFAULT, text),))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.entries)

    @property
    def default(self) -> Optional[str]:
        """Text of the x-default entry, or None when the alternative is empty"""
        return self.get(X_DEFAULT)

    def languages(self) -> List[str]:
        return [lang for lang, _ in self.entries]

    def get(self, lang: str) -> Optional[str]:
        """Text for exactly this language tag, without fallback"""
        wanted = lang.lower()
        for entry_lang, text in self.entries:
            if entry_lang.lower() == wanted:
                return text
        return None

    def lookup(self, lang: str = X_DEFAULT) -> Optional[str]:
        """
        Text for a language, falling back to the default entry

        Args:
            lang: Language tag to look up

        Returns:
            str or None: Localized text, the x-default text, or None if empty
        """
        text = self.get(lang)
        if text is None:
            text = self.default
        return text

    def with_entry(self, lang: str, text: str) -> 'LanguageAlternative':
        """
        Return a copy with one entry added or replaced

        Setting a localized text on an empty alternative also creates the
        default entry from the same text.
        """
        entries = list(self.entries)
        for i, (entry_lang, _) in enumerate(entries):
            if entry_lang.lower() == lang.lower():
                entries[i] = (lang, text)
                break
        else:
            if not entries and lang.lower() != X_DEFAULT:
                entries.append((X_DEFAULT, text))
            entries.append((lang, text))
        return LanguageAlternative(tuple(entries))

    def to_raw_list(self) -> List[str]:
        raw = []
        for lang, text in self.entries:
            raw.extend((lang, text))
        return raw


@dataclass(frozen=True)
class XmlNode:
    """
    Immutable copy of an XML element tree

    Tags and attribute names use Clark notation ({uri}local), so two nodes
    compare equal regardless of the prefixes or indentation of their source.
    """

    tag: str
    attrib: Tuple[Tuple[str, str], ...] = ()
    text: Optional[str] = None
    children: Tuple['XmlNode', ...] = ()
    tail: Optional[str] = None

    @classmethod
    def from_element(cls, elem: ET.Element, keep_tail: bool = False) -> 'XmlNode':
        """
        Copy an ElementTree element, dropping formatting whitespace

        Args:
            elem: Element to copy
            keep_tail: Copy the text following elem, as for mixed content

        Returns:
            XmlNode: Structural copy of the element
        """
        children = tuple(cls.from_element(child, keep_tail=True) for child in elem)
        text = elem.text
        # Whitespace between child elements is indentation only
        if children and text is not None and not text.strip():
            text = None
        tail = elem.tail if keep_tail else None
        if tail is not None and not tail.strip():
            tail = None
        return cls(tag=elem.tag,
                   attrib=tuple(sorted(elem.attrib.items())),
                   text=text,
                   children=children,
                   tail=tail)

    def to_element(self, parent: Optional[ET.Element] = None) -> ET.Element:
        """Rebuild the element, attached to parent when given"""
        attrib = dict(self.attrib)
        if parent is None:
            elem = ET.Element(self.tag, attrib)
        else:
            elem = ET.SubElement(parent, self.tag, attrib)
        elem.text = self.text
        elem.tail = self.tail
        for child in self.children:
            child.to_element(elem)
        return elem

    def itertext(self) -> Iterator[str]:
        if self.text:
            yield self.text
        for child in self.children:
            yield from child.itertext()
            if child.tail:
                yield child.tail

    def namespaces(self) -> Set[str]:
        """Namespace URIs used by tags and attribute names in this tree"""
        uris = set()
        for name in [self.tag] + [attr for attr, _ in self.attrib]:
            if name.startswith('{'):
                uris.add(name[1:].split('}', 1)[0])
        for child in self.children:
            uris.update(child.namespaces())
        return uris


@dataclass(frozen=True)
class OpaqueValue(PropertyValue):
    """
    A property element kept verbatim

    Used for structures, qualified values, resource references and any other
    markup the four literal shapes cannot express, so it survives a round trip.
    """

    node: XmlNode
    shape = ValueShape.STRUCTURE

    def texts(self) -> List[str]:
        return [text.strip() for text in self.node.itertext() if text.strip()]

    def to_raw_list(self) -> List[str]:
        return self.texts()


# Value class for each RDF container element name
CONTAINER_CLASSES: Dict[str, type] = {
    'Seq': OrderedList,
    'Bag': UnorderedList,
    'Alt': LanguageAlternative,
}
