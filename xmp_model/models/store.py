"""
store.py
Description: In-memory property store for one XMP packet.
    Maps (namespace prefix, property name) keys to typed property values and
    offers both raw typed access and a simplified scalar view for editors.
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
# xmp_model/models/store.py
import json
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

from .values import OpaqueValue, PropertyValue, Scalar
from ..utils.error_handling import InvalidKeyError
from ..utils.namespace import NamespaceManager
from ..utils.view import ScalarViewPolicy
from ..utils.xml_tools import XMLTools


class PropertyKey(NamedTuple):
    """Identifies one property within a packet"""

    prefix: str
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.prefix}:{self.name}"


KeyLike = Union[PropertyKey, Tuple[str, str]]


class PropertyStore:
    """
    Mapping from property keys to typed values

    Keys whose namespace is not in the schema registry are kept as foreign
    entries; their namespace URI is recorded so they can be encoded again.
    """

    def __init__(self, view_policy: Optional[ScalarViewPolicy] = None):
        """
        Initialize an empty store

        Args:
            view_policy: Presentation policy for scalar views (default policy if None)
        """
        self.view_policy = view_policy or ScalarViewPolicy()
        self.foreign_namespaces: Dict[str, str] = {}
        self.about = ""
        self._values: Dict[PropertyKey, PropertyValue] = {}

    # -- key handling -------------------------------------------------------

    def namespace_uri(self, prefix: str) -> Optional[str]:
        """Resolve a prefix through the registry, then the foreign namespaces"""
        uri = NamespaceManager.get_uri(prefix)
        if uri is None:
            uri = self.foreign_namespaces.get(prefix)
        return uri

    def prefix_for_uri(self, uri: str) -> Optional[str]:
        prefix = NamespaceManager.get_prefix(uri)
        if prefix is None:
            for foreign_prefix, foreign_uri in self.foreign_namespaces.items():
                if foreign_uri == uri:
                    return foreign_prefix
        return prefix

    def register_foreign_namespace(self, prefix: str, uri: str) -> None:
        """
        Record a namespace unknown to the schema registry

        Args:
            prefix: Prefix the namespace is keyed under
            uri: Namespace URI

        Raises:
            InvalidKeyError: If the prefix is unusable, or the prefix or the URI
                is already bound elsewhere
        """
        if not XMLTools.is_ncname(prefix) or NamespaceManager.is_reserved_prefix(prefix):
            raise InvalidKeyError(f"Invalid namespace prefix: {prefix!r}")
        if not uri:
            raise InvalidKeyError(f"Namespace {prefix!r} needs a URI")
        bound = self.namespace_uri(prefix)
        if bound is not None and bound != uri:
            raise InvalidKeyError(f"Prefix {prefix!r} is already bound to {bound}")
        owner = self.prefix_for_uri(uri)
        if owner is not None and owner != prefix:
            # One URI serializes under one prefix only
            raise InvalidKeyError(f"Namespace {uri} is already bound to prefix {owner!r}")
        self.foreign_namespaces[prefix] = uri

    def _make_key(self, prefix: str, name: str) -> PropertyKey:
        if not isinstance(prefix, str) or not isinstance(name, str):
            raise InvalidKeyError("Namespace prefix and property name must be strings")
        if not prefix or not name:
            raise InvalidKeyError("Namespace prefix and property name must not be empty")
        if not XMLTools.is_ncname(name):
            raise InvalidKeyError(f"Invalid property name: {name!r}")
        if self.namespace_uri(prefix) is None:
            raise InvalidKeyError(f"Unknown namespace prefix: {prefix!r}")
        return PropertyKey(prefix, name)

    # -- access -------------------------------------------------------------

    def get_raw_value(self, prefix: str, name: str) -> Optional[PropertyValue]:
        """
        Get the full typed value of a property

        Args:
            prefix: Namespace prefix
            name: Property name

        Returns:
            PropertyValue or None: The stored value, None if absent
        """
        return self._values.get(PropertyKey(prefix, name))

    def get_scalar_view(self, prefix: str, name: str) -> Optional[str]:
        """
        Get the editor presentation of a property

        Args:
            prefix: Namespace prefix
            name: Property name

        Returns:
            str or None: Scalar view, None if the property is absent
        """
        value = self.get_raw_value(prefix, name)
        if value is None:
            return None
        return self.view_policy.render(value)

    def set_scalar(self, prefix: str, name: str, text: str) -> bool:
        """
        Set a property to a single literal

        Any previous shape of the property is replaced by a scalar.

        Args:
            prefix: Namespace prefix
            name: Property name
            text: New value

        Returns:
            bool: False if the key is invalid, the store is then unchanged
        """
        if not isinstance(text, str):
            return False
        try:
            key = self._make_key(prefix, name)
        except InvalidKeyError:
            return False
        self._values[key] = Scalar(text)
        return True

    def set_raw(self, key: KeyLike, value: PropertyValue) -> None:
        """
        Replace a property keeping the explicit shape of value

        Args:
            key: Property key or (prefix, name) tuple
            value: Typed value

        Raises:
            InvalidKeyError: If the key is invalid
            TypeError: If value is not a PropertyValue
        """
        if not isinstance(value, PropertyValue):
            raise TypeError(f"Expected a PropertyValue, got {type(value).__name__}")
        prefix, name = key
        key = self._make_key(prefix, name)
        if isinstance(value, OpaqueValue):
            expected = XMLTools.clark(self.namespace_uri(prefix), name)
            if value.node.tag != expected:
                raise InvalidKeyError(
                    f"Opaque element {value.node.tag} does not match key {key.qualified_name}")
        self._values[key] = value

    def remove(self, key: KeyLike) -> None:
        """Delete a property; absent keys are ignored"""
        self._values.pop(PropertyKey(*key), None)

    # -- container protocol ---------------------------------------------------

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: KeyLike) -> bool:
        return PropertyKey(*key) in self._values

    def __iter__(self) -> Iterator[PropertyKey]:
        return iter(self.keys())

    def keys(self) -> List[PropertyKey]:
        """Keys grouped by namespace prefix, then ordered by property name"""
        return sorted(self._values)

    def items(self) -> List[Tuple[PropertyKey, PropertyValue]]:
        return [(key, self._values[key]) for key in self.keys()]

    def is_empty(self) -> bool:
        return not self._values

    def has_schema(self, prefix: str) -> bool:
        """Check whether any property of a namespace is present"""
        return any(key.prefix == prefix for key in self._values)

    def clear(self) -> None:
        self._values.clear()
        self.foreign_namespaces.clear()
        self.about = ""

    def update(self, other: 'PropertyStore') -> 'PropertyStore':
        """
        Merge another store into this one

        Values of the other store replace values under the same key. Its
        foreign namespaces and non-empty resource identifier are adopted.

        Args:
            other: Store to merge from

        Returns:
            self for chaining
        """
        for prefix, uri in other.foreign_namespaces.items():
            bound = self.foreign_namespaces.get(prefix)
            if bound is not None and bound != uri:
                # Keys of the old binding would be re-bound silently
                raise InvalidKeyError(f"Prefix {prefix!r} is bound to {bound}, not {uri}")
            owner = self.prefix_for_uri(uri)
            if owner is not None and owner != prefix:
                raise InvalidKeyError(f"Namespace {uri} is bound to {owner!r}, not {prefix!r}")
        self.foreign_namespaces.update(other.foreign_namespaces)
        self._values.update(other._values)
        if other.about:
            self.about = other.about
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert the store to a dictionary of flattened raw values"""
        return {key.qualified_name: {'shape': value.shape.value, 'value': value.to_raw_list()}
                for key, value in self.items()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
