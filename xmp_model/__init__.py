"""
xmp_model - In-memory model, parser and encoder for XMP metadata packets
Author: Eric Hiss (GitHub: EricRollei)
Version: 1.0.0
"""
# xmp_model/__init__.py
from .handlers.encoder import PacketEncoder
from .handlers.parser import PacketParser, ParseResult
from .models.store import PropertyKey, PropertyStore
from .models.values import (
    X_DEFAULT,
    LanguageAlternative,
    OpaqueValue,
    OrderedList,
    PropertyValue,
    Scalar,
    UnorderedList,
    ValueShape,
    XmlNode,
)
from .service import XMPModel
from .utils.error_handling import (
    FramingError,
    InvalidKeyError,
    MalformedError,
    ParseError,
    ParseWarning,
    WarningKind,
    XMPError,
)
from .utils.namespace import NamespaceManager
from .utils.view import ScalarViewPolicy

__version__ = "1.0.0"

__all__ = [
    'XMPModel',
    'PacketParser',
    'ParseResult',
    'PacketEncoder',
    'PropertyKey',
    'PropertyStore',
    'PropertyValue',
    'Scalar',
    'OrderedList',
    'UnorderedList',
    'LanguageAlternative',
    'OpaqueValue',
    'XmlNode',
    'ValueShape',
    'X_DEFAULT',
    'NamespaceManager',
    'ScalarViewPolicy',
    'XMPError',
    'ParseError',
    'FramingError',
    'MalformedError',
    'InvalidKeyError',
    'ParseWarning',
    'WarningKind',
]
