"""
error_handling.py
Description: Errors, parse warnings and recovery strategies for XMP packet handling.
    Fatal conditions are raised as exceptions; schema-level oddities are collected
    as warnings so metadata from non-conforming producers can still be read.
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
# xmp_model/utils/error_handling.py
import re
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple


class XMPError(Exception):
    """Base class for all XMP model errors"""


class ParseError(XMPError):
    """A packet could not be parsed"""


class FramingError(ParseError):
    """The packet wrapper is missing or corrupt"""


class MalformedError(ParseError):
    """The packet markup cannot be tokenized"""


class InvalidKeyError(XMPError, ValueError):
    """A namespace prefix or property name does not form a valid key"""


class WarningKind(Enum):
    UNKNOWN_NAMESPACE = 'unknown_namespace'
    UNKNOWN_PROPERTY = 'unknown_property'
    SHAPE_MISMATCH = 'shape_mismatch'
    MISSING_DEFAULT_LANGUAGE = 'missing_default_language'
    DUPLICATE_LANGUAGE = 'duplicate_language'
    DUPLICATE_PROPERTY = 'duplicate_property'
    UNSUPPORTED_PROPERTY = 'unsupported_property'
    MISSING_WRAPPER = 'missing_wrapper'


class ParseWarning(NamedTuple):
    """A recoverable problem found while parsing"""

    kind: WarningKind
    key: Optional[Tuple[str, str]]
    message: str

    def __str__(self) -> str:
        return self.message


class ErrorRecovery:
    """Strategies for recovering from non-conforming packets"""

    # Root elements a bare metadata block may start with
    _METADATA_ROOT = re.compile(rb'<(x:xmpmeta|x:xapmeta|rdf:RDF)[\s>/]')

    @staticmethod
    def recover_framing(handler, context: Dict[str, Any]) -> Optional[Tuple[int, int]]:
        """
        Recover from a missing packet wrapper

        Args:
            handler: The handler that encountered the error
            context: Error context including data, limit and error_type

        Returns:
            tuple or None: (start, end) offsets of the metadata block
        """
        data = context.get('data')
        if not data:
            return None

        error_type = context.get('error_type')
        if error_type != 'FramingError':
            return None

        limit = context.get('limit') or len(data)
        span = ErrorRecovery._find_metadata_element(data, limit)
        if span is not None and handler is not None:
            handler.log(f"Recovered bare metadata element at offset {span[0]}", level="DEBUG")
        return span

    @staticmethod
    def _find_metadata_element(data: bytes, limit: int) -> Optional[Tuple[int, int]]:
        """
        Locate a bare x:xmpmeta, x:xapmeta or rdf:RDF element

        Args:
            data: Raw bytes to search
            limit: Maximum number of bytes the element may span

        Returns:
            tuple or None: (start, end) offsets of the element
        """
        match = ErrorRecovery._METADATA_ROOT.search(data)
        if match is None:
            return None

        start = match.start()
        closing = b'</' + match.group(1) + b'>'
        end = data.find(closing, start, start + limit)
        if end < 0:
            return None
        return start, end + len(closing)
