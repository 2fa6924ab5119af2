"""
service.py
Description: Session interface for XMP metadata editing
    This service owns one property store and coordinates the packet parser
    and encoder, giving editors a simple interface for loading, changing
    and regenerating a packet.
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
This code depends on several third-party libraries, each with its own license:
- defusedxml (through the packet parser)

"""
# xmp_model/service.py
import datetime
import os
from typing import Any, Dict, List, Optional, Union

from .handlers.encoder import PacketEncoder
from .handlers.parser import PacketParser
from .models.store import KeyLike, PropertyStore
from .models.values import PropertyValue
from .utils.error_handling import ParseError, ParseWarning
from .utils.view import ScalarViewPolicy


class XMPModel:
    """
    Unified interface for one metadata editing session

    Parsed packets are merged into the session store; the encoder
    regenerates a packet from it on demand.
    """

    def __init__(self, strict: bool = False, debug: bool = False,
                 view_policy: Optional[ScalarViewPolicy] = None,
                 **encoder_options):
        """
        Initialize the session

        Args:
            strict: Default framing mode for parse_file
            debug: Whether to enable debug logging
            view_policy: Presentation policy for scalar views
            **encoder_options: Passed on to PacketEncoder (padding, writable, toolkit, indent)
        """
        self.debug = debug
        self.strict = strict
        self.store = PropertyStore(view_policy)

        # Initialize handlers on demand
        self._parser = None
        self._encoder = None
        self._encoder_options = encoder_options

    @property
    def parser(self) -> PacketParser:
        if self._parser is None:
            self._parser = PacketParser(strict=self.strict, debug=self.debug)
        return self._parser

    @property
    def encoder(self) -> PacketEncoder:
        if self._encoder is None:
            self._encoder = PacketEncoder(debug=self.debug, **self._encoder_options)
        return self._encoder

    # -- packets --------------------------------------------------------------

    def parse_file(self, filepath: Union[str, os.PathLike]) -> List[ParseWarning]:
        """
        Merge the packet found in a file into the session

        Args:
            filepath: Path to an XMP sidecar or a media file holding a packet

        Returns:
            list: Warnings reported while parsing

        Raises:
            ParseError: If no usable packet is found, the session is then unchanged
        """
        return self._merge(filepath, None, self.strict)

    def parse_buffer(self, buffer: Union[bytes, bytearray, memoryview],
                     length: Optional[int] = None,
                     skip_other_data: bool = False) -> List[ParseWarning]:
        """
        Merge the packet held in a buffer into the session

        Args:
            buffer: Bytes holding the packet
            length: Number of bytes to consume (all if None)
            skip_other_data: Tolerate foreign bytes around the packet,
                such as an application tag or a whole media file

        Returns:
            list: Warnings reported while parsing
        """
        if isinstance(buffer, str):
            buffer = buffer.encode('utf-8')
        return self._merge(buffer, length, not skip_other_data)

    def _merge(self, source, length: Optional[int], strict: bool) -> List[ParseWarning]:
        try:
            result = self.parser.parse(source, length=length, strict=strict,
                                       namespaces=self.store.foreign_namespaces)
        except ParseError as e:
            self._log("Could not parse XMP packet", level="ERROR", error=e)
            raise
        self.store.update(result.store)
        self._log(f"Merged {len(result.store)} properties", level="DEBUG")
        return result.warnings

    def generate_packet(self, buffer: Optional[bytearray] = None) -> bytes:
        """
        Serialize the session into a packet

        Args:
            buffer: Optional bytearray the packet is appended to, e.g. one
                already holding an application marker

        Returns:
            bytes: The packet alone
        """
        packet = self.encoder.encode(self.store)
        if buffer is not None:
            buffer.extend(packet)
        return packet

    # -- properties -----------------------------------------------------------

    def get_scalar_property(self, prefix: str, name: str) -> Optional[str]:
        return self.store.get_scalar_view(prefix, name)

    def get_raw_property_value(self, prefix: str, name: str) -> Optional[List[str]]:
        """
        Get the flattened raw form of a property

        Returns:
            list or None: Scalar text, list items, or alternating language tags and texts
        """
        value = self.store.get_raw_value(prefix, name)
        return value.to_raw_list() if value is not None else None

    def get_property(self, prefix: str, name: str) -> Optional[PropertyValue]:
        return self.store.get_raw_value(prefix, name)

    def set_scalar_property(self, prefix: str, name: str, text: str) -> bool:
        return self.store.set_scalar(prefix, name, text)

    def set_property(self, key: KeyLike, value: PropertyValue) -> None:
        self.store.set_raw(key, value)

    def remove_property(self, key: KeyLike) -> None:
        self.store.remove(key)

    def is_empty(self) -> bool:
        return self.store.is_empty()

    def has_schema(self, prefix: str) -> bool:
        return self.store.has_schema(prefix)

    def to_dict(self) -> Dict[str, Any]:
        return self.store.to_dict()

    # -- housekeeping ---------------------------------------------------------

    def _log(self, message: str, level: str = "INFO", error: Exception = None) -> None:
        """Log a message with appropriate level"""
        if level == "DEBUG" and not self.debug:
            return
        timestamp = self._get_timestamp()
        error_text = f" - {str(error)}" if error else ""
        print(f"[{timestamp}] XMPModel [{level}] {message}{error_text}")

    def _get_timestamp(self) -> str:
        """Get current timestamp in ISO 8601 format"""
        return datetime.datetime.now().isoformat()

    def cleanup(self) -> None:
        """Clean up handler state"""
        for handler in (self._parser, self._encoder):
            if handler is not None:
                handler.cleanup()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure cleanup"""
        self.cleanup()
