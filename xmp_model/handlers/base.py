"""
base.py
Description: Base class for the XMP packet handlers with common functionality
This module provides logging and error tracking shared by the packet parser and encoder.
It is designed to be extended by specific handler classes.
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
# xmp_model/handlers/base.py
import datetime
from typing import Any, Dict, List


class BaseHandler:
    """Base class for all packet handlers with common functionality"""

    def __init__(self, debug: bool = False):
        """
        Initialize the base handler

        Args:
            debug: Whether to enable debug logging
        """
        self.debug = debug
        self.error_history: List[Dict[str, Any]] = []
        self.max_error_history = 100

    def log(self, message: str, level: str = "INFO", error: Exception = None) -> None:
        """
        Log a message with appropriate level

        Args:
            message: The message to log
            level: Log level (INFO, DEBUG, WARNING, ERROR)
            error: Optional exception to include in log
        """
        if level == "DEBUG" and not self.debug:
            return

        timestamp = self.get_timestamp()

        error_text = f" - {str(error)}" if error else ""
        log_message = f"[{timestamp}] {self.__class__.__name__} [{level}] {message}{error_text}"

        print(log_message)

        # Track problems for the caller
        if level in ["ERROR", "WARNING"]:
            self.error_history.append({
                'timestamp': timestamp,
                'level': level,
                'message': message,
                'error': str(error) if error else None
            })

            # Maintain history size
            if len(self.error_history) > self.max_error_history:
                self.error_history.pop(0)

    def get_timestamp(self) -> str:
        """Get current timestamp in ISO 8601 format"""
        return datetime.datetime.now().isoformat()

    def cleanup(self) -> None:
        """Clean up any resources used by the handler"""
        self.error_history.clear()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure cleanup"""
        self.cleanup()
