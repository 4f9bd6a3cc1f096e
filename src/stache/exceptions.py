"""Stache Exceptions

Errors raised while compiling templates.
"""

from __future__ import annotations

from typing import Optional


class StacheError(Exception):
    """Base exception for all stache errors."""

    pass


class ParseError(StacheError):
    """Raised when template text cannot be compiled.

    This is the only error the parse phase produces. Rendering a compiled
    template never raises it.
    """

    def __init__(self, line: int, message: str, section: Optional[str] = None):
        self.line = line
        self.message = message
        self.section = section
        super().__init__(f"line {line}: {message}")
