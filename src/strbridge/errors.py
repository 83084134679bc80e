"""Exceptions raised by the copying conversions."""

from __future__ import annotations


class ConversionError(ValueError):
    """Malformed input reached a strict transcoder.

    The underlying ``UnicodeError`` is kept as ``__cause__``.
    """

    def __init__(self, message: str, source_encoding: str, target_encoding: str) -> None:
        super().__init__(message)
        self.source_encoding = source_encoding
        self.target_encoding = target_encoding
