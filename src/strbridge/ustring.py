"""UTF-16 strings of the Unicode text-processing library.

A ``UnicodeString`` either owns a private copy of its 16-bit units or is a
read-only alias of units owned elsewhere (``UnicodeString.alias``). An alias
is only meaningful while its source keeps the same contents; it pins the
source buffer, so a ``bytearray`` behind it cannot be resized until the
alias is released or collected. Call ``copy()`` to get an independent
string.
"""

from __future__ import annotations

from typing import Optional

from .config import UCHAR_SIZE, utf_codec
from .transcode import BytesLike, as_bytes, utf_to_utf

_UTF16 = utf_codec(UCHAR_SIZE)


class UnicodeString:
    __slots__ = ("_units", "_aliased")

    def __init__(self, text: str = "") -> None:
        self._units = _owned_units(text.encode(_UTF16, "surrogatepass"))
        self._aliased = False

    @classmethod
    def alias(cls, units: memoryview, length: Optional[int] = None) -> "UnicodeString":
        """Read-only aliasing constructor; does not copy ``units``."""
        view = memoryview(units)
        if view.format != "H" or view.ndim != 1:
            raise TypeError(f"Expected a 1-D view of 16-bit units, got format {view.format!r}")
        if length is not None:
            view = view[:length]
        obj = cls.__new__(cls)
        obj._units = view.toreadonly()
        obj._aliased = True
        return obj

    @classmethod
    def from_utf16(cls, data: BytesLike) -> "UnicodeString":
        """Owned copy of native-order UTF-16 bytes, taken as-is."""
        raw = as_bytes(data)
        if len(raw) % UCHAR_SIZE:
            raise ValueError(f"UTF-16 buffer has odd length {len(raw)}")
        obj = cls.__new__(cls)
        obj._units = _owned_units(raw)
        obj._aliased = False
        return obj

    @classmethod
    def from_utf8(cls, data: BytesLike) -> "UnicodeString":
        return cls.from_utf16(utf_to_utf(data, "utf-8", _UTF16))

    @classmethod
    def from_utf32(cls, data: BytesLike, length: Optional[int] = None) -> "UnicodeString":
        """Transcode native-order UTF-32 units; ``length`` counts 32-bit units."""
        raw = as_bytes(data)
        if length is not None:
            raw = raw[: length * 4]
        return cls.from_utf16(utf_to_utf(raw, utf_codec(4), _UTF16))

    @property
    def is_alias(self) -> bool:
        return self._aliased

    def __len__(self) -> int:
        return len(self._units)

    def get_buffer(self) -> memoryview:
        """Read-only view of the 16-bit units (no terminator)."""
        return self._units.toreadonly()

    def tobytes(self) -> bytes:
        return self._units.tobytes()

    def to_text(self) -> str:
        return self.tobytes().decode(_UTF16, "surrogatepass")

    def copy(self) -> "UnicodeString":
        return UnicodeString.from_utf16(self.tobytes())

    def release(self) -> None:
        """Drop the alias (unpinning its source) and become empty."""
        if self._aliased:
            self._units.release()
        self._units = _owned_units(b"")
        self._aliased = False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UnicodeString):
            return self._units == other._units
        if isinstance(other, str):
            return self.to_text() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        kind = "alias" if self._aliased else "owned"
        return f"UnicodeString({self.to_text()!r}, {kind})"


def _owned_units(raw: bytes) -> memoryview:
    return memoryview(bytearray(raw)).cast("H")
