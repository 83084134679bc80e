"""Wide-character strings.

A ``WideString`` is a mutable sequence of platform wide code units (UTF-16
when the unit is 2 bytes, UTF-32 when it is 4). Storage is a ``bytearray``
in native byte order that always ends with one null unit, so ``c_str()``
hands out a terminated view without copying.

Views returned by ``c_str()`` and ``code_units()`` alias the storage. While
any of them is alive the storage cannot be resized: ``append``, ``assign``
and ``clear`` raise ``BufferError`` whenever they would change its length.
"""

from __future__ import annotations

from array import array
from typing import Iterable, Union

from .config import check_unit_size, unit_format, utf_codec
from .transcode import BytesLike, as_bytes


class WideString:
    __slots__ = ("_storage", "_unit_size")

    def __init__(self, text: str = "", unit_size: int | None = None) -> None:
        self._unit_size = check_unit_size(unit_size)
        self._storage = bytearray(self._encode(text))
        self._storage += self._terminator()

    # -- construction -------------------------------------------------------

    @classmethod
    def from_bytes(cls, data: BytesLike, unit_size: int | None = None) -> "WideString":
        """Build from native-order code-unit bytes (no terminator expected)."""
        ws = cls("", unit_size)
        raw = as_bytes(data)
        if len(raw) % ws._unit_size:
            raise ValueError(
                f"Buffer length {len(raw)} is not a multiple of the unit size {ws._unit_size}"
            )
        ws._storage[:0] = raw
        return ws

    @classmethod
    def from_units(cls, units: Iterable[int], unit_size: int | None = None) -> "WideString":
        ws = cls("", unit_size)
        ws._storage[:0] = array(unit_format(ws._unit_size), units).tobytes()
        return ws

    def _encode(self, text: str) -> bytes:
        # Wide strings may carry lone surrogates, as the platform type does.
        return text.encode(utf_codec(self._unit_size), "surrogatepass")

    def _terminator(self) -> bytes:
        return b"\0" * self._unit_size

    # -- accessors ----------------------------------------------------------

    @property
    def unit_size(self) -> int:
        return self._unit_size

    @property
    def codec(self) -> str:
        return utf_codec(self._unit_size)

    def __len__(self) -> int:
        return len(self._storage) // self._unit_size - 1

    def c_str(self) -> memoryview:
        """Read-only view of the code units including the terminating null."""
        return memoryview(self._storage).toreadonly().cast(unit_format(self._unit_size))

    def code_units(self) -> memoryview:
        """Read-only view of the code units, terminator excluded."""
        return self.c_str()[: len(self)]

    def tobytes(self) -> bytes:
        return bytes(self._storage[: len(self) * self._unit_size])

    def to_text(self) -> str:
        return self.tobytes().decode(self.codec, "surrogatepass")

    def copy(self) -> "WideString":
        return WideString.from_bytes(self.tobytes(), self._unit_size)

    # -- mutation -----------------------------------------------------------

    def append(self, other: Union[str, "WideString"]) -> None:
        self._storage[-self._unit_size:] = self._coerce(other) + self._terminator()

    def assign(self, other: Union[str, "WideString"]) -> None:
        self._storage[:] = self._coerce(other) + self._terminator()

    def clear(self) -> None:
        self._storage[:] = self._terminator()

    def _coerce(self, other: Union[str, "WideString"]) -> bytes:
        if isinstance(other, WideString):
            if other._unit_size != self._unit_size:
                raise ValueError("Cannot mix wide strings of different unit sizes")
            return other.tobytes()
        return self._encode(other)

    # -- protocol -----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WideString):
            return self._unit_size == other._unit_size and self._storage == other._storage
        if isinstance(other, str):
            return self.to_text() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"WideString({self.to_text()!r}, unit_size={self._unit_size})"
