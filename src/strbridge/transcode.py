"""Encoding primitives used by the conversions.

Three primitives, all built on Python's codec machinery:

- ``utf_to_utf``: strict transcoding between UTF-8/16/32 byte buffers.
  Malformed input raises ``ConversionError``.
- ``utf8_to_utf16_lenient``: never fails; malformed UTF-8 becomes U+FFFD.
- ``utf32_to_utf16``: reports invalid code points through its status.

The last two follow the measure-then-fill protocol: called without a
destination they only compute the required length in UTF-16 units;
called with a destination they write into it and null-terminate when
there is room. Both read their source up to the first null unit.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from .config import UCHAR_SIZE, utf_codec
from .errors import ConversionError

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class Status(enum.Enum):
    OK = "ok"
    BUFFER_OVERFLOW = "buffer-overflow"
    INVALID_CHAR = "invalid-char"


@dataclass(frozen=True)
class TranscodeResult:
    length: int  # UTF-16 units, terminator excluded
    status: Status = Status.OK

    @property
    def failed(self) -> bool:
        return self.status is not Status.OK


def as_bytes(data: BytesLike) -> bytes:
    """Flatten any buffer (including typed memoryviews) to bytes."""
    if isinstance(data, bytes):
        return data
    return memoryview(data).cast("B").tobytes()


def until_nul(data: BytesLike, unit_size: int = 1) -> bytes:
    """Return the units of ``data`` before the first null unit."""
    raw = as_bytes(data)
    zero = b"\0" * unit_size
    pos = raw.find(zero)
    while pos != -1 and pos % unit_size:
        pos = raw.find(zero, pos + 1)
    if pos == -1:
        # Trailing partial unit is dropped.
        return raw[: len(raw) - len(raw) % unit_size]
    return raw[:pos]


def utf_to_utf(data: BytesLike, source: str, target: str) -> bytes:
    """Strictly transcode ``data`` from codec ``source`` to codec ``target``."""
    try:
        return as_bytes(data).decode(source).encode(target)
    except UnicodeError as exc:
        raise ConversionError(
            f"Cannot convert {source} to {target}: {getattr(exc, 'reason', exc)} "
            f"at position {getattr(exc, 'start', '?')}",
            source,
            target,
        ) from exc


def _fill(units: bytes, dest: Optional[memoryview]) -> TranscodeResult:
    length = len(units) // UCHAR_SIZE
    if dest is None:
        status = Status.BUFFER_OVERFLOW if length else Status.OK
        return TranscodeResult(length, status)
    if dest.readonly:
        raise TypeError("Destination buffer is read-only")
    capacity = len(dest)
    if length > capacity:
        return TranscodeResult(length, Status.BUFFER_OVERFLOW)
    dest.cast("B")[: len(units)] = units
    if length < capacity:
        dest[length] = 0
    return TranscodeResult(length)


def utf8_to_utf16_lenient(
    source: BytesLike, dest: Optional[memoryview] = None
) -> TranscodeResult:
    """Transform null-terminated UTF-8 into UTF-16, substituting bad sequences.

    ``dest`` must be a writable memoryview of 16-bit units.
    """
    text = until_nul(source).decode("utf-8", errors="replace")
    return _fill(text.encode(utf_codec(UCHAR_SIZE)), dest)


def utf32_to_utf16(
    source: BytesLike, dest: Optional[memoryview] = None
) -> TranscodeResult:
    """Transcode null-terminated native-order UTF-32 into UTF-16.

    Surrogate or out-of-range code points yield ``Status.INVALID_CHAR``
    with a length of 0; nothing is written in that case.
    """
    raw = until_nul(source, 4)
    try:
        text = raw.decode(utf_codec(4))
    except UnicodeDecodeError as exc:
        logger.debug("Invalid UTF-32 code unit at byte %d: %s", exc.start, exc.reason)
        return TranscodeResult(0, Status.INVALID_CHAR)
    return _fill(text.encode(utf_codec(UCHAR_SIZE)), dest)
