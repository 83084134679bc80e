"""Conversions between the string representations.

Supported representations are UTF-8 bytes (``bytes``/``bytearray``/
``memoryview``), ``WideString``, ``WidgetString`` and ``UnicodeString``;
Python ``str`` is accepted as a source too.

Usage:
    - to_utf8(...)
    - to_wstring(...)
    - to_wx(...)
    - to_icu(...)
    - to_icu_raw(...)

The copying conversions are strict: malformed input raises
``ConversionError``. ``to_icu_raw`` never raises on bad input and degrades
to an empty buffer instead.

``to_icu`` and ``to_icu_raw`` may alias their argument instead of copying
it (16-bit wide units). The result is then only valid while the argument
stays unchanged; call ``copy()`` on a ``UnicodeString`` to detach it.
"""

from __future__ import annotations

import logging
from functools import singledispatch
from typing import Callable, Optional

from .config import UCHAR_SIZE, check_unit_size, check_widget_storage, utf_codec
from .errors import ConversionError
from .transcode import (
    BytesLike,
    TranscodeResult,
    until_nul,
    utf32_to_utf16,
    utf8_to_utf16_lenient,
    utf_to_utf,
)
from .ucharbuffer import UCharBuffer
from .ustring import UnicodeString
from .wide import WideString
from .widget import WidgetString

logger = logging.getLogger(__name__)

_UTF16 = utf_codec(UCHAR_SIZE)
_BYTES_TYPES = (bytes, bytearray, memoryview)


def _unsupported(target: str, value: object) -> TypeError:
    return TypeError(f"Cannot convert {type(value).__name__} to {target}")


def _rewiden(ws: WideString, unit_size: Optional[int]) -> WideString:
    size = check_unit_size(unit_size) if unit_size is not None else ws.unit_size
    if size == ws.unit_size:
        return ws.copy()
    return WideString.from_bytes(utf_to_utf(ws.tobytes(), ws.codec, utf_codec(size)), size)


# ---------------------------------------------------------------------------
# UTF-8
# ---------------------------------------------------------------------------

@singledispatch
def to_utf8(value: object) -> bytes:
    """Convert to UTF-8 bytes (always a copy)."""
    raise _unsupported("UTF-8", value)


@to_utf8.register(bytes)
@to_utf8.register(bytearray)
@to_utf8.register(memoryview)
def _utf8_from_bytes(value: BytesLike) -> bytes:
    # Treated as a C string: the copy ends at the first null byte.
    return until_nul(value)


@to_utf8.register(str)
def _utf8_from_str(value: str) -> bytes:
    return utf_to_utf(value.encode(_UTF16, "surrogatepass"), _UTF16, "utf-8")


@to_utf8.register(WideString)
def _utf8_from_wide(value: WideString) -> bytes:
    return utf_to_utf(value.tobytes(), value.codec, "utf-8")


@to_utf8.register(WidgetString)
def _utf8_from_widget(value: WidgetString) -> bytes:
    return value.utf8_string()


@to_utf8.register(UnicodeString)
def _utf8_from_icu(value: UnicodeString) -> bytes:
    return utf_to_utf(value.tobytes(), _UTF16, "utf-8")


# ---------------------------------------------------------------------------
# Wide strings
# ---------------------------------------------------------------------------

@singledispatch
def to_wstring(value: object, unit_size: Optional[int] = None) -> WideString:
    """Convert to a wide string (always a copy).

    ``unit_size`` overrides the platform wide unit size for the result.
    """
    raise _unsupported("wide string", value)


@to_wstring.register(bytes)
@to_wstring.register(bytearray)
@to_wstring.register(memoryview)
def _wide_from_utf8(value: BytesLike, unit_size: Optional[int] = None) -> WideString:
    size = check_unit_size(unit_size)
    return WideString.from_bytes(utf_to_utf(value, "utf-8", utf_codec(size)), size)


@to_wstring.register(str)
def _wide_from_str(value: str, unit_size: Optional[int] = None) -> WideString:
    return WideString(value, unit_size)


@to_wstring.register(WideString)
def _wide_from_wide(value: WideString, unit_size: Optional[int] = None) -> WideString:
    return _rewiden(value, unit_size)


@to_wstring.register(WidgetString)
def _wide_from_widget(value: WidgetString, unit_size: Optional[int] = None) -> WideString:
    return value.to_wide(unit_size)


@to_wstring.register(UnicodeString)
def _wide_from_icu(value: UnicodeString, unit_size: Optional[int] = None) -> WideString:
    return to_wx(value, storage="wchar", unit_size=unit_size).to_wide()


# ---------------------------------------------------------------------------
# Widget strings
# ---------------------------------------------------------------------------

@singledispatch
def to_wx(
    value: object, storage: Optional[str] = None, unit_size: Optional[int] = None
) -> WidgetString:
    """Convert to a widget string (always a copy)."""
    raise _unsupported("widget string", value)


@to_wx.register(bytes)
@to_wx.register(bytearray)
@to_wx.register(memoryview)
def _wx_from_utf8(
    value: BytesLike, storage: Optional[str] = None, unit_size: Optional[int] = None
) -> WidgetString:
    return WidgetString.from_utf8(value, storage, unit_size)


@to_wx.register(str)
def _wx_from_str(
    value: str, storage: Optional[str] = None, unit_size: Optional[int] = None
) -> WidgetString:
    return WidgetString(value, storage, unit_size)


@to_wx.register(WideString)
def _wx_from_wide(
    value: WideString, storage: Optional[str] = None, unit_size: Optional[int] = None
) -> WidgetString:
    return WidgetString.from_wide(_rewiden(value, unit_size), storage)


@to_wx.register(WidgetString)
def _wx_from_wx(
    value: WidgetString, storage: Optional[str] = None, unit_size: Optional[int] = None
) -> WidgetString:
    return WidgetString.from_utf8(value.utf8_string(), storage or value.storage, unit_size)


@to_wx.register(UnicodeString)
def _wx_from_icu(
    value: UnicodeString, storage: Optional[str] = None, unit_size: Optional[int] = None
) -> WidgetString:
    storage = check_widget_storage(storage)
    size = check_unit_size(unit_size)
    if storage == "wchar" and size == UCHAR_SIZE:
        # Same code units on both sides: copy them verbatim.
        return WidgetString.from_wide(WideString.from_bytes(value.tobytes(), size), storage)
    return WidgetString.from_utf16(value.tobytes(), storage, size)


# ---------------------------------------------------------------------------
# Unicode-library strings
# ---------------------------------------------------------------------------

@singledispatch
def to_icu(value: object) -> UnicodeString:
    """Convert to a ``UnicodeString``.

    From a wide or widget string with 16-bit units this is a read-only alias
    that is only valid for the source's lifetime; everything else copies.
    """
    raise _unsupported("UnicodeString", value)


@to_icu.register(bytes)
@to_icu.register(bytearray)
@to_icu.register(memoryview)
def _icu_from_utf8(value: BytesLike) -> UnicodeString:
    return UnicodeString.from_utf8(value)


@to_icu.register(str)
def _icu_from_str(value: str) -> UnicodeString:
    return UnicodeString(value)


@to_icu.register(WideString)
def _icu_from_wide(value: WideString) -> UnicodeString:
    if value.unit_size == UCHAR_SIZE:
        return UnicodeString.alias(value.code_units())
    return UnicodeString.from_utf32(value.tobytes(), len(value))


@to_icu.register(WidgetString)
def _icu_from_widget(value: WidgetString) -> UnicodeString:
    native = value.native
    if isinstance(native, WideString):
        return _icu_from_wide(native)
    return UnicodeString.from_utf8(native)


@to_icu.register(UnicodeString)
def _icu_from_icu(value: UnicodeString) -> UnicodeString:
    return value.copy()


# ---------------------------------------------------------------------------
# Raw null-terminated UTF-16 buffers
# ---------------------------------------------------------------------------

Transform = Callable[[BytesLike, Optional[memoryview]], TranscodeResult]


def _transcode_into_buffer(source: BytesLike, transform: Transform, what: str) -> UCharBuffer:
    measured = transform(source, None)
    if not measured.length:
        return UCharBuffer.null()
    buf = UCharBuffer.owned(measured.length)
    result = transform(source, buf.writable())
    if result.failed:
        logger.warning(
            "%s conversion failed after measuring %d units (%s); using empty buffer",
            what, measured.length, result.status.value,
        )
        buf.release()
        return UCharBuffer.null()
    buf.freeze()
    return buf


@singledispatch
def to_icu_raw(value: object) -> UCharBuffer:
    """Create a buffer with a raw null-terminated UTF-16 string.

    Never raises on malformed or empty input; returns the empty buffer
    instead. A non-owned result is only valid for the input's lifetime.
    """
    raise _unsupported("UTF-16 buffer", value)


@to_icu_raw.register(bytes)
@to_icu_raw.register(bytearray)
@to_icu_raw.register(memoryview)
def _raw_from_utf8(value: BytesLike) -> UCharBuffer:
    return _transcode_into_buffer(value, utf8_to_utf16_lenient, "UTF-8")


@to_icu_raw.register(str)
def _raw_from_str(value: str) -> UCharBuffer:
    return _raw_from_utf8(value.encode("utf-8", "surrogatepass"))


@to_icu_raw.register(WideString)
def _raw_from_wide(value: WideString) -> UCharBuffer:
    if not len(value) or value.c_str()[0] == 0:
        return UCharBuffer.null()
    if value.unit_size == UCHAR_SIZE:
        logger.debug("Aliasing %d wide units without copying", len(value))
        return UCharBuffer.non_owned(value.c_str())
    return _transcode_into_buffer(value.c_str(), utf32_to_utf16, "UTF-32")


@to_icu_raw.register(WidgetString)
def _raw_from_widget(value: WidgetString) -> UCharBuffer:
    native = value.native
    if isinstance(native, WideString):
        return _raw_from_wide(native)
    return _raw_from_utf8(native)


__all__ = [
    "ConversionError",
    "to_utf8",
    "to_wstring",
    "to_wx",
    "to_icu",
    "to_icu_raw",
]
