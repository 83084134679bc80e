"""Tests for the encoding primitives."""

from __future__ import annotations

from array import array

import pytest

from strbridge.config import utf_codec
from strbridge.errors import ConversionError
from strbridge.transcode import (
    Status,
    until_nul,
    utf32_to_utf16,
    utf8_to_utf16_lenient,
    utf_to_utf,
)
from tests.conftest import utf16_units


def _dest(units: int) -> memoryview:
    return memoryview(bytearray(units * 2)).cast("H")


def test_utf_to_utf_strict_raises_on_malformed_utf8() -> None:
    with pytest.raises(ConversionError) as info:
        utf_to_utf(b"ab\x80", "utf-8", utf_codec(2))
    assert isinstance(info.value.__cause__, UnicodeDecodeError)
    assert info.value.source_encoding == "utf-8"


def test_utf_to_utf_rejects_lone_surrogate_when_encoding_utf8() -> None:
    lone = "\ud800".encode(utf_codec(2), "surrogatepass")
    with pytest.raises(ConversionError):
        utf_to_utf(lone, utf_codec(2), "utf-8")


def test_utf_to_utf_is_a_conversion_error_and_value_error() -> None:
    with pytest.raises(ValueError):
        utf_to_utf(b"\xff", "utf-8", "utf-8")


def test_lenient_measure_pass_reports_length_only() -> None:
    result = utf8_to_utf16_lenient("café".encode("utf-8"))
    assert result.length == 4
    assert result.status is Status.BUFFER_OVERFLOW


def test_lenient_measure_of_empty_input_is_zero() -> None:
    result = utf8_to_utf16_lenient(b"")
    assert result.length == 0
    assert not result.failed


def test_lenient_fill_writes_units_and_terminator() -> None:
    dest = _dest(5)
    dest[4] = 0xFFFF
    result = utf8_to_utf16_lenient("café".encode("utf-8"), dest)
    assert not result.failed
    assert dest.tolist() == utf16_units("café") + [0]


def test_lenient_substitutes_malformed_sequences() -> None:
    result = utf8_to_utf16_lenient(b"\x80")
    assert result.length == 1
    dest = _dest(2)
    utf8_to_utf16_lenient(b"\x80", dest)
    assert dest.tolist() == [0xFFFD, 0]


def test_lenient_stops_at_first_nul() -> None:
    assert utf8_to_utf16_lenient(b"ab\0cd").length == 2


def test_lenient_reports_overflow_for_short_destination() -> None:
    dest = _dest(2)
    result = utf8_to_utf16_lenient(b"abcd", dest)
    assert result.status is Status.BUFFER_OVERFLOW
    assert result.length == 4
    assert dest.tolist() == [0, 0]


def test_lenient_rejects_read_only_destination() -> None:
    with pytest.raises(TypeError):
        utf8_to_utf16_lenient(b"a", memoryview(bytes(4)).cast("H"))


def test_utf32_to_utf16_produces_surrogate_pairs() -> None:
    source = array("I", [0x61, 0x1F600, 0]).tobytes()
    assert utf32_to_utf16(source).length == 3
    dest = _dest(4)
    result = utf32_to_utf16(source, dest)
    assert not result.failed
    assert dest.tolist() == [0x61, 0xD83D, 0xDE00, 0]


def test_utf32_to_utf16_reports_invalid_code_points() -> None:
    for bad in (0xD800, 0x110000):
        result = utf32_to_utf16(array("I", [0x61, bad]).tobytes())
        assert result.status is Status.INVALID_CHAR
        assert result.length == 0


def test_until_nul_respects_unit_alignment() -> None:
    units = array("I", [0x100, 0x10000])
    assert until_nul(units.tobytes(), 4) == units.tobytes()

    terminated = array("I", [0x100, 0x41, 0, 0x42]).tobytes()
    assert until_nul(terminated, 4) == array("I", [0x100, 0x41]).tobytes()


def test_until_nul_accepts_typed_views() -> None:
    view = memoryview(array("H", [0x41, 0x42, 0, 0x43]))
    assert until_nul(view, 2) == array("H", [0x41, 0x42]).tobytes()
