"""Tests for conversions between the string representations."""

from __future__ import annotations


import pytest

from strbridge import (
    ConversionError,
    UCharBuffer,
    UnicodeString,
    WideString,
    WidgetString,
    to_icu,
    to_icu_raw,
    to_utf8,
    to_wstring,
    to_wx,
)
from strbridge import convert
from strbridge.config import utf_codec
from strbridge.transcode import Status, TranscodeResult
from tests.conftest import as_text, utf16_units

SAMPLES = ["", "ascii", "café", "Ünïcödé ✓", "日本語", "emoji 😀🎉", "tab\tnew\nline"]


# ---------------------------------------------------------------------------
# Copying conversions
# ---------------------------------------------------------------------------

def test_cafe_scenario(unit_size: int) -> None:
    """5 UTF-8 bytes -> 4 wide units -> the same 5 bytes."""
    utf8 = b"caf\xc3\xa9"
    ws = to_wstring(utf8, unit_size=unit_size)
    assert len(ws) == 4
    assert ws.unit_size == unit_size
    assert to_utf8(ws) == utf8


@pytest.mark.parametrize("text", SAMPLES)
def test_utf8_wide_round_trip(text: str, unit_size: int) -> None:
    ws = WideString(text, unit_size)
    assert to_wstring(to_utf8(ws), unit_size=unit_size) == ws
    utf8 = text.encode("utf-8")
    assert to_utf8(to_wstring(utf8, unit_size=unit_size)) == utf8


def test_to_utf8_from_wide_rejects_lone_surrogate(unit_size: int) -> None:
    with pytest.raises(ConversionError):
        to_utf8(WideString("a\ud800b", unit_size))


def test_to_utf8_from_str_rejects_lone_surrogate() -> None:
    with pytest.raises(ConversionError):
        to_utf8("\udfff")


def test_to_wstring_rejects_malformed_utf8(unit_size: int) -> None:
    with pytest.raises(ConversionError):
        to_wstring(b"\x80", unit_size=unit_size)


def test_to_wx_from_utf8(widget_storage: str) -> None:
    wx = to_wx("grüße".encode("utf-8"), storage=widget_storage)
    assert isinstance(wx, WidgetString)
    assert wx.storage == widget_storage
    assert wx == "grüße"


def test_to_wx_from_utf8_is_strict() -> None:
    with pytest.raises(ConversionError):
        to_wx(b"\xe2\x82")


def test_to_utf8_copies_bytes() -> None:
    source = bytearray(b"abc")
    out = to_utf8(source)
    source[0] = ord("x")
    assert out == b"abc"


def test_to_utf8_from_bytes_stops_at_nul() -> None:
    assert to_utf8(b"ab\0cd") == b"ab"
    assert to_utf8(bytearray(b"\0abc")) == b""


SOURCES = {
    "utf8": lambda: "héllo 😀".encode("utf-8"),
    "str": lambda: "héllo 😀",
    "wide16": lambda: WideString("héllo 😀", 2),
    "wide32": lambda: WideString("héllo 😀", 4),
    "widget-wchar": lambda: WidgetString("héllo 😀", "wchar"),
    "widget-utf8": lambda: WidgetString("héllo 😀", "utf8"),
    "icu": lambda: UnicodeString("héllo 😀"),
}
TARGETS = {
    "utf8": to_utf8,
    "wide": to_wstring,
    "widget": to_wx,
    "icu": to_icu,
}


@pytest.mark.parametrize("source", sorted(SOURCES))
@pytest.mark.parametrize("target", sorted(TARGETS))
def test_every_pair_converts(source: str, target: str) -> None:
    result = TARGETS[target](SOURCES[source]())
    assert as_text(result) == "héllo 😀"


@pytest.mark.parametrize("func", [to_utf8, to_wstring, to_wx, to_icu, to_icu_raw])
def test_unsupported_source_type(func) -> None:
    with pytest.raises(TypeError, match="Cannot convert int"):
        func(42)


# ---------------------------------------------------------------------------
# Unicode-library views and copies
# ---------------------------------------------------------------------------

def test_to_icu_aliases_16_bit_wide_string() -> None:
    ws = WideString("zero-copy ✓", 2)
    view = to_icu(ws)
    assert view.is_alias
    assert view.get_buffer().tolist() == ws.code_units().tolist()


def test_zero_copy_view_matches_copying_conversion() -> None:
    ws = WideString("mixed ü 😀", 2)
    alias = to_icu(ws)
    copied = to_icu(to_utf8(ws))
    assert not copied.is_alias
    assert alias.tobytes() == copied.tobytes()


def test_alias_is_bounded_by_source() -> None:
    ws = WideString("abc", 2)
    alias = to_icu(ws)
    with pytest.raises(BufferError):
        ws.append("d")
    alias.release()
    ws.append("d")
    assert ws == "abcd"


def test_to_icu_transcodes_32_bit_wide_string() -> None:
    ws = WideString("a😀", 4)
    s = to_icu(ws)
    assert not s.is_alias
    assert s.get_buffer().tolist() == utf16_units("a😀")


def test_to_icu_rejects_invalid_utf32() -> None:
    with pytest.raises(ConversionError):
        to_icu(WideString.from_units([0x110000], 4))


def test_to_icu_from_widget() -> None:
    assert to_icu(WidgetString("abc", "wchar", 2)).is_alias
    assert not to_icu(WidgetString("abc", "wchar", 4)).is_alias
    utf8_backed = to_icu(WidgetString("abc", "utf8"))
    assert not utf8_backed.is_alias
    assert utf8_backed == "abc"


def test_to_icu_from_icu_is_independent_copy() -> None:
    units = memoryview(bytearray("abc".encode(utf_codec(2)))).cast("H")
    alias = UnicodeString.alias(units)
    dup = to_icu(alias)
    units[0] = ord("z")
    assert not dup.is_alias
    assert dup == "abc"


def test_reverse_direction_always_copies(unit_size: int, widget_storage: str) -> None:
    ws = WideString("copy me", 2)
    alias = to_icu(ws)
    wx = to_wx(alias, storage=widget_storage, unit_size=unit_size)
    back = to_wstring(alias, unit_size=unit_size)
    alias.release()
    ws.assign("something else entirely")
    assert wx == "copy me"
    assert back == "copy me"
    assert back.unit_size == unit_size


def test_to_wstring_from_icu_keeps_surrogate_pairs() -> None:
    s = UnicodeString("😀")
    assert to_wstring(s, unit_size=2).code_units().tolist() == [0xD83D, 0xDE00]
    assert to_wstring(s, unit_size=4).code_units().tolist() == [0x1F600]


# ---------------------------------------------------------------------------
# Raw buffers
# ---------------------------------------------------------------------------

def test_raw_from_empty_utf8() -> None:
    buf = to_icu_raw(b"")
    assert not buf.is_owned
    assert buf.capacity == 0
    assert buf.view().tolist() == [0]


def test_raw_from_empty_wide(unit_size: int) -> None:
    buf = to_icu_raw(WideString("", unit_size))
    assert not buf.is_owned
    assert buf.capacity == 0
    assert buf.view().tolist() == [0]


def test_raw_from_wide_with_leading_nul_is_empty(unit_size: int) -> None:
    buf = to_icu_raw(WideString.from_units([0, 0x61], unit_size))
    assert not buf.is_owned
    assert buf.capacity == 0
    assert buf.view().tolist() == [0]


def test_raw_from_utf8_is_owned_and_frozen() -> None:
    buf = to_icu_raw(b"caf\xc3\xa9")
    assert buf.is_owned
    assert buf.capacity == 5
    assert len(buf) == 4
    assert buf.view().tolist() == utf16_units("café") + [0]
    with pytest.raises(TypeError):
        buf.writable()


@pytest.mark.parametrize("data", [b"\x80", b"abc\xff", b"\xc3", b"\xed\xa0\x80"])
def test_raw_from_malformed_utf8_never_raises(data: bytes) -> None:
    buf = to_icu_raw(data)
    units = buf.view().tolist()
    assert units[-1] == 0
    assert 0xFFFD in units


def test_raw_from_utf8_stops_at_nul() -> None:
    assert to_icu_raw(b"ab\0cd").to_text() == "ab"
    buf = to_icu_raw(b"\0abc")
    assert not buf.is_owned
    assert buf.capacity == 0


def test_raw_from_str_substitutes_lone_surrogates() -> None:
    assert to_icu_raw("a\ud800b").to_text() == "a\ufffd\ufffd\ufffdb"


def test_raw_from_16_bit_wide_aliases_source() -> None:
    ws = WideString("abc", 2)
    buf = to_icu_raw(ws)
    assert not buf.is_owned
    assert buf.capacity == -1
    assert buf.view().tolist() == [0x61, 0x62, 0x63, 0]
    with pytest.raises(BufferError):
        ws.append("d")
    buf.release()
    ws.append("d")


def test_raw_from_32_bit_wide_transcodes() -> None:
    buf = to_icu_raw(WideString("a😀", 4))
    assert buf.is_owned
    assert buf.capacity == 4
    assert buf.view().tolist() == [0x61, 0xD83D, 0xDE00, 0]


def test_raw_from_invalid_32_bit_wide_degrades_to_empty() -> None:
    buf = to_icu_raw(WideString.from_units([0x61, 0xD800], 4))
    assert not buf.is_owned
    assert buf.capacity == 0
    assert buf.view().tolist() == [0]


def test_raw_from_widget(widget_storage: str) -> None:
    buf = to_icu_raw(WidgetString("wx ✓", widget_storage, 4))
    assert buf.is_owned
    assert buf.to_text() == "wx ✓"


def test_raw_falls_back_to_empty_when_second_pass_fails(caplog: pytest.LogCaptureFixture) -> None:
    calls: list[bool] = []

    def flaky(source, dest=None) -> TranscodeResult:
        calls.append(dest is None)
        if dest is None:
            return TranscodeResult(3, Status.BUFFER_OVERFLOW)
        dest[0] = ord("x")
        return TranscodeResult(0, Status.INVALID_CHAR)

    buf = convert._transcode_into_buffer(b"abc", flaky, "test")
    assert calls == [True, False]
    assert isinstance(buf, UCharBuffer)
    assert not buf.is_owned
    assert buf.view().tolist() == [0]
    assert "using empty buffer" in caplog.text


def test_raw_moved_holder_keeps_data() -> None:
    buf = to_icu_raw(b"move")
    moved = buf.move()
    buf.release()
    assert moved.to_text() == "move"
    assert not buf.is_owned
