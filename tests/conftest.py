"""Pytest fixtures shared across all test modules.

Wide strings are exercised with both unit sizes on every host; the
platform's own size is only the default.
"""

from __future__ import annotations

from array import array

import pytest

from strbridge.config import utf_codec


@pytest.fixture(params=[2, 4], ids=["wchar16", "wchar32"])
def unit_size(request: pytest.FixtureRequest) -> int:
    """Wide-character unit size in bytes."""
    return request.param


@pytest.fixture(params=["wchar", "utf8"])
def widget_storage(request: pytest.FixtureRequest) -> str:
    """Internal storage mode of the widget string."""
    return request.param


def utf16_units(text: str) -> list[int]:
    """Expected UTF-16 code units of ``text``."""
    return array("H", text.encode(utf_codec(2), "surrogatepass")).tolist()


def as_text(value: object) -> str:
    """Text carried by any conversion result."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value.to_text()  # type: ignore[attr-defined]
