"""Platform facts the conversions depend on.

The wide-character unit size is fixed per platform (2 bytes on Windows,
4 bytes on most Unix systems). Conversions accept an explicit override so
both layouts can be produced on any host.
"""

from __future__ import annotations

import ctypes
import sys

# Size of one wide-character code unit, in bytes.
WCHAR_SIZE: int = ctypes.sizeof(ctypes.c_wchar)

# Size of one Unicode-library code unit (always UTF-16).
UCHAR_SIZE: int = 2

BYTEORDER: str = sys.byteorder

# Internal storage of the platform widget string: "wchar" keeps wide units,
# "utf8" keeps UTF-8 bytes.
WIDGET_STORAGE: str = "wchar"

_UNIT_SIZES = (2, 4)
_WIDGET_STORAGES = ("wchar", "utf8")

# memoryview.cast() format per code-unit size.
_UNIT_FORMATS = {1: "B", 2: "H", 4: "I"}


def check_unit_size(unit_size: int | None) -> int:
    """Resolve a wide unit size, defaulting to the platform's."""
    if unit_size is None:
        return WCHAR_SIZE
    if unit_size not in _UNIT_SIZES:
        raise ValueError(f"Unsupported wide unit size: {unit_size!r} (use 2 or 4)")
    return unit_size


def check_widget_storage(storage: str | None) -> str:
    if storage is None:
        return WIDGET_STORAGE
    if storage not in _WIDGET_STORAGES:
        supported = ", ".join(_WIDGET_STORAGES)
        raise ValueError(f"Unknown widget storage: {storage!r}. Use one of: {supported}")
    return storage


def unit_format(unit_size: int) -> str:
    return _UNIT_FORMATS[unit_size]


def utf_codec(unit_size: int) -> str:
    """Codec name for native-order UTF-8/16/32 with the given unit size."""
    if unit_size == 1:
        return "utf-8"
    suffix = "le" if BYTEORDER == "little" else "be"
    return f"utf-{unit_size * 8}-{suffix}"


def describe_platform() -> dict:
    return {
        "wchar_size": WCHAR_SIZE,
        "uchar_size": UCHAR_SIZE,
        "byteorder": BYTEORDER,
        "widget_storage": WIDGET_STORAGE,
    }
