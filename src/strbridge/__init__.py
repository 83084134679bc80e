"""strbridge: conversions between UTF-8, wide, widget and UTF-16 strings."""

from .convert import to_icu, to_icu_raw, to_utf8, to_wstring, to_wx
from .errors import ConversionError
from .ucharbuffer import UCharBuffer
from .ustring import UnicodeString
from .wide import WideString
from .widget import WidgetString

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "UCharBuffer",
    "UnicodeString",
    "WideString",
    "WidgetString",
    "to_icu",
    "to_icu_raw",
    "to_utf8",
    "to_wstring",
    "to_wx",
]
