"""Platform widget toolkit string.

Immutable text value whose internal storage depends on how the toolkit was
built: ``"wchar"`` keeps wide code units, ``"utf8"`` keeps UTF-8 bytes. The
toolkit exposes the text as UTF-8 (``utf8_string``), as a wide string
(``to_wide``) and as its native storage (``native``).
"""

from __future__ import annotations

from typing import Optional, Union

from .config import UCHAR_SIZE, check_unit_size, check_widget_storage, utf_codec
from .transcode import BytesLike, utf_to_utf
from .wide import WideString


class WidgetString:
    __slots__ = ("_storage", "_native")

    def __init__(
        self,
        text: str = "",
        storage: Optional[str] = None,
        unit_size: Optional[int] = None,
    ) -> None:
        self._storage = check_widget_storage(storage)
        if self._storage == "wchar":
            self._native: Union[WideString, bytes] = WideString(text, unit_size)
        else:
            check_unit_size(unit_size)
            self._native = utf_to_utf(text.encode("utf-8", "surrogatepass"), "utf-8", "utf-8")

    @classmethod
    def from_utf8(
        cls,
        data: BytesLike,
        storage: Optional[str] = None,
        unit_size: Optional[int] = None,
    ) -> "WidgetString":
        obj = cls("", storage, unit_size)
        if obj._storage == "wchar":
            size = obj._native.unit_size  # type: ignore[union-attr]
            obj._native = WideString.from_bytes(utf_to_utf(data, "utf-8", utf_codec(size)), size)
        else:
            obj._native = utf_to_utf(data, "utf-8", "utf-8")
        return obj

    @classmethod
    def from_wide(cls, ws: WideString, storage: Optional[str] = None) -> "WidgetString":
        obj = cls("", storage, ws.unit_size)
        if obj._storage == "wchar":
            obj._native = ws.copy()
        else:
            obj._native = utf_to_utf(ws.tobytes(), ws.codec, "utf-8")
        return obj

    @classmethod
    def from_utf16(
        cls,
        data: BytesLike,
        storage: Optional[str] = None,
        unit_size: Optional[int] = None,
    ) -> "WidgetString":
        """Decode native-order UTF-16 bytes, the toolkit's UTF-16 converter."""
        obj = cls("", storage, unit_size)
        if obj._storage == "wchar":
            size = obj._native.unit_size  # type: ignore[union-attr]
            obj._native = WideString.from_bytes(
                utf_to_utf(data, utf_codec(UCHAR_SIZE), utf_codec(size)), size
            )
        else:
            obj._native = utf_to_utf(data, utf_codec(UCHAR_SIZE), "utf-8")
        return obj

    @property
    def storage(self) -> str:
        return self._storage

    @property
    def native(self) -> Union[WideString, bytes]:
        """Native storage: a ``WideString`` in wchar mode, UTF-8 ``bytes`` otherwise.

        Must be treated as read-only; views over it alias this string.
        """
        return self._native

    def __len__(self) -> int:
        """Length in native units for wchar storage, in characters for UTF-8."""
        if isinstance(self._native, WideString):
            return len(self._native)
        return len(self._native.decode("utf-8"))

    def utf8_string(self) -> bytes:
        if isinstance(self._native, WideString):
            return utf_to_utf(self._native.tobytes(), self._native.codec, "utf-8")
        return self._native

    def to_wide(self, unit_size: Optional[int] = None) -> WideString:
        """Copy out as a wide string."""
        if isinstance(self._native, WideString):
            if unit_size is None or unit_size == self._native.unit_size:
                return self._native.copy()
            source = self._native.tobytes()
            codec = self._native.codec
        else:
            source = self._native
            codec = "utf-8"
        size = check_unit_size(unit_size)
        return WideString.from_bytes(utf_to_utf(source, codec, utf_codec(size)), size)

    def to_text(self) -> str:
        if isinstance(self._native, WideString):
            return self._native.to_text()
        return self._native.decode("utf-8")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WidgetString):
            return self.to_text() == other.to_text()
        if isinstance(other, str):
            return self.to_text() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"WidgetString({self.to_text()!r}, storage={self._storage!r})"

