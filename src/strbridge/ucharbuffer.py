"""Buffer holding a null-terminated UTF-16 string, owned or borrowed.

A ``UCharBuffer`` is one of three things:

- owned: a fresh allocation of ``length + 1`` units made by the holder,
  freed by the holder on ``release()`` (or when leaving a ``with`` block);
- non-owned: a read-only alias of units that belong to the caller. The
  holder never frees them; releasing it only drops its own view, which
  unpins the caller's buffer so it can be resized again;
- null: the process-wide empty string, a single null unit that is never
  released.

Holders are move-only. ``copy.copy``, ``copy.deepcopy`` and pickling raise
``TypeError``; ownership changes hands through ``move()``, which leaves the
source holder empty so releasing it is a no-op.

Capacity is ``length + 1`` for owned buffers, ``0`` for the null buffer and
``-1`` for a non-owned alias whose size is unknown.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .config import UCHAR_SIZE, utf_codec
from .transcode import until_nul

logger = logging.getLogger(__name__)

_empty_lock = threading.Lock()
_empty_units: Optional[memoryview] = None


def _empty() -> memoryview:
    global _empty_units
    if _empty_units is None:
        with _empty_lock:
            if _empty_units is None:
                _empty_units = memoryview(bytes(UCHAR_SIZE)).cast("H")
    return _empty_units


class UCharBuffer:
    __slots__ = ("_owned", "_data", "_capacity", "_frozen")

    def __init__(self, owned: bool, data: Optional[memoryview], capacity: int) -> None:
        # Use the owned/non_owned/null factories.
        self._owned = owned
        self._data: Optional[memoryview] = data
        self._capacity = capacity
        self._frozen = not owned

    @classmethod
    def owned(cls, length: int) -> "UCharBuffer":
        """Allocate room for ``length`` units plus the terminating null."""
        if length < 0:
            raise ValueError(f"Negative buffer length: {length}")
        data = memoryview(bytearray((length + 1) * UCHAR_SIZE)).cast("H")
        logger.debug("Allocated owned UTF-16 buffer of %d units", length + 1)
        return cls(True, data, length + 1)

    @classmethod
    def non_owned(cls, data: memoryview) -> "UCharBuffer":
        """Alias null-terminated 16-bit units owned by the caller, without copying.

        The caller's buffer must stay unchanged for the holder's lifetime.
        """
        view = memoryview(data)
        if view.format != "H" or view.ndim != 1 or not view.c_contiguous:
            raise TypeError(
                f"Expected a contiguous 1-D view of 16-bit units, got format {view.format!r}"
            )
        return cls(False, view.toreadonly(), -1)

    @classmethod
    def null(cls) -> "UCharBuffer":
        """The shared empty string; safe to request from any thread."""
        return cls(False, _empty(), 0)

    # -- state ----------------------------------------------------------------

    @property
    def is_owned(self) -> bool:
        return self._owned

    @property
    def capacity(self) -> int:
        """Available units for owned buffers, 0 or -1 for non-owned ones."""
        return self._capacity

    @property
    def is_released(self) -> bool:
        return self._data is None

    def _view(self) -> memoryview:
        if self._data is None:
            raise ValueError("UCharBuffer has been released or moved from")
        return self._data

    # -- access ---------------------------------------------------------------

    def view(self) -> memoryview:
        """Read-only view of the units, including the terminating null."""
        return self._view().toreadonly()

    def writable(self) -> memoryview:
        """Writable view of a freshly allocated owned buffer.

        Only available between ``owned()`` and ``freeze()``.
        """
        data = self._view()
        if not self._owned:
            raise TypeError("Cannot write into a non-owned UCharBuffer")
        if self._frozen:
            raise TypeError("UCharBuffer is frozen")
        return data

    def freeze(self) -> None:
        self._frozen = True

    def __len__(self) -> int:
        return len(until_nul(self._view(), UCHAR_SIZE)) // UCHAR_SIZE

    def tobytes(self) -> bytes:
        """Units up to (excluding) the first null, native byte order."""
        return until_nul(self._view(), UCHAR_SIZE)

    def to_text(self) -> str:
        return self.tobytes().decode(utf_codec(UCHAR_SIZE), "surrogatepass")

    # -- ownership ------------------------------------------------------------

    def move(self) -> "UCharBuffer":
        """Transfer the contents to a new holder and reset this one.

        Moving from an already moved-from or released holder yields another
        empty holder.
        """
        moved = UCharBuffer(self._owned, self._data, self._capacity)
        moved._frozen = self._frozen
        self._owned = False
        self._data = None
        self._capacity = 0
        self._frozen = True
        return moved

    def release(self) -> None:
        data = self._data
        if data is None:
            return
        if self._owned:
            logger.debug("Releasing owned UTF-16 buffer of %d units", self._capacity)
        if data is not _empty_units:
            data.release()
        self._owned = False
        self._data = None
        self._capacity = 0

    def __enter__(self) -> "UCharBuffer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __copy__(self) -> "UCharBuffer":
        raise TypeError("UCharBuffer cannot be copied; use move()")

    def __deepcopy__(self, memo: dict) -> "UCharBuffer":
        raise TypeError("UCharBuffer cannot be copied; use move()")

    def __reduce_ex__(self, protocol: object) -> object:
        raise TypeError("UCharBuffer cannot be pickled")

    def __repr__(self) -> str:
        if self._data is None:
            return "UCharBuffer(<released>)"
        kind = "owned" if self._owned else "non-owned"
        return f"UCharBuffer({self.to_text()!r}, {kind}, capacity={self._capacity})"
