"""Loading text files of unknown encoding as UTF-8 conversion input.

A file is turned into UTF-8 bytes, the byte-oriented source every
conversion accepts. A byte order mark decides the encoding when present
(UTF-32 marks are checked before UTF-16 ones, since ``FF FE 00 00`` also
starts with the UTF-16 LE mark); otherwise charset-normalizer guesses.

The transcoding to UTF-8 is strict first. If the detected encoding does not
decode the whole file, the file is decoded again with U+FFFD substitution
and the result is marked ``lossy``, mirroring the lenient raw-buffer path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from charset_normalizer import from_bytes

from .convert import to_icu_raw
from .errors import ConversionError
from .transcode import utf_to_utf
from .ucharbuffer import UCharBuffer

logger = logging.getLogger(__name__)

_BOMS = (
    (b"\xff\xfe\x00\x00", "utf-32-le"),
    (b"\x00\x00\xfe\xff", "utf-32-be"),
    (b"\xef\xbb\xbf", "utf-8"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
)


@dataclass(frozen=True)
class FileSource:
    path: Path
    encoding: str
    method: str  # "bom", "detected" or "utf-8-default"
    utf8: bytes
    lossy: bool = False

    def text(self) -> str:
        return self.utf8.decode("utf-8")

    def raw_buffer(self) -> UCharBuffer:
        """The file's text as a null-terminated UTF-16 buffer (caller releases it)."""
        return to_icu_raw(self.utf8)


def sniff_encoding(data: bytes) -> tuple[str, str, int]:
    """Return ``(encoding, method, bom_length)`` for ``data``."""
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return encoding, "bom", len(bom)
    if data:
        match = from_bytes(data).best()
        if match is not None:
            return match.encoding, "detected", 0
    return "utf-8", "utf-8-default", 0


def read_source(path: str | Path) -> FileSource:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Text file not found: {path}")

    data = path.read_bytes()
    encoding, method, skip = sniff_encoding(data)
    body = data[skip:]
    try:
        utf8 = utf_to_utf(body, encoding, "utf-8")
        lossy = False
    except ConversionError as exc:
        logger.warning("%s is not valid %s (%s); substituting U+FFFD", path.name, encoding, exc)
        utf8 = body.decode(encoding, errors="replace").encode("utf-8")
        lossy = True

    logger.info("Loaded %s as %s (method=%s, %d UTF-8 bytes)", path.name, encoding, method, len(utf8))
    return FileSource(path, encoding, method, utf8, lossy)
