"""CLI entrypoint for strbridge.

Subcommands:
  convert   Convert text between string representations.
  platform  Show the wide unit size, byte order and widget storage.

Each command outputs a JSON summary to stdout.
Non-zero exit code on error, with {"error": "..."} JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_SOURCES = ("utf8", "wide", "widget", "icu")
_TARGETS = ("utf8", "wide", "widget", "icu", "raw")


def _created_at() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _ok(data: dict) -> None:
    payload = dict(data)
    payload.setdefault("status", "ok")
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _err(data: dict, code: int = 1) -> None:
    payload = dict(data)
    payload["status"] = "error"
    payload.setdefault("error", "Unknown error")
    payload.setdefault("created_at", _created_at())
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    sys.exit(code)


class _JsonArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that preserves CLI JSON contract on parse failures."""

    def error(self, message: str) -> None:  # type: ignore[override]
        _err({"error": f"Invalid arguments: {message}"}, code=1)


def _printable(text: str) -> str:
    # Lone surrogates cannot be written to a UTF-8 stdout.
    return text.encode("utf-8", "replace").decode("utf-8")


def _describe(value: Any) -> dict[str, Any]:
    from .ucharbuffer import UCharBuffer
    from .ustring import UnicodeString
    from .wide import WideString
    from .widget import WidgetString

    if isinstance(value, bytes):
        return {
            "target": "utf8",
            "length": len(value),
            "code_units": list(value),
            "hex": value.hex(),
            "text": value.decode("utf-8", errors="replace"),
        }
    if isinstance(value, WideString):
        return {
            "target": "wide",
            "unit_size": value.unit_size,
            "length": len(value),
            "code_units": value.code_units().tolist(),
            "text": _printable(value.to_text()),
        }
    if isinstance(value, WidgetString):
        return {
            "target": "widget",
            "storage": value.storage,
            "length": len(value),
            "text": _printable(value.to_text()),
        }
    if isinstance(value, UnicodeString):
        return {
            "target": "icu",
            "aliased": value.is_alias,
            "length": len(value),
            "code_units": value.get_buffer().tolist(),
            "text": _printable(value.to_text()),
        }
    if isinstance(value, UCharBuffer):
        return {
            "target": "raw",
            "owned": value.is_owned,
            "capacity": value.capacity,
            "length": len(value),
            "code_units": value.view().tolist(),
            "text": _printable(value.to_text()),
        }
    raise TypeError(f"Unexpected conversion result: {type(value).__name__}")


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------

def _build_source(args: argparse.Namespace) -> tuple[Any, dict[str, Any]]:
    from .textfile import read_source
    from .ustring import UnicodeString
    from .wide import WideString
    from .widget import WidgetString

    info: dict[str, Any] = {"source": args.source}

    if args.hex is not None:
        raw = bytes.fromhex(args.hex)
        if args.source == "utf8":
            return raw, info
        if args.source == "wide":
            return WideString.from_bytes(raw, args.wchar_size), info
        raise ValueError("--hex requires --from utf8 or --from wide")

    if args.path is not None:
        loaded = read_source(args.path)
        info.update({
            "path": args.path,
            "encoding": loaded.encoding,
            "enc_method": loaded.method,
            "lossy": loaded.lossy,
        })
        if args.source == "utf8":
            return loaded.utf8, info
        text = loaded.text()
    else:
        text = args.text

    if args.source == "utf8":
        return text.encode("utf-8", "surrogatepass"), info
    if args.source == "wide":
        return WideString(text, args.wchar_size), info
    if args.source == "widget":
        return WidgetString(text, args.widget_storage, args.wchar_size), info
    return UnicodeString(text), info


def cmd_convert(args: argparse.Namespace) -> None:
    from .convert import to_icu, to_icu_raw, to_utf8, to_wstring, to_wx
    from .logs import setup_file_logger

    log = setup_file_logger(args.log) if args.log else logging.getLogger("strbridge")

    source, info = _build_source(args)
    log.info("convert %s -> %s", args.source, args.target)

    if args.target == "utf8":
        result: Any = to_utf8(source)
    elif args.target == "wide":
        result = to_wstring(source, unit_size=args.wchar_size)
    elif args.target == "widget":
        result = to_wx(source, storage=args.widget_storage, unit_size=args.wchar_size)
    elif args.target == "icu":
        result = to_icu(source)
    else:
        with to_icu_raw(source) as buf:
            _ok({**info, **_describe(buf), "created_at": _created_at()})
        return

    _ok({**info, **_describe(result), "created_at": _created_at()})


# ---------------------------------------------------------------------------
# platform
# ---------------------------------------------------------------------------

def cmd_platform(args: argparse.Namespace) -> None:
    from .config import describe_platform

    _ok({**describe_platform(), "created_at": _created_at()})


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = _JsonArgumentParser(
        prog="strbridge",
        description="strbridge: convert between UTF-8, wide, widget and UTF-16 strings",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="Convert text between representations")
    src = p_convert.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", help="Input text")
    src.add_argument("--hex", help="Input bytes as hex (UTF-8, or native wide units)")
    src.add_argument("--path", help="Input text file, transcoded to UTF-8 after encoding detection")
    p_convert.add_argument(
        "--from", dest="source", choices=_SOURCES, default="utf8",
        help="Representation to build from the input (default: utf8)",
    )
    p_convert.add_argument("--to", dest="target", choices=_TARGETS, required=True)
    p_convert.add_argument(
        "--wchar-size", type=int, choices=(2, 4), default=None,
        help="Wide unit size in bytes (default: platform)",
    )
    p_convert.add_argument(
        "--widget-storage", choices=("wchar", "utf8"), default=None,
        help="Widget string storage (default: wchar)",
    )
    p_convert.add_argument("--log", default=None, help="Write a debug log to this file")
    p_convert.set_defaults(func=cmd_convert)

    p_platform = sub.add_parser("platform", help="Show platform string layout")
    p_platform.set_defaults(func=cmd_platform)

    return parser


def main() -> None:
    parser = build_parser()
    try:
        args = parser.parse_args()
        args.func(args)
    except SystemExit:
        raise
    except Exception as exc:
        _err({"error": str(exc), "error_type": type(exc).__name__}, code=1)


if __name__ == "__main__":
    main()
