#!/usr/bin/env python3
"""
Command-line tool for level files.

Usage:
    level_tool.py check FILE             print the diagnostic report
    level_tool.py fmt FILE               print canonical text
    level_tool.py share FILE [BASE_URL]  print a link token, or a link
    level_tool.py open TOKEN_OR_LINK     print a shared level
    level_tool.py render FILE            draw the level
    level_tool.py view FILE|NAME         interactive viewer

Add -v for debug logging. FILE may be '-' for stdin or the name of a
built-in level.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ascii_render import render, render_layer_map
from diagnostics import DiagnosticError, DiagnosticOk, ParseFailed, check, line_col, locate, to_json
from level_codec import compress, load_shared_level, share_link, token_from_link
from level_format import format_level
from levels import LEVELS

logger = logging.getLogger(__name__)

USAGE = __doc__


def read_source(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    if name in LEVELS and not Path(name).exists():
        return LEVELS[name]
    return Path(name).read_text(encoding="utf-8")


def cmd_check(text: str) -> int:
    diagnostic = check(text)
    print(to_json(diagnostic))
    match diagnostic:
        case DiagnosticOk(level=level):
            print(f"OK: {level.height} rows, width {level.width}", file=sys.stderr)
            return 0
        case DiagnosticError(payload=payload):
            if isinstance(payload, ParseFailed):
                span = locate(text, diagnostic) or (0, 0)
                line, col = line_col(text, span[0])
                print(f"Parse error at line {line + 1}, column {col + 1}", file=sys.stderr)
            else:
                print(f"Invalid level: {payload.message}", file=sys.stderr)
            return 1
    raise TypeError(f"Unknown diagnostic: {diagnostic!r}")


def cmd_fmt(text: str) -> int:
    formatted = format_level(text)
    sys.stdout.write(formatted.text)
    print(f"tab width: {formatted.tab_width}", file=sys.stderr)
    return 0


def cmd_share(text: str, base_url: str | None) -> int:
    canonical = format_level(text).text
    print(share_link(base_url, canonical) if base_url else compress(canonical))
    return 0


def cmd_open(token_or_link: str) -> int:
    token = token_from_link(token_or_link) if "?" in token_or_link else token_or_link
    sys.stdout.write(load_shared_level(token))
    return 0


def cmd_render(text: str) -> int:
    match check(text):
        case DiagnosticOk(level=level):
            print(render(level))
            print()
            print(render_layer_map(level))
            return 0
        case DiagnosticError() as diagnostic:
            print(to_json(diagnostic))
            return 1
    raise TypeError("Unknown diagnostic")


def main(argv: list[str]) -> int:
    if "-v" in argv:
        argv = [arg for arg in argv if arg != "-v"]
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    if not argv:
        print(USAGE, file=sys.stderr)
        return 2

    command, args = argv[0], argv[1:]
    logger.debug("command %s %s", command, args)
    if command == "check" and len(args) == 1:
        return cmd_check(read_source(args[0]))
    elif command == "fmt" and len(args) == 1:
        return cmd_fmt(read_source(args[0]))
    elif command == "share" and len(args) in (1, 2):
        return cmd_share(read_source(args[0]), args[1] if len(args) == 2 else None)
    elif command == "open" and len(args) == 1:
        return cmd_open(args[0])
    elif command == "render" and len(args) == 1:
        return cmd_render(read_source(args[0]))
    elif command == "view" and len(args) <= 1:
        import level_viewer

        level_viewer.main(args)
        return 0

    print(USAGE, file=sys.stderr)
    return 2


def _entry() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    _entry()
