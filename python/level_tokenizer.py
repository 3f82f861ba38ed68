"""
Split level text into rows and whitespace-delimited cell tokens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["Token", "tokenize", "split_rows", "split_cells"]

# Cells are separated by horizontal whitespace only (space, tab, CR, FF, VT).
# Other separators such as \u2028 stay part of the token and fail to parse.
_TOKEN_RE = re.compile(r"[^ \t\r\f\v]+")


@dataclass(frozen=True)
class Token:
    """A cell token and where it sits in the source text."""

    text: str
    row: int
    col: int
    start: int  # offset of first character
    end: int  # offset one past the last character


def split_rows(text: str) -> list[str]:
    """
    Split text on newlines.

    A final trailing newline does not open an extra row, blank rows in the
    middle are kept.
    """
    if not text:
        return []
    rows = text.split("\n")
    if rows[-1] == "":
        rows.pop()
    return rows


def split_cells(row: str) -> list[str]:
    """Cell tokens of a single row."""
    return _TOKEN_RE.findall(row)


def tokenize(text: str) -> list[list[Token]]:
    """Tokenize `text` into rows of tokens. Never fails."""
    result: list[list[Token]] = []
    offset = 0

    for row_idx, row_str in enumerate(split_rows(text)):
        tokens = [
            Token(
                text=match.group(),
                row=row_idx,
                col=col_idx,
                start=offset + match.start(),
                end=offset + match.end(),
            )
            for col_idx, match in enumerate(_TOKEN_RE.finditer(row_str))
        ]
        result.append(tokens)
        offset += len(row_str) + 1  # account for the newline

    return result
