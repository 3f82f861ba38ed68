"""
Canonical formatting of level text.

Cells in a row are joined with a single tab and rows keep their line breaks.
The recommended tab width lines columns up in an editor whatever the token
lengths are. Formatting its own output changes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass

from level_tokenizer import split_cells

__all__ = ["FormattedLevel", "format_level", "SEPARATOR"]

SEPARATOR = "\t"


@dataclass(frozen=True)
class FormattedLevel:
    text: str
    tab_width: int  # widest token + 1


def format_level(text: str) -> FormattedLevel:
    """
    Normalize whitespace between cells.

    Works on raw text, so it also formats documents that don't parse.

    Example:
        "N   N+P\\n  N N\\n" -> FormattedLevel("N\\tN+P\\nN\\tN\\n", tab_width=4)
    """
    widest = 0
    lines: list[str] = []

    # Split on every newline (not split_rows) so a trailing newline survives
    for line in text.split("\n"):
        tokens = split_cells(line)
        widest = max([widest, *(len(token) for token in tokens)])
        lines.append(SEPARATOR.join(tokens))

    return FormattedLevel("\n".join(lines), widest + 1)
