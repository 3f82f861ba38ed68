"""
Grid parser: turns level text into a Level.

Cells are separated by whitespace, rows by newlines. Rows may have different
lengths. Cross-cell rules (one player, doors resolve to triggers) are left to
level_validator.
"""

from __future__ import annotations

import logging

from cell_grammar import parse_cell
from level_tokenizer import tokenize
from level_types import Cell, Level, LevelParseError

__all__ = ["parse_level"]

logger = logging.getLogger(__name__)


def parse_level(text: str) -> Level:
    """
    Parse level text into a Level.

    Example:
        "N N N\\nN N+P" ->
        Level with rows [N, N, N] and [N, N+P]

    Args:
        text: The whole level document

    Returns:
        The parsed Level (not yet validated)

    Raises:
        LevelParseError: At the first malformed cell. `rest` is the remainder
            of `text` from the start of the failing token, e.g. "N N Q N\\n" fails
            with rest "Q N\\n".
    """
    rows: list[tuple[Cell, ...]] = []

    for token_row in tokenize(text):
        cells: list[Cell] = []
        for token in token_row:
            try:
                cells.append(parse_cell(token.text, token.row, token.col))
            except LevelParseError as e:
                # Report from the start of the failing token; the reason keeps the in-token detail
                logger.debug("parse failed at offset %d (row %d, col %d)", token.start, token.row, token.col)
                raise LevelParseError(text[token.start:], e.reason) from e
        rows.append(tuple(cells))

    level = Level(tuple(rows))
    logger.debug("parsed level: %d rows, width %d", level.height, level.width)
    return level
