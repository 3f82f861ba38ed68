"""
ASCII rendering for levels.

Provides two views:
1. Level map - one coloured glyph per cell, the top of each cell's stack
2. Layer map - which cells sit on the underground (glitch) layer
"""

from __future__ import annotations

import logging
from typing import Callable

from simple_chalk import chalk  # type: ignore[import-untyped]

from level_types import (
    Box,
    Cell,
    CellPosition,
    Charge,
    Door,
    Enemy,
    Goal,
    Level,
    Modifier,
    PlayerStart,
    StartMarker,
    TileKind,
    Trigger,
    Wall,
)

__all__ = ["glyph", "render", "render_layer_map"]

logger = logging.getLogger(__name__)

_TILE_GLYPHS = {
    TileKind.NORMAL: ".",
    TileKind.EMPTY: " ",
    TileKind.HAZARD: "~",
}


def _modifier_style(modifier: Modifier) -> tuple[str, Callable[[str], str]]:
    match modifier:
        case Wall():
            return "#", chalk.white
        case Enemy():
            return "E", chalk.red
        case Box():
            return "B", chalk.blue
        case Charge():
            return "c", chalk.yellowBright
        case Trigger():
            return "t", chalk.cyan
        case Door():
            return "D", chalk.yellow
        case Goal():
            return "G", chalk.magenta
        case PlayerStart():
            return "@", chalk.green
        case StartMarker():
            return "S", chalk.greenBright
    raise TypeError(f"Unknown modifier: {modifier!r}")


def glyph(cell: Cell) -> tuple[str, Callable[[str], str]]:
    """Character and colour for a cell: its topmost attachment, else its tile."""
    if cell.attachments:
        return _modifier_style(cell.attachments[-1].modifier)
    if cell.tile is TileKind.HAZARD:
        return _TILE_GLYPHS[cell.tile], chalk.redBright
    return _TILE_GLYPHS[cell.tile], chalk.white


def render(level: Level, highlight_pos: CellPosition | None = None, color: bool = True) -> str:
    """
    Render a level as a bordered character map.

    Short rows are padded with blanks. Underground cells get a blue background
    and the highlighted cell a white one.

    Args:
        level: The level to draw
        highlight_pos: Optional cell to highlight
        color: Emit ANSI colours (disable for plain text)

    Returns:
        The rendered map, one line per row plus the border
    """
    width = level.width
    lines = ["┌" + "─" * width + "┐"]

    for row in level.rows:
        parts = ["│"]
        for cell in row:
            char, colorize = glyph(cell)
            if not color:
                parts.append(char)
            elif highlight_pos == cell.position:
                parts.append(chalk.bgWhite.black(char))
            elif cell.underground:
                parts.append(chalk.bgBlue(colorize(char)))
            else:
                parts.append(colorize(char))
        parts.append(" " * (width - len(row)))
        parts.append("│")
        lines.append("".join(parts))

    lines.append("└" + "─" * width + "┘")
    return "\n".join(lines)


def render_layer_map(level: Level) -> str:
    """Underground cells as X, surface cells as '.', missing cells as blanks."""
    width = level.width
    lines = [
        "".join("X" if cell.underground else "." for cell in row).ljust(width)
        for row in level.rows
    ]
    output = "\n".join(lines)
    logger.info("Glitch area:\n%s", output)
    return output
