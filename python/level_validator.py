"""
Cross-cell rules for a parsed Level.

Checked in order, stopping at the first violation:
1. exactly one player start
2. every door references only ids defined by some trigger
3. the level fits within the size limits
4. no cell stacks more than the allowed number of layers
"""

from __future__ import annotations

import logging

from level_types import Level, LevelRules, LevelValidationError, PlayerStart

__all__ = ["validate", "count_player_starts"]

logger = logging.getLogger(__name__)


def count_player_starts(level: Level) -> int:
    """Player starts in the level; a multiplier counts each stacked copy."""
    return sum(
        attachment.multiplier
        for cell in level.cells()
        for attachment in cell.attachments
        if isinstance(attachment.modifier, PlayerStart)
    )


def validate(level: Level, rules: LevelRules = LevelRules()) -> None:
    """
    Check `level` against the level rules.

    Raises:
        LevelValidationError: Describing the first rule broken. Errors apply to
            the whole document, not to a cell.
    """
    players = count_player_starts(level)
    if players != 1:
        raise LevelValidationError(f"Level must have exactly one player start (P), found {players}")

    missing = level.symbols.unresolved()
    if missing:
        listed = ", ".join(f"'{ident}'" for ident in missing)
        raise LevelValidationError(
            f"Door references undefined trigger id{'s' if len(missing) > 1 else ''}: {listed}"
        )

    if level.width > rules.max_width or level.height > rules.max_height:
        raise LevelValidationError(
            f"Level is too large: {level.width}x{level.height} "
            f"(limit {rules.max_width}x{rules.max_height})"
        )

    for cell in level.cells():
        if cell.stack_height > rules.max_stack:
            raise LevelValidationError(
                f"Stack too tall at row {cell.row}, column {cell.col}: "
                f"{cell.stack_height} layers (limit {rules.max_stack})"
            )

    logger.debug("level valid: %d triggers, %d door references", len(level.symbols.definitions), len(level.symbols.references))
