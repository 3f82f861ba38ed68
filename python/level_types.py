"""
Shared type definitions for the level-description language.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from types import MappingProxyType
from typing import Mapping

MAX_ID_LENGTH = 10


class TileKind(Enum):
    """Base terrain of a cell."""

    NORMAL = "N"  # Normal floor
    EMPTY = "X"  # Void, nothing to stand on
    HAZARD = "H"  # Glitch floor


class EnemyVariant(Enum):
    STATIC = "static"
    LINEAR = "linear"


class Axis(Enum):
    X = "X"
    Y = "Y"


class BoxConstraint(Enum):
    """How a box is allowed to move."""

    FREE = ""
    X_AXIS = "X"
    Y_AXIS = "Y"
    ROTATION_FIXED = "R"


# =============================================================================
# Modifiers
# =============================================================================


@dataclass(frozen=True)
class Wall:
    """A wall block."""

    pass


@dataclass(frozen=True)
class Enemy:
    """An enemy; linear enemies patrol along `axis`."""

    variant: EnemyVariant = EnemyVariant.STATIC
    axis: Axis | None = None


@dataclass(frozen=True)
class Box:
    """A pushable box."""

    constraint: BoxConstraint = BoxConstraint.FREE


@dataclass(frozen=True)
class Charge:
    """A charge pickup."""

    pass


@dataclass(frozen=True)
class Trigger:
    """A trigger plate defining identifier `id`."""

    id: str


@dataclass(frozen=True)
class Door:
    """A door that opens once every trigger in `gated_by` has fired."""

    gated_by: tuple[str, ...]


@dataclass(frozen=True)
class Goal:
    """The level exit, optionally labelled."""

    label: str | None = None


@dataclass(frozen=True)
class PlayerStart:
    """Where the player spawns."""

    pass


@dataclass(frozen=True)
class StartMarker:
    """A respawn checkpoint."""

    pass


Modifier = Wall | Enemy | Box | Charge | Trigger | Door | Goal | PlayerStart | StartMarker


@dataclass(frozen=True)
class Attachment:
    """A modifier stacked `multiplier` times on a cell."""

    modifier: Modifier
    multiplier: int = 1


# =============================================================================
# Grid
# =============================================================================


@dataclass(frozen=True)
class CellPosition:
    """A position within a level."""

    row: int
    col: int


@dataclass(frozen=True)
class Cell:
    """One parsed cell token."""

    row: int
    col: int
    tile: TileKind
    tile_multiplier: int = 1
    underground: bool = False
    attachments: tuple[Attachment, ...] = ()

    @property
    def position(self) -> CellPosition:
        return CellPosition(self.row, self.col)

    @property
    def stack_height(self) -> int:
        return self.tile_multiplier + sum(a.multiplier for a in self.attachments)

    def modifiers(self) -> tuple[Modifier, ...]:
        return tuple(a.modifier for a in self.attachments)


@dataclass(frozen=True)
class SymbolTable:
    """
    Trigger/Door linkage by identifier.

    `definitions` maps a trigger id to the positions of the Triggers that
    define it, `references` maps it to the positions of the Doors gated by it.
    Both are read-only views.
    """

    definitions: Mapping[str, tuple[CellPosition, ...]]
    references: Mapping[str, tuple[CellPosition, ...]]

    def unresolved(self) -> list[str]:
        """Referenced ids with no defining Trigger, sorted."""
        return sorted(ident for ident in self.references if ident not in self.definitions)


def build_symbol_table(rows: tuple[tuple[Cell, ...], ...]) -> SymbolTable:
    definitions: dict[str, list[CellPosition]] = {}
    references: dict[str, list[CellPosition]] = {}

    for row in rows:
        for cell in row:
            for modifier in cell.modifiers():
                match modifier:
                    case Trigger(id=ident):
                        definitions.setdefault(ident, []).append(cell.position)
                    case Door(gated_by=idents):
                        for ident in idents:
                            references.setdefault(ident, []).append(cell.position)

    return SymbolTable(
        definitions=MappingProxyType({k: tuple(v) for k, v in definitions.items()}),
        references=MappingProxyType({k: tuple(v) for k, v in references.items()}),
    )


@dataclass(frozen=True)
class Level:
    """A ragged 2D grid of cells. Rows may have different lengths."""

    rows: tuple[tuple[Cell, ...], ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    @cached_property
    def symbols(self) -> SymbolTable:
        return build_symbol_table(self.rows)

    def cells(self) -> list[Cell]:
        """All cells in row-major order."""
        return [cell for row in self.rows for cell in row]

    def get(self, pos: CellPosition) -> Cell | None:
        if 0 <= pos.row < len(self.rows) and 0 <= pos.col < len(self.rows[pos.row]):
            return self.rows[pos.row][pos.col]
        return None


@dataclass(frozen=True)
class LevelRules:
    """Limits enforced by the validator."""

    max_width: int = 256
    max_height: int = 256
    max_stack: int = 64


# =============================================================================
# Errors
# =============================================================================


class LevelError(ValueError):
    """Base class for level language errors."""


class LevelParseError(LevelError):
    """
    Malformed cell syntax.

    The cell grammar sets `rest` to the unconsumed suffix of the token. The
    grid parser replaces it with the rest of the whole document from the start
    of the failing token.
    """

    def __init__(self, rest: str, reason: str) -> None:
        super().__init__(reason)
        self.rest = rest
        self.reason = reason


class LevelValidationError(LevelError):
    """A well-formed level violates a cross-cell rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LevelCodecError(LevelError):
    """A link token could not be decoded."""
