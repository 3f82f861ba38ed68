"""
Grammar for a single cell token.

    [_]<tile>[x<N>](+<tag>[x<N>][(<param>)])*

- `_` puts the cell on the underground layer
- <tile> is one of N (normal floor), X (empty), H (hazard floor)
- x<N> stacks N copies of the preceding tile or modifier (N >= 1)
- <tag> is one of
    W            wall
    E, EX, EY    static enemy, linear enemy along x / y
    B, BX, BY, BR  free box, box locked to x / y, box with fixed rotation
    C            charge
    T(<id>)      trigger defining <id>
    D(<id>&...)  door opened once every listed trigger has fired
    G, G(<lbl>)  goal with an optional label
    P            player start
    S            start marker (checkpoint)
- ids and labels are 1-10 ASCII letters or digits

Examples: "N", "_N+P", "Nx3+W", "N+T(red)", "N+D(red&blue)", "N+EXx2".
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

from level_types import (
    MAX_ID_LENGTH,
    Attachment,
    Axis,
    Box,
    BoxConstraint,
    Cell,
    Charge,
    Door,
    Enemy,
    EnemyVariant,
    Goal,
    LevelParseError,
    Modifier,
    PlayerStart,
    StartMarker,
    TileKind,
    Trigger,
    Wall,
)

__all__ = ["parse_cell", "format_cell", "modifier_token", "LAYER_MARKER", "MAX_MULTIPLIER"]

LAYER_MARKER = "_"
MAX_MULTIPLIER = 9999

_ID_RE = re.compile(rf"[A-Za-z0-9]{{1,{MAX_ID_LENGTH}}}")
_DIGITS_RE = re.compile(r"[0-9]+")

_TILES = {kind.value: kind for kind in TileKind}


class _Param(Enum):
    NONE = "none"
    ID = "id"
    REFS = "refs"
    LABEL = "label"


# tag -> (parameter shape, factory taking the parsed parameter)
_TAGS: dict[str, tuple[_Param, Callable[..., Modifier]]] = {
    "W": (_Param.NONE, lambda _: Wall()),
    "E": (_Param.NONE, lambda _: Enemy()),
    "EX": (_Param.NONE, lambda _: Enemy(EnemyVariant.LINEAR, Axis.X)),
    "EY": (_Param.NONE, lambda _: Enemy(EnemyVariant.LINEAR, Axis.Y)),
    "B": (_Param.NONE, lambda _: Box()),
    "BX": (_Param.NONE, lambda _: Box(BoxConstraint.X_AXIS)),
    "BY": (_Param.NONE, lambda _: Box(BoxConstraint.Y_AXIS)),
    "BR": (_Param.NONE, lambda _: Box(BoxConstraint.ROTATION_FIXED)),
    "C": (_Param.NONE, lambda _: Charge()),
    "T": (_Param.ID, lambda ident: Trigger(ident)),
    "D": (_Param.REFS, lambda refs: Door(refs)),
    "G": (_Param.LABEL, lambda label: Goal(label)),
    "P": (_Param.NONE, lambda _: PlayerStart()),
    "S": (_Param.NONE, lambda _: StartMarker()),
}

# Longest first so "EX" wins over "E"
_TAG_ORDER = sorted(_TAGS, key=len, reverse=True)

_VALID_FORMATS = (
    "  Valid formats:\n"
    "    - [_]<tile>[x<N>] with tile N, X or H (e.g. 'N', '_H', 'Nx3')\n"
    "    - followed by +<tag>[x<N>][(<param>)] (e.g. '+W', '+EX', '+T(red)', '+D(red&blue)')\n"
    f"    - ids are 1-{MAX_ID_LENGTH} letters or digits"
)


class _CellReader:
    """Cursor over one token; every failure reports the text from the failure point on."""

    def __init__(self, text: str, row: int, col: int) -> None:
        self.text = text
        self.row = row
        self.col = col
        self.pos = 0

    def fail(self, at: int, what: str) -> LevelParseError:
        rest = self.text[at:]
        reason = (
            f"Invalid cell '{self.text}'\n"
            f"  Row {self.row}, column {self.col}\n"
            f"  {what}: '{rest}'\n" + _VALID_FORMATS
        )
        return LevelParseError(rest, reason)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def multiplier(self) -> int:
        if self.peek() != "x":
            return 1
        start = self.pos
        match = _DIGITS_RE.match(self.text, start + 1)
        if match is None:
            raise self.fail(start, "Multiplier must be x followed by a number")
        digits = match.group()
        if len(digits) > len(str(MAX_MULTIPLIER)) or not 1 <= int(digits) <= MAX_MULTIPLIER:
            raise self.fail(start, f"Multiplier must be between 1 and {MAX_MULTIPLIER}")
        self.pos = match.end()
        return int(digits)

    def param(self) -> tuple[int, str] | None:
        """Read a parenthesized parameter. Returns (offset of '(', contents)."""
        if self.peek() != "(":
            return None
        start = self.pos
        close = self.text.find(")", start + 1)
        if close == -1:
            raise self.fail(start, "Unterminated parameter")
        self.pos = close + 1
        return start, self.text[start + 1 : close]

    def tile(self) -> tuple[TileKind, int]:
        kind = _TILES.get(self.peek())
        if kind is None:
            raise self.fail(self.pos, "Unknown tile kind")
        self.pos += 1
        return kind, self.multiplier()

    def attachment(self) -> Attachment:
        start = self.pos
        if self.peek() != "+":
            raise self.fail(start, "Unexpected characters")
        self.pos += 1

        tag = next((t for t in _TAG_ORDER if self.text.startswith(t, self.pos)), None)
        if tag is None:
            raise self.fail(start, "Unknown modifier")
        self.pos += len(tag)

        count = self.multiplier()
        shape, factory = _TAGS[tag]
        param = self.param()

        match shape:
            case _Param.NONE:
                if param is not None:
                    raise self.fail(param[0], f"Modifier '{tag}' takes no parameter")
                value = None
            case _Param.ID:
                if param is None:
                    raise self.fail(start, f"Modifier '{tag}' needs an id, e.g. {tag}(red)")
                if not _ID_RE.fullmatch(param[1]):
                    raise self.fail(param[0], "Invalid id")
                value = param[1]
            case _Param.REFS:
                if param is None:
                    raise self.fail(start, f"Modifier '{tag}' needs trigger ids, e.g. {tag}(red&blue)")
                refs = tuple(param[1].split("&"))
                if not all(_ID_RE.fullmatch(ref) for ref in refs):
                    raise self.fail(param[0], "Invalid trigger reference list")
                value = refs
            case _Param.LABEL:
                if param is not None and not _ID_RE.fullmatch(param[1]):
                    raise self.fail(param[0], "Invalid label")
                value = param[1] if param is not None else None

        return Attachment(factory(value), count)


def parse_cell(text: str, row: int = 0, col: int = 0) -> Cell:
    """
    Parse one cell token.

    Args:
        text: The token, without surrounding whitespace
        row: Row of the token in its level
        col: Column of the token in its level

    Returns:
        The parsed Cell

    Raises:
        LevelParseError: With `rest` set to the unconsumed suffix of `text`
    """
    reader = _CellReader(text, row, col)

    underground = reader.peek() == LAYER_MARKER
    if underground:
        reader.pos += 1

    # A tile kind is always required; "+P" alone is not a cell
    tile, tile_multiplier = reader.tile()

    attachments: list[Attachment] = []
    while reader.pos < len(text):
        attachments.append(reader.attachment())

    return Cell(
        row=row,
        col=col,
        tile=tile,
        tile_multiplier=tile_multiplier,
        underground=underground,
        attachments=tuple(attachments),
    )


def modifier_token(modifier: Modifier) -> str:
    """Tag and parameter of a modifier, e.g. 'EX' or 'D(red&blue)'."""
    match modifier:
        case Wall():
            return "W"
        case Enemy(variant=EnemyVariant.LINEAR, axis=Axis() as axis):
            return "E" + axis.value
        case Enemy():
            return "E"
        case Box(constraint=constraint):
            return "B" + constraint.value
        case Charge():
            return "C"
        case Trigger(id=ident):
            return f"T({ident})"
        case Door(gated_by=refs):
            return f"D({'&'.join(refs)})"
        case Goal(label=None):
            return "G"
        case Goal(label=label):
            return f"G({label})"
        case PlayerStart():
            return "P"
        case StartMarker():
            return "S"
    raise TypeError(f"Unknown modifier: {modifier!r}")


def format_cell(cell: Cell) -> str:
    """Token text for a cell; parse_cell(format_cell(cell)) gives the cell back."""

    def times(n: int) -> str:
        return f"x{n}" if n != 1 else ""

    parts = [LAYER_MARKER if cell.underground else "", cell.tile.value, times(cell.tile_multiplier)]
    for attachment in cell.attachments:
        tag, paren, param = modifier_token(attachment.modifier).partition("(")
        parts.append(f"+{tag}{times(attachment.multiplier)}{paren}{param}")
    return "".join(parts)
