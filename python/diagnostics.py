"""
Live-editing feedback: parse + validate a document into a single Diagnostic.

`check(text)` is stateless; a host calls it again on every document change.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from level_parser import parse_level
from level_types import Level, LevelParseError, LevelRules, LevelValidationError
from level_validator import validate

__all__ = [
    "DiagnosticOk",
    "DiagnosticError",
    "Diagnostic",
    "ParseFailed",
    "ValidationFailed",
    "check",
    "load_level",
    "locate",
    "line_col",
    "to_dict",
    "to_json",
]


@dataclass(frozen=True)
class ParseFailed:
    """The document doesn't parse; `rest` is the text from the failing cell on."""

    rest: str


@dataclass(frozen=True)
class ValidationFailed:
    """The document parses but breaks a level rule."""

    message: str


ErrorPayload = ParseFailed | ValidationFailed


@dataclass(frozen=True)
class DiagnosticOk:
    level: Level


@dataclass(frozen=True)
class DiagnosticError:
    payload: ErrorPayload


Diagnostic = DiagnosticOk | DiagnosticError


def load_level(text: str, rules: LevelRules = LevelRules()) -> Level:
    """Parse and validate, raising the first error. Used to hand a level to the engine."""
    level = parse_level(text)
    validate(level, rules)
    return level


def check(text: str, rules: LevelRules = LevelRules()) -> Diagnostic:
    """Parse then validate `text`, reporting the first problem found."""
    try:
        return DiagnosticOk(load_level(text, rules))
    except LevelParseError as e:
        return DiagnosticError(ParseFailed(e.rest))
    except LevelValidationError as e:
        return DiagnosticError(ValidationFailed(e.message))


def to_dict(diagnostic: Diagnostic) -> dict[str, Any]:
    """
    The report format read by editors:

        {"result": "ok"}
        {"result": "error", "contents": {"parse_failed": {"rest": ...}}}
        {"result": "error", "contents": {"validation_error": {"message": ...}}}
    """
    match diagnostic:
        case DiagnosticOk():
            return {"result": "ok"}
        case DiagnosticError(payload=ParseFailed(rest=rest)):
            return {"result": "error", "contents": {"parse_failed": {"rest": rest}}}
        case DiagnosticError(payload=ValidationFailed(message=message)):
            return {"result": "error", "contents": {"validation_error": {"message": message}}}
    raise TypeError(f"Unknown diagnostic: {diagnostic!r}")


def to_json(diagnostic: Diagnostic) -> str:
    return json.dumps(to_dict(diagnostic))


def locate(text: str, diagnostic: Diagnostic) -> tuple[int, int] | None:
    """
    Best-effort (start, end) offsets to highlight for a diagnostic.

    Parse failures are found by searching for the first occurrence of `rest`
    in the text and clamped to one character. If the failing suffix also
    appears earlier in the document, this points at the earlier occurrence.
    Validation failures cover the whole document. Ok has no span.
    """
    match diagnostic:
        case DiagnosticOk():
            return None
        case DiagnosticError(payload=ParseFailed(rest=rest)):
            start = text.find(rest) if rest else len(text)
            if start < 0:
                start = 0
            start = min(start, max(len(text) - 1, 0))
            return start, min(start + 1, len(text))
        case DiagnosticError(payload=ValidationFailed()):
            return 0, len(text)
    raise TypeError(f"Unknown diagnostic: {diagnostic!r}")


def line_col(text: str, offset: int) -> tuple[int, int]:
    """Zero-based (line, column) of an offset."""
    line = text.count("\n", 0, offset)
    col = offset - (text.rfind("\n", 0, offset) + 1)
    return line, col
