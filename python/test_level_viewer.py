"""Tests for level_viewer module (display generation only, no terminal)."""

from pathlib import Path

from rich.panel import Panel
from rich.text import Text

from diagnostics import DiagnosticError, DiagnosticOk
from level_types import CellPosition
from level_viewer import LevelViewer
from levels import LEVELS


def panel_text(viewer: LevelViewer) -> str:
    panel = viewer.generate_display()
    assert isinstance(panel, Panel)
    assert isinstance(panel.renderable, Text)
    return panel.renderable.plain


class TestLevelViewer:
    def test_valid_level(self) -> None:
        viewer = LevelViewer(LEVELS["doors"])

        assert isinstance(viewer.diagnostic, DiagnosticOk)
        assert viewer.last_good is not None
        assert "Level OK" in panel_text(viewer)

    def test_broken_level(self) -> None:
        viewer = LevelViewer("N N Q")

        assert viewer.last_good is None
        text = panel_text(viewer)
        assert "Parse error at line 1, column 5" in text
        assert "No valid level loaded yet" in text

    def test_invalid_level(self) -> None:
        viewer = LevelViewer("N N")

        assert "Invalid level" in panel_text(viewer)

    def test_cursor_moves_and_clamps(self) -> None:
        viewer = LevelViewer("N+P N\nN")

        assert viewer.handle_key("d")
        assert viewer.cursor == CellPosition(0, 1)
        viewer.handle_key("d")
        assert viewer.cursor == CellPosition(0, 1)
        viewer.handle_key("s")
        assert viewer.cursor == CellPosition(1, 0)
        viewer.handle_key("w")
        assert viewer.cursor == CellPosition(0, 0)
        assert "N+P" in panel_text(viewer)

    def test_keys(self) -> None:
        viewer = LevelViewer(LEVELS["glitch"])

        viewer.handle_key("l")
        assert viewer.show_layers
        viewer.handle_key("k")
        assert viewer.extra is not None and viewer.extra.plain.startswith("v1.")
        viewer.handle_key("f")
        assert "tab width" in viewer.status_message
        viewer.handle_key("?")
        assert "Unknown key" in viewer.status_message
        assert viewer.handle_key("Q") is False

    def test_reload_keeps_last_good_level(self, tmp_path: Path) -> None:
        path = tmp_path / "level.txt"
        path.write_text("N+P N\n", encoding="utf-8")
        viewer = LevelViewer(path.read_text(encoding="utf-8"), path)
        good = viewer.last_good

        path.write_text("N+P N+Q\n", encoding="utf-8")
        viewer.handle_key("r")

        assert isinstance(viewer.diagnostic, DiagnosticError)
        assert viewer.last_good == good
        assert "keeping last good level" in viewer.status_message
