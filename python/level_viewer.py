"""
Interactive viewer for level files.
Display a level with live diagnostics and inspect cells with keyboard commands.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render, render_layer_map
from cell_grammar import format_cell
from diagnostics import DiagnosticError, DiagnosticOk, ParseFailed, ValidationFailed, check, line_col, locate
from level_codec import compress
from level_format import format_level
from level_types import CellPosition, Level
from levels import LEVELS

logger = logging.getLogger(__name__)


class LevelViewer:
    """Shows a level document and its diagnostics."""

    def __init__(self, text: str, path: Path | None = None) -> None:
        self.path = path
        self.text = text
        self.console = Console()
        self.cursor = CellPosition(0, 0)
        self.show_layers = False
        self.extra: Text | None = None
        self.status_message = "Ready"
        # Kept while the document is broken, like an editor keeps the last loaded level
        self.last_good: Level | None = None
        self.diagnostic = check(text)
        if isinstance(self.diagnostic, DiagnosticOk):
            self.last_good = self.diagnostic.level

    def reload(self) -> None:
        """Re-read the file and re-check it."""
        if self.path is None:
            self.status_message = "Nothing to reload"
            return
        self.text = self.path.read_text(encoding="utf-8")
        self.diagnostic = check(self.text)
        if isinstance(self.diagnostic, DiagnosticOk):
            self.last_good = self.diagnostic.level
            self.status_message = f"Reloaded {self.path}"
        else:
            self.status_message = f"Reloaded {self.path}, keeping last good level"

    def diagnostic_text(self) -> Text:
        text = Text()
        match self.diagnostic:
            case DiagnosticOk():
                text.append("✓ Level OK\n", style="bold green")
            case DiagnosticError(payload=ParseFailed(rest=rest)):
                span = locate(self.text, self.diagnostic)
                line, col = line_col(self.text, span[0] if span else 0)
                text.append(f"✗ Parse error at line {line + 1}, column {col + 1}: ", style="bold red")
                text.append(f"{rest.splitlines()[0] if rest.strip() else '<end of document>'}\n")
            case DiagnosticError(payload=ValidationFailed(message=message)):
                text.append("✗ Invalid level: ", style="bold red")
                text.append(f"{message}\n")
        return text

    def generate_display(self) -> Panel:
        """Generate the current display with level, diagnostics and status."""
        status = self.diagnostic_text()
        level = self.last_good

        if level is None:
            status.append("\nNo valid level loaded yet.\n", style="dim")
        else:
            grid = render_layer_map(level) if self.show_layers else render(level, highlight_pos=self.cursor)
            status.append("\n")
            status.append(Text.from_ansi(grid))
            status.append("\n\n")

            cell = level.get(self.cursor)
            status.append("Cursor: ", style="bold")
            status.append(f"[{self.cursor.row}, {self.cursor.col}] ")
            status.append(format_cell(cell) if cell is not None else "(no cell)")
            status.append("\n")

        if self.extra is not None:
            status.append("\n")
            status.append(self.extra)
            status.append("\n")

        status.append("\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  WASD - Move cursor\n")
        status.append("  L - Toggle layer map\n")
        status.append("  F - Show canonical text\n")
        status.append("  K - Show link token\n")
        status.append("  R - Reload file\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Stereo Glitch Level Viewer", border_style="green", width=80)

    def move_cursor(self, d_row: int, d_col: int) -> None:
        level = self.last_good
        if level is None or level.height == 0:
            return
        row = min(max(self.cursor.row + d_row, 0), level.height - 1)
        width = max(len(level.rows[row]), 1)
        col = min(max(self.cursor.col + d_col, 0), width - 1)
        self.cursor = CellPosition(row, col)

    def toggle_layers(self) -> None:
        self.show_layers = not self.show_layers
        self.status_message = "Showing layer map" if self.show_layers else "Showing level"

    def show_canonical(self) -> None:
        formatted = format_level(self.text)
        self.extra = Text(formatted.text.expandtabs(formatted.tab_width))
        self.status_message = f"Canonical text, tab width {formatted.tab_width}"

    def show_token(self) -> None:
        token = compress(format_level(self.text).text)
        self.extra = Text(token, overflow="fold")
        self.status_message = f"Link token, {len(token)} chars"

    def handle_key(self, key: str) -> bool:
        """Apply a key press. Returns False when the viewer should quit."""
        match key.lower():
            case "q":
                self.status_message = "Quitting..."
                return False
            case "w":
                self.move_cursor(-1, 0)
            case "s":
                self.move_cursor(1, 0)
            case "a":
                self.move_cursor(0, -1)
            case "d":
                self.move_cursor(0, 1)
            case "l":
                self.toggle_layers()
            case "f":
                self.show_canonical()
            case "k":
                self.show_token()
            case "r":
                self.reload()
            case _:
                self.status_message = f"Unknown key: {repr(key)}"
        return True

    def run(self) -> None:
        """Run the viewer until Q is pressed."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())
                    if not self.handle_key(readchar.readkey()):
                        live.update(self.generate_display())
                        break
            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main(argv: list[str]) -> None:
    """View a level file, or a built-in level by name."""
    if argv and argv[0] in LEVELS:
        viewer = LevelViewer(LEVELS[argv[0]])
    elif argv:
        path = Path(argv[0])
        viewer = LevelViewer(path.read_text(encoding="utf-8"), path)
    else:
        viewer = LevelViewer(LEVELS["default"])
    viewer.run()


if __name__ == "__main__":
    main(sys.argv[1:])
