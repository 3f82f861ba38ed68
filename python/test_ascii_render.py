"""Tests for ascii_render module."""

from ascii_render import glyph, render, render_layer_map
from cell_grammar import parse_cell
from level_parser import parse_level
from level_types import CellPosition


class TestGlyph:
    def test_tile_glyphs(self) -> None:
        assert glyph(parse_cell("N"))[0] == "."
        assert glyph(parse_cell("X"))[0] == " "
        assert glyph(parse_cell("H"))[0] == "~"

    def test_top_attachment_wins(self) -> None:
        """The last modifier in the token is drawn."""
        assert glyph(parse_cell("N+T(a)+W"))[0] == "#"
        assert glyph(parse_cell("N+W+P"))[0] == "@"


class TestRender:
    def test_plain_render(self) -> None:
        level = parse_level("N N+P\n_H")

        assert render(level, color=False) == "\n".join(
            [
                "┌──┐",
                "│.@│",
                "│~ │",
                "└──┘",
            ]
        )

    def test_empty_level(self) -> None:
        assert render(parse_level(""), color=False) == "┌┐\n└┘"

    def test_colored_render_keeps_glyphs(self) -> None:
        output = render(parse_level("N+G N+P"), highlight_pos=CellPosition(0, 1))

        assert "G" in output
        assert "@" in output


class TestLayerMap:
    def test_layer_map(self) -> None:
        level = parse_level("_N N _H\nN")

        assert render_layer_map(level) == "X.X\n.  "
