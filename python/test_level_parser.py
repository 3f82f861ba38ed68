"""Tests for level_tokenizer and level_parser modules."""

import pytest

from level_parser import parse_level
from level_tokenizer import Token, split_rows, tokenize
from level_types import Attachment, CellPosition, LevelParseError, PlayerStart, TileKind
from levels import LEVELS


class TestTokenize:
    """Tests for splitting text into tokens."""

    def test_empty_text(self) -> None:
        assert tokenize("") == []

    def test_offsets(self) -> None:
        """Tokens record row, column and source offsets."""
        text = "N  N+P\n\tX"
        rows = tokenize(text)

        assert rows == [
            [Token("N", 0, 0, 0, 1), Token("N+P", 0, 1, 3, 6)],
            [Token("X", 1, 0, 8, 9)],
        ]
        for row in rows:
            for token in row:
                assert text[token.start : token.end] == token.text

    def test_trailing_newline_opens_no_row(self) -> None:
        assert split_rows("N\nN\n") == ["N", "N"]
        assert len(tokenize("N\nN\n")) == 2

    def test_blank_rows_kept(self) -> None:
        assert tokenize("N\n\nN") == [[Token("N", 0, 0, 0, 1)], [], [Token("N", 2, 0, 3, 4)]]

    def test_whitespace_only(self) -> None:
        assert tokenize("   \t ") == [[]]

    def test_unicode_separators_stay_in_token(self) -> None:
        """Only horizontal whitespace separates cells."""
        for sep in ("\x1c", "\x1f", "\x85", "\u2028", "\u2029"):
            assert tokenize(f"N{sep}N") == [[Token(f"N{sep}N", 0, 0, 0, 3)]]

    def test_vertical_tab_and_form_feed_separate(self) -> None:
        assert [t.text for t in tokenize("N\vN\fN")[0]] == ["N", "N", "N"]


class TestParseLevel:
    """Tests for the grid parser."""

    def test_simple_grid(self) -> None:
        level = parse_level("N N N\nN N+P N")

        assert level.height == 2
        assert level.width == 3
        assert [len(row) for row in level.rows] == [3, 3]
        assert level.rows[1][1].attachments == (Attachment(PlayerStart()),)
        assert level.rows[1][1].position == CellPosition(1, 1)

    def test_surrounding_whitespace(self) -> None:
        """Leading and trailing spaces don't create cells."""
        level = parse_level("  N+P  ")

        assert level.height == 1
        assert len(level.rows[0]) == 1
        assert level.rows[0][0].tile is TileKind.NORMAL

    def test_runs_of_whitespace(self) -> None:
        level = parse_level("N N     N\nN    N+P        N   \n")

        assert [len(row) for row in level.rows] == [3, 3]

    def test_trailing_blank_row(self) -> None:
        level = parse_level("N N\n\n")

        assert level.height == 2
        assert level.rows[1] == ()

    def test_ragged_rows(self) -> None:
        """Rows of different lengths are legal."""
        level = parse_level("N\nN N N\nN N")

        assert [len(row) for row in level.rows] == [1, 3, 2]
        assert level.width == 3

    def test_tabs_and_crlf(self) -> None:
        level = parse_level("N\tN+P\r\nX\t\tH\r\n")

        assert [len(row) for row in level.rows] == [2, 2]
        assert level.rows[1][1].tile is TileKind.HAZARD

    def test_empty_document(self) -> None:
        level = parse_level("")

        assert level.rows == ()
        assert level.width == 0
        assert level.height == 0

    def test_builtin_levels_parse(self) -> None:
        for text in LEVELS.values():
            parse_level(text)

    def test_same_text_same_level(self) -> None:
        assert parse_level(LEVELS["doors"]) == parse_level(LEVELS["doors"])


class TestParseLevelErrors:
    """Failures report the rest of the whole document."""

    def test_unknown_tile_rest(self) -> None:
        with pytest.raises(LevelParseError) as excinfo:
            parse_level("N N Q N\n")

        assert excinfo.value.rest == "Q N\n"

    def test_unknown_modifier_rest(self) -> None:
        with pytest.raises(LevelParseError) as excinfo:
            parse_level("N N+Q N\nN")

        assert excinfo.value.rest == "N+Q N\nN"

    def test_underground_unknown_tile_rest(self) -> None:
        with pytest.raises(LevelParseError) as excinfo:
            parse_level("N _Q N\n")

        assert excinfo.value.rest == "_Q N\n"

    def test_bad_multiplier_rest_starts_at_token(self) -> None:
        """The position inside the cell is only in the message."""
        with pytest.raises(LevelParseError) as excinfo:
            parse_level("N N+Wxa N")

        assert excinfo.value.rest == "N+Wxa N"
        assert "Row 0, column 1" in excinfo.value.reason
        assert "Multiplier must be x followed by a number: 'xa'" in excinfo.value.reason

    def test_unicode_separator_fails(self) -> None:
        with pytest.raises(LevelParseError) as excinfo:
            parse_level("N+P N\u2028N")

        assert excinfo.value.rest == "N\u2028N"

    def test_error_on_later_row(self) -> None:
        with pytest.raises(LevelParseError) as excinfo:
            parse_level("N N\nN  x\nN")

        assert excinfo.value.rest == "x\nN"

    def test_stops_at_first_failure(self) -> None:
        with pytest.raises(LevelParseError) as excinfo:
            parse_level("N Q\nZ")

        assert excinfo.value.rest == "Q\nZ"

    def test_reason_mentions_row_and_column(self) -> None:
        with pytest.raises(LevelParseError, match="Row 1, column 2"):
            parse_level("N\nN N N+T(")


class TestSymbolTable:
    """Tests for trigger/door linkage."""

    def test_definitions_and_references(self) -> None:
        level = parse_level("N+T(a) N+D(a&b)\nN+T(a) N+D(a)")
        symbols = level.symbols

        assert symbols.definitions == {"a": (CellPosition(0, 0), CellPosition(1, 0))}
        assert symbols.references == {
            "a": (CellPosition(0, 1), CellPosition(1, 1)),
            "b": (CellPosition(0, 1),),
        }
        assert symbols.unresolved() == ["b"]

    def test_no_symbols(self) -> None:
        symbols = parse_level("N N+P").symbols

        assert symbols.definitions == {}
        assert symbols.references == {}
        assert symbols.unresolved() == []

    def test_symbol_table_is_read_only(self) -> None:
        """A parsed level can't be edited through its symbol table."""
        level = parse_level("N+P N+T(a) N+D(a)")

        with pytest.raises(TypeError):
            level.symbols.definitions["b"] = (CellPosition(9, 9),)
        with pytest.raises(TypeError):
            level.symbols.references["a"] = ()
        with pytest.raises(TypeError):
            del level.symbols.definitions["a"]

        assert level.symbols.definitions == {"a": (CellPosition(0, 1),)}
        assert level.symbols.references == {"a": (CellPosition(0, 2),)}
