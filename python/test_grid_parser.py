"""Tests for grid_parser module."""

import pytest

from grid_parser import parse_grid
from grid_types import EmptyGridError, GridParseError, InvalidShapeError
from multigrid import Grid


class TestParseGrid:
    """Tests for the compact grid literal parser."""

    def test_rank_one(self) -> None:
        """Whitespace separates cells."""
        grid = parse_grid("1 2 3", rank=1)
        assert grid == Grid(1, [1, 2, 3])

    def test_rank_two(self) -> None:
        """A single pipe separates rows."""
        grid = parse_grid("1 2 3|4 5 6", rank=2)
        assert grid.shape == (2, 3)
        assert grid.to_nested() == [[1, 2, 3], [4, 5, 6]]

    def test_rank_three(self) -> None:
        """A double pipe separates layers."""
        grid = parse_grid("1 2|3 4||5 6|7 8", rank=3)
        assert grid.shape == (2, 2, 2)
        assert grid[1][0][1] == 6

    def test_rank_four(self) -> None:
        """Separators keep growing one pipe per axis."""
        grid = parse_grid("1|2||3|4|||5|6||7|8", rank=4)
        assert grid.shape == (2, 2, 2, 1)
        assert grid[1][1][0][0] == 7

    def test_multiline_and_extra_spaces(self) -> None:
        """Newlines and repeated spaces are plain whitespace."""
        grid = parse_grid(
            """
            1  2 |
            3  4
            """,
            rank=2,
        )
        assert grid.to_nested() == [[1, 2], [3, 4]]

    def test_custom_converter(self) -> None:
        """Cells go through the given conversion function."""
        grid = parse_grid("a b|c d", rank=2, convert=str)
        assert grid.to_nested() == [["a", "b"], ["c", "d"]]

        grid = parse_grid("0.5 1.5", rank=1, convert=float)
        assert list(grid) == [0.5, 1.5]

    def test_rank_one_ignores_pipes_as_cells(self) -> None:
        """At rank 1 a pipe is just part of a cell string."""
        grid = parse_grid("a|b c", rank=1, convert=str)
        assert list(grid) == ["a|b", "c"]


class TestParseGridErrors:
    """Tests for parser error reporting."""

    def test_error_empty_definition(self) -> None:
        """Blank input is rejected."""
        with pytest.raises(GridParseError, match="Empty grid definition"):
            parse_grid("   ", rank=2)

    def test_error_empty_row(self) -> None:
        """A doubled separator leaves an empty row."""
        with pytest.raises(GridParseError, match="Empty row") as exc_info:
            parse_grid("1 2||3 4", rank=2)
        assert "(1,)" in str(exc_info.value)

    def test_error_trailing_separator(self) -> None:
        """A trailing separator leaves an empty row too."""
        with pytest.raises(GridParseError, match="Empty row"):
            parse_grid("1 2|3 4|", rank=2)

    def test_error_invalid_cell(self) -> None:
        """Conversion failures report the cell and its position."""
        with pytest.raises(GridParseError, match="Invalid cell string: 'x'") as exc_info:
            parse_grid("1 2|3 x", rank=2)
        message = str(exc_info.value)
        assert "(1, 1)" in message
        assert 'Row: "3 x"' in message

    def test_error_is_value_error(self) -> None:
        """Parse errors are ValueErrors."""
        with pytest.raises(ValueError):
            parse_grid("a", rank=1)

    def test_error_ragged(self) -> None:
        """Rows of different lengths break rectangularity."""
        with pytest.raises(InvalidShapeError, match="rectangular"):
            parse_grid("1 2|3", rank=2)

    def test_error_ragged_layers(self) -> None:
        """Layers with different row counts break rectangularity."""
        with pytest.raises(InvalidShapeError):
            parse_grid("1 2|3 4||5 6", rank=3)

    def test_error_zero_rank(self) -> None:
        """Rank must be at least one."""
        with pytest.raises(InvalidShapeError):
            parse_grid("1", rank=0)

    def test_empty_error_types_are_distinct(self) -> None:
        """An empty literal is a parse error, not an empty-grid error."""
        with pytest.raises(GridParseError):
            parse_grid("", rank=1)
        assert not issubclass(GridParseError, EmptyGridError)
