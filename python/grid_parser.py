"""
Compact text literals for multigrid grids.

Cells are separated by whitespace. Each enclosing axis is separated by a run
of pipes one longer than the axis inside it:

    "1 2|3 4"               rank 2, shape (2, 2)
    "1 2|3 4||5 6|7 8"      rank 3, shape (2, 2, 2)
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from grid_types import GridParseError
from multigrid import Grid, check_rank

__all__ = ["parse_grid", "LEVEL_SEPARATOR"]

logger = logging.getLogger(__name__)

LEVEL_SEPARATOR = "|"


def parse_grid(text: str, rank: int, convert: Callable[[str], Any] = int) -> Grid[Any]:
    """
    Parse a grid literal of the given rank.

    Example:
        parse_grid("1 2 3|4 5 6", rank=2)
        Creates a (2, 3) grid with rows [1, 2, 3] and [4, 5, 6]

        parse_grid("a b|c d", rank=2, convert=str)
        Creates a (2, 2) grid of strings

    Args:
        text: The literal; newlines count as whitespace between cells
        rank: Number of dimensions
        convert: Applied to every cell string (default int)

    Returns:
        The parsed Grid

    Raises:
        GridParseError: If the literal is empty, has an empty row, or a cell
            cannot be converted
        InvalidShapeError: If the literal is not rectangular
    """
    check_rank(rank)
    source = text.strip()
    if not source:
        raise GridParseError("Empty grid definition")

    nested = _parse_level(source, rank, convert, ())
    grid = Grid.from_nested(nested, rank=rank)
    logger.debug("parse_grid: parsed rank=%d shape=%r", rank, grid.shape)
    return grid


def _parse_level(chunk: str, rank: int, convert: Callable[[str], Any], position: tuple[int, ...]) -> list[Any]:
    if rank > 1:
        parts = chunk.split(LEVEL_SEPARATOR * (rank - 1))
        return [
            _parse_level(part, rank - 1, convert, position + (index,))
            for index, part in enumerate(parts)
        ]

    cell_strings = chunk.split()
    if not cell_strings:
        raise GridParseError(
            f"Empty row in grid definition\n"
            f"  Position: {position!r}\n"
            f"  Check for doubled or trailing '{LEVEL_SEPARATOR}' separators"
        )

    cells: list[Any] = []
    for col_idx, cell_str in enumerate(cell_strings):
        try:
            cells.append(convert(cell_str))
        except (TypeError, ValueError) as exc:
            raise GridParseError(
                f"Invalid cell string: '{cell_str}'\n"
                f"  Position: {position + (col_idx,)!r}\n"
                f"  Row: \"{chunk.strip()}\"\n"
                f"  Conversion: {getattr(convert, '__name__', convert)!r} failed with: {exc}"
            ) from exc
    return cells
