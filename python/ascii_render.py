"""
ASCII rendering of one- and two-dimensional grid slices.

Everything here goes through the public reduce/size contract: a slice is the
set of elements selected by one or two ANY constraints, and a row ends each
time the last wildcard axis reaches its final index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from simple_chalk import chalk  # type: ignore[import-untyped]

from grid_types import Constraint, ConstraintError, Coordinates, is_wildcard
from multigrid import Grid, GridView
from traversal import Slot, check_constraints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderOptions:
    """Formatting knobs for rendered slices."""

    cell_width: int | None = None  # None = widest cell in the slice
    color: bool = False  # Colour cells and borders
    separator: str = " "
    formatter: Callable[[Any], str] = str


DEFAULT_OPTIONS = RenderOptions()

# Alternating row colours when options.color is set
ROW_COLORS: list[Callable[[str], str]] = [chalk.cyan, chalk.yellow]


def collect_slice(
    grid: Grid[Any] | GridView[Any],
    constraints: Sequence[Constraint],
    formatter: Callable[[Any], str] = str,
) -> list[list[tuple[str, tuple[int, ...]]]]:
    """
    Gather a slice as rows of (text, coordinates) pairs.

    Raises:
        ConstraintError: If the constraints do not hold one or two ANY entries
        ArityError: If the constraint count does not match the grid's rank
        GridIndexError: If a fixed index is outside its axis
    """
    check_constraints(grid, constraints)
    wild_axes = [axis for axis, constraint in enumerate(constraints) if is_wildcard(constraint)]
    if not 1 <= len(wild_axes) <= 2:
        raise ConstraintError(
            f"A slice needs one or two ANY constraints\n"
            f"  Got {len(wild_axes)} in {tuple(constraints)!r}"
        )

    row_axis = wild_axes[-1]
    last_index = grid.size(row_axis) - 1
    rows: list[list[tuple[str, tuple[int, ...]]]] = [[]]

    def collect(slot: Slot[Any], coords: Coordinates) -> None:
        rows[-1].append((formatter(slot.value), tuple(coords)))
        if coords[row_axis] == last_index:
            rows.append([])

    grid.reduce(collect, *constraints)
    rows.pop()  # Trailing row opened after the final element
    return rows


def render_slice(
    grid: Grid[Any] | GridView[Any],
    *constraints: Constraint,
    options: RenderOptions = DEFAULT_OPTIONS,
    highlight: Sequence[int] | None = None,
) -> str:
    """
    Render a slice as whitespace-aligned rows.

    Example:
        grid = Grid.from_nested([[1, 2], [3, 4]], rank=2)
        render_slice(grid, ANY, ANY)   # "1 2\\n3 4"
        render_slice(grid, ANY, 1)     # "2 4"

    Args:
        grid: Grid or view to render
        *constraints: One per dimension, one or two of them ANY
        options: Formatting options
        highlight: Full coordinates of a cell to show inverted

    Returns:
        The rendered slice, rows separated by newlines
    """
    return "\n".join(line for line, _ in _render_rows(grid, constraints, options, highlight))


def render_grid_box(
    grid: Grid[Any] | GridView[Any],
    *constraints: Constraint,
    title: str | None = None,
    options: RenderOptions = DEFAULT_OPTIONS,
    highlight: Sequence[int] | None = None,
) -> str:
    """Render a slice inside a box border, with an optional centred title."""
    body = _render_rows(grid, constraints, options, highlight)
    label = f" {title} " if title else ""
    inner_width = max(max(width for _, width in body), len(label))
    colorize: Callable[[str], str] = chalk.green if options.color else (lambda s: s)

    start = (inner_width - len(label)) // 2
    top = "┌" + "─" * start + label + "─" * (inner_width - start - len(label)) + "┐"

    lines = [colorize(top)]
    for line, width in body:
        lines.append(colorize("│") + line + " " * (inner_width - width) + colorize("│"))
    lines.append(colorize("└" + "─" * inner_width + "┘"))
    return "\n".join(lines)


def _render_rows(
    grid: Grid[Any] | GridView[Any],
    constraints: Sequence[Constraint],
    options: RenderOptions,
    highlight: Sequence[int] | None,
) -> list[tuple[str, int]]:
    """Render each row, paired with its visible (ANSI-free) width."""
    rows = collect_slice(grid, constraints, options.formatter)
    if options.cell_width is not None:
        width = options.cell_width
    else:
        width = max(len(text) for row in rows for text, _ in row)
    target = tuple(highlight) if highlight is not None else None

    lines: list[tuple[str, int]] = []
    for r_idx, row in enumerate(rows):
        parts: list[str] = []
        visible = 0
        for text, coords in row:
            content = text.center(width)
            visible += len(content)
            if coords == target:
                content = chalk.bgWhite.black(content)
            elif options.color:
                content = ROW_COLORS[r_idx % len(ROW_COLORS)](content)
            parts.append(content)
        visible += len(options.separator) * (len(parts) - 1)
        lines.append((options.separator.join(parts), visible))

    logger.info(
        "render_slice: rows=%d, cols=%d, cell_width=%d",
        len(rows),
        len(rows[0]),
        width,
    )
    return lines
