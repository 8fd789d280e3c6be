"""
Demonstration scripts for the multigrid system.
"""

import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ascii_render import RenderOptions, render_grid_box, render_slice
from grid_parser import parse_grid
from grid_types import ANY, Coordinates
from multigrid import Grid
from traversal import Slot

console = Console()

LAYOUTS = dict(
    cube="1 2 3|4 5 6|7 8 9||10 11 12|13 14 15|16 17 18",
    plane="0 1 2 3|1 2 3 4|2 3 4 5",
)


def show(title: str, body: str) -> None:
    console.print(Panel(Text.from_ansi(body), title=title, expand=False))


def construction_demo() -> None:
    """Build grids from a shape, from nested lists and from a literal."""
    ones = Grid.of_shape(4, 4, 2, fill=1)
    console.print(f"of_shape(4, 4, 2): {ones!r}")

    nested = Grid.from_nested([[0, 1], [2, 3], [4, 5]], rank=2)
    console.print(f"from_nested: {nested!r} -> {nested.to_nested()}")

    cube = parse_grid(LAYOUTS["cube"], rank=3)
    console.print(f"parse_grid: {cube!r}")
    for layer_idx in range(cube.size(0)):
        show(f"cube[{layer_idx}]", render_slice(cube, layer_idx, ANY, ANY))


def reduction_demo() -> None:
    """Sum slices of a (4, 4, 2) grid of ones."""
    grid = Grid.of_shape(4, 4, 2, fill=1)
    total = 0

    def add(slot: Slot[int], coords: Coordinates) -> None:
        nonlocal total
        total += slot.value

    grid.reduce(add, ANY, ANY, ANY)
    console.print(f"sum over (ANY, ANY, ANY): {total}")

    total = 0
    grid.reduce(add, 0, ANY, 0)
    console.print(f"sum over (0, ANY, 0): {total}")

    def double(slot: Slot[int], coords: Coordinates) -> None:
        slot.value *= 2

    grid.reduce(double, 1, ANY, ANY)
    show("grid[1] doubled", render_slice(grid, 1, ANY, ANY))


def traversal_demo() -> None:
    """Search for the first element above a threshold, stopping there."""
    plane = parse_grid(LAYOUTS["plane"], rank=2)
    found: list[tuple[int, ...]] = []

    def first_above_three(slot: Slot[int], coords: Coordinates) -> bool:
        if slot.value > 3:
            found.append(tuple(coords))
            return True
        return False

    completed = plane.traverse(first_above_three, ANY, ANY)
    console.print(f"completed={completed}, first element > 3 at {found[0]}")
    show(
        "plane",
        render_grid_box(plane, ANY, ANY, title="plane", options=RenderOptions(color=True), highlight=found[0]),
    )


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--verbose":
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    construction_demo()
    console.print()
    reduction_demo()
    console.print()
    traversal_demo()
