"""
Recursive rectangular grids of any rank.

A rank-N grid holds an ordered list of rank-(N-1) grids; a rank-1 grid holds
the elements themselves. Shape is fixed at construction, element values stay
mutable.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Callable, Generic, Iterable, Iterator, Sequence, TypeVar

import traversal
from grid_types import (
    ArityError,
    Constraint,
    DimensionError,
    EmptyGridError,
    GridIndexError,
    InvalidShapeError,
)
from traversal import Callback, Predicate

logger = logging.getLogger(__name__)

T = TypeVar("T")


def check_rank(rank: object) -> None:
    if isinstance(rank, bool) or not isinstance(rank, int):
        raise InvalidShapeError(f"Grid rank must be an integer, got {rank!r}")
    if rank < 1:
        raise InvalidShapeError(
            f"Zero-dimensional grids are not allowed\n"
            f"  Got rank: {rank}"
        )


def _check_sizes(sizes: Sequence[int]) -> None:
    invalid = [
        (dimension, size)
        for dimension, size in enumerate(sizes)
        if isinstance(size, bool) or not isinstance(size, int) or size < 1
    ]
    if invalid:
        error_msg = (
            f"Grid size must be greater than zero in every dimension\n"
            f"  Requested shape: {tuple(sizes)!r}\n"
            f"  Invalid dimensions:\n"
        )
        for dimension, size in invalid:
            error_msg += f"    Dimension {dimension}: {size!r}\n"
        raise InvalidShapeError(error_msg.rstrip("\n"))


class Grid(Generic[T]):
    """
    A rectangular N-dimensional grid.

    Build one from a shape with `Grid.of_shape`, from nested lists with
    `Grid.from_nested`, or directly from rank-(N-1) subgrids (or elements,
    at rank 1) with `Grid(rank, items)`.

    Example:
        grid = Grid.from_nested([[0, 1, 2], [1, 2, 3]], rank=2)
        grid.shape          # (2, 3)
        grid[1][2]          # 3
        grid.reduce(lambda slot, coords: print(coords, slot.value), ANY, 0)
    """

    __slots__ = ("_rank", "_children")

    def __init__(self, rank: int, items: Iterable[Any]) -> None:
        """
        Take ownership of `items` as this grid's children.

        Raises:
            InvalidShapeError: If rank < 1, an item is not a rank-(N-1) Grid,
                or the subgrids do not all share one shape
            EmptyGridError: If `items` is empty
        """
        check_rank(rank)
        children = list(items)
        if not children:
            raise EmptyGridError(
                f"Grid size must be greater than zero in every dimension\n"
                f"  Got an empty sequence for a rank-{rank} grid"
            )
        if rank > 1:
            children = _adopt_subgrids(rank, children)

        self._rank = rank
        self._children: list[Any] = children
        logger.debug("Grid: built rank=%d with %d children", rank, len(children))

    @classmethod
    def of_shape(
        cls,
        *sizes: int,
        fill: T | None = None,
        factory: Callable[[], T] | None = None,
        rank: int | None = None,
    ) -> Grid[T]:
        """
        Build a grid with the given size per dimension, outermost first.

        Args:
            *sizes: One positive size per dimension
            fill: Value stored in every element when no factory is given; the
                same object is shared by every element, so pass a factory for
                mutable values
            factory: Called once per element to produce its initial value
            rank: Expected number of dimensions, checked against len(sizes)

        Raises:
            ArityError: If `rank` is given and differs from len(sizes)
            InvalidShapeError: If no size is given or any size is not positive
        """
        if rank is not None and rank != len(sizes):
            raise ArityError(
                f"Invalid count of grid dimensions\n"
                f"  Expected: {rank} sizes\n"
                f"  Got: {len(sizes)} - {sizes!r}"
            )
        check_rank(len(sizes))
        _check_sizes(sizes)

        grid = cls._build(sizes, fill, factory)
        logger.debug("Grid.of_shape: built rank=%d shape=%r", len(sizes), sizes)
        return grid

    @classmethod
    def _build(cls, sizes: Sequence[int], fill: Any, factory: Callable[[], Any] | None) -> Grid[Any]:
        grid = cls.__new__(cls)
        grid._rank = len(sizes)
        head, rest = sizes[0], sizes[1:]
        if rest:
            grid._children = [cls._build(rest, fill, factory) for _ in range(head)]
        elif factory is not None:
            grid._children = [factory() for _ in range(head)]
        else:
            grid._children = [fill] * head
        return grid

    @classmethod
    def from_nested(cls, nested: Sequence[Any], *, rank: int) -> Grid[Any]:
        """
        Build a grid from nested lists or tuples, `rank` levels deep.

        Existing Grid objects may appear at any level in place of a nested
        sequence.

        Raises:
            InvalidShapeError: If the nesting is ragged or too shallow
            EmptyGridError: If any level is empty
        """
        check_rank(rank)
        if rank == 1:
            return cls(1, nested)

        items: list[Grid[Any]] = []
        for index, child in enumerate(nested):
            if isinstance(child, Grid):
                items.append(child)
            elif isinstance(child, (list, tuple)):
                items.append(cls.from_nested(child, rank=rank - 1))
            else:
                raise InvalidShapeError(
                    f"Expected a nested sequence for a rank-{rank - 1} subgrid\n"
                    f"  Position: {index}\n"
                    f"  Got: {child!r}"
                )
        return cls(rank, items)

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.size(dimension) for dimension in range(self._rank))

    def size(self, dimension: int = 0) -> int:
        """
        Return the extent along `dimension` (0 is the outermost axis).

        Raises:
            DimensionError: If dimension is negative or not below the rank
        """
        if not 0 <= dimension < self._rank:
            problem = "too big" if dimension >= self._rank else "negative"
            raise DimensionError(
                f"Dimension value is {problem}\n"
                f"  Rank: {self._rank}\n"
                f"  Requested dimension: {dimension}"
            )
        if dimension == 0:
            return len(self._children)
        if not self._children:
            return 0
        return self._children[0].size(dimension - 1)

    def __len__(self) -> int:
        return len(self._children)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def at(self, index: int) -> Any:
        """
        Return the subgrid (rank > 1) or element (rank 1) at `index`.

        Raises:
            GridIndexError: If index is not in 0..size(0)-1
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._children):
            raise GridIndexError(
                f"Index {index!r} is out of range\n"
                f"  Valid range: 0..{len(self._children) - 1}"
            )
        return self._children[index]

    def put(self, index: int, value: T) -> None:
        """Replace the element at `index` of a rank-1 grid, with bounds checking."""
        self.at(index)
        self[index] = value

    def __getitem__(self, index: int) -> Any:
        # Unchecked: no bounds contract beyond what list indexing does
        return self._children[index]

    def __setitem__(self, index: int, value: T) -> None:
        if self._rank > 1:
            raise TypeError(
                f"Cannot replace a subgrid of a rank-{self._rank} grid\n"
                f"  Assign elements through the rank-1 grids instead"
            )
        self._children[index] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._children)

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def traverse(self, predicate: Predicate, *constraints: Constraint) -> bool:
        """
        Visit the elements selected by one constraint per dimension.

        Returns False if the predicate returned True (stop) for some element,
        True once every selected element has been visited.
        """
        return traversal.traverse(self, predicate, *constraints)

    def reduce(self, callback: Callback, *constraints: Constraint) -> None:
        """Visit every element selected by the constraints."""
        traversal.reduce(self, callback, *constraints)

    # -------------------------------------------------------------------------
    # Copying, comparison, conversion
    # -------------------------------------------------------------------------

    def copy(self) -> Grid[T]:
        """Deep copy: subgrids and element values are all duplicated."""
        duplicate = type(self).__new__(type(self))
        duplicate._rank = self._rank
        if self._rank > 1:
            duplicate._children = [child.copy() for child in self._children]
        else:
            duplicate._children = deepcopy(self._children)
        return duplicate

    def __copy__(self) -> Grid[T]:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Grid[T]:
        return self.copy()

    def view(self) -> GridView[T]:
        return GridView(self)

    def to_nested(self) -> list[Any]:
        if self._rank == 1:
            return list(self._children)
        return [child.to_nested() for child in self._children]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GridView):
            other = other._grid
        if not isinstance(other, Grid):
            return NotImplemented
        return self._rank == other._rank and self._children == other._children

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Grid(rank={self._rank}, shape={self.shape!r})"


def _grid_ids(grid: Grid[Any]) -> set[int]:
    """Identities of a grid and every subgrid below it."""
    ids = {id(grid)}
    if grid.rank > 1:
        for child in grid:
            ids |= _grid_ids(child)
    return ids


def _adopt_subgrids(rank: int, children: list[Any]) -> list[Grid[Any]]:
    """Check subgrid ranks and shapes, copying any subgrid that shares storage with an earlier one."""
    adopted: list[Grid[Any]] = []
    seen: set[int] = set()

    for index, child in enumerate(children):
        if not isinstance(child, Grid) or child.rank != rank - 1:
            got = f"rank-{child.rank} Grid" if isinstance(child, Grid) else repr(child)
            raise InvalidShapeError(
                f"Subgrid {index} of a rank-{rank} grid must be a rank-{rank - 1} Grid\n"
                f"  Got: {got}"
            )
        subtree = _grid_ids(child)
        if not seen.isdisjoint(subtree):
            child = child.copy()
            subtree = _grid_ids(child)
        seen.update(subtree)
        adopted.append(child)

    expected = adopted[0].shape
    mismatched = [(i, child.shape) for i, child in enumerate(adopted) if child.shape != expected]
    if mismatched:
        error_msg = (
            f"Grid must be rectangular\n"
            f"  Expected: subgrid shape {expected!r} (from subgrid 0)\n"
            f"  Mismatched subgrids:\n"
        )
        for index, shape in mismatched:
            error_msg += f"    Subgrid {index}: {shape!r}\n"
        raise InvalidShapeError(error_msg.rstrip("\n"))

    return adopted


class GridView(Generic[T]):
    """
    Read-only window onto a grid.

    Indexing and iteration hand out views of subgrids, and traversals hand out
    slots whose value cannot be assigned.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Grid[T]) -> None:
        self._grid = grid

    @staticmethod
    def _wrap(child: Any) -> Any:
        return GridView(child) if isinstance(child, Grid) else child

    @property
    def rank(self) -> int:
        return self._grid.rank

    @property
    def shape(self) -> tuple[int, ...]:
        return self._grid.shape

    def size(self, dimension: int = 0) -> int:
        return self._grid.size(dimension)

    def __len__(self) -> int:
        return len(self._grid)

    def at(self, index: int) -> Any:
        return self._wrap(self._grid.at(index))

    def __getitem__(self, index: int) -> Any:
        return self._wrap(self._grid[index])

    def __iter__(self) -> Iterator[Any]:
        for child in self._grid:
            yield self._wrap(child)

    def traverse(self, predicate: Predicate, *constraints: Constraint) -> bool:
        return traversal.traverse(self._grid, predicate, *constraints, readonly=True)

    def reduce(self, callback: Callback, *constraints: Constraint) -> None:
        traversal.reduce(self._grid, callback, *constraints, readonly=True)

    def copy(self) -> Grid[T]:
        return self._grid.copy()

    def to_nested(self) -> list[Any]:
        return self._grid.to_nested()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GridView):
            other = other._grid
        if not isinstance(other, Grid):
            return NotImplemented
        return self._grid == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GridView(rank={self.rank}, shape={self.shape!r})"
