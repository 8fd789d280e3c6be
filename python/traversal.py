"""
Constraint-driven traversal over recursive grids.

A traversal fixes some axes to a single index and ranges over the others
(the ANY wildcard). It walks one dimension per recursion level, writing each
level's index into a shared coordinate buffer, and calls a predicate once per
selected element. A truthy predicate result stops the walk at once.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Generic, Sequence, TypeVar

from grid_types import (
    ArityError,
    Constraint,
    ConstraintError,
    Coordinates,
    GridIndexError,
    Wildcard,
)

if TYPE_CHECKING:
    from multigrid import Grid, GridView

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Slot(Generic[T]):
    """
    Reference to the element currently being visited.

    One slot is created per traversal and re-pointed at every element, so a
    predicate must read or write `value` during the call rather than keep the
    slot around.
    """

    __slots__ = ("_items", "_index")

    def __init__(self) -> None:
        self._items: list[Any] = []
        self._index = 0

    @property
    def value(self) -> T:
        return self._items[self._index]

    @value.setter
    def value(self, new_value: T) -> None:
        self._items[self._index] = new_value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self.value!r})"


class ReadOnlySlot(Slot[T]):
    """Slot whose element cannot be reassigned."""

    __slots__ = ()

    @property
    def value(self) -> T:
        return self._items[self._index]


# Type alias for traversal predicates: return True to stop
Predicate = Callable[[Slot[Any], Coordinates], bool]

# Type alias for reduction callbacks
Callback = Callable[[Slot[Any], Coordinates], None]


def check_constraints(grid: Grid[Any] | GridView[Any], constraints: Sequence[Constraint]) -> tuple[Constraint, ...]:
    """
    Validate one constraint per dimension against the grid's shape.

    Raises:
        ArityError: If the constraint count differs from the grid's rank
        ConstraintError: If a constraint is neither an int nor ANY
        GridIndexError: If a fixed index is outside its axis
    """
    if len(constraints) != grid.rank:
        raise ArityError(
            f"Invalid count of grid dimensions\n"
            f"  Expected: {grid.rank} constraints (one per dimension)\n"
            f"  Got: {len(constraints)} - {tuple(constraints)!r}"
        )

    for axis, constraint in enumerate(constraints):
        if constraint is Wildcard.ANY:
            continue
        if isinstance(constraint, bool) or not isinstance(constraint, int):
            raise ConstraintError(
                f"Invalid constraint for dimension {axis}: {constraint!r}\n"
                f"  Expected a non-negative index or ANY"
            )
        extent = grid.size(axis)
        if not 0 <= constraint < extent:
            raise GridIndexError(
                f"Fixed index {constraint} is out of range for dimension {axis}\n"
                f"  Valid range: 0..{extent - 1}"
            )

    return tuple(constraints)


def traverse(
    grid: Grid[Any],
    predicate: Predicate,
    *constraints: Constraint,
    readonly: bool = False,
) -> bool:
    """
    Visit every element selected by the constraints in row-major order.

    Axis 0 varies slowest. For each selected element predicate(slot, coords)
    is called; `coords` is one list of length rank shared by the whole walk and
    reflects the element's full coordinates during the call.

    Args:
        grid: The grid to walk
        predicate: Called per element; a truthy result stops the traversal
        *constraints: One int or ANY per dimension, outermost first
        readonly: Hand out slots that reject assignment

    Returns:
        True if every selected element was visited, False if the predicate
        stopped the walk early
    """
    checked = check_constraints(grid, constraints)
    coords: Coordinates = [0] * grid.rank
    slot: Slot[Any] = ReadOnlySlot() if readonly else Slot()

    logger.debug("traverse: rank=%d constraints=%r", grid.rank, checked)
    stopped = _walk(grid._children, grid.rank, 0, checked, coords, slot, predicate)
    if stopped:
        logger.debug("traverse: stopped early at %r", tuple(coords))
    return not stopped


def _walk(
    children: list[Any],
    rank: int,
    axis: int,
    constraints: tuple[Constraint, ...],
    coords: Coordinates,
    slot: Slot[Any],
    predicate: Predicate,
) -> bool:
    """Walk one level of the grid. Returns True once the predicate asks to stop."""
    constraint = constraints[axis]

    if rank > 1:
        if constraint is Wildcard.ANY:
            for index, subgrid in enumerate(children):
                coords[axis] = index
                if _walk(subgrid._children, rank - 1, axis + 1, constraints, coords, slot, predicate):
                    return True
            return False

        coords[axis] = constraint
        return _walk(children[constraint]._children, rank - 1, axis + 1, constraints, coords, slot, predicate)

    # Leaf level: children are the elements themselves
    slot._items = children
    if constraint is Wildcard.ANY:
        for index in range(len(children)):
            coords[axis] = index
            slot._index = index
            if predicate(slot, coords):
                return True
        return False

    coords[axis] = constraint
    slot._index = constraint
    return bool(predicate(slot, coords))


def reduce(
    grid: Grid[Any],
    callback: Callback,
    *constraints: Constraint,
    readonly: bool = False,
) -> None:
    """Call callback(slot, coords) for every selected element, with no early exit."""

    def visit(slot: Slot[Any], coords: Coordinates) -> bool:
        callback(slot, coords)
        return False

    traverse(grid, visit, *constraints, readonly=readonly)
