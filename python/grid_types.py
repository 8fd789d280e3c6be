"""
Shared type definitions for the multigrid system.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Wildcard(Enum):
    """Per-dimension constraint meaning "visit every index along this axis"."""

    ANY = "*"

    def __repr__(self) -> str:
        return "ANY"


ANY = Wildcard.ANY

# A fixed index pins the axis, ANY ranges over it
Constraint = Union[int, Wildcard]

# Shared, mutated-in-place coordinate buffer handed to traversal callbacks
Coordinates = list[int]


def is_wildcard(constraint: object) -> bool:
    return constraint is Wildcard.ANY


# =============================================================================
# Errors
# =============================================================================


class GridError(Exception):
    """Base class for every error raised by the multigrid modules."""


class InvalidShapeError(GridError, ValueError):
    """A dimension size is not positive, or nested input is not rectangular."""


class EmptyGridError(GridError, ValueError):
    """Nested-sequence construction was given an empty sequence."""


class GridIndexError(GridError, IndexError):
    """A checked access or a fixed constraint is outside its axis."""


class DimensionError(GridError, ValueError):
    """A dimension number is not below the grid's rank."""


class ArityError(GridError, TypeError):
    """The number of sizes or constraints does not match the grid's rank."""


class ConstraintError(GridError, TypeError):
    """A constraint is neither an index nor the wildcard."""


class GridParseError(GridError, ValueError):
    """A compact grid literal could not be parsed."""
