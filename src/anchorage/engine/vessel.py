"""Vessel domain model for the anchorage engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import NamedTuple

from .errors import InvalidDimensionsError


class Cell(NamedTuple):
    """Integer grid cell; x grows rightward, y grows downward."""

    x: int
    y: int


@dataclass(frozen=True)
class Dimensions:
    """Immutable unrotated footprint of a vessel."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensionsError(
                f"Vessel dimensions must be positive, got {self.width}x{self.height}."
            )

    def rotated(self) -> Dimensions:
        return Dimensions(self.height, self.width)


def new_vessel_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Vessel:
    """Identity, size and orientation shared by available and placed vessels."""

    dimensions: Dimensions
    designation: str = ""
    is_rotated: bool = False
    id: str = field(default_factory=new_vessel_id)

    @property
    def effective_width(self) -> int:
        """Width of the footprint after applying rotation."""
        return self.dimensions.height if self.is_rotated else self.dimensions.width

    @property
    def effective_height(self) -> int:
        """Height of the footprint after applying rotation."""
        return self.dimensions.width if self.is_rotated else self.dimensions.height

    def fits_grid(self, grid_width: int, grid_height: int) -> bool:
        """Return True if the current orientation fits an empty grid."""
        return self.effective_width <= grid_width and self.effective_height <= grid_height


@dataclass
class AvailableVessel(Vessel):
    """A vessel waiting in the pool to be dragged onto the grid."""

    def rotate(self) -> None:
        self.is_rotated = not self.is_rotated

    def place_at(self, x: int, y: int, is_rotated: bool | None = None) -> PlacedVessel:
        """Promote this vessel to a placed one anchored at (x, y)."""
        return PlacedVessel(
            dimensions=self.dimensions,
            designation=self.designation,
            is_rotated=self.is_rotated if is_rotated is None else is_rotated,
            id=self.id,
            x=x,
            y=y,
        )


@dataclass
class PlacedVessel(Vessel):
    """A vessel anchored on the grid at its top-left cell (x, y)."""

    x: int = 0
    y: int = 0

    def occupied_cells(self) -> set[Cell]:
        """Return every cell covered by this vessel's footprint."""
        return {
            Cell(self.x + dx, self.y + dy)
            for dx in range(self.effective_width)
            for dy in range(self.effective_height)
        }

    def overlaps(self, other: PlacedVessel) -> bool:
        """Return True if the two footprints share at least one cell.

        Vessels whose edges merely touch do not overlap.
        """
        return (
            self.x < other.x + other.effective_width
            and other.x < self.x + self.effective_width
            and self.y < other.y + other.effective_height
            and other.y < self.y + self.effective_height
        )

    def is_within_bounds(self, grid_width: int, grid_height: int) -> bool:
        """Check whether the whole footprint lies inside the grid."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.x + self.effective_width <= grid_width
            and self.y + self.effective_height <= grid_height
        )

    def moved_to(self, x: int, y: int, is_rotated: bool | None = None) -> PlacedVessel:
        """Return a copy of this vessel at a new anchor, keeping its identity."""
        return PlacedVessel(
            dimensions=self.dimensions,
            designation=self.designation,
            is_rotated=self.is_rotated if is_rotated is None else is_rotated,
            id=self.id,
            x=x,
            y=y,
        )

    def to_available(self) -> AvailableVessel:
        """Demote back into the pool, dropping the anchor."""
        return AvailableVessel(
            dimensions=self.dimensions,
            designation=self.designation,
            is_rotated=self.is_rotated,
            id=self.id,
        )


def compute_occupied_cells(vessel: PlacedVessel) -> set[Cell]:
    return vessel.occupied_cells()


def overlaps(first: PlacedVessel, second: PlacedVessel) -> bool:
    return first.overlaps(second)


def is_within_bounds(vessel: PlacedVessel, grid_width: int, grid_height: int) -> bool:
    return vessel.is_within_bounds(grid_width, grid_height)
