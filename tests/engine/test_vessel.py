"""Tests for vessel geometry."""

import pytest

from anchorage.engine.errors import InvalidDimensionsError
from anchorage.engine.vessel import (
    AvailableVessel,
    Cell,
    Dimensions,
    PlacedVessel,
    compute_occupied_cells,
    is_within_bounds,
    overlaps,
)


def _placed(width: int, height: int, x: int, y: int, rotated: bool = False) -> PlacedVessel:
    return PlacedVessel(dimensions=Dimensions(width, height), is_rotated=rotated, x=x, y=y)


def test_occupied_cells_for_unrotated_vessel() -> None:
    vessel = _placed(4, 3, x=2, y=3)
    cells = vessel.occupied_cells()
    assert len(cells) == 12
    assert (2, 3) in cells
    assert (5, 3) in cells
    assert (2, 5) in cells
    assert (5, 5) in cells
    assert (1, 3) not in cells
    assert (2, 2) not in cells


def test_occupied_cells_for_rotated_vessel() -> None:
    vessel = _placed(4, 3, x=1, y=1, rotated=True)
    cells = compute_occupied_cells(vessel)
    assert len(cells) == 12
    assert Cell(3, 1) in cells
    assert Cell(1, 4) in cells
    assert Cell(3, 4) in cells
    assert Cell(4, 1) not in cells


@pytest.mark.parametrize("width,height,x,y", [(1, 1, 0, 0), (3, 2, 5, 7), (6, 5, 1, 9)])
def test_occupied_cells_cover_exact_rectangle(width: int, height: int, x: int, y: int) -> None:
    cells = _placed(width, height, x, y).occupied_cells()
    assert len(cells) == width * height
    assert (x, y) in cells
    assert (x + width - 1, y + height - 1) in cells
    assert (x - 1, y) not in cells
    assert (x, y - 1) not in cells


def test_rotation_swaps_effective_dimensions() -> None:
    vessel = AvailableVessel(dimensions=Dimensions(5, 3))
    assert (vessel.effective_width, vessel.effective_height) == (5, 3)
    vessel.rotate()
    assert (vessel.effective_width, vessel.effective_height) == (3, 5)
    assert vessel.dimensions == Dimensions(5, 3)


def test_overlap_detected_and_symmetric() -> None:
    first = _placed(3, 3, 0, 0)
    second = _placed(3, 3, 2, 2)
    assert first.overlaps(second)
    assert overlaps(second, first)


def test_touching_vessels_do_not_overlap() -> None:
    left = _placed(3, 3, 0, 0)
    right = _placed(3, 3, 3, 0)
    below = _placed(3, 3, 0, 3)
    assert not left.overlaps(right)
    assert not right.overlaps(left)
    assert not left.overlaps(below)


def test_rotated_vessel_overlap() -> None:
    horizontal = _placed(5, 1, 0, 2)
    vertical = _placed(5, 1, 3, 0, rotated=True)
    assert horizontal.overlaps(vertical)
    assert vertical.overlaps(horizontal)


def test_overlap_matches_cell_intersection() -> None:
    anchor = _placed(2, 3, 4, 4)
    for x in range(0, 8):
        for y in range(0, 8):
            other = _placed(3, 2, x, y, rotated=(x + y) % 2 == 0)
            shares_cell = bool(anchor.occupied_cells() & other.occupied_cells())
            assert anchor.overlaps(other) is shares_cell


def test_bounds_boundary() -> None:
    filling = _placed(10, 8, 0, 0)
    assert filling.is_within_bounds(10, 8)
    assert not _placed(10, 8, 1, 0).is_within_bounds(10, 8)
    assert not _placed(10, 8, 0, 1).is_within_bounds(10, 8)
    assert not is_within_bounds(_placed(2, 2, -1, 0), 10, 8)
    assert not is_within_bounds(_placed(2, 2, 0, -1), 10, 8)


def test_rotated_vessel_exceeding_height_is_out_of_bounds() -> None:
    vessel = _placed(3, 1, 0, 8, rotated=True)
    assert not vessel.is_within_bounds(10, 10)


@pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (-1, 2)])
def test_dimensions_must_be_positive(width: int, height: int) -> None:
    with pytest.raises(InvalidDimensionsError):
        Dimensions(width, height)


def test_promotion_and_demotion_preserve_identity() -> None:
    available = AvailableVessel(dimensions=Dimensions(4, 2), designation="Tug", is_rotated=True)
    placed = available.place_at(3, 4)
    assert placed.id == available.id
    assert placed.designation == "Tug"
    assert placed.is_rotated is True
    assert (placed.x, placed.y) == (3, 4)

    back = placed.to_available()
    assert isinstance(back, AvailableVessel)
    assert back.id == available.id
    assert back.is_rotated is True
    assert back.dimensions == available.dimensions
