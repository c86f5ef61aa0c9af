"""Tests for expanding fleet records into the vessel pool."""

import random

import pytest

from anchorage.engine.errors import InvalidFleetSpecError, InvalidGridError
from anchorage.engine.fleet import FleetSpec, expand_fleet


def test_lng_units_expand_on_standard_anchorage() -> None:
    pool = expand_fleet([FleetSpec(6, 5, "LNG Unit", 2)], 12, 15, random.Random(1))
    assert len(pool) == 2
    assert {vessel.designation for vessel in pool} == {"LNG Unit"}
    assert len({vessel.id for vessel in pool}) == 2
    for vessel in pool:
        assert vessel.fits_grid(12, 15)


def test_oversized_entry_is_dropped() -> None:
    specs = [FleetSpec(20, 20, "Supertanker", 3), FleetSpec(2, 1, "Tug", 1)]
    pool = expand_fleet(specs, 12, 15, random.Random(2))
    assert [vessel.designation for vessel in pool] == ["Tug"]


def test_rotation_forced_when_only_rotated_fits() -> None:
    pool = expand_fleet([FleetSpec(14, 3, "Barge", 10)], 12, 15, random.Random(3))
    assert len(pool) == 10
    assert all(vessel.is_rotated for vessel in pool)
    assert all((vessel.effective_width, vessel.effective_height) == (3, 14) for vessel in pool)


def test_rotation_forced_when_only_normal_fits() -> None:
    pool = expand_fleet([FleetSpec(3, 14, "Barge", 10)], 12, 15, random.Random(4))
    assert not any(vessel.is_rotated for vessel in pool)


def test_rotation_is_random_when_both_fit() -> None:
    pool = expand_fleet([FleetSpec(2, 3, "Ferry", 60)], 12, 15, random.Random(5))
    rotations = {vessel.is_rotated for vessel in pool}
    assert rotations == {True, False}


def test_pool_is_shuffled_across_entries() -> None:
    specs = [FleetSpec(1, 1, "Dinghy", 20), FleetSpec(2, 2, "Yacht", 20)]
    pool = expand_fleet(specs, 12, 15, random.Random(6))
    designations = [vessel.designation for vessel in pool]
    assert designations.count("Dinghy") == 20
    assert designations != sorted(designations)
    assert designations != sorted(designations, reverse=True)


def test_same_seed_gives_same_pool() -> None:
    specs = [FleetSpec(6, 5, "LNG Unit", 2), FleetSpec(3, 2, "Tug", 4)]
    first = expand_fleet(specs, 12, 15, random.Random(42))
    second = expand_fleet(specs, 12, 15, random.Random(42))
    assert [(v.id, v.designation, v.is_rotated) for v in first] == [
        (v.id, v.designation, v.is_rotated) for v in second
    ]


def test_empty_fleet_gives_empty_pool() -> None:
    assert expand_fleet([], 12, 15, random.Random(0)) == []


def test_negative_count_is_invalid() -> None:
    with pytest.raises(InvalidFleetSpecError):
        expand_fleet([FleetSpec(2, 2, "Ghost", -1)], 12, 15, random.Random(0))


def test_invalid_grid_is_rejected() -> None:
    with pytest.raises(InvalidGridError):
        expand_fleet([FleetSpec(2, 2, "Tug", 1)], 0, 15, random.Random(0))
