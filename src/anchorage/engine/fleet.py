"""Expand fleet records into the pool of vessels a round starts with."""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from typing import Iterable

from anchorage.telemetry import get_meter, get_tracer

from .errors import InvalidFleetSpecError
from .placement import validate_grid
from .vessel import AvailableVessel, Dimensions

logger = logging.getLogger(__name__)
tracer = get_tracer("anchorage.engine.fleet")
meter = get_meter("anchorage.engine.fleet")

FLEET_VESSEL_COUNTER = meter.create_counter(
    "anchorage_engine_fleet_vessels",
    unit="1",
    description="Vessels created or dropped while expanding fleet records",
)


@dataclass(frozen=True)
class FleetSpec:
    """One fleet record: ``count`` identical vessels of a given size."""

    width: int
    height: int
    designation: str
    count: int

    def fits(self, grid_width: int, grid_height: int) -> tuple[bool, bool]:
        """Return (fits unrotated, fits rotated) for the given grid."""
        fits_normal = self.width <= grid_width and self.height <= grid_height
        fits_rotated = self.height <= grid_width and self.width <= grid_height
        return fits_normal, fits_rotated


@dataclass(frozen=True)
class FleetPlan:
    """Grid size plus the fleet records to lay out on it for one round."""

    grid_width: int
    grid_height: int
    specs: tuple[FleetSpec, ...] = ()


def _vessel_id(rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def _initial_rotation(rng: random.Random, fits_normal: bool, fits_rotated: bool) -> bool:
    if fits_normal and fits_rotated:
        return rng.random() < 0.5
    return fits_rotated


def expand_fleet(
    fleet_specs: Iterable[FleetSpec],
    grid_width: int,
    grid_height: int,
    rng: random.Random,
) -> list[AvailableVessel]:
    """Create a shuffled pool of available vessels from fleet records.

    Entries whose vessels fit the grid in neither orientation are dropped
    entirely. Every other entry yields ``count`` vessels with ids drawn from
    ``rng`` and a starting rotation that fits the grid; when both
    orientations fit the choice is random. The finished pool is shuffled as
    a whole.
    """
    validate_grid(grid_width, grid_height)
    with tracer.start_as_current_span("fleet.expand") as span:
        span.set_attribute("grid.width", grid_width)
        span.set_attribute("grid.height", grid_height)
        pool: list[AvailableVessel] = []
        for spec in fleet_specs:
            if spec.count < 0:
                raise InvalidFleetSpecError(
                    f"Fleet '{spec.designation}' has negative count {spec.count}."
                )
            dimensions = Dimensions(spec.width, spec.height)
            fits_normal, fits_rotated = spec.fits(grid_width, grid_height)
            if not (fits_normal or fits_rotated):
                FLEET_VESSEL_COUNTER.add(spec.count, attributes={"result": "dropped"})
                logger.warning(
                    "fleet_entry_dropped",
                    extra={
                        "designation": spec.designation,
                        "width": spec.width,
                        "height": spec.height,
                        "count": spec.count,
                    },
                )
                continue
            for _ in range(spec.count):
                pool.append(
                    AvailableVessel(
                        dimensions=dimensions,
                        designation=spec.designation,
                        is_rotated=_initial_rotation(rng, fits_normal, fits_rotated),
                        id=_vessel_id(rng),
                    )
                )
            FLEET_VESSEL_COUNTER.add(spec.count, attributes={"result": "created"})

        rng.shuffle(pool)
        span.set_attribute("fleet.vessels", len(pool))
        logger.info("fleet_expanded", extra={"vessels": len(pool)})
        return pool
