"""Placement decisions: clamp a raw drop target into the grid and check collisions.

`adjust_and_validate` is the single decision function behind both the hover
preview and the drop commit. It never mutates the placed set it is handed;
the caller owns that state and applies an accepted result itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from anchorage.telemetry import get_meter, get_tracer

from .errors import InvalidGridError
from .vessel import Cell, PlacedVessel

logger = logging.getLogger(__name__)
tracer = get_tracer("anchorage.engine.placement")
meter = get_meter("anchorage.engine.placement")

VALIDATION_COUNTER = meter.create_counter(
    "anchorage_engine_placement_checks",
    unit="1",
    description="Placement validations evaluated by the engine",
)


class RejectionReason(Enum):
    """Why a candidate placement was turned down."""

    INVALID_DIMENSIONS = "invalid_dimensions"
    DOES_NOT_FIT = "does_not_fit"
    OUT_OF_BOUNDS = "out_of_bounds"
    COLLISION = "collision"


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a placement check.

    ``x``/``y`` hold the adjusted anchor when accepted and are ``None``
    otherwise. ``blocking_id`` names the first placed vessel that collided.
    """

    accepted: bool
    x: int | None = None
    y: int | None = None
    reason: RejectionReason | None = None
    blocking_id: str | None = None

    @classmethod
    def accept(cls, x: int, y: int) -> PlacementResult:
        return cls(accepted=True, x=x, y=y)

    @classmethod
    def reject(
        cls, reason: RejectionReason, blocking_id: str | None = None
    ) -> PlacementResult:
        return cls(accepted=False, reason=reason, blocking_id=blocking_id)

    @property
    def position(self) -> tuple[int, int] | None:
        if not self.accepted:
            return None
        return self.x, self.y


def validate_grid(grid_width: int, grid_height: int) -> None:
    """Raise InvalidGridError unless both grid sides are positive."""
    if grid_width <= 0 or grid_height <= 0:
        raise InvalidGridError(f"Grid size must be positive, got {grid_width}x{grid_height}.")


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


def footprint_cells(x: int, y: int, width: int, height: int) -> set[Cell]:
    """Cells covered by a width x height block anchored at (x, y)."""
    return {Cell(x + dx, y + dy) for dx in range(width) for dy in range(height)}


def adjust_and_validate(
    grid_width: int,
    grid_height: int,
    effective_width: int,
    effective_height: int,
    target_x: int,
    target_y: int,
    placed_vessels: Iterable[PlacedVessel],
    exclude_id: str | None = None,
) -> PlacementResult:
    """Snap a raw target into the grid and decide whether the vessel may go there.

    The target is clamped so the full footprint stays inside the grid, then
    the footprint is checked against every placed vessel except
    ``exclude_id`` (the vessel being moved, if any).
    """
    validate_grid(grid_width, grid_height)
    with tracer.start_as_current_span("placement.adjust_and_validate") as span:
        span.set_attribute("grid.width", grid_width)
        span.set_attribute("grid.height", grid_height)
        span.set_attribute("vessel.width", effective_width)
        span.set_attribute("vessel.height", effective_height)
        span.set_attribute("target.x", target_x)
        span.set_attribute("target.y", target_y)

        result = _decide(
            grid_width,
            grid_height,
            effective_width,
            effective_height,
            target_x,
            target_y,
            placed_vessels,
            exclude_id,
        )

        span.set_attribute("placement.accepted", result.accepted)
        if result.reason is not None:
            span.set_attribute("placement.reason", result.reason.value)
        VALIDATION_COUNTER.add(
            1,
            attributes={
                "result": "accepted" if result.accepted else "rejected",
                "reason": result.reason.value if result.reason else "none",
            },
        )
        logger.debug(
            "placement_checked",
            extra={
                "target_x": target_x,
                "target_y": target_y,
                "adjusted_x": result.x,
                "adjusted_y": result.y,
                "accepted": result.accepted,
                "reason": result.reason.value if result.reason else None,
            },
        )
        return result


def _decide(
    grid_width: int,
    grid_height: int,
    effective_width: int,
    effective_height: int,
    target_x: int,
    target_y: int,
    placed_vessels: Iterable[PlacedVessel],
    exclude_id: str | None,
) -> PlacementResult:
    if effective_width <= 0 or effective_height <= 0:
        return PlacementResult.reject(RejectionReason.INVALID_DIMENSIONS)
    if effective_width > grid_width or effective_height > grid_height:
        return PlacementResult.reject(RejectionReason.DOES_NOT_FIT)

    x = clamp(target_x, 0, grid_width - effective_width)
    y = clamp(target_y, 0, grid_height - effective_height)

    if x < 0 or y < 0 or x + effective_width > grid_width or y + effective_height > grid_height:
        return PlacementResult.reject(RejectionReason.OUT_OF_BOUNDS)

    candidate = footprint_cells(x, y, effective_width, effective_height)
    for existing in placed_vessels:
        if exclude_id is not None and existing.id == exclude_id:
            continue
        if not candidate.isdisjoint(existing.occupied_cells()):
            return PlacementResult.reject(RejectionReason.COLLISION, blocking_id=existing.id)

    return PlacementResult.accept(x, y)
