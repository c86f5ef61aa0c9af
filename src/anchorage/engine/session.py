"""Single-round placement session: the available pool, the placed set and the grid."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Mapping

from anchorage.telemetry import get_meter, get_tracer

from .errors import AnchorageInputError, MalformedPayloadError, UnknownVesselError
from .fleet import FleetPlan, expand_fleet
from .payload import VesselPayload, decode_payload
from .placement import PlacementResult, adjust_and_validate, validate_grid
from .preview import HoverPreview, HoverSequencer
from .vessel import AvailableVessel, PlacedVessel

logger = logging.getLogger(__name__)
tracer = get_tracer("anchorage.engine.session")
meter = get_meter("anchorage.engine.session")

PLACEMENT_COUNTER = meter.create_counter(
    "anchorage_engine_placements",
    unit="1",
    description="Vessel drops committed or rejected by a session",
)

RawPayload = VesselPayload | str | bytes | Mapping[str, Any]

DEFAULT_GRID_WIDTH = 12
DEFAULT_GRID_HEIGHT = 15


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of a session."""

    grid_width: int
    grid_height: int
    available: tuple[AvailableVessel, ...]
    placed: tuple[PlacedVessel, ...]
    fleet_loaded: bool
    is_complete: bool


class PlacementSession:
    """Owns the vessels of one round and applies accepted placements.

    Every vessel id lives in exactly one of ``available`` and ``placed``.
    Placement decisions are delegated to ``adjust_and_validate``; the
    session only moves vessels between the two collections.
    """

    def __init__(
        self, grid_width: int = DEFAULT_GRID_WIDTH, grid_height: int = DEFAULT_GRID_HEIGHT
    ) -> None:
        validate_grid(grid_width, grid_height)
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.available: list[AvailableVessel] = []
        self.placed: list[PlacedVessel] = []
        self.fleet_loaded = False
        self.previews = HoverSequencer()

    @property
    def is_complete(self) -> bool:
        """True once a loaded fleet has been fully placed."""
        return self.fleet_loaded and not self.available

    def start_round(self, plan: FleetPlan | None, rng: random.Random) -> None:
        """Discard every vessel and build a fresh pool from ``plan``.

        ``None`` means the fleet source had no data; the round starts empty
        and is never reported complete.
        """
        with tracer.start_as_current_span("session.start_round") as span:
            self.available.clear()
            self.placed.clear()
            self.previews.clear()
            if plan is None:
                self.fleet_loaded = False
                span.set_attribute("fleet.loaded", False)
                logger.warning("round_started_without_fleet")
                return

            validate_grid(plan.grid_width, plan.grid_height)
            self.grid_width = plan.grid_width
            self.grid_height = plan.grid_height
            self.available = expand_fleet(plan.specs, plan.grid_width, plan.grid_height, rng)
            self.fleet_loaded = True
            span.set_attribute("fleet.loaded", True)
            span.set_attribute("fleet.vessels", len(self.available))
            logger.info(
                "round_started",
                extra={
                    "grid_width": self.grid_width,
                    "grid_height": self.grid_height,
                    "vessels": len(self.available),
                },
            )

    def find_vessel(self, vessel_id: str) -> AvailableVessel | PlacedVessel:
        """Look a vessel up in either collection."""
        for vessel in self.placed:
            if vessel.id == vessel_id:
                return vessel
        for candidate in self.available:
            if candidate.id == vessel_id:
                return candidate
        raise UnknownVesselError(f"No vessel with id {vessel_id!r} in this session.")

    def check_placement(
        self,
        x: int,
        y: int,
        effective_width: int,
        effective_height: int,
        exclude_id: str | None = None,
    ) -> PlacementResult:
        """Run the placement check against the current placed set."""
        return adjust_and_validate(
            self.grid_width,
            self.grid_height,
            effective_width,
            effective_height,
            x,
            y,
            self.placed,
            exclude_id=exclude_id,
        )

    def evaluate(
        self, payload: RawPayload, target_x: int, target_y: int
    ) -> tuple[VesselPayload, PlacementResult]:
        """Decide a drop of ``payload`` at the raw target without changing state."""
        decoded = decode_payload(payload)
        vessel = self.find_vessel(decoded.vessel_id)
        if decoded.base_dimensions() != vessel.dimensions:
            raise MalformedPayloadError(
                f"Payload size {decoded.effective_width}x{decoded.effective_height} "
                f"does not match vessel {vessel.id!r}."
            )
        exclude_id = vessel.id if isinstance(vessel, PlacedVessel) else None
        result = self.check_placement(
            target_x,
            target_y,
            decoded.effective_width,
            decoded.effective_height,
            exclude_id=exclude_id,
        )
        return decoded, result

    def hover(
        self,
        payload: RawPayload,
        target_x: int,
        target_y: int,
        sequence: int | None = None,
    ) -> HoverPreview | None:
        """Evaluate a hover and make it the shown preview.

        Hosts that validate asynchronously reserve ``sequence`` with
        ``previews.begin()`` when the pointer moves and pass it here once the
        check runs; a superseded sequence yields ``None`` and leaves the
        shown preview untouched. A request that fails to evaluate withdraws
        the shown preview before the error propagates.
        """
        if sequence is None:
            sequence = self.previews.begin()
        try:
            decoded, result = self.evaluate(payload, target_x, target_y)
        except AnchorageInputError:
            self.previews.discard(sequence)
            raise
        return self.previews.resolve(sequence, decoded.vessel_id, result)

    def drop(self, payload: RawPayload, target_x: int, target_y: int) -> PlacementResult:
        """Commit a drop; on rejection nothing changes."""
        with tracer.start_as_current_span("session.drop") as span:
            span.set_attribute("target.x", target_x)
            span.set_attribute("target.y", target_y)
            decoded, result = self.evaluate(payload, target_x, target_y)
            self.previews.clear()
            span.set_attribute("vessel.id", decoded.vessel_id)
            span.set_attribute("placement.accepted", result.accepted)

            if not result.accepted:
                reason = result.reason.value if result.reason else "unknown"
                PLACEMENT_COUNTER.add(1, attributes={"result": "rejected", "reason": reason})
                logger.info(
                    "vessel_drop_rejected",
                    extra={
                        "vessel_id": decoded.vessel_id,
                        "target_x": target_x,
                        "target_y": target_y,
                        "reason": reason,
                        "blocking_id": result.blocking_id,
                    },
                )
                return result

            self._commit(decoded, result.x, result.y)
            PLACEMENT_COUNTER.add(1, attributes={"result": "accepted", "reason": "none"})
            logger.info(
                "vessel_placed",
                extra={
                    "vessel_id": decoded.vessel_id,
                    "x": result.x,
                    "y": result.y,
                    "rotated": decoded.is_rotated,
                    "remaining": len(self.available),
                },
            )
            return result

    def remove(self, vessel_id: str) -> bool:
        """Send a placed vessel back to the pool. Returns False if it is not placed."""
        for index, vessel in enumerate(self.placed):
            if vessel.id == vessel_id:
                del self.placed[index]
                self.available.append(vessel.to_available())
                self.previews.clear()
                logger.info("vessel_removed", extra={"vessel_id": vessel_id})
                return True
        return False

    def rotate(self, vessel_id: str) -> bool:
        """Toggle the rotation of a vessel still in the pool."""
        for vessel in self.available:
            if vessel.id == vessel_id:
                vessel.rotate()
                logger.debug(
                    "vessel_rotated",
                    extra={"vessel_id": vessel_id, "rotated": vessel.is_rotated},
                )
                return True
        return False

    def get_state(self) -> SessionState:
        """Return an immutable view of the session."""
        return SessionState(
            grid_width=self.grid_width,
            grid_height=self.grid_height,
            available=tuple(replace(vessel) for vessel in self.available),
            placed=tuple(replace(vessel) for vessel in self.placed),
            fleet_loaded=self.fleet_loaded,
            is_complete=self.is_complete,
        )

    def _commit(self, payload: VesselPayload, x: int, y: int) -> None:
        for index, vessel in enumerate(self.placed):
            if vessel.id == payload.vessel_id:
                self.placed[index] = vessel.moved_to(x, y, is_rotated=payload.is_rotated)
                return
        for index, candidate in enumerate(self.available):
            if candidate.id == payload.vessel_id:
                del self.available[index]
                self.placed.append(candidate.place_at(x, y, is_rotated=payload.is_rotated))
                return
        raise UnknownVesselError(f"No vessel with id {payload.vessel_id!r} in this session.")
