"""Placement session with per-round telemetry."""

from __future__ import annotations

import random
import time

from anchorage.engine.fleet import FleetPlan
from anchorage.engine.placement import PlacementResult
from anchorage.engine.session import PlacementSession, RawPayload
from anchorage.telemetry import (
    get_logger,
    get_tracer,
    record_duration_metric,
    record_placement_metric,
)


class InstrumentedPlacementSession(PlacementSession):
    """Wraps PlacementSession with a span per round and round metrics.

    Individual drops are already traced and counted by the base session;
    their spans nest under the open round span.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._logger = get_logger("anchorage.engine")
        self._tracer = get_tracer("anchorage.engine.round")
        self._round_span_cm = None
        self._round_span = None
        self._round_start_time: float | None = None
        self._round_id_counter = 0
        self._drops_in_round = 0
        self._round_finished = False

    def start_round(self, plan: FleetPlan | None, rng: random.Random) -> None:
        self._open_round_span()
        with self._tracer.start_as_current_span("anchorage.engine.start_round") as span:
            super().start_round(plan, rng)
            span.set_attribute("fleet.loaded", self.fleet_loaded)
            span.set_attribute("fleet.vessels", len(self.available))
            record_placement_metric(
                "anchorage_rounds_started_total",
                1,
                {"fleet_loaded": self.fleet_loaded},
            )
            self._logger.info(
                "Round %d started with %d vessels on %dx%d",
                self._round_id_counter,
                len(self.available),
                self.grid_width,
                self.grid_height,
            )

    def drop(self, payload: RawPayload, target_x: int, target_y: int) -> PlacementResult:
        try:
            result = super().drop(payload, target_x, target_y)
        except ValueError as exc:
            record_placement_metric(
                "anchorage_invalid_drops_total", 1, {"error": type(exc).__name__}
            )
            self._logger.error("Invalid drop at (%d,%d): %s", target_x, target_y, exc)
            raise

        self._drops_in_round += 1
        if result.accepted and self.is_complete and not self._round_finished:
            self._finish_round()
        return result

    def _open_round_span(self) -> None:
        self._close_round_span()
        self._round_start_time = time.perf_counter()
        self._round_id_counter += 1
        self._drops_in_round = 0
        self._round_finished = False
        self._round_span_cm = self._tracer.start_as_current_span("anchorage.engine.round")
        self._round_span = self._round_span_cm.__enter__()
        self._round_span.set_attribute("round.id", self._round_id_counter)

    def _finish_round(self) -> None:
        self._round_finished = True
        duration = (
            time.perf_counter() - self._round_start_time if self._round_start_time else 0.0
        )
        record_placement_metric("anchorage_rounds_completed_total", 1)
        record_duration_metric("anchorage_round_duration_seconds", duration)

        with self._tracer.start_as_current_span("anchorage.engine.round_complete") as span:
            span.set_attribute("round.id", self._round_id_counter)
            span.set_attribute("vessels", len(self.placed))
            span.set_attribute("drops", self._drops_in_round)
            span.set_attribute("duration_ms", duration * 1000)

        if self._round_span is not None:
            self._round_span.set_attribute("vessels", len(self.placed))
            self._round_span.set_attribute("drops", self._drops_in_round)

        self._logger.info(
            "Round %d complete. vessels=%d drops=%d duration_s=%.3f",
            self._round_id_counter,
            len(self.placed),
            self._drops_in_round,
            duration,
        )
        self._close_round_span()

    def _close_round_span(self) -> None:
        if self._round_span_cm is not None:
            self._round_span_cm.__exit__(None, None, None)
            self._round_span_cm = None
            self._round_span = None
