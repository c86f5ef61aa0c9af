"""Hover preview bookkeeping.

Hover checks may complete out of order when the engine sits behind a
transport. Each check is tagged with a sequence number and only the result
of the most recently issued check is ever shown.
"""

from __future__ import annotations

from dataclasses import dataclass

from .placement import PlacementResult


@dataclass(frozen=True)
class HoverPreview:
    """A placement result paired with the hover request that produced it."""

    sequence: int
    vessel_id: str
    result: PlacementResult

    @property
    def is_valid(self) -> bool:
        return self.result.accepted


class HoverSequencer:
    """Issues hover sequence numbers and drops stale responses."""

    def __init__(self) -> None:
        self._latest_issued = 0
        self.current: HoverPreview | None = None

    @property
    def latest_issued(self) -> int:
        return self._latest_issued

    def begin(self) -> int:
        """Register a new hover request and return its sequence number."""
        self._latest_issued += 1
        return self._latest_issued

    def is_current(self, sequence: int) -> bool:
        return sequence == self._latest_issued

    def resolve(
        self, sequence: int, vessel_id: str, result: PlacementResult
    ) -> HoverPreview | None:
        """Record a response if it answers the newest request, else discard it."""
        if not self.is_current(sequence):
            return None
        self.current = HoverPreview(sequence=sequence, vessel_id=vessel_id, result=result)
        return self.current

    def clear(self) -> None:
        """Forget the shown preview and invalidate any request still in flight."""
        self._latest_issued += 1
        self.current = None

    def discard(self, sequence: int) -> None:
        """Withdraw the shown preview when the newest request failed to evaluate."""
        if self.is_current(sequence):
            self.current = None
