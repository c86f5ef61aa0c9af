"""Input errors raised by the placement engine.

A rejected placement is a normal return value; these exceptions signal
callers that handed the engine something it cannot interpret at all.
"""

from __future__ import annotations


class AnchorageInputError(ValueError):
    """Base class for invalid input reaching the engine."""


class InvalidDimensionsError(AnchorageInputError):
    """A vessel was described with a non-positive width or height."""


class InvalidGridError(AnchorageInputError):
    """The anchorage grid has a non-positive width or height."""


class InvalidFleetSpecError(AnchorageInputError):
    """A fleet record cannot be expanded (e.g. a negative count)."""


class MalformedPayloadError(AnchorageInputError):
    """A drag payload failed validation at the boundary."""


class UnknownVesselError(AnchorageInputError, LookupError):
    """A command referenced a vessel id the session does not hold."""
