"""Structured drag payload exchanged between the input surface and the session."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedPayloadError
from .vessel import Dimensions, Vessel


class VesselPayload(BaseModel):
    """Describes the vessel being dragged, as it looked when the drag began."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    vessel_id: str = Field(alias="vesselId", min_length=1)
    effective_width: int = Field(alias="effectiveWidth", gt=0)
    effective_height: int = Field(alias="effectiveHeight", gt=0)
    is_rotated: bool = Field(alias="isRotated")
    designation: str = ""

    @classmethod
    def from_vessel(cls, vessel: Vessel) -> VesselPayload:
        return cls(
            vessel_id=vessel.id,
            effective_width=vessel.effective_width,
            effective_height=vessel.effective_height,
            is_rotated=vessel.is_rotated,
            designation=vessel.designation,
        )

    def base_dimensions(self) -> Dimensions:
        """Undo the rotation to recover the vessel's unrotated size."""
        if self.is_rotated:
            return Dimensions(self.effective_height, self.effective_width)
        return Dimensions(self.effective_width, self.effective_height)

    def encode(self) -> str:
        return self.model_dump_json(by_alias=True)


def decode_payload(raw: str | bytes | Mapping[str, Any] | VesselPayload) -> VesselPayload:
    """Validate a payload received from the drag surface.

    Accepts a JSON document or an already-parsed mapping. Anything that does
    not describe a vessel raises MalformedPayloadError.
    """
    if isinstance(raw, VesselPayload):
        return raw
    try:
        if isinstance(raw, (str, bytes)):
            return VesselPayload.model_validate_json(raw)
        if isinstance(raw, Mapping):
            return VesselPayload.model_validate(dict(raw))
    except ValidationError as exc:
        raise MalformedPayloadError(f"Invalid vessel payload: {exc}") from exc
    raise MalformedPayloadError(f"Unsupported payload type {type(raw).__name__}.")
