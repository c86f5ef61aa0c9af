"""Wire models for the fleet API response."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from anchorage.engine.fleet import FleetPlan, FleetSpec


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShipDimensions(_ApiModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class AnchorageSize(_ApiModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class Fleet(_ApiModel):
    """A group of identical ships."""

    single_ship_dimensions: ShipDimensions
    ship_designation: str = ""
    ship_count: int = Field(default=0, ge=0)

    def to_spec(self) -> FleetSpec:
        return FleetSpec(
            width=self.single_ship_dimensions.width,
            height=self.single_ship_dimensions.height,
            designation=self.ship_designation,
            count=self.ship_count,
        )


class FleetData(_ApiModel):
    """Complete response of the random-fleet endpoint."""

    anchorage_size: AnchorageSize
    fleets: list[Fleet] = Field(default_factory=list)

    def to_fleet_specs(self) -> list[FleetSpec]:
        return [fleet.to_spec() for fleet in self.fleets]

    def to_plan(self) -> FleetPlan:
        return FleetPlan(
            grid_width=self.anchorage_size.width,
            grid_height=self.anchorage_size.height,
            specs=tuple(self.to_fleet_specs()),
        )


def load_fleet_file(path: str | Path) -> FleetData:
    """Parse a fleet JSON document saved on disk."""
    return FleetData.model_validate_json(Path(path).read_text(encoding="utf-8"))
