"""Fleet data source: API client and wire models."""

from .client import FleetApiClient
from .config import FleetApiConfig
from .models import AnchorageSize, Fleet, FleetData, ShipDimensions, load_fleet_file

__all__ = [
    "AnchorageSize",
    "Fleet",
    "FleetApiClient",
    "FleetApiConfig",
    "FleetData",
    "ShipDimensions",
    "load_fleet_file",
]
