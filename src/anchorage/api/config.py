"""Fleet API endpoint configuration."""

from __future__ import annotations

import os
from typing import Any, Dict

from pydantic import BaseModel, Field

DEFAULT_API_BASE_URL = "https://esa.instech.no"
DEFAULT_API_PATH = "/api/fleets/random"
DEFAULT_PROXY_URL = "https://api.allorigins.win/raw?url="


class FleetApiConfig(BaseModel):
    """Where to fetch fleets from, and whether to go through the CORS proxy."""

    base_url: str = DEFAULT_API_BASE_URL
    path: str = DEFAULT_API_PATH
    use_proxy: bool = False
    proxy_url: str = DEFAULT_PROXY_URL
    timeout_s: float = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls, **overrides: Any) -> "FleetApiConfig":
        """Construct config from `ANCHORAGE_*` env vars; overrides win."""

        data: Dict[str, Any] = {}
        string_fields = {
            "base_url": "ANCHORAGE_FLEET_API_URL",
            "path": "ANCHORAGE_FLEET_API_PATH",
            "proxy_url": "ANCHORAGE_PROXY_URL",
            "timeout_s": "ANCHORAGE_HTTP_TIMEOUT",
        }
        for name, env_name in string_fields.items():
            value = os.getenv(env_name)
            if value:
                data[name] = value.strip()

        use_proxy = os.getenv("ANCHORAGE_USE_PROXY")
        if use_proxy is not None:
            data["use_proxy"] = use_proxy.strip().lower() in {"1", "true", "yes", "on"}

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"
