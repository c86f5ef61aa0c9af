"""HTTP client for the random-fleet endpoint."""

from __future__ import annotations

import logging
import random
import time
from urllib.parse import quote

import requests
from pydantic import ValidationError

from anchorage.telemetry import get_tracer

from .config import FleetApiConfig
from .models import FleetData

logger = logging.getLogger(__name__)
tracer = get_tracer("anchorage.api.client")


class FleetApiClient:
    """Fetches a random fleet for a new round.

    The upstream API sends no CORS headers, so browser-hosted deployments
    route through a proxy that takes the full, percent-encoded API URL as a
    query parameter. Every request carries a cache buster so repeated calls
    return different fleets.

    Failures never propagate: HTTP, network and parse errors are logged and
    reported as ``None`` so the caller can show an empty round instead.
    """

    def __init__(
        self,
        config: FleetApiConfig | None = None,
        session: requests.Session | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or FleetApiConfig.from_env()
        self.session = session or requests.Session()
        self._rng = rng or random.Random()

    def build_request_url(self) -> str:
        cache_buster = f"?_t={int(time.time() * 1000)}&_r={self._rng.randrange(2**31)}"
        api_url = f"{self.config.api_url}{cache_buster}"
        if self.config.use_proxy:
            return f"{self.config.proxy_url}{quote(api_url, safe='')}"
        return api_url

    def get_random_fleet(self) -> FleetData | None:
        url = self.build_request_url()
        with tracer.start_as_current_span("fleet_api.get_random_fleet") as span:
            span.set_attribute("fleet_api.proxy", self.config.use_proxy)
            try:
                response = self.session.get(url, timeout=self.config.timeout_s)
                response.raise_for_status()
                fleet_data = FleetData.model_validate_json(response.text)
            except requests.RequestException as exc:
                span.record_exception(exc)
                logger.warning("fleet_fetch_failed", extra={"url": url, "error": str(exc)})
                return None
            except ValidationError as exc:
                span.record_exception(exc)
                logger.warning(
                    "fleet_parse_failed",
                    extra={"url": url, "errors": exc.error_count()},
                )
                return None

            self._rng.shuffle(fleet_data.fleets)
            span.set_attribute("fleet_api.fleets", len(fleet_data.fleets))
            logger.info(
                "fleet_fetched",
                extra={
                    "fleets": len(fleet_data.fleets),
                    "width": fleet_data.anchorage_size.width,
                    "height": fleet_data.anchorage_size.height,
                },
            )
            return fleet_data

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> FleetApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
