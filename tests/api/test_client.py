"""Fleet API client tests."""

from __future__ import annotations

import random
from unittest.mock import MagicMock
from urllib.parse import urlparse

import pytest
import requests

from anchorage.api.client import FleetApiClient
from anchorage.api.config import FleetApiConfig
from anchorage.api.models import FleetData, load_fleet_file

SAMPLE_RESPONSE_JSON = """{
  "anchorageSize": {"width": 12, "height": 15},
  "fleets": [
    {
      "singleShipDimensions": {"width": 6, "height": 5},
      "shipDesignation": "LNG Unit",
      "shipCount": 2
    }
  ]
}"""


def _session_returning(text: str = SAMPLE_RESPONSE_JSON, status_error: Exception | None = None):
    response = MagicMock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    session = MagicMock()
    session.get.return_value = response
    return session


def _requested_url(session: MagicMock) -> str:
    assert session.get.call_count == 1
    return session.get.call_args.args[0]


def test_direct_endpoint_used_without_proxy() -> None:
    session = _session_returning()
    client = FleetApiClient(FleetApiConfig(use_proxy=False), session=session, rng=random.Random(1))

    result = client.get_random_fleet()

    assert result is not None
    url = urlparse(_requested_url(session))
    assert url.hostname == "esa.instech.no"
    assert url.path == "/api/fleets/random"
    assert "_t=" in url.query and "_r=" in url.query
    assert session.get.call_args.kwargs["timeout"] == 10.0


def test_proxy_endpoint_wraps_encoded_api_url() -> None:
    session = _session_returning()
    client = FleetApiClient(FleetApiConfig(use_proxy=True), session=session, rng=random.Random(1))

    assert client.get_random_fleet() is not None

    url = _requested_url(session)
    assert urlparse(url).hostname == "api.allorigins.win"
    assert url.startswith("https://api.allorigins.win/raw?url=")
    assert "https%3A%2F%2Fesa.instech.no%2Fapi%2Ffleets%2Frandom" in url


def test_http_error_returns_none() -> None:
    session = _session_returning(status_error=requests.HTTPError("500 Server Error"))
    client = FleetApiClient(FleetApiConfig(), session=session)
    assert client.get_random_fleet() is None


def test_network_error_returns_none() -> None:
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("unreachable")
    client = FleetApiClient(FleetApiConfig(), session=session)
    assert client.get_random_fleet() is None


def test_invalid_json_returns_none() -> None:
    client = FleetApiClient(FleetApiConfig(), session=_session_returning("{ not valid json }"))
    assert client.get_random_fleet() is None


def test_response_parses_into_plan() -> None:
    client = FleetApiClient(FleetApiConfig(), session=_session_returning())
    fleet = client.get_random_fleet()
    assert fleet is not None
    plan = fleet.to_plan()
    assert (plan.grid_width, plan.grid_height) == (12, 15)
    assert len(plan.specs) == 1
    spec = plan.specs[0]
    assert (spec.width, spec.height, spec.designation, spec.count) == (6, 5, "LNG Unit", 2)


def test_context_manager_closes_session() -> None:
    session = _session_returning()
    with FleetApiClient(FleetApiConfig(), session=session):
        pass
    session.close.assert_called_once()


def test_load_fleet_file(tmp_path) -> None:
    path = tmp_path / "fleet.json"
    path.write_text(SAMPLE_RESPONSE_JSON, encoding="utf-8")
    fleet = load_fleet_file(path)
    assert isinstance(fleet, FleetData)
    assert fleet.fleets[0].ship_designation == "LNG Unit"


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANCHORAGE_FLEET_API_URL", "http://localhost:8080/")
    monkeypatch.setenv("ANCHORAGE_USE_PROXY", "yes")
    monkeypatch.setenv("ANCHORAGE_HTTP_TIMEOUT", "2.5")

    config = FleetApiConfig.from_env()
    assert config.api_url == "http://localhost:8080/api/fleets/random"
    assert config.use_proxy is True
    assert config.timeout_s == 2.5

    assert FleetApiConfig.from_env(use_proxy=False).use_proxy is False
