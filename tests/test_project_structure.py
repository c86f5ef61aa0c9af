"""Basic project scaffolding tests."""

import importlib


def test_package_importable() -> None:
    """Verify the top-level package is importable."""
    import anchorage  # noqa: F401  (import used to ensure availability)

    assert anchorage is not None


def test_submodules_exist() -> None:
    """All primary submodules should be importable."""
    modules = [
        "anchorage.engine.vessel",
        "anchorage.engine.placement",
        "anchorage.engine.fleet",
        "anchorage.engine.session",
        "anchorage.api",
        "anchorage.telemetry",
        "anchorage.cli",
    ]

    for module in modules:
        assert importlib.import_module(module) is not None
