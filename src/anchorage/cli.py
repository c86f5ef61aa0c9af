"""Interactive command-line planner for placing vessels on an anchorage."""

from __future__ import annotations

import argparse
import random
import string
from pathlib import Path
from typing import Sequence

from opentelemetry.instrumentation.logging import LoggingInstrumentor

from anchorage.api import FleetApiClient, FleetApiConfig, FleetData, load_fleet_file
from anchorage.engine.instrumented_session import InstrumentedPlacementSession
from anchorage.engine.payload import VesselPayload
from anchorage.engine.placement import PlacementResult
from anchorage.engine.session import PlacementSession
from anchorage.engine.vessel import AvailableVessel, Vessel
from anchorage.telemetry import TelemetryConfig, configure_console_logging, init_telemetry

VESSEL_SYMBOLS = string.ascii_uppercase + string.ascii_lowercase + string.digits

HELP_TEXT = """Commands:
  show                 draw the anchorage
  list                 list vessels waiting to be placed
  place N X Y          drop pool vessel N with its top-left corner at (X, Y)
  hover N X Y          preview a drop without committing it
  rotate N             rotate pool vessel N by 90 degrees
  move S X Y           move placed vessel S (its map symbol) to (X, Y)
  remove S             return placed vessel S to the pool
  new                  fetch a new fleet and start over
  quit                 leave the planner"""


def _symbol(index: int) -> str:
    return VESSEL_SYMBOLS[index % len(VESSEL_SYMBOLS)]


def _format_anchorage(session: PlacementSession) -> str:
    grid = [["." for _ in range(session.grid_width)] for _ in range(session.grid_height)]
    for index, vessel in enumerate(session.placed):
        for cell in vessel.occupied_cells():
            grid[cell.y][cell.x] = _symbol(index)

    header = "    " + " ".join(f"{x:>2}" for x in range(session.grid_width))
    rows = [header]
    for y, row in enumerate(grid):
        rows.append(f"{y:>2} |" + " ".join(f"{symbol:>2}" for symbol in row))
    return "\n".join(rows)


def _describe(vessel: Vessel) -> str:
    rotation = " (rotated)" if vessel.is_rotated else ""
    return (
        f"{vessel.designation or 'Vessel'} "
        f"{vessel.effective_width}x{vessel.effective_height}{rotation}"
    )


def _format_pool(session: PlacementSession) -> str:
    if not session.available:
        return "No vessels waiting."
    return "\n".join(
        f"{number:>3}. {_describe(vessel)}"
        for number, vessel in enumerate(session.available, start=1)
    )


def _format_legend(session: PlacementSession) -> str:
    return "\n".join(
        f"  {_symbol(index)}: {_describe(vessel)} at ({vessel.x}, {vessel.y})"
        for index, vessel in enumerate(session.placed)
    )


def _pool_vessel(session: PlacementSession, raw: str) -> AvailableVessel:
    try:
        number = int(raw)
    except ValueError as exc:
        raise ValueError("Pool vessels are chosen by their number in 'list'.") from exc
    if not 1 <= number <= len(session.available):
        raise ValueError(f"Choose a vessel between 1 and {len(session.available)}.")
    return session.available[number - 1]


def _placed_id(session: PlacementSession, symbol: str) -> str:
    for index, vessel in enumerate(session.placed):
        if _symbol(index) == symbol:
            return vessel.id
    raise ValueError(f"No placed vessel is drawn as '{symbol}'.")


def _parse_target(args: Sequence[str]) -> tuple[int, int]:
    try:
        return int(args[0]), int(args[1])
    except (IndexError, ValueError) as exc:
        raise ValueError("Targets are two integers: X Y.") from exc


def _describe_result(result: PlacementResult, verb: str) -> str:
    if result.accepted:
        return f"{verb} at ({result.x}, {result.y})."
    detail = result.reason.value.replace("_", " ") if result.reason else "rejected"
    return f"Cannot place there: {detail}."


def _load_fleet(fleet_file: Path | None, client: FleetApiClient) -> FleetData | None:
    if fleet_file is not None:
        try:
            return load_fleet_file(fleet_file)
        except (OSError, ValueError) as exc:
            print(f"Could not read {fleet_file}: {exc}")
            return None
    return client.get_random_fleet()


def _start_round(
    session: PlacementSession,
    fleet_file: Path | None,
    client: FleetApiClient,
    rng: random.Random,
) -> None:
    fleet = _load_fleet(fleet_file, client)
    session.start_round(fleet.to_plan() if fleet else None, rng)
    if fleet is None:
        print("Could not load fleet data. Type 'new' to try again.")
    elif not session.available:
        print("This fleet has no vessels that fit the anchorage.")
    else:
        print(
            f"\nAnchorage {session.grid_width}x{session.grid_height}, "
            f"{len(session.available)} vessels to place."
        )


def _handle(
    session: PlacementSession, command: str, args: list[str]
) -> str | None:
    """Run one planner command and return the text to show."""
    if command == "show":
        legend = _format_legend(session)
        return _format_anchorage(session) + (f"\n{legend}" if legend else "")
    if command == "list":
        return _format_pool(session)
    if command in {"place", "hover"}:
        vessel = _pool_vessel(session, args[0] if args else "")
        x, y = _parse_target(args[1:])
        payload = VesselPayload.from_vessel(vessel)
        if command == "hover":
            preview = session.hover(payload, x, y)
            return _describe_result(preview.result, "Would fit") if preview else None
        return _describe_result(session.drop(payload, x, y), "Placed")
    if command == "rotate":
        vessel = _pool_vessel(session, args[0] if args else "")
        session.rotate(vessel.id)
        return f"Now {_describe(vessel)}."
    if command == "move":
        vessel_id = _placed_id(session, args[0] if args else "")
        x, y = _parse_target(args[1:])
        payload = VesselPayload.from_vessel(session.find_vessel(vessel_id))
        return _describe_result(session.drop(payload, x, y), "Moved")
    if command == "remove":
        vessel_id = _placed_id(session, args[0] if args else "")
        session.remove(vessel_id)
        return "Vessel returned to the pool."
    if command == "help":
        return HELP_TEXT
    return f"Unknown command '{command}'. Type 'help' for a list."


def run_planner(
    seed: int | None = None,
    fleet_file: Path | None = None,
    use_proxy: bool = False,
    instrumented: bool = False,
) -> None:
    print("Anchorage planner. Type 'help' for commands.")
    rng = random.Random(seed)
    session: PlacementSession = (
        InstrumentedPlacementSession() if instrumented else PlacementSession()
    )
    with FleetApiClient(FleetApiConfig.from_env(use_proxy=use_proxy or None), rng=rng) as client:
        _start_round(session, fleet_file, client, rng)
        while True:
            raw = input("\n> ").strip()
            if not raw:
                continue
            command, *args = raw.split()
            command = command.lower()
            if command in {"q", "quit", "exit"}:
                print("Goodbye!")
                return
            if command == "new":
                _start_round(session, fleet_file, client, rng)
                continue
            try:
                output = _handle(session, command, args)
            except ValueError as exc:
                print(f"Invalid input: {exc}")
                continue
            if output:
                print(output)
            if command in {"place", "move"} and session.is_complete:
                print("\nAll vessels are anchored. Type 'new' for another fleet.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Place a fleet of vessels on an anchorage grid.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--fleet-file",
        type=Path,
        default=None,
        help="Read the fleet from a JSON file instead of the fleet API.",
    )
    parser.add_argument(
        "--proxy", action="store_true", help="Reach the fleet API through the CORS proxy."
    )
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Export traces, metrics and logs as configured by OTEL_* variables.",
    )
    args = parser.parse_args()

    configure_console_logging()
    if args.telemetry:
        init_telemetry(TelemetryConfig.from_env())
        LoggingInstrumentor().instrument()
    run_planner(
        seed=args.seed,
        fleet_file=args.fleet_file,
        use_proxy=args.proxy,
        instrumented=args.telemetry,
    )


if __name__ == "__main__":
    main()
