#!/usr/bin/env python3
"""
Prerequisite checker for the anchorage planner.

Run from repo root (after activating your venv):

    python3 scripts/check_prereqs.py
"""

import random
import sys
import traceback
from pathlib import Path


def add_src_to_syspath() -> None:
    """Ensure `src/` is on sys.path so `import anchorage` works without installing."""
    repo_root = Path(__file__).resolve().parents[1]
    src = repo_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


def header(title: str) -> None:
    print("\n" + "=" * 72)
    print(title)
    print("=" * 72)


def check_python_version() -> bool:
    header("1) Python version")
    v = sys.version_info
    print(f"Detected Python: {v.major}.{v.minor}.{v.micro}")
    ok = v >= (3, 10)
    print("OK: Python 3.10 or newer is available." if ok else "FAIL: Python 3.10+ required.")
    return ok


def check_core_imports() -> bool:
    header("2) Library imports (pydantic, requests, opentelemetry)")
    libs = ["pydantic", "requests", "opentelemetry.sdk", "opentelemetry.exporter.otlp"]
    all_ok = True
    for name in libs:
        try:
            __import__(name)
            print(f"OK: imported {name}")
        except Exception as exc:  # noqa: BLE001
            all_ok = False
            print(f"FAIL: could not import {name}: {exc}")
            traceback.print_exc(limit=1)
    return all_ok


def check_engine_smoke_test() -> bool:
    header("3) Placement engine smoke test (expand a fleet, drop every vessel)")
    add_src_to_syspath()
    try:
        from anchorage.engine.fleet import FleetPlan, FleetSpec
        from anchorage.engine.payload import VesselPayload
        from anchorage.engine.session import PlacementSession

        session = PlacementSession()
        plan = FleetPlan(12, 15, (FleetSpec(6, 5, "LNG Unit", 2), FleetSpec(3, 2, "Tug", 3)))
        session.start_round(plan, random.Random(0))
        print(f"OK: round started with {len(session.available)} vessels.")

        for vessel in list(session.available):
            placed = False
            for y in range(session.grid_height):
                for x in range(session.grid_width):
                    if session.drop(VesselPayload.from_vessel(vessel), x, y).accepted:
                        placed = True
                        break
                if placed:
                    break
        print(f"    placed={len(session.placed)}, remaining={len(session.available)}")
        return session.is_complete
    except Exception as exc:  # noqa: BLE001
        print(f"FAIL: engine smoke test failed: {exc}")
        traceback.print_exc(limit=1)
        return False


def main() -> None:
    checks = [
        ("Python version", check_python_version),
        ("Library imports", check_core_imports),
        ("Engine smoke test", check_engine_smoke_test),
    ]

    results: list[tuple[str, bool]] = [(name, fn()) for name, fn in checks]

    header("Summary")
    for name, ok in results:
        status = "OK  " if ok else "FAIL"
        print(f"{status} - {name}")

    print("\n" + "=" * 72)
    if all(ok for _, ok in results):
        print("ALL CHECKS PASSED. Start the planner with:")
        print("    PYTHONPATH=src python3 -m anchorage.cli --seed 1")
    else:
        print("Some checks FAILED. Review the messages above and fix them first.")
    print("=" * 72)


if __name__ == "__main__":
    main()
