"""Command handling of the interactive planner."""

import pytest

from anchorage import cli
from anchorage.engine.placement import PlacementResult, RejectionReason
from anchorage.engine.session import PlacementSession
from anchorage.engine.vessel import AvailableVessel, Dimensions


@pytest.fixture
def session() -> PlacementSession:
    session = PlacementSession(6, 4)
    session.fleet_loaded = True
    session.available.extend(
        [
            AvailableVessel(dimensions=Dimensions(3, 2), designation="Ferry", id="ferry"),
            AvailableVessel(dimensions=Dimensions(2, 2), designation="Tug", id="tug"),
        ]
    )
    return session


def test_place_and_show(session: PlacementSession) -> None:
    assert cli._handle(session, "place", ["1", "0", "0"]) == "Placed at (0, 0)."
    drawing = cli._handle(session, "show", [])
    assert drawing is not None
    lines = drawing.splitlines()
    assert lines[1].startswith(" 0 |")
    assert lines[1].split("|")[1].split()[:4] == ["A", "A", "A", "."]
    assert "A: Ferry 3x2 at (0, 0)" in drawing


def test_collision_message(session: PlacementSession) -> None:
    cli._handle(session, "place", ["1", "0", "0"])
    assert cli._handle(session, "place", ["1", "1", "1"]) == "Cannot place there: collision."
    assert [vessel.id for vessel in session.available] == ["tug"]


def test_hover_reports_clamped_position(session: PlacementSession) -> None:
    assert cli._handle(session, "hover", ["2", "9", "9"]) == "Would fit at (4, 2)."
    assert len(session.available) == 2


def test_move_and_remove_by_symbol(session: PlacementSession) -> None:
    cli._handle(session, "place", ["1", "0", "0"])
    assert cli._handle(session, "move", ["A", "3", "2"]) == "Moved at (3, 2)."
    assert cli._handle(session, "remove", ["A"]) == "Vessel returned to the pool."
    assert session.placed == []
    assert {vessel.id for vessel in session.available} == {"ferry", "tug"}


def test_rotate_updates_description(session: PlacementSession) -> None:
    assert cli._handle(session, "rotate", ["1"]) == "Now Ferry 2x3 (rotated)."


@pytest.mark.parametrize(
    "command,args",
    [("place", ["9", "0", "0"]), ("place", ["x", "0", "0"]), ("place", ["1", "0"]), ("move", ["Z", "0", "0"])],
)
def test_bad_input_raises_value_error(session: PlacementSession, command: str, args: list[str]) -> None:
    with pytest.raises(ValueError):
        cli._handle(session, command, args)


def test_unknown_command(session: PlacementSession) -> None:
    assert "Unknown command" in cli._handle(session, "fly", [])


def test_describe_result_names_rejection_reason() -> None:
    assert cli._describe_result(PlacementResult.accept(2, 3), "Placed") == "Placed at (2, 3)."
    rejected = PlacementResult.reject(RejectionReason.DOES_NOT_FIT)
    assert cli._describe_result(rejected, "Placed") == "Cannot place there: does not fit."
