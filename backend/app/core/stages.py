"""Lead stage vocabulary and display metadata."""

from dataclasses import dataclass
from enum import Enum


class Stage(str, Enum):
    RNR = "RNR"
    INTERESTED = "Interested"
    NOT_INTERESTED = "Not Interested"
    WALK_IN = "Walk-in"
    DEMO = "Demo"
    DEMO_COMPLETED = "Demo Completed"
    ADMISSION = "Admission"


# Funnel order used for transition menus and funnel counts
CANONICAL_STAGES: tuple[Stage, ...] = tuple(Stage)
INITIAL_STAGE = Stage.RNR

# Found in older sample data; accepted on load, never offered as a target
LEGACY_STAGES: frozenset[str] = frozenset({"Interested Walk-in"})

DEMO_STAGES: frozenset[str] = frozenset({Stage.DEMO.value, Stage.DEMO_COMPLETED.value})


@dataclass(frozen=True)
class StageDisplay:
    label: str
    badge: str
    icon: str
    icon_color: str


STAGE_DISPLAY: dict[Stage, StageDisplay] = {
    Stage.RNR: StageDisplay("RNR", "bg-yellow-100 text-yellow-800", "alert-circle", "text-yellow-500"),
    Stage.INTERESTED: StageDisplay("Interested", "bg-green-100 text-green-800", "check-circle", "text-green-500"),
    Stage.NOT_INTERESTED: StageDisplay("Not Interested", "bg-red-100 text-red-800", "x-circle", "text-red-500"),
    Stage.WALK_IN: StageDisplay("Walk-in", "bg-blue-100 text-blue-800", "check-circle", "text-blue-500"),
    Stage.DEMO: StageDisplay("Demo", "bg-purple-100 text-purple-800", "clock", "text-purple-500"),
    Stage.DEMO_COMPLETED: StageDisplay("Demo Completed", "bg-indigo-100 text-indigo-800", "check-circle", "text-indigo-500"),
    Stage.ADMISSION: StageDisplay("Admission", "bg-green-100 text-green-800", "check-circle", "text-green-500"),
}

_missing = set(Stage) - set(STAGE_DISPLAY)
if _missing:
    raise RuntimeError(f"Stage display metadata missing for: {sorted(s.value for s in _missing)}")

UNKNOWN_STAGE_DISPLAY = StageDisplay("", "bg-gray-100 text-gray-800", "alert-circle", "text-gray-500")


def parse_stage(value: str | None) -> Stage | None:
    """Return the canonical Stage for ``value``, or None if it is not canonical."""
    if not value:
        return None
    try:
        return Stage(value)
    except ValueError:
        return None


def is_known_stage(value: str) -> bool:
    return parse_stage(value) is not None or value in LEGACY_STAGES


def display_for(value: str) -> StageDisplay:
    """Display metadata for a stored stage value; unknown values render as-is."""
    stage = parse_stage(value)
    if stage is None:
        return StageDisplay(
            value,
            UNKNOWN_STAGE_DISPLAY.badge,
            UNKNOWN_STAGE_DISPLAY.icon,
            UNKNOWN_STAGE_DISPLAY.icon_color,
        )
    return STAGE_DISPLAY[stage]
