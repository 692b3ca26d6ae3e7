"""
simulation/scenarios.py
=======================
Named load cases, each a frame builder paired with a loading schedule.

A scenario returns the SimulationResult of an incremental loading run.
Adding one takes two edits:
  1. Add a frame module to structure/frames/
  2. Register a Scenario entry in SCENARIOS with its default schedule
"""

from dataclasses import dataclass
from types import ModuleType

from core.models import SimulationResult
from simulation import runner
from structure.frames import frame_single_bar, frame_pratt_bridge, frame_crane_tower, frame_grid


@dataclass(frozen=True)
class Scenario:
    """
    A frame plus its default loading schedule.

    Attributes:
        frame (module): Frame module exposing build() -> TrussData.
        description (str): One line shown by --list.
        max_steps (int): Default step cap.
        load_factor_step (float): Default load factor increment.
    """
    frame: ModuleType
    description: str
    max_steps: int
    load_factor_step: float

    def __call__(self, max_steps: int | None = None, load_factor_step: float | None = None) -> SimulationResult:
        return runner.run(
            self.frame.build(),
            max_steps=self.max_steps if max_steps is None else max_steps,
            load_factor_start=1.0,
            load_factor_step=self.load_factor_step if load_factor_step is None else load_factor_step,
        )


# ---------------------------------------------------------------------------
# Scenario registry
# ---------------------------------------------------------------------------

SCENARIOS: dict[str, Scenario] = {
    "single_bar": Scenario(
        frame_single_bar, "One steel bar pulled until it snaps (load factor 2.5)", 20, 0.25,
    ),
    "pratt_bridge": Scenario(
        frame_pratt_bridge, "6-panel Pratt bridge under growing traffic load", 200, 0.5,
    ),
    "crane_tower": Scenario(
        frame_crane_tower, "Tower crane with an increasing hook load", 200, 0.25,
    ),
    "grid": Scenario(
        frame_grid, "Braced grid overloaded at its centre", 100, 1.0,
    ),
}

FRAME_MODULES = {name: scenario.frame for name, scenario in SCENARIOS.items()}


def run_scenario(name: str, **kwargs) -> SimulationResult:
    """
    Run a scenario by name with optional keyword overrides.

    Args:
        name: Scenario key from the SCENARIOS registry.
        **kwargs: max_steps and/or load_factor_step overrides.

    Returns:
        SimulationResult from the selected scenario.

    Raises:
        ValueError: If the scenario name is not registered.
    """
    try:
        scenario = SCENARIOS[name]
    except KeyError:
        raise ValueError(f"Unknown scenario '{name}'. Available: {', '.join(SCENARIOS)}") from None
    return scenario(**kwargs)


def list_scenarios() -> list[str]:
    """Return all registered scenario names."""
    return list(SCENARIOS)
