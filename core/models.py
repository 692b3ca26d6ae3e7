"""
core/models.py
==============
Shared data contracts for the truss strain simulator.

Nodes, materials, loads and every result record travel between modules as
these dataclasses. The bar element itself lives in structure/element.py
because it carries behaviour (geometry refresh, strain evaluation), but it
only ever refers to nodes by their index in a caller-owned list.

Units are SI throughout: metres, newtons, pascals, joules.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np


# ---------------------------------------------------------------------------
# Material
# ---------------------------------------------------------------------------

@dataclass
class Material:
    """
    Material and cross-section properties for a bar.

    Attributes:
        name (str): Human-readable material name (e.g. "Steel").
        E (float): Young's modulus in Pa.
        A (float): Cross-sectional area in m².
        sigma_y (float): Yield stress in Pa. Exceeding it breaks the bar.
    """
    name: str
    E: float
    A: float
    sigma_y: float


# ---------------------------------------------------------------------------
# Predefined materials
# ---------------------------------------------------------------------------

STEEL = Material(name="Steel", E=200e9, A=0.01, sigma_y=250e6)
GLASS = Material(name="Glass", E=70e9, A=0.01, sigma_y=50e6)
RUBBER = Material(name="Rubber", E=0.1e9, A=0.01, sigma_y=15e6)
BUILDING = Material(name="Building Frame", E=1.2e9, A=0.01, sigma_y=30e6)
CASTLE_MASONRY = Material(name="Castle Masonry", E=3e9, A=0.01, sigma_y=40e6)
TIMBER_BRIDGE = Material(name="Timber Bridge", E=5e9, A=0.01, sigma_y=80e6)


def with_area(material: Material, A: float) -> Material:
    """Return a copy of ``material`` with a different cross-section area."""
    return dataclasses.replace(material, A=A)


# ---------------------------------------------------------------------------
# Geometry and loading
# ---------------------------------------------------------------------------

@dataclass
class Node:
    """
    A pin joint in the plane.

    Attributes:
        x (float): X-coordinate in metres.
        y (float): Y-coordinate in metres.
        fixed (bool): Both DOFs (ux, uy) are held at zero displacement.
    """
    x: float
    y: float
    fixed: bool = False


@dataclass
class Load:
    """
    A nodal force applied for one step.

    Attributes:
        node (int): Index of the loaded node.
        fx (float): Force along global X in N.
        fy (float): Force along global Y in N.
    """
    node: int
    fx: float = 0.0
    fy: float = 0.0


@dataclass
class TrussData:
    """
    Complete definition of a truss, as returned by every frame module.

    Attributes:
        name (str): Human-readable name (used in plots and reports).
        nodes (List[Node]): All nodes, addressed by list index.
        elements (list): BarElement instances referencing nodes by index.
        loads (List[Load]): Reference loads (scaled by the runner).
        fixed_nodes (List[int]): Extra node indices to fix on top of any
                                 node whose ``fixed`` flag is set.
        fixed_dofs (List[Tuple[int, str]]): Single constrained DOFs as
                                 (node, "x" | "y"), e.g. rollers.
    """
    name: str
    nodes: List[Node]
    elements: list
    loads: List[Load]
    fixed_nodes: List[int] = field(default_factory=list)
    fixed_dofs: List[Tuple[int, str]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Solver output
# ---------------------------------------------------------------------------

@dataclass
class SparsityInfo:
    """Fill statistics of an assembled global stiffness matrix."""
    non_zero: int
    total: int
    sparsity: float  # percent of entries never written


@dataclass
class SolveReport:
    """
    Result of one linear solve.

    Attributes:
        displacements (np.ndarray): Full vector of length 2 * node_count,
                                    ordered (ux0, uy0, ux1, uy1, ...).
        indeterminate_dofs (List[int]): DOFs whose pivot vanished (reported
                                        as 0) or was tiny next to the
                                        stiffness scale (a mechanism).
        residual (float): ||K_eff u - F_eff|| on the penalised system.
    """
    displacements: np.ndarray
    indeterminate_dofs: List[int]
    residual: float


@dataclass
class StrainStats:
    """
    Aggregate snapshot produced by the strain evaluator.

    Attributes:
        max_strain (float): Largest |strain| among elements evaluated this pass.
        total_strain_energy (float): Sum of strain energy of intact elements (J).
        failed_count (int): Elements failed after this pass.
        active_element_count (int): Total elements minus failed_count.
        newly_failed (List[int]): Element indices that failed during this pass.
    """
    max_strain: float
    total_strain_energy: float
    failed_count: int
    active_element_count: int
    newly_failed: List[int] = field(default_factory=list)


@dataclass
class StepResult:
    """
    Everything the caller reads back after one assemble-solve-evaluate pass.

    Attributes:
        step (int): Step index assigned by the runner (0 for a lone step).
        load_factor (float): Multiplier applied to the loads this step.
        displacements (np.ndarray): Solved displacement vector.
        stats (StrainStats): Aggregated strain statistics.
        indeterminate_dofs (List[int]): DOFs the solver could not determine.
    """
    step: int
    load_factor: float
    displacements: np.ndarray
    stats: StrainStats
    indeterminate_dofs: List[int] = field(default_factory=list)

    def node_displacement(self, node: int) -> Tuple[float, float]:
        """(ux, uy) of a single node."""
        return float(self.displacements[2 * node]), float(self.displacements[2 * node + 1])


# ---------------------------------------------------------------------------
# Simulation output
# ---------------------------------------------------------------------------

@dataclass
class SimulationResult:
    """
    Complete output of a progressive loading run.

    Attributes:
        truss_name (str): Name of the simulated truss.
        history (List[StepResult]): One record per executed step.
        collapse_detected (bool): The run ended because the truss failed.
        collapse_step (Optional[int]): Step at which collapse was detected.
        failed_sequence (List[int]): Element indices in the order they failed.
    """
    truss_name: str
    history: List[StepResult]
    collapse_detected: bool
    collapse_step: Optional[int]
    failed_sequence: List[int]


@dataclass
class EvolutionResult:
    """
    Outcome of one structural optimization generation.

    Attributes:
        generation (int): Generation counter after this pass.
        removed (int): Number of elements pruned.
        reinforced (int): Number of elements whose area was increased.
        step_result (StepResult): The solve the decisions were based on.
    """
    generation: int
    removed: int
    reinforced: int
    step_result: StepResult
