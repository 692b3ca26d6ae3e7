"""
simulation/runner.py
====================
Drives the assemble -> solve -> evaluate pipeline.

step() is one complete pass, in the order every driver must follow:
  1. Refresh geometry and local stiffness of every intact element
  2. Build a fresh GlobalAssembler sized to the current node count
  3. Fix boundary nodes (Node.fixed plus explicit nodes and single DOFs)
  4. Scatter every intact element's stiffness
  5. Apply this step's forces
  6. Solve for displacements
  7. Evaluate strains and failures, aggregate stats

run() repeats step() with a growing load factor until the truss collapses
or max_steps is reached, the same incremental loading used to push a
structure through progressive failure.

Inputs:  TrussData (from any module in structure/frames/)
Outputs: StepResult / SimulationResult (consumed by visualization/)
"""

import logging
import math

from core.config import DEFAULT_CONFIG, SolverConfig
from core.models import TrussData, StepResult, SimulationResult
from structure.stiffness import GlobalAssembler
from solver.equilibrium import solve_with_report
from solver.failure import evaluate_strains, all_failed


logger = logging.getLogger(__name__)


def step(
    nodes,
    elements,
    loads,
    fixed_nodes=(),
    fixed_dofs=(),
    load_factor: float = 1.0,
    step_index: int = 0,
    config: SolverConfig = DEFAULT_CONFIG,
) -> StepResult:
    """
    Run one quasi-static pass over the current mesh state.

    Args:
        nodes: Caller-owned node list (positions may change between calls).
        elements: Caller-owned element list (failed flags updated in place).
        loads: Iterable of Load applied this step.
        fixed_nodes: Extra node indices to fix on top of Node.fixed.
        fixed_dofs: Single DOFs to fix, as (node, "x" | "y") pairs.
        load_factor: Multiplier applied to every load.
        step_index: Index recorded on the returned StepResult.
        config: Solver constants.

    Returns:
        StepResult with displacements, stats and indeterminate DOFs.
    """
    active = [element for element in elements if not element.failed]
    for element in active:
        element.refresh_geometry(nodes, min_length=config.min_length)

    assembler = GlobalAssembler(len(nodes))

    for index, node in enumerate(nodes):
        if node.fixed:
            assembler.fix_node(index)
    for index in fixed_nodes:
        assembler.fix_node(index)
    for index, axis in fixed_dofs:
        assembler.fix_dof(index, axis)

    for element in active:
        assembler.add_element(element)

    for load in loads:
        assembler.apply_force(load.node, load.fx * load_factor, load.fy * load_factor)

    report = solve_with_report(assembler, config)
    stats = evaluate_strains(nodes, elements, report.displacements)

    if stats.newly_failed:
        logger.info(
            "Step %d (load factor %.3f): elements %s failed",
            step_index, load_factor, stats.newly_failed,
        )

    return StepResult(
        step=step_index,
        load_factor=load_factor,
        displacements=report.displacements,
        stats=stats,
        indeterminate_dofs=report.indeterminate_dofs,
    )


def run(
    truss: TrussData,
    max_steps: int = 100,
    load_factor_start: float = 1.0,
    load_factor_step: float = 0.5,
    config: SolverConfig = DEFAULT_CONFIG,
) -> SimulationResult:
    """
    Execute a progressive loading simulation for a given truss.

    The load factor starts at ``load_factor_start`` and grows by
    ``load_factor_step`` every step. The run stops early on collapse: every
    element failed, or failures have left part of the mesh indeterminate
    (a mechanism).

    Args:
        truss: Fully defined truss (nodes, elements, loads). Modified in
               place: element failure flags persist after the run.
        max_steps: Maximum number of load steps.
        load_factor_start: Load factor of the first step.
        load_factor_step: Increment added to the load factor every step.
        config: Solver constants.

    Returns:
        SimulationResult with the full step history.
    """
    history: list[StepResult] = []
    failed_sequence: list[int] = []

    for step_index in range(max_steps):
        load_factor = load_factor_start + step_index * load_factor_step

        result = step(
            truss.nodes,
            truss.elements,
            truss.loads,
            fixed_nodes=truss.fixed_nodes,
            fixed_dofs=truss.fixed_dofs,
            load_factor=load_factor,
            step_index=step_index,
            config=config,
        )
        history.append(result)
        failed_sequence.extend(result.stats.newly_failed)

        if all_failed(truss.elements) or (failed_sequence and result.indeterminate_dofs):
            logger.info("Collapse of '%s' at step %d", truss.name, step_index)
            return SimulationResult(
                truss_name=truss.name,
                history=history,
                collapse_detected=True,
                collapse_step=step_index,
                failed_sequence=failed_sequence,
            )

    return SimulationResult(
        truss_name=truss.name,
        history=history,
        collapse_detected=False,
        collapse_step=None,
        failed_sequence=failed_sequence,
    )


def rotate_nodes(nodes, angle: float, center=(0.0, 0.0)) -> None:
    """
    Rigidly rotate nodes in place about ``center`` by ``angle`` radians.

    Elements keep their original length, so a rigid rotation alone
    produces no strain on the next step.
    """
    cx, cy = center
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    for node in nodes:
        dx = node.x - cx
        dy = node.y - cy
        node.x = cx + dx * cos_a - dy * sin_a
        node.y = cy + dx * sin_a + dy * cos_a
