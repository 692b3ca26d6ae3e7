"""
simulation/optimizer.py
=======================
Stress-driven structural optimization by pruning and reinforcing bars.

One generation:
  1. Solve the truss under its loads (runner.step)
  2. Prune intact bars that are barely working: stress ratio below
     PRUNE_THRESHOLD and below half the mean ratio, provided both end
     nodes keep more than two connections afterwards
  3. Reinforce intact bars above REINFORCE_THRESHOLD by growing their
     area 10%, capped at MAX_AREA

This is mesh editing layered on top of the FEA core: it removes elements
from the caller's list between solves, which the core supports because
nothing is cached across steps.
"""

import logging
from collections import Counter

from core.config import DEFAULT_CONFIG, SolverConfig
from core.models import TrussData, EvolutionResult
from simulation.runner import step


logger = logging.getLogger(__name__)


PRUNE_THRESHOLD = 0.15
REINFORCE_THRESHOLD = 0.7
REINFORCE_FACTOR = 1.1
MAX_AREA = 0.02
MIN_CONNECTIONS = 2


def evolve(
    truss: TrussData,
    generation: int = 0,
    config: SolverConfig = DEFAULT_CONFIG,
) -> EvolutionResult:
    """
    Run one optimization generation on ``truss`` in place.

    Args:
        truss: Truss to optimize. Its element list is edited in place.
        generation: Generation counter before this pass.
        config: Solver constants.

    Returns:
        EvolutionResult. The generation counter only advances when
        something was removed or reinforced.
    """
    step_result = step(
        truss.nodes, truss.elements, truss.loads,
        fixed_nodes=truss.fixed_nodes, fixed_dofs=truss.fixed_dofs, config=config,
    )

    ratios = [element.stress_ratio() for element in truss.elements]
    mean_ratio = sum(ratios) / len(ratios) if ratios else 0.0
    connections = _node_connections(truss.elements)

    to_remove = []
    to_reinforce = []
    for index, (element, ratio) in enumerate(zip(truss.elements, ratios)):
        if element.failed:
            continue

        if ratio < PRUNE_THRESHOLD and ratio < 0.5 * mean_ratio:
            if connections[element.n1] > MIN_CONNECTIONS and connections[element.n2] > MIN_CONNECTIONS:
                to_remove.append(index)
                connections[element.n1] -= 1
                connections[element.n2] -= 1
                continue

        if ratio > REINFORCE_THRESHOLD:
            to_reinforce.append(element)

    for index in reversed(to_remove):
        del truss.elements[index]

    for element in to_reinforce:
        element.A = min(element.A * REINFORCE_FACTOR, MAX_AREA)

    if to_remove or to_reinforce:
        generation += 1
        logger.info(
            "Generation %d: pruned %d, reinforced %d, %d elements left",
            generation, len(to_remove), len(to_reinforce), len(truss.elements),
        )

    return EvolutionResult(
        generation=generation,
        removed=len(to_remove),
        reinforced=len(to_reinforce),
        step_result=step_result,
    )


def optimize(
    truss: TrussData,
    max_generations: int = 20,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[EvolutionResult]:
    """
    Evolve until a generation changes nothing or ``max_generations`` is hit.

    Returns:
        One EvolutionResult per generation run.
    """
    results = []
    generation = 0
    for _ in range(max_generations):
        result = evolve(truss, generation, config)
        results.append(result)
        if result.removed == 0 and result.reinforced == 0:
            break
        generation = result.generation
    return results


def mass_reduction(initial_element_count: int, truss: TrussData) -> float:
    """Percentage of the initial element count removed so far."""
    if initial_element_count == 0:
        return 0.0
    return 100.0 * (initial_element_count - len(truss.elements)) / initial_element_count


def _node_connections(elements) -> Counter:
    """Number of elements meeting at each node index."""
    connections = Counter()
    for element in elements:
        connections[element.n1] += 1
        connections[element.n2] += 1
    return connections
