"""
solver/failure.py
=================
Evaluates strain and brittle failure across the whole element list.

Failure criterion (per element, decided in BarElement.evaluate_strain):

    |sigma| = |E * strain| > sigma_y   ->   failed = True, permanently

Failed elements are skipped: they carry no stiffness, no strain energy and
their last strain is left as it was when they broke.

Consumed by simulation/runner.py right after each equilibrium solve.
"""

from core.models import StrainStats


def evaluate_strains(nodes, elements, displacements) -> StrainStats:
    """
    Recompute strain and stress of every intact element and summarize.

    An element that crosses its yield stress during this pass fails and
    contributes no strain energy; its strain still counts toward
    ``max_strain`` since it was measured this pass.

    Args:
        nodes: Caller-owned node list.
        elements: Element list (failed flags updated in place).
        displacements: Solved global displacement vector.

    Returns:
        StrainStats for this pass.
    """
    max_strain = 0.0
    total_strain_energy = 0.0
    newly_failed = []

    for index, element in enumerate(elements):
        if element.failed:
            continue

        strain = element.evaluate_strain(nodes, displacements)
        max_strain = max(max_strain, abs(strain))

        if element.failed:
            newly_failed.append(index)
        else:
            total_strain_energy += element.strain_energy()

    failed_count = sum(1 for element in elements if element.failed)

    return StrainStats(
        max_strain=max_strain,
        total_strain_energy=total_strain_energy,
        failed_count=failed_count,
        active_element_count=len(elements) - failed_count,
        newly_failed=newly_failed,
    )


def all_failed(elements) -> bool:
    """
    Check if every element has failed.

    An empty element list counts as failed: nothing is left to carry load.
    """
    return all(element.failed for element in elements)
