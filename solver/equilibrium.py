"""
solver/equilibrium.py
=====================
Solves the static equilibrium equation K u = F for one assembled step.

Procedure:
    1. Densify the assembler's sparse K into a (n_dof, n_dof) array.
    2. Penalty boundary conditions: for every fixed DOF, zero its row and
       column, write a huge diagonal and zero its load entry.
    3. Gaussian elimination with partial pivoting.
    4. Back-substitution.

Pivots below the absolute tolerance are skipped instead of raising. Those
DOFs are mechanically indeterminate (a disconnected node, a bar with no
transverse support) and come back as 0.

A mechanism left behind by failed bars rarely produces an exact zero pivot:
rounding leaves a pivot around 1e-16 of the stiffness scale, and the solve
returns enormous displacements instead. solve_with_report() therefore also
lists DOFs whose pivot is tiny relative to the largest free diagonal of K,
so drivers can tell a loose mesh from a stiff one.

Dense storage limits this to meshes of a few hundred nodes, which is what
the scenarios use. The system is rebuilt and re-solved from scratch every
step.
"""

import logging

import numpy as np

from core.config import DEFAULT_CONFIG, SolverConfig
from core.models import SolveReport


logger = logging.getLogger(__name__)


def solve(assembler, config: SolverConfig = DEFAULT_CONFIG) -> np.ndarray:
    """
    Solve an assembled system and return only the displacement vector.

    Args:
        assembler: A filled GlobalAssembler.
        config: Penalty and pivot tolerance to use.

    Returns:
        u (np.ndarray): Displacements of shape (2 * node_count,), including
                        ~0 entries for fixed DOFs.
    """
    return solve_with_report(assembler, config).displacements


def solve_with_report(assembler, config: SolverConfig = DEFAULT_CONFIG) -> SolveReport:
    """
    Solve an assembled system and report indeterminate DOFs and residual.

    A DOF is indeterminate when its pivot is below the absolute tolerance
    or below ``mechanism_tolerance`` times the largest free diagonal of
    K_eff. Fixed DOFs carry the penalty and are left out of that scale.

    Args:
        assembler: A filled GlobalAssembler.
        config: Penalty and pivot tolerances to use.

    Returns:
        SolveReport with displacements, indeterminate DOFs and
        ||K_eff u - F_eff||.
    """
    K, F = apply_penalty(
        assembler.to_dense(),
        np.array(assembler.F, dtype=float),
        assembler.fixed_dofs,
        penalty=config.penalty,
    )
    free = [dof for dof in range(len(F)) if dof not in assembler.fixed_dofs]
    scale = float(np.abs(np.diag(K))[free].max()) if free else 0.0

    u, indeterminate = gaussian_elimination(
        K, F,
        tolerance=config.pivot_tolerance,
        flag_below=config.mechanism_tolerance * scale,
    )

    if indeterminate:
        logger.warning(
            "%d of %d DOFs are indeterminate: %s",
            len(indeterminate), len(u), indeterminate,
        )

    return SolveReport(
        displacements=u,
        indeterminate_dofs=indeterminate,
        residual=residual(K, u, F),
    )


def apply_penalty(K: np.ndarray, F: np.ndarray, fixed_dofs, penalty: float = DEFAULT_CONFIG.penalty):
    """
    Enforce zero displacement at fixed DOFs by the penalty method.

    Each fixed DOF is fully decoupled from the rest of the system (row and
    column zeroed) and given a dominating diagonal, so it solves to ~0
    without being removed. K and F are modified in place.

    Args:
        K: Dense global stiffness.
        F: Global load vector.
        fixed_dofs: Iterable of constrained DOF indices.
        penalty: Diagonal value for constrained DOFs.

    Returns:
        The effective system (K, F) after enforcement.
    """
    for dof in fixed_dofs:
        K[dof, :] = 0.0
        K[:, dof] = 0.0
        K[dof, dof] = penalty
        F[dof] = 0.0
    return K, F


def gaussian_elimination(
    K: np.ndarray,
    F: np.ndarray,
    tolerance: float = DEFAULT_CONFIG.pivot_tolerance,
    flag_below: float = 0.0,
):
    """
    Solve K x = F by Gaussian elimination with partial pivoting.

    At step k the row with the largest |entry| in column k (from k down) is
    swapped into place together with its load entry. A pivot below
    ``tolerance`` skips elimination for that column. During back-substitution
    a near-zero diagonal gives x_i = 0 rather than a division. Diagonals
    that clear ``tolerance`` but stay below ``flag_below`` are solved
    normally and still reported.

    The inputs are copied and left untouched.

    Args:
        K: Square coefficient matrix.
        F: Right-hand side.
        tolerance: Pivot magnitude treated as zero.
        flag_below: Pivot magnitude below which an unknown is reported.

    Returns:
        (x, indeterminate): Solution vector and the sorted list of unknowns
        whose diagonal vanished (set to 0) or fell below ``flag_below``.
    """
    A = np.array(K, dtype=float)
    b = np.array(F, dtype=float)
    n = len(b)

    for k in range(n - 1):
        max_row = k + int(np.argmax(np.abs(A[k:, k])))
        if max_row != k:
            A[[k, max_row]] = A[[max_row, k]]
            b[[k, max_row]] = b[[max_row, k]]

        pivot = A[k, k]
        if abs(pivot) < tolerance:
            continue

        factors = A[k + 1:, k] / pivot
        A[k + 1:, k] = 0.0
        A[k + 1:, k + 1:] -= np.outer(factors, A[k, k + 1:])
        b[k + 1:] -= factors * b[k]

    x = np.zeros(n)
    indeterminate = []
    for i in range(n - 1, -1, -1):
        diagonal = abs(A[i, i])
        if diagonal < tolerance:
            indeterminate.append(i)
            continue
        if diagonal < flag_below:
            indeterminate.append(i)
        x[i] = (b[i] - A[i, i + 1:] @ x[i + 1:]) / A[i, i]

    indeterminate.sort()
    return x, indeterminate


def residual(K: np.ndarray, x: np.ndarray, F: np.ndarray) -> float:
    """Euclidean norm of K x - F."""
    return float(np.linalg.norm(K @ x - F))
