"""
structure/stiffness.py
======================
Assembles the global stiffness matrix K and load vector F for one step.

K is held sparsely as a row -> {column: value} mapping of size
(2 * node_count)², F as a dense numpy vector. A GlobalAssembler is built
fresh every step, filled, handed to solver/equilibrium.py and discarded.
Nothing is cached between steps.

Fixed DOFs are tracked here as well. Entries touching a fixed row or column
are never scattered, and forces on a fixed component are dropped. The solver
penalises the same DOFs again, so either mechanism alone keeps them at ~0.
"""

import numpy as np

from core.models import SparsityInfo


AXES = {"x": 0, "y": 1}


class GlobalAssembler:
    """
    Global system for a truss with ``node_count`` nodes (2 DOFs each).

    Attributes:
        node_count (int): Number of nodes the system was sized for.
        n_dof (int): 2 * node_count.
        K (dict[int, dict[int, float]]): Sparse global stiffness.
        F (np.ndarray): Global load vector of shape (n_dof,).
        fixed_dofs (set[int]): Constrained DOF indices.
    """

    def __init__(self, node_count: int):
        self.node_count = node_count
        self.n_dof = 2 * node_count
        self.K = {i: {} for i in range(self.n_dof)}
        self.F = np.zeros(self.n_dof)
        self.fixed_dofs = set()

    def add_element(self, element) -> None:
        """
        Scatter an element's cached 4x4 stiffness into K.

        Entries are added to whatever is already stored (superposition of
        elements sharing a DOF). Any entry whose row or column is fixed is
        skipped.

        Args:
            element: BarElement whose ``k`` is current (refresh_geometry()
                     must already have been called this step).
        """
        indices = element.global_dof_indices()
        k_local = element.k

        for a, row in enumerate(indices):
            if row in self.fixed_dofs:
                continue
            k_row = self.K[row]
            for b, col in enumerate(indices):
                if col in self.fixed_dofs:
                    continue
                k_row[col] = k_row.get(col, 0.0) + float(k_local[a, b])

    def apply_force(self, node_index: int, fx: float, fy: float) -> None:
        """Accumulate a nodal force. Components on fixed DOFs are ignored."""
        dof_x = 2 * node_index
        dof_y = 2 * node_index + 1

        if dof_x not in self.fixed_dofs:
            self.F[dof_x] += fx
        if dof_y not in self.fixed_dofs:
            self.F[dof_y] += fy

    def fix_node(self, node_index: int) -> None:
        """Constrain both DOFs of a node."""
        self.fixed_dofs.add(2 * node_index)
        self.fixed_dofs.add(2 * node_index + 1)

    def fix_dof(self, node_index: int, axis: str) -> None:
        """
        Constrain a single DOF of a node.

        Args:
            node_index: Node to constrain.
            axis: "x" or "y".

        Raises:
            ValueError: If axis is not "x" or "y".
        """
        if axis not in AXES:
            raise ValueError(f"Unknown DOF axis '{axis}'. Use 'x' or 'y'.")
        self.fixed_dofs.add(2 * node_index + AXES[axis])

    def to_dense(self) -> np.ndarray:
        """Copy K into a dense (n_dof, n_dof) array."""
        dense = np.zeros((self.n_dof, self.n_dof))
        for i, row in self.K.items():
            for j, value in row.items():
                dense[i, j] = value
        return dense

    def sparsity(self) -> SparsityInfo:
        """Count stored entries against the full matrix size."""
        non_zero = sum(len(row) for row in self.K.values())
        total = self.n_dof * self.n_dof
        sparsity = 100.0 * (1.0 - non_zero / total) if total else 100.0
        return SparsityInfo(non_zero=non_zero, total=total, sparsity=sparsity)
