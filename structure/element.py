"""
structure/element.py
====================
Two-node axial bar element for 2D trusses.

The element stores only the indices of its end nodes. Every method that
needs coordinates receives the caller's node list, so drivers are free to
move or rotate nodes between steps. The one geometric quantity frozen at
construction is the original length L0, which stays the strain reference
for the element's whole life.

Local stiffness in global coordinates (c = cos, s = sin of the bar angle):

    k = (E A / L) * [[ c²,  cs, -c², -cs],
                     [ cs,  s², -cs, -s²],
                     [-c², -cs,  c²,  cs],
                     [-cs, -s²,  cs,  s²]]

Consumed by structure/stiffness.py (scatter) and solver/failure.py (strain).
"""

import math

import numpy as np

from core.config import DEFAULT_CONFIG
from core.models import Material


class BarElement:
    """
    Pin-jointed bar carrying axial force only.

    Attributes:
        n1, n2 (int): Indices of the start and end nodes.
        E (float): Young's modulus in Pa.
        A (float): Cross-sectional area in m².
        sigma_y (float): Yield stress in Pa.
        yield_strain (float): sigma_y / E.
        length (float): Current length, refreshed by refresh_geometry().
        c, s (float): Direction cosines of the current geometry.
        original_length (float): As-built length L0. Never recomputed.
        k (np.ndarray): Cached 4x4 stiffness in global coordinates.
        strain, stress (float): Values from the last evaluate_strain() call.
        failed (bool): Brittle failure flag. Once True, stays True.
    """

    def __init__(self, n1: int, n2: int, nodes, E: float = 200e9, A: float = 0.01,
                 sigma_y: float = 250e6, min_length: float = DEFAULT_CONFIG.min_length):
        self.n1 = n1
        self.n2 = n2

        self.E = E
        self.A = A
        self.sigma_y = sigma_y
        self.yield_strain = sigma_y / E
        self.min_length = min_length

        self.failed = False
        self.strain = 0.0
        self.stress = 0.0

        self.length = 0.0
        self.c = 0.0
        self.s = 0.0
        self.k = np.zeros((4, 4))

        self.refresh_geometry(nodes)
        self.original_length = self.length

    @classmethod
    def from_material(cls, n1: int, n2: int, nodes, material: Material) -> "BarElement":
        """Build an element from a Material preset."""
        return cls(n1, n2, nodes, E=material.E, A=material.A, sigma_y=material.sigma_y)

    def __repr__(self):
        state = "failed" if self.failed else "intact"
        return f"BarElement({self.n1}->{self.n2}, E={self.E:.3g}, A={self.A:.3g}, {state})"

    # -----------------------------------------------------------------------
    # Geometry and stiffness
    # -----------------------------------------------------------------------

    def refresh_geometry(self, nodes, min_length: float | None = None) -> np.ndarray:
        """
        Recompute length, direction cosines and the 4x4 stiffness matrix
        from the current node positions.

        Must run before every assembly pass since nodes may have moved.
        Lengths shorter than ``min_length`` are raised to it so coincident
        nodes never divide by zero.

        Args:
            nodes: Caller-owned node list indexed by n1 / n2.
            min_length: Length clamp for this refresh. Defaults to the
                        value the element was built with.

        Returns:
            The refreshed stiffness matrix (also cached on ``self.k``).
        """
        dx = nodes[self.n2].x - nodes[self.n1].x
        dy = nodes[self.n2].y - nodes[self.n1].y
        if min_length is None:
            min_length = self.min_length
        self.length = max(math.hypot(dx, dy), min_length)

        self.c = dx / self.length
        self.s = dy / self.length

        c2 = self.c * self.c
        s2 = self.s * self.s
        cs = self.c * self.s
        block = np.array([[c2, cs],
                          [cs, s2]])

        self.k = (self.E * self.A / self.length) * np.block([[block, -block],
                                                             [-block, block]])
        return self.k

    def global_dof_indices(self) -> tuple:
        """The four global DOFs addressed by ``k``, in its row/column order."""
        return (2 * self.n1, 2 * self.n1 + 1, 2 * self.n2, 2 * self.n2 + 1)

    # -----------------------------------------------------------------------
    # Strain, stress and failure
    # -----------------------------------------------------------------------

    def evaluate_strain(self, nodes, displacements) -> float:
        """
        Update strain and stress from a solved displacement vector.

        Deformed end positions are the node coordinates plus their
        displacements. Strain is engineering strain against the original
        length. If |stress| exceeds the yield stress the element fails;
        this is the only place the failure flag is ever set.

        Args:
            nodes: Caller-owned node list.
            displacements: Global displacement vector (ux0, uy0, ux1, ...).

        Returns:
            The new strain.
        """
        u1x, u1y, u2x, u2y = (_component(displacements, i) for i in self.global_dof_indices())

        dx_new = (nodes[self.n2].x + u2x) - (nodes[self.n1].x + u1x)
        dy_new = (nodes[self.n2].y + u2y) - (nodes[self.n1].y + u1y)
        length_new = math.hypot(dx_new, dy_new)

        self.strain = (length_new - self.original_length) / self.original_length
        self.stress = self.E * self.strain

        if abs(self.stress) > self.sigma_y and not self.failed:
            self.failed = True

        return self.strain

    def strain_energy(self) -> float:
        """0.5 * E * strain² * A * L0, or 0 once failed."""
        if self.failed:
            return 0.0
        return 0.5 * self.E * self.strain * self.strain * self.A * self.original_length

    def stress_ratio(self) -> float:
        """|stress| / yield stress. Values >= 1 mean the bar has broken."""
        return abs(self.stress) / self.sigma_y

    def axial_force(self) -> float:
        """Axial force in N (positive = tension)."""
        return self.stress * self.A


def _component(displacements, index: int) -> float:
    """Displacement entry, or 0 for a vector shorter than the mesh."""
    if index < len(displacements):
        return float(displacements[index])
    return 0.0
