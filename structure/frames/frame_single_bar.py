"""
structure/frames/frame_single_bar.py
====================================
A single steel bar under axial tension, for validation by hand.

Geometry:

    Node 0 ================ Node 1  --> F = 1 MN
    (0, 0)                  (1, 0)
    fixed

Material: Steel (E = 200 GPa, A = 0.01 m², sigma_y = 250 MPa)

Expected at load factor 1:
    tip displacement u = F L / (E A) = 5e-4 m
    stress           = E u / L      = 1e8 Pa   (stress ratio 0.4)

The bar breaks once the load factor passes 2.5.
"""

from core.models import TrussData, Node, Load, STEEL
from structure.element import BarElement


LENGTH = 1.0        # m
TIP_FORCE = 1.0e6   # N


def build() -> TrussData:
    """
    Construct the single-bar truss.

    Returns:
        TrussData with 2 nodes, 1 element and one axial tip load.
    """
    nodes = [
        Node(x=0.0, y=0.0, fixed=True),
        Node(x=LENGTH, y=0.0),
    ]
    elements = [BarElement.from_material(0, 1, nodes, STEEL)]

    return TrussData(
        name="Single Steel Bar",
        nodes=nodes,
        elements=elements,
        loads=[Load(node=1, fx=TIP_FORCE, fy=0.0)],
    )
