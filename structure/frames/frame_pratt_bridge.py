"""
structure/frames/frame_pratt_bridge.py
=======================================
Defines a Pratt truss bridge for progressive failure simulation.

Geometry (6-panel Pratt truss):

    Top chord:    T0---T1---T2---T3---T4---T5---T6
                  |  / |  / |  / |  / |  / |  / |
    Bot chord:    B0---B1---B2---B3---B4---B5---B6

    Panel width  : 5.0 m
    Truss height : 4.0 m
    Total span   : 30.0 m

Node numbering:
    Bottom chord: nodes 0–6  (y = 0.0)
    Top chord:    nodes 7–13 (y = 4.0)

Element layout:
    Bottom chords : B0-B1 ... B5-B6   (elements 0–5)
    Top chords    : T0-T1 ... T5-T6   (elements 6–11)
    Verticals     : B0-T0 ... B6-T6   (elements 12–18)
    Diagonals     : B1-T0 ... B6-T5   (elements 19–24)

Supports:
    B0 (node 0): pinned, both DOFs fixed
    B6 (node 6): roller, uy fixed, free to slide horizontally

Load:
    Traffic as point loads along the bottom chord: -100 kN at B1–B5,
    -50 kN at B0 and B6 (those land on supports and are dropped).

14 nodes, 25 bars and 3 reaction components: statically determinate.
"""

from core.models import TrussData, Node, Load, STEEL, with_area
from structure.element import BarElement


# ---------------------------------------------------------------------------
# Bridge geometry constants
# ---------------------------------------------------------------------------

PANEL_WIDTH = 5.0    # m
TRUSS_HEIGHT = 4.0   # m
N_PANELS = 6
N_NODES_CHORD = N_PANELS + 1

PANEL_LOAD = -100_000.0  # N, downward

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

BOTTOM_CHORD_MAT = with_area(STEEL, 0.0155)
TOP_CHORD_MAT = with_area(STEEL, 0.0123)
VERTICAL_MAT = with_area(STEEL, 0.0066)
DIAGONAL_MAT = with_area(STEEL, 0.0114)


def build() -> TrussData:
    """
    Construct and return the Pratt bridge.

    Returns:
        TrussData with 14 nodes, 25 elements, pinned/roller supports
        and point loads along the bottom chord.
    """
    nodes = _define_nodes()
    return TrussData(
        name="Pratt Truss Bridge (6-panel, 30m span)",
        nodes=nodes,
        elements=_define_elements(nodes),
        loads=_define_loads(),
        fixed_dofs=[(N_PANELS, "y")],
    )


def _define_nodes() -> list[Node]:
    """Bottom chord nodes 0–6 at y=0, then top chord nodes 7–13."""
    nodes = []
    for i in range(N_NODES_CHORD):
        nodes.append(Node(x=i * PANEL_WIDTH, y=0.0, fixed=(i == 0)))
    for i in range(N_NODES_CHORD):
        nodes.append(Node(x=i * PANEL_WIDTH, y=TRUSS_HEIGHT))
    return nodes


def _define_elements(nodes) -> list[BarElement]:
    """Chords, verticals and Pratt diagonals, in the order listed above."""
    elements = []
    top = N_NODES_CHORD  # index offset of the top chord

    for i in range(N_PANELS):
        elements.append(BarElement.from_material(i, i + 1, nodes, BOTTOM_CHORD_MAT))

    for i in range(N_PANELS):
        elements.append(BarElement.from_material(top + i, top + i + 1, nodes, TOP_CHORD_MAT))

    for i in range(N_NODES_CHORD):
        elements.append(BarElement.from_material(i, top + i, nodes, VERTICAL_MAT))

    # Each diagonal runs from the right bottom node of a panel to its left top node
    for i in range(N_PANELS):
        elements.append(BarElement.from_material(i + 1, top + i, nodes, DIAGONAL_MAT))

    return elements


def _define_loads() -> list[Load]:
    """Full panel load at interior bottom nodes, half load at the ends."""
    loads = []
    for i in range(N_NODES_CHORD):
        if i == 0 or i == N_PANELS:
            loads.append(Load(node=i, fy=PANEL_LOAD / 2))
        else:
            loads.append(Load(node=i, fy=PANEL_LOAD))
    return loads
