"""
structure/frames/frame_crane_tower.py
=====================================
A lattice tower crane: braced mast with a cantilevered jib.

Geometry:

              T0---T1---T2---T3
             /|  / |  / |  / | \\
    L6---R6==B0---B1---B2---B3---B4  <- hook load at the jib tip
    | \\/ |
    | /\\ |     mast: 6 X-braced panels, 2 m wide, 3 m high
    L0   R0    both base nodes fixed

Node numbering:
    Mast:  level j has left node 2j and right node 2j + 1 (j = 0..6)
    Jib:   top chord T0..T3 and bottom chord B1..B4 appended after the mast,
           with B0 being the top-right mast node R6

Loads:
    Hook load at the jib tip, its own weight spread over the bottom chord
    and a light wind push on the windward mast column.

Sections follow a real tower crane: heavy legs and base braces, lighter
panel diagonals, and a jib that tapers toward the tip.
"""

from core.models import TrussData, Node, Load, STEEL, with_area
from structure.element import BarElement


# ---------------------------------------------------------------------------
# Geometry constants
# ---------------------------------------------------------------------------

MAST_WIDTH = 2.0
PANEL_HEIGHT = 3.0
N_MAST_PANELS = 6
JIB_PANEL = 3.0
JIB_DEPTH = 2.0
N_JIB_PANELS = 4

HOOK_LOAD = -150_000.0      # N
JIB_SELF_WEIGHT = -5_000.0  # N per bottom chord node
WIND_LOAD = 2_000.0         # N per windward mast node

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

LEG_MAT = with_area(STEEL, 0.015)
HORIZONTAL_MAT = with_area(STEEL, 0.012)
BRACE_MAT = with_area(STEEL, 0.008)
JIB_CHORD_MAT = with_area(STEEL, 0.012)
JIB_WEB_MAT = with_area(STEEL, 0.006)
TIE_MAT = with_area(STEEL, 0.01)


def build() -> TrussData:
    """
    Construct the crane.

    Returns:
        TrussData with a fixed base, mast, jib and hook load.
    """
    nodes = _mast_nodes()
    elements = _mast_elements(nodes)
    jib_top, jib_bottom = _add_jib(nodes, elements)

    return TrussData(
        name="Tower Crane",
        nodes=nodes,
        elements=elements,
        loads=_define_loads(jib_bottom),
    )


def _mast_nodes() -> list[Node]:
    nodes = []
    for j in range(N_MAST_PANELS + 1):
        y = j * PANEL_HEIGHT
        nodes.append(Node(x=0.0, y=y, fixed=(j == 0)))
        nodes.append(Node(x=MAST_WIDTH, y=y, fixed=(j == 0)))
    return nodes


def _mast_elements(nodes) -> list[BarElement]:
    """Legs, level horizontals and X bracing in every panel."""
    elements = []
    for j in range(1, N_MAST_PANELS + 1):
        prev_left, prev_right = 2 * (j - 1), 2 * (j - 1) + 1
        left, right = 2 * j, 2 * j + 1

        elements.append(BarElement.from_material(prev_left, left, nodes, LEG_MAT))
        elements.append(BarElement.from_material(prev_right, right, nodes, LEG_MAT))
        elements.append(BarElement.from_material(left, right, nodes, HORIZONTAL_MAT))

        brace = LEG_MAT if j == 1 else BRACE_MAT
        elements.append(BarElement.from_material(prev_left, right, nodes, brace))
        elements.append(BarElement.from_material(prev_right, left, nodes, brace))
    return elements


def _add_jib(nodes, elements) -> tuple[list[int], list[int]]:
    """
    Append the jib to the top of the mast.

    Returns:
        (top chord node indices, bottom chord node indices). The bottom
        chord list starts with the top-right mast node.
    """
    top_left = 2 * N_MAST_PANELS
    top_right = top_left + 1
    base_y = N_MAST_PANELS * PANEL_HEIGHT

    jib_top = []
    jib_bottom = [top_right]

    # Apex above the mast, tied back to both mast heads
    nodes.append(Node(x=MAST_WIDTH, y=base_y + JIB_DEPTH))
    apex = len(nodes) - 1
    jib_top.append(apex)
    elements.append(BarElement.from_material(top_left, apex, nodes, TIE_MAT))
    elements.append(BarElement.from_material(top_right, apex, nodes, TIE_MAT))

    for i in range(1, N_JIB_PANELS + 1):
        x = MAST_WIDTH + i * JIB_PANEL
        nodes.append(Node(x=x, y=base_y))
        bottom = len(nodes) - 1
        elements.append(BarElement.from_material(jib_bottom[-1], bottom, nodes, JIB_CHORD_MAT))
        elements.append(BarElement.from_material(jib_top[-1], bottom, nodes, JIB_WEB_MAT))
        jib_bottom.append(bottom)

        # The tip closes on the last diagonal, no top chord node above it
        if i < N_JIB_PANELS:
            nodes.append(Node(x=x, y=base_y + JIB_DEPTH))
            top = len(nodes) - 1
            elements.append(BarElement.from_material(jib_top[-1], top, nodes, JIB_CHORD_MAT))
            elements.append(BarElement.from_material(bottom, top, nodes, JIB_WEB_MAT))
            jib_top.append(top)

    return jib_top, jib_bottom


def _define_loads(jib_bottom: list[int]) -> list[Load]:
    loads = [Load(node=jib_bottom[-1], fy=HOOK_LOAD)]
    for node in jib_bottom[1:-1]:
        loads.append(Load(node=node, fy=JIB_SELF_WEIGHT))
    for j in range(1, N_MAST_PANELS + 1):
        loads.append(Load(node=2 * j, fx=WIND_LOAD))
    return loads
