"""
structure/frames/frame_grid.py
==============================
A dense braced grid, the starting point for structural optimization.

15 x 10 nodes on a 1 m lattice. Every cell has its horizontal, vertical
and both diagonal bars, so the optimizer has plenty of redundant members
to prune. The two bottom corners are pinned; a point load hangs at the
centre of the grid and lighter loads at the top quarter points.

Node numbering is row-major from the top row: node = row * GRID_WIDTH + col,
with row 0 at the top (y = (GRID_HEIGHT - 1) * CELL).
"""

from core.models import TrussData, Node, Load, STEEL, with_area
from structure.element import BarElement


GRID_WIDTH = 15
GRID_HEIGHT = 10
CELL = 1.0             # m
LOAD_FORCE = -50_000.0  # N, downward

CHORD_MAT = with_area(STEEL, 0.008)
DIAGONAL_MAT = with_area(STEEL, 0.006)


def build(width: int = GRID_WIDTH, height: int = GRID_HEIGHT) -> TrussData:
    """
    Construct the grid truss.

    Args:
        width: Nodes per row (at least 4).
        height: Nodes per column (at least 2).

    Returns:
        TrussData with width * height nodes.
    """
    nodes = []
    for row in range(height):
        for col in range(width):
            bottom_corner = row == height - 1 and col in (0, width - 1)
            nodes.append(Node(x=col * CELL, y=(height - 1 - row) * CELL, fixed=bottom_corner))

    elements = []
    for row in range(height):
        for col in range(width):
            idx = row * width + col
            if col < width - 1:
                elements.append(BarElement.from_material(idx, idx + 1, nodes, CHORD_MAT))
            if row < height - 1:
                elements.append(BarElement.from_material(idx, idx + width, nodes, CHORD_MAT))
            if col < width - 1 and row < height - 1:
                elements.append(BarElement.from_material(idx, idx + width + 1, nodes, DIAGONAL_MAT))
            if col > 0 and row < height - 1:
                elements.append(BarElement.from_material(idx, idx + width - 1, nodes, DIAGONAL_MAT))

    centre = (height // 2) * width + width // 2
    quarter = width // 4
    loads = [
        Load(node=centre, fy=LOAD_FORCE),
        Load(node=quarter, fy=0.3 * LOAD_FORCE),
        Load(node=width - quarter - 1, fy=0.3 * LOAD_FORCE),
    ]

    return TrussData(
        name=f"Braced Grid ({width}x{height})",
        nodes=nodes,
        elements=elements,
        loads=loads,
    )
