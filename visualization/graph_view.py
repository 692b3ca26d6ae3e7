"""
visualization/graph_view.py
============================
Renders a 2D truss with elements coloured by stress ratio.

Element colour follows the heat-map in visualization/colors.py (cyan for an
idle bar through red at yield, flashing magenta once exceeded), and line
width grows with |strain|. Failed elements are drawn as dashed grey lines.
Fixed nodes are drawn as black triangles.

The deformed shape is drawn with displacements magnified so millimetre
movements on a 30 m bridge are visible; the undeformed geometry is shown
faintly underneath.

Consumed by main.py.
"""

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
from matplotlib import cm

from core.models import TrussData, StepResult
from visualization.colors import heatmap_color, line_width


# Fraction of the truss size the largest displacement is scaled to
AUTO_MAGNIFICATION_TARGET = 0.05

HEATMAP_CMAP = mcolors.LinearSegmentedColormap.from_list(
    "stress_ratio",
    [(0.0, heatmap_color(0.0)), (0.25, heatmap_color(0.25)), (0.5, heatmap_color(0.5)),
     (0.75, heatmap_color(0.75)), (1.0, heatmap_color(1.0))],
)


def plot_truss(
    truss: TrussData,
    step_result: StepResult | None = None,
    magnification: float | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> plt.Figure:
    """
    Render the truss at one step with a stress-ratio heat-map.

    Args:
        truss: Truss geometry and elements (with their last strain/stress).
        step_result: Step to draw displacements and stats from. If None the
                     undeformed truss is drawn.
        magnification: Displacement scale factor. None picks one so the
                       largest displacement is visible; 0 draws undeformed.
        show: Whether to call plt.show() immediately.
        save_path: If provided, saves the figure to this path instead.

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(10, 7))

    positions = _node_positions(truss)
    deformed = positions
    if step_result is not None:
        scale = _magnification(positions, step_result.displacements, magnification)
        deformed = positions + scale * step_result.displacements.reshape(-1, 2)
        _draw_undeformed(ax, truss, positions)

    _draw_elements(ax, truss, deformed)
    _draw_nodes(ax, truss, deformed)
    _add_colorbar(fig, ax)
    _style_axes(ax, truss, step_result)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150)
    elif show:
        plt.show()

    return fig


def plot_failure_sequence(
    truss: TrussData,
    failed_sequence: list[int],
    show: bool = True,
    save_path: str | None = None,
) -> plt.Figure:
    """
    Render the truss with failed elements in red, numbered by failure
    order, and surviving elements in green.

    Args:
        truss: Truss geometry.
        failed_sequence: Element indices in the order they failed.
        show: Whether to call plt.show() immediately.
        save_path: Optional path to save the figure.

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(10, 7))
    positions = _node_positions(truss)
    order = {index: rank for rank, index in enumerate(failed_sequence, start=1)}

    for index, element in enumerate(truss.elements):
        xs, ys = _element_line(element, positions)
        if index in order:
            ax.plot(xs, ys, color="red", linewidth=2, linestyle="--")
            ax.text(np.mean(xs), np.mean(ys), str(order[index]), color="red", fontsize=8)
        else:
            ax.plot(xs, ys, color="green", linewidth=2)

    _draw_nodes(ax, truss, positions)
    ax.set_title("Failure Sequence (numbers = failure order)", fontsize=12)
    _set_axis_labels(ax)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150)
    elif show:
        plt.show()

    return fig


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _node_positions(truss: TrussData) -> np.ndarray:
    """Node coordinates as an (n, 2) array."""
    return np.array([[node.x, node.y] for node in truss.nodes], dtype=float).reshape(-1, 2)


def _magnification(positions: np.ndarray, displacements: np.ndarray, requested: float | None) -> float:
    if requested is not None:
        return requested
    max_disp = float(np.max(np.abs(displacements))) if len(displacements) else 0.0
    if max_disp == 0.0:
        return 0.0
    extent = float(np.ptp(positions, axis=0).max()) if len(positions) else 1.0
    return AUTO_MAGNIFICATION_TARGET * max(extent, 1.0) / max_disp


def _element_line(element, positions: np.ndarray):
    start = positions[element.n1]
    end = positions[element.n2]
    return [start[0], end[0]], [start[1], end[1]]


def _draw_undeformed(ax, truss, positions):
    for element in truss.elements:
        xs, ys = _element_line(element, positions)
        ax.plot(xs, ys, color="lightgrey", linewidth=1, zorder=1)


def _draw_elements(ax, truss, positions):
    """
    Draw elements coloured by stress ratio, width by strain.
    Failed elements are dashed grey.
    """
    for element in truss.elements:
        xs, ys = _element_line(element, positions)
        if element.failed:
            ax.plot(xs, ys, color="grey", linewidth=1, linestyle="--", alpha=0.5, zorder=2)
        else:
            ax.plot(
                xs, ys,
                color=heatmap_color(element.stress_ratio()),
                linewidth=line_width(element.strain),
                zorder=3,
            )


def _draw_nodes(ax, truss, positions):
    """Fixed nodes as black triangles, the rest as small blue dots."""
    fixed = set(truss.fixed_nodes) | {index for index, node in enumerate(truss.nodes) if node.fixed}
    for index, (x, y) in enumerate(positions):
        if index in fixed:
            ax.scatter(x, y, color="black", s=80, marker="^", zorder=5)
        else:
            ax.scatter(x, y, color="steelblue", s=15, zorder=4)


def _add_colorbar(fig, ax):
    sm = cm.ScalarMappable(cmap=HEATMAP_CMAP, norm=mcolors.Normalize(vmin=0.0, vmax=1.0))
    sm.set_array([])
    cbar = fig.colorbar(sm, ax=ax, shrink=0.7, pad=0.02)
    cbar.set_label("Stress ratio |σ| / σy", fontsize=9)


def _style_axes(ax, truss, step_result):
    if step_result is None:
        ax.set_title(truss.name, fontsize=11)
    else:
        stats = step_result.stats
        ax.set_title(
            f"{truss.name} — Step {step_result.step} (x{step_result.load_factor:.2f} load) | "
            f"max strain = {stats.max_strain:.2e} | "
            f"failed = {stats.failed_count}/{stats.failed_count + stats.active_element_count}",
            fontsize=10,
        )
    ax.set_aspect("equal", adjustable="datalim")
    _set_axis_labels(ax)


def _set_axis_labels(ax):
    ax.set_xlabel("X (m)")
    ax.set_ylabel("Y (m)")
