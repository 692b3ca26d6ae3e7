"""
tests/test_phase7_visualization.py
====================================
Phase 7: Heat-map colour rules and smoke tests for the plots. No window
is opened; figures are saved to a temp directory and then deleted.

Checks:
  - Heat-map breakpoints, interpolation and the overload flash
  - Line width grows with |strain|
  - plot_truss(), plot_failure_sequence() and plot_history() write files
"""

import sys
import os
import math
import tempfile
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend, no window
import matplotlib.pyplot as plt

from structure.frames import frame_single_bar, frame_pratt_bridge
from simulation.runner import run, step
from visualization.colors import heatmap_rgba255, heatmap_color, line_width
from visualization.graph_view import plot_truss, plot_failure_sequence
from visualization.history_plot import plot_history


def test_heatmap_breakpoints():
    """Cyan, green, yellow, orange and red at the quarter marks."""
    assert heatmap_rgba255(0.0) == (0, 229, 255, 1.0)
    assert heatmap_rgba255(0.25) == (0, 255, 0, 1.0)
    assert heatmap_rgba255(0.5) == (255, 255, 0, 1.0)
    assert heatmap_rgba255(0.75) == (255, 136, 0, 1.0)
    assert heatmap_rgba255(1.0) == (255, 0, 0, 1.0)
    print("  PASS: Heat-map breakpoints")


def test_heatmap_interpolates():
    """Midway between breakpoints the channels are truncated linear blends."""
    assert heatmap_rgba255(0.125) == (0, 242, 127, 1.0)
    assert heatmap_rgba255(0.375) == (127, 255, 0, 1.0)
    assert heatmap_rgba255(0.875) == (255, 68, 0, 1.0)
    print("  PASS: Heat-map interpolation")


def test_heatmap_overload_flash():
    """Above yield the colour is magenta, alpha toggling with time."""
    bright = heatmap_rgba255(1.5, t=math.pi / 20)    # sin(pi / 2) > 0
    dim = heatmap_rgba255(1.5, t=3 * math.pi / 20)   # sin(3 pi / 2) < 0
    assert bright == (255, 0, 255, 1.0)
    assert dim == (255, 0, 255, 0.5)
    r, g, b, alpha = heatmap_rgba255(2.0)
    assert (r, g, b) == (255, 0, 255) and alpha in (0.5, 1.0)
    print("  PASS: Overload flash")


def test_heatmap_color_normalised():
    """heatmap_color() is the same colour scaled to 0..1."""
    r, g, b, alpha = heatmap_color(0.0)
    assert (r, g, b, alpha) == (0.0, 229 / 255, 1.0, 1.0)
    print("  PASS: heatmap_color()")


def test_line_width():
    """2 + 20 |strain|, symmetric in sign."""
    assert line_width(0.0) == 2.0
    assert math.isclose(line_width(0.05), 3.0)
    assert line_width(-0.05) == line_width(0.05)
    print("  PASS: line_width()")


def test_plot_truss_saves_file():
    """plot_truss() saves a PNG for a solved Pratt bridge."""
    truss = frame_pratt_bridge.build()
    result = step(truss.nodes, truss.elements, truss.loads, fixed_dofs=truss.fixed_dofs)

    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "truss_test.png")
        fig = plot_truss(truss, result, show=False, save_path=path)
        assert os.path.exists(path), "Truss plot file was not created"
        assert fig is not None
        plt.close(fig)
    print("  PASS: plot_truss() saved")


def test_plot_truss_undeformed():
    """plot_truss() without a step draws the bare geometry."""
    truss = frame_single_bar.build()
    fig = plot_truss(truss, show=False)
    assert len(fig.axes) == 2  # truss + colorbar
    plt.close(fig)
    print("  PASS: plot_truss() undeformed")


def test_failure_plots_save_files():
    """Failure sequence and history plots save PNGs after a collapse."""
    truss = frame_single_bar.build()
    result = run(truss, max_steps=20, load_factor_step=0.25)

    with tempfile.TemporaryDirectory() as tmpdir:
        seq_path = os.path.join(tmpdir, "sequence.png")
        fig = plot_failure_sequence(truss, result.failed_sequence, show=False, save_path=seq_path)
        assert os.path.exists(seq_path), "Failure sequence file was not created"
        plt.close(fig)

        hist_path = os.path.join(tmpdir, "history.png")
        fig = plot_history(result, yield_strain=truss.elements[0].yield_strain,
                           show=False, save_path=hist_path)
        assert os.path.exists(hist_path), "History plot file was not created"
        assert len(fig.axes) == 3
        plt.close(fig)
    print("  PASS: Failure sequence and history plots saved")


if __name__ == "__main__":
    print("=== Phase 7: Visualization ===")
    test_heatmap_breakpoints()
    test_heatmap_interpolates()
    test_heatmap_overload_flash()
    test_heatmap_color_normalised()
    test_line_width()
    test_plot_truss_saves_file()
    test_plot_truss_undeformed()
    test_failure_plots_save_files()
    print("All Phase 7 tests passed.\n")
