"""
visualization/history_plot.py
==============================
Plots strain statistics over a progressive loading run.

Three subplots in one figure:
  1. Max |strain| vs step, with the yield strain of the weakest bar
  2. Total strain energy, dropping whenever bars break
  3. Failed element count, the progressive failure staircase

Collapse is marked with a red dashed line on all subplots.

Consumed by main.py after runner.run() completes.
"""

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from core.models import SimulationResult


def plot_history(
    result: SimulationResult,
    yield_strain: float | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> plt.Figure:
    """
    Render the strain history figure for a completed simulation.

    Args:
        result: Completed SimulationResult from runner.run().
        yield_strain: Optional reference line on the strain subplot.
        show: Whether to call plt.show() immediately.
        save_path: If provided, saves figure to this path.

    Returns:
        matplotlib Figure object.
    """
    steps = [r.step for r in result.history]
    max_strain = [r.stats.max_strain for r in result.history]
    energy = [r.stats.total_strain_energy for r in result.history]
    failed = [r.stats.failed_count for r in result.history]

    fig, axes = plt.subplots(3, 1, figsize=(10, 9), sharex=True)
    fig.suptitle(f"Strain History — {result.truss_name}", fontsize=13, fontweight="bold")

    ax_strain, ax_energy, ax_failed = axes

    ax_strain.plot(steps, max_strain, color="steelblue", linewidth=2)
    if yield_strain is not None:
        ax_strain.axhline(yield_strain, color="steelblue", linestyle=":", linewidth=1,
                          alpha=0.6, label="Yield strain")
    ax_strain.set_ylabel("max |ε|", fontsize=10)
    ax_strain.set_title("Maximum Strain", fontsize=10)
    ax_strain.grid(True, alpha=0.3)

    ax_energy.plot(steps, energy, color="darkorange", linewidth=2)
    ax_energy.set_ylabel("U (J)", fontsize=10)
    ax_energy.set_title("Total Strain Energy", fontsize=10)
    ax_energy.grid(True, alpha=0.3)

    ax_failed.step(steps, failed, where="post", color="firebrick", linewidth=2)
    ax_failed.set_ylabel("Failed", fontsize=10)
    ax_failed.set_xlabel("Simulation Step", fontsize=10)
    ax_failed.set_title("Failed Elements", fontsize=10)
    ax_failed.grid(True, alpha=0.3)

    if result.collapse_detected and result.collapse_step is not None:
        for ax in axes:
            ax.axvline(result.collapse_step, color="red", linewidth=1.8,
                       linestyle="--", alpha=0.85)

    _add_legend(ax_strain, result.collapse_detected)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150)
    elif show:
        plt.show()

    return fig


def _add_legend(ax, collapse_detected: bool):
    """Collapse status patch plus any labelled reference lines."""
    status = "Collapse Detected" if collapse_detected else "No Collapse"
    color = "red" if collapse_detected else "green"
    handles, _ = ax.get_legend_handles_labels()
    handles.append(mpatches.Patch(color=color, label=status))
    ax.legend(handles=handles, loc="upper left", fontsize=9)
