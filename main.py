"""
main.py
=======
Entry point for the truss strain simulator.

Usage:
    python main.py                              # pratt_bridge, scenario defaults
    python main.py crane_tower
    python main.py grid --steps 50 --load-step 2.0
    python main.py grid --optimize              # prune/reinforce instead of overloading
    python main.py --list

Without --steps / --load-step each scenario uses its own schedule. With
--optimize, --steps caps the number of optimizer generations (default 20).
"""

import argparse
import logging
import os

from simulation.scenarios import SCENARIOS
from simulation.runner import run
from simulation.optimizer import optimize, mass_reduction
from visualization.graph_view import plot_truss, plot_failure_sequence
from visualization.history_plot import plot_history


logger = logging.getLogger(__name__)

DEFAULT_GENERATIONS = 20


def main(argv=None):
    """
    Run one scenario from the command line and show or save its figures.

    A progressive run produces the final heat-map, the failure order (when
    anything broke) and the strain history. An optimizer run produces the
    heat-map of the pruned truss.
    """
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        width = max(len(name) for name in SCENARIOS)
        for name, scenario in SCENARIOS.items():
            print(f"{name:<{width}}  {scenario.description}")
        return

    if args.save:
        os.makedirs(args.output_dir, exist_ok=True)
        logger.info("Writing figures to %s", args.output_dir)

    scenario = SCENARIOS[args.scenario]
    truss = scenario.frame.build()

    if args.optimize:
        figures = _run_optimizer(truss, args.steps or DEFAULT_GENERATIONS)
    else:
        figures = _run_progressive(
            truss,
            max_steps=args.steps or scenario.max_steps,
            load_factor_step=args.load_step or scenario.load_factor_step,
        )

    for filename, draw in figures:
        path = os.path.join(args.output_dir, filename) if args.save else None
        draw(show=not args.save, save_path=path)


def _run_progressive(truss, max_steps, load_factor_step):
    """Overload the truss step by step; returns (filename, draw) pairs."""
    print(f"{truss.name}: up to {max_steps} steps, load factor +{load_factor_step} per step")

    result = run(truss, max_steps=max_steps, load_factor_step=load_factor_step)
    final = result.history[-1]

    print(f"  steps run   {len(result.history)}")
    print(f"  final load  x{final.load_factor:.2f}")
    print(f"  failed      {final.stats.failed_count} of {len(truss.elements)}")
    if result.collapse_detected:
        print(f"  COLLAPSE at step {result.collapse_step}")
    if result.failed_sequence:
        print(f"  order       {result.failed_sequence}")

    figures = [("truss_final.png", lambda **kw: plot_truss(truss, final, **kw))]
    if result.failed_sequence:
        figures.append(
            ("failure_sequence.png",
             lambda **kw: plot_failure_sequence(truss, result.failed_sequence, **kw))
        )
    weakest = min(element.yield_strain for element in truss.elements)
    figures.append(
        ("strain_history.png", lambda **kw: plot_history(result, yield_strain=weakest, **kw))
    )
    return figures


def _run_optimizer(truss, max_generations):
    """Prune and reinforce until nothing changes; returns (filename, draw) pairs."""
    print(f"{truss.name}: optimizing for up to {max_generations} generations")

    initial_count = len(truss.elements)
    results = optimize(truss, max_generations=max_generations)
    final = results[-1]

    print(f"  generations {final.generation}")
    print(f"  elements    {len(truss.elements)} of {initial_count} "
          f"({mass_reduction(initial_count, truss):.1f}% removed)")
    print(f"  max strain  {final.step_result.stats.max_strain:.3e}")

    return [("optimized_truss.png", lambda **kw: plot_truss(truss, final.step_result, **kw))]


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="2D truss strain and failure simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "scenario", nargs="?", default="pratt_bridge", choices=list(SCENARIOS),
        help="Scenario to run (default: pratt_bridge)",
    )
    parser.add_argument(
        "--steps", type=int, default=None,
        help="Maximum load steps, or optimizer generations with --optimize",
    )
    parser.add_argument(
        "--load-step", type=float, default=None,
        help="Load factor increment per step",
    )
    parser.add_argument(
        "--optimize", action="store_true",
        help="Prune and reinforce the truss instead of overloading it",
    )
    parser.add_argument(
        "--save", action="store_true",
        help="Write figures to --output-dir instead of opening windows",
    )
    parser.add_argument(
        "--output-dir", default="output_figures",
        help="Directory for saved figures (default: output_figures)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log element failures and indeterminate DOFs",
    )
    parser.add_argument(
        "--list", action="store_true",
        help="List scenarios and exit",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
