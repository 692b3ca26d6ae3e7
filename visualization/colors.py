"""
visualization/colors.py
=======================
Maps stress ratios and strains to drawing styles.

Heat-map contract (stress ratio = |sigma| / sigma_y):

    0.00  cyan    (0, 229, 255)
    0.25  green   (0, 255, 0)
    0.50  yellow  (255, 255, 0)
    0.75  orange  (255, 136, 0)
    1.00  red     (255, 0, 0)
    >1.0  magenta (255, 0, 255), alpha flashing between 1.0 and 0.5

Colours are interpolated linearly within each quarter. This is a display
rule only; nothing in the solver reads it.
"""

import math
import time


BASE_LINE_WIDTH = 2.0
LINE_WIDTH_SCALE = 20.0


def heatmap_rgba255(stress_ratio: float, t: float | None = None) -> tuple[int, int, int, float]:
    """
    Heat-map colour as integer RGB channels plus alpha.

    Args:
        stress_ratio: |stress| / yield stress.
        t: Time in seconds driving the overload flash. Defaults to now.

    Returns:
        (r, g, b, alpha) with channels in 0..255 and alpha in 0..1.
    """
    if stress_ratio > 1.0:
        if t is None:
            t = time.time()
        alpha = 1.0 if math.sin(t * 10.0) > 0 else 0.5
        return 255, 0, 255, alpha

    ratio = min(max(stress_ratio, 0.0), 1.0)

    if ratio < 0.25:
        local = ratio / 0.25
        r, g, b = 0.0, 229 + (255 - 229) * local, 255 * (1 - local)
    elif ratio < 0.5:
        local = (ratio - 0.25) / 0.25
        r, g, b = 255 * local, 255.0, 0.0
    elif ratio < 0.75:
        local = (ratio - 0.5) / 0.25
        r, g, b = 255.0, 255 - 119 * local, 0.0
    else:
        local = (ratio - 0.75) / 0.25
        r, g, b = 255.0, 136 * (1 - local), 0.0

    return int(r), int(g), int(b), 1.0


def heatmap_color(stress_ratio: float, t: float | None = None) -> tuple[float, float, float, float]:
    """Heat-map colour as a matplotlib RGBA tuple in 0..1."""
    r, g, b, alpha = heatmap_rgba255(stress_ratio, t)
    return r / 255.0, g / 255.0, b / 255.0, alpha


def line_width(strain: float) -> float:
    """Line width growing with |strain|."""
    return BASE_LINE_WIDTH + abs(strain) * LINE_WIDTH_SCALE
