"""
core/config.py
==============
Numerical settings shared by the element kernel and the linear solver.

The defaults are the values the engine has always run with. They are kept in
one frozen dataclass so a test or driver can try a different penalty or pivot
tolerance without touching module globals.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SolverConfig:
    """
    Tunable constants for one solve.

    Attributes:
        penalty (float): Diagonal value written into every fixed DOF row.
                         Must dominate the largest assembled stiffness.
        pivot_tolerance (float): Pivots (and back-substitution diagonals)
                                 below this magnitude are skipped and the
                                 DOF resolves to 0.
        min_length (float): Element lengths below this are clamped before
                            being used as a divisor.
        mechanism_tolerance (float): A pivot smaller than this fraction of
                                     the largest free diagonal of K marks
                                     its DOF as indeterminate. The DOF is
                                     still solved; only the report changes.
    """
    penalty: float = 1e20
    pivot_tolerance: float = 1e-12
    min_length: float = 1e-6
    mechanism_tolerance: float = 1e-10


DEFAULT_CONFIG = SolverConfig()
