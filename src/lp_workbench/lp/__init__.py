"""Linear programming core: standard form, simplex engine and sensitivity analysis."""

from .simplex import simplex_solve, solve
from .standard_form import InconsistentBoundsError, build_standard_form
from .diagnostics import diagnose_infeasibility

__all__ = [
    "simplex_solve",
    "solve",
    "build_standard_form",
    "InconsistentBoundsError",
    "diagnose_infeasibility",
]
