"""Linear-program solving core of the optimization workbench."""

from pydantic import ValidationError

from .builder import ProblemBuilder
from .geometry import GeometryError, compute_feasible_region
from .lp import InconsistentBoundsError, diagnose_infeasibility, simplex_solve, solve
from .schemas import (
    Bound,
    Constraint,
    FeasibleRegion,
    InfeasibilityReport,
    Objective,
    PlotExtent,
    Point,
    Problem,
    SensitivityAnalysis,
    Solution,
    SolveFailure,
    SolveOptions,
)

__all__ = [
    "Bound",
    "Constraint",
    "FeasibleRegion",
    "GeometryError",
    "InconsistentBoundsError",
    "InfeasibilityReport",
    "Objective",
    "PlotExtent",
    "Point",
    "Problem",
    "ProblemBuilder",
    "SensitivityAnalysis",
    "Solution",
    "SolveFailure",
    "SolveOptions",
    "ValidationError",
    "compute_feasible_region",
    "diagnose_infeasibility",
    "simplex_solve",
    "solve",
]
