from typing import List, Optional

from .simplex import simplex_solve
from .standard_form import InconsistentBoundsError, resolve_bounds
from ..schemas import InfeasibilityReport, Problem, SolveOptions


def diagnose_infeasibility(problem: Problem, options: Optional[SolveOptions] = None) -> InfeasibilityReport:
    """Very small IIS-style heuristic: drop each constraint and re-solve."""

    opts = options or SolveOptions()
    try:
        resolve_bounds(problem)
    except InconsistentBoundsError as exc:
        return InfeasibilityReport(
            status="infeasible",
            message=str(exc),
            suggestions=["Check variable bounds and ensure lower <= upper."],
        )

    solution = simplex_solve(problem, opts)
    if solution.status != "infeasible":
        message = "Model is not infeasible." if solution.success else solution.message
        return InfeasibilityReport(status=solution.status, message=message)

    labels = problem.constraint_names()
    conflicts: List[str] = []
    for idx, label in enumerate(labels):
        trimmed = problem.constraints[:idx] + problem.constraints[idx + 1 :]
        relaxed = problem.model_copy(update={"constraints": trimmed})
        if simplex_solve(relaxed, opts).status != "infeasible":
            conflicts.append(label)

    suggestions = []
    if conflicts:
        suggestions.append("Relax or inspect the conflicting constraints above.")
    else:
        suggestions.append("Consider relaxing bounds or checking for contradictory requirements.")

    return InfeasibilityReport(
        status="infeasible",
        message="Detected infeasibility; listed constraints critical to infeasibility.",
        conflicting_constraints=conflicts,
        suggestions=suggestions,
    )
