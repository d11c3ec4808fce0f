import logging
import time

import numpy as np
from typing import Dict, Any, Mapping, Optional, Set, Union

from .standard_form import build_standard_form
from .tableau import Tableau
from .sensitivity import analyze_optimal_tableau
from ..schemas import Problem, SolveOptions, Solution, SolveFailure, SolveResult

logger = logging.getLogger(__name__)


def simplex_solve(problem: Union[Problem, Mapping[str, Any]], opts: Optional[SolveOptions] = None) -> SolveResult:
    """
    Two-phase primal simplex on a dense tableau, with an optional Big-M single phase.
    Returns a complete Solution or a SolveFailure, never anything in between.
    """

    if not isinstance(problem, Problem):
        problem = Problem.model_validate(problem)
    opts = opts or SolveOptions()
    start = time.perf_counter()

    try:
        A, b, c, meta, basis = build_standard_form(problem)
    except ValueError as exc:
        return _failure("infeasible", str(exc), 0, start)

    m, n = A.shape
    max_iters = opts.max_iters or max(50 * (m + n), 1)
    tableau = Tableau(A, b, basis, tol=opts.tol)
    artificial = set(meta["artificial_indices"])

    if opts.big_m is not None and artificial:
        first = _big_m_phase(tableau, c, artificial, opts, max_iters)
    else:
        first = _phase_I(tableau, artificial, opts, max_iters)
    iterations = first["iterations"]
    if first["status"] != "feasible":
        return _failure(first["status"], first["message"], iterations, start)

    second = _phase_II(tableau, c, artificial, opts, max(max_iters - iterations, 1))
    iterations += second["iterations"]
    if second["status"] != "optimal":
        return _failure(second["status"], second["message"], iterations, start)

    analysis = analyze_optimal_tableau(tableau, c, meta, problem, opts.tol)
    logger.debug("Optimal after %d pivots, objective %.6g", iterations, analysis["optimal_value"])

    return Solution(
        iterations=iterations,
        execution_time_ms=(time.perf_counter() - start) * 1000.0,
        **analysis,
    )


solve = simplex_solve


def _failure(status: str, message: str, iterations: int, start: float) -> SolveFailure:
    logger.debug("Solve ended %s after %d pivots: %s", status, iterations, message)
    return SolveFailure(
        status=status,
        message=message,
        iterations=iterations,
        execution_time_ms=(time.perf_counter() - start) * 1000.0,
    )


def _phase_I(
    tableau: Tableau,
    artificial: Set[int],
    opts: SolveOptions,
    max_iterations: int,
) -> Dict[str, Any]:
    if not artificial or tableau.num_rows == 0:
        tableau.phase = 2
        return {"status": "feasible", "iterations": 0, "message": ""}

    c_phase1 = np.zeros(tableau.num_cols)
    for idx in artificial:
        c_phase1[idx] = -1.0  # maximise => drives artificials to zero

    tableau.phase = 1
    tableau.set_objective(c_phase1)
    result = _run_simplex(tableau, opts, max_iterations, forbidden=set())

    if result["status"] == "unbounded":
        # -sum(artificials) is bounded above by zero, so this is a numerical fault
        return {
            "status": "numerical_instability",
            "iterations": result["iterations"],
            "message": "Phase I reported an unbounded auxiliary problem.",
        }
    if result["status"] != "optimal":
        result["message"] = f"Phase I: {result['message']}"
        return result

    infeasibility = -tableau.objective_value
    if infeasibility > opts.tol:
        return {
            "status": "infeasible",
            "iterations": result["iterations"],
            "message": f"Infeasible: artificial variables cannot be driven to zero (sum {infeasibility:.6g}).",
        }

    iterations = result["iterations"] + _drive_out_artificials(tableau, artificial)
    logger.debug("Phase I feasible after %d pivots", iterations)
    return {"status": "feasible", "iterations": iterations, "message": ""}


def _big_m_phase(
    tableau: Tableau,
    c: np.ndarray,
    artificial: Set[int],
    opts: SolveOptions,
    max_iterations: int,
) -> Dict[str, Any]:
    c_big_m = c.copy()
    for idx in artificial:
        c_big_m[idx] = -opts.big_m

    tableau.phase = 2
    tableau.set_objective(c_big_m)
    result = _run_simplex(tableau, opts, max_iterations, forbidden=set())
    if result["status"] != "optimal":
        return result

    x = tableau.basic_solution()
    infeasibility = float(sum(x[idx] for idx in artificial))
    if infeasibility > opts.tol:
        return {
            "status": "infeasible",
            "iterations": result["iterations"],
            "message": f"Infeasible: artificial variables remain positive under Big-M (sum {infeasibility:.6g}).",
        }

    iterations = result["iterations"] + _drive_out_artificials(tableau, artificial)
    return {"status": "feasible", "iterations": iterations, "message": ""}


def _phase_II(
    tableau: Tableau,
    c: np.ndarray,
    artificial: Set[int],
    opts: SolveOptions,
    max_iterations: int,
) -> Dict[str, Any]:
    tableau.phase = 2
    tableau.set_objective(c)
    result = _run_simplex(tableau, opts, max_iterations, forbidden=artificial)
    if result["status"] == "optimal":
        result["message"] = ""
    return result


def _drive_out_artificials(tableau: Tableau, artificial: Set[int]) -> int:
    """Pivot zero-level artificials out of the basis; rows where that fails are redundant."""
    pivots = 0
    for row, col in enumerate(list(tableau.basis)):
        if col not in artificial:
            continue
        for j in range(tableau.num_cols):
            if j in artificial or j in tableau.basis:
                continue
            if abs(tableau.body[row, j]) > tableau.tol:
                tableau.pivot(row, j)
                pivots += 1
                break
        else:
            logger.debug("Row %d is redundant; its artificial stays basic at zero", row)
    return pivots


def _run_simplex(
    tableau: Tableau,
    opts: SolveOptions,
    max_iterations: int,
    forbidden: Set[int],
) -> Dict[str, Any]:
    tol = opts.tol
    use_bland = opts.pivot_rule == "bland"
    iterations = 0
    degenerate_streak = 0

    while True:
        entering = tableau.entering_column(forbidden, use_bland)
        if entering is None:
            return {"status": "optimal", "iterations": iterations, "message": ""}

        if iterations >= max_iterations:
            return {
                "status": "non_convergent",
                "iterations": iterations,
                "message": f"Hit iteration limit of {max_iterations} pivots.",
            }

        pivot_row = tableau.leaving_row(entering, use_bland)
        if pivot_row is None and np.any(tableau.body[:, entering] > 0.0):
            # only sub-tolerance entries limit the step: badly scaled, not unbounded
            return {
                "status": "numerical_instability",
                "iterations": iterations,
                "message": "Ratio test is limited only by entries below the tolerance; rescale the model.",
            }
        if pivot_row is None:
            return {
                "status": "unbounded",
                "iterations": iterations,
                "message": "Unbounded: the objective improves without limit.",
            }

        pivot_value = tableau.body[pivot_row, entering]
        if abs(pivot_value) < opts.pivot_floor:
            return {
                "status": "numerical_instability",
                "iterations": iterations,
                "message": f"Pivot element {pivot_value:.3g} is below the safety floor {opts.pivot_floor:.3g}.",
            }

        theta = tableau.rhs[pivot_row] / pivot_value
        tableau.pivot(pivot_row, entering)
        iterations += 1
        if not tableau.is_finite():
            return {
                "status": "numerical_instability",
                "iterations": iterations,
                "message": "Tableau contains non-finite values after pivoting.",
            }

        if theta <= tol:
            degenerate_streak += 1
            if not use_bland and degenerate_streak >= opts.bland_after:
                logger.debug("Switching to Bland's rule after %d degenerate pivots", degenerate_streak)
                use_bland = True
        else:
            degenerate_streak = 0
