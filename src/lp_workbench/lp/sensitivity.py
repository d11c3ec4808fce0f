"""Post-optimal analysis of a final simplex tableau.

Everything here works in the canonical maximisation form produced by
``build_standard_form`` and maps the answers back to the caller's problem:
row flips, variable offsets/splits and the minimise sign are undone before
anything leaves this module.
"""

import numpy as np
from typing import Dict, Any, List, Tuple

from .tableau import Tableau
from ..schemas import (
    CoefficientRange,
    Problem,
    RhsRange,
    SensitivityAnalysis,
    VariableValue,
)


def analyze_optimal_tableau(
    tableau: Tableau,
    c: np.ndarray,
    meta: Dict[str, Any],
    problem: Problem,
    tol: float,
) -> Dict[str, Any]:
    """Return the Solution fields derived from an optimal phase-II tableau."""

    x_std = tableau.basic_solution()
    basis = list(tableau.basis)
    body = tableau.body
    B_inv = tableau.basis_inverse(meta["initial_basis"])
    reduced = _reduced_costs(c, basis, body, tol)
    eligible = [
        j for j in range(tableau.num_cols)
        if j not in basis and meta["col_types"][j] != "artificial"
    ]

    sense_sign = meta["sense_sign"]
    objective_value = sense_sign * float(c @ x_std) + meta["objective_constant"]
    x_original = _reconstruct_original_solution(meta, x_std)
    values = [x_original[name] for name in meta["original_names"]]

    y = c[basis] @ B_inv if B_inv.size else np.zeros(tableau.num_rows)
    y[np.abs(y) < tol] = 0.0
    # redundant rows keep a zero artificial in the basis; it cannot move off zero
    pinned_rows = [r for r, col in enumerate(basis) if meta["col_types"][col] == "artificial"]

    labels = problem.constraint_names()
    slacks: List[float] = []
    shadow_prices: List[float] = []
    rhs_ranges: List[RhsRange] = []
    binding: List[str] = []
    for label, cons, row in zip(labels, problem.constraints, meta["constraint_rows"]):
        slack_col = meta["row_slacks"][row]
        gap = 0.0 if slack_col is None else float(x_std[slack_col])
        slacks.append(gap)
        if gap <= tol:
            binding.append(label)

        sign = meta["row_signs"][row]
        shadow_prices.append(_clean(sense_sign * sign * y[row]))

        low, high = _rhs_interval(tableau.rhs, B_inv[:, row] * sign, pinned_rows, tol)
        rhs_ranges.append(RhsRange(constraint=label, min=cons.rhs + low, max=cons.rhs + high))

    coefficient_ranges: List[CoefficientRange] = []
    reduced_costs: List[float] = []
    for name, coef in zip(meta["original_names"], problem.objective.coefficients):
        direction = np.zeros(tableau.num_cols)
        for idx, comp_coef in meta["components"][name]:
            direction[idx] += sense_sign * comp_coef
        low, high = _cost_interval(direction, basis, body, reduced, eligible, tol)
        coefficient_ranges.append(CoefficientRange(variable=name, min=coef + low, max=coef + high))
        reduced_costs.append(_variable_reduced_cost(meta, name, reduced))

    return {
        "optimal_value": objective_value,
        "optimal_solution": values,
        "variables": [VariableValue(name=n, value=v) for n, v in zip(meta["original_names"], values)],
        "slack_variables": slacks,
        "shadow_prices": shadow_prices,
        "reduced_costs": reduced_costs,
        "sensitivity_analysis": SensitivityAnalysis(
            coefficient_ranges=coefficient_ranges,
            rhs_ranges=rhs_ranges,
            binding_constraints=binding,
        ),
    }


def _reduced_costs(c: np.ndarray, basis: List[int], body: np.ndarray, tol: float) -> np.ndarray:
    # Re-priced from the true costs so Big-M and two-phase tableaus agree.
    reduced = c[basis] @ body - c if body.size else -c.copy()
    reduced[np.abs(reduced) < tol] = 0.0
    reduced[basis] = 0.0
    return reduced


def _rhs_interval(
    x_basic: np.ndarray,
    column: np.ndarray,
    pinned_rows: List[int],
    tol: float,
) -> Tuple[float, float]:
    """Range of delta keeping x_B + delta * column >= 0 and every pinned row at zero."""
    if any(abs(column[r]) > tol for r in pinned_rows):
        return 0.0, 0.0
    low, high = -np.inf, np.inf
    for value, step in zip(x_basic, column):
        value = max(value, 0.0)
        if step > tol:
            low = max(low, -value / step)
        elif step < -tol:
            high = min(high, value / -step)
    return low, high


def _cost_interval(
    direction: np.ndarray,
    basis: List[int],
    body: np.ndarray,
    reduced: np.ndarray,
    eligible: List[int],
    tol: float,
) -> Tuple[float, float]:
    """Range of delta keeping every eligible reduced cost non-negative when c += delta * direction."""
    if not direction.any():
        return -np.inf, np.inf
    rate = direction[basis] @ body - direction if body.size else -direction
    low, high = -np.inf, np.inf
    for j in eligible:
        d = max(reduced[j], 0.0)
        if rate[j] > tol:
            low = max(low, -d / rate[j])
        elif rate[j] < -tol:
            high = min(high, d / -rate[j])
    return low, high


def _variable_reduced_cost(meta: Dict[str, Any], name: str, reduced: np.ndarray) -> float:
    # Change in the reported objective per unit of the variable forced upward.
    # Free variables list their positive part first.
    components = meta["components"][name]
    if not components:
        return 0.0
    idx, coef = components[0]
    return _clean(-meta["sense_sign"] * coef * reduced[idx])


def _reconstruct_original_solution(meta: Dict[str, Any], x_std: np.ndarray) -> Dict[str, float]:
    result: Dict[str, float] = {}
    for var_name in meta["original_names"]:
        value = meta["offsets"][var_name]
        for idx, coef in meta["components"][var_name]:
            value += coef * x_std[idx]
        result[var_name] = _clean(value)
    return result


def _clean(value: float) -> float:
    return 0.0 if abs(value) < 1e-12 else float(value)
