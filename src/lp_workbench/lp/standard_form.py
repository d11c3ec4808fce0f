import numpy as np
from typing import Dict, Tuple, List, Any, Optional

from ..schemas import Problem


class InconsistentBoundsError(ValueError):
    """Raised when a variable's lower bound exceeds its upper bound."""


def resolve_bounds(problem: Problem) -> Dict[str, Tuple[Optional[float], Optional[float]]]:
    """
    Collapse the bound list into one (lb, ub) pair per variable, None meaning unlimited.
    Explicit lower bounds replace the implicit x >= 0; "free" removes it.
    """

    lowers: Dict[str, List[float]] = {name: [] for name in problem.objective.variables}
    uppers: Dict[str, List[float]] = {name: [] for name in problem.objective.variables}
    free = set()
    for bound in problem.bounds:
        if bound.type == "free":
            free.add(bound.variable)
        if bound.type in (">=", "="):
            lowers[bound.variable].append(bound.value)
        if bound.type in ("<=", "="):
            uppers[bound.variable].append(bound.value)

    resolved: Dict[str, Tuple[Optional[float], Optional[float]]] = {}
    for name in problem.objective.variables:
        if lowers[name]:
            lb: Optional[float] = max(lowers[name])
        elif name in free:
            lb = None
        else:
            lb = 0.0
        ub = min(uppers[name]) if uppers[name] else None
        if lb is not None and ub is not None and lb > ub:
            raise InconsistentBoundsError(
                f"Variable {name} has inconsistent bounds (lb {lb} > ub {ub})."
            )
        resolved[name] = (lb, ub)
    return resolved


def build_standard_form(problem: Problem) -> Tuple[np.ndarray, np.ndarray, np.ndarray, Dict[str, Any], List[int]]:
    """
    Convert a Problem to canonical form max c.x s.t. Ax = b, x >= 0, b >= 0.
    Return A, b, c, metadata (column meanings and row bookkeeping) and the initial basis.
    """

    col_names: List[str] = []
    col_types: List[str] = []
    objective_coeffs_raw: List[float] = []
    rows: List[List[float]] = []
    rhs_values: List[float] = []
    basis: List[int] = []
    row_names: List[str] = []
    row_sources: List[str] = []
    row_signs: List[float] = []
    row_shifts: List[float] = []
    row_slacks: List[Optional[int]] = []
    structural_indices: List[int] = []
    artificial_indices: List[int] = []
    slack_indices: List[int] = []

    components: Dict[str, List[Tuple[int, float]]] = {}
    offsets: Dict[str, float] = {}

    def add_column(name: str, col_type: str) -> int:
        col_names.append(name)
        col_types.append(col_type)
        objective_coeffs_raw.append(0.0)
        for row in rows:
            row.append(0.0)
        return len(col_names) - 1

    bounds = resolve_bounds(problem)

    # Structural columns: each variable is an offset plus signed non-negative columns
    extra_constraints: List[Tuple[str, List[float], str, float, str]] = []
    names = problem.objective.variables
    for pos, name in enumerate(names):
        lb, ub = bounds[name]
        if lb is not None and ub is not None and lb == ub:
            # Fixed variable -> substitute its value, no column needed
            components[name] = []
            offsets[name] = lb
        elif lb is None and ub is None:
            idx_pos = add_column(f"{name}__pos", "structural")
            idx_neg = add_column(f"{name}__neg", "structural")
            components[name] = [(idx_pos, 1.0), (idx_neg, -1.0)]
            offsets[name] = 0.0
            structural_indices.extend([idx_pos, idx_neg])
        elif lb is None:
            # x <= ub with no lower limit -> x = ub - x'
            idx = add_column(f"{name}__mirror", "structural")
            components[name] = [(idx, -1.0)]
            offsets[name] = ub
            structural_indices.append(idx)
        else:
            idx = add_column(name, "structural")
            components[name] = [(idx, 1.0)]
            offsets[name] = lb
            structural_indices.append(idx)
            if ub is not None:
                coeffs = [0.0] * len(names)
                coeffs[pos] = 1.0
                extra_constraints.append((f"bound_{name}_ub", coeffs, "<=", ub, "bound"))

    objective_constant = 0.0
    for name, coef in zip(names, problem.objective.coefficients):
        objective_constant += coef * offsets[name]
        for idx, comp_coef in components[name]:
            objective_coeffs_raw[idx] += coef * comp_coef

    constraint_specs: List[Tuple[str, List[float], str, float, str]] = []
    for label, cons in zip(problem.constraint_names(), problem.constraints):
        constraint_specs.append((label, list(cons.coefficients), cons.operator, cons.rhs, "constraint"))
    constraint_specs.extend(extra_constraints)

    for name, coeffs, op, rhs, source in constraint_specs:
        coeff_entries: Dict[int, float] = {}
        shift = 0.0
        for var_name, coef in zip(names, coeffs):
            if coef == 0.0:
                continue
            shift += coef * offsets[var_name]
            for idx, comp_coef in components[var_name]:
                coeff_entries[idx] = coeff_entries.get(idx, 0.0) + coef * comp_coef
        rhs_value = rhs - shift

        sign = 1.0
        if rhs_value < 0:
            coeff_entries = {idx: -val for idx, val in coeff_entries.items()}
            rhs_value = -rhs_value
            sign = -1.0
            if op == "<=":
                op = ">="
            elif op == ">=":
                op = "<="
        if abs(rhs_value) <= 1e-12:
            rhs_value = 0.0

        slack_col: Optional[int] = None
        if op == "<=":
            idx_slack = add_column(f"slack_{name}", "slack")
            coeff_entries[idx_slack] = 1.0
            basis.append(idx_slack)
            slack_indices.append(idx_slack)
            slack_col = idx_slack
        elif op == ">=":
            idx_surplus = add_column(f"surplus_{name}", "surplus")
            coeff_entries[idx_surplus] = -1.0
            idx_art = add_column(f"artificial_{name}", "artificial")
            coeff_entries[idx_art] = 1.0
            basis.append(idx_art)
            artificial_indices.append(idx_art)
            slack_col = idx_surplus
        else:  # equality
            idx_art = add_column(f"artificial_{name}", "artificial")
            coeff_entries[idx_art] = 1.0
            basis.append(idx_art)
            artificial_indices.append(idx_art)

        row = [0.0] * len(col_names)
        for idx, value in coeff_entries.items():
            row[idx] = value
        rows.append(row)
        rhs_values.append(rhs_value)
        row_names.append(name)
        row_sources.append(source)
        row_signs.append(sign)
        row_shifts.append(shift)
        row_slacks.append(slack_col)

    if rows:
        A = np.array(rows, dtype=float)
        b = np.array(rhs_values, dtype=float)
    else:
        A = np.zeros((0, len(col_names)), dtype=float)
        b = np.zeros(0, dtype=float)

    c_raw = np.array(objective_coeffs_raw, dtype=float)
    sense_sign = 1.0 if problem.objective.direction == "maximize" else -1.0
    c = sense_sign * c_raw

    metadata: Dict[str, Any] = {
        "direction": problem.objective.direction,
        "sense_sign": sense_sign,
        "original_names": list(names),
        "col_names": col_names,
        "col_types": col_types,
        "components": components,
        "offsets": offsets,
        "row_names": row_names,
        "row_sources": row_sources,
        "row_signs": row_signs,
        "row_shifts": row_shifts,
        "row_slacks": row_slacks,
        "constraint_rows": [idx for idx, src in enumerate(row_sources) if src == "constraint"],
        "artificial_indices": artificial_indices,
        "slack_indices": slack_indices,
        "structural_indices": structural_indices,
        "initial_basis": list(basis),
        "objective_constant": objective_constant,
        "objective_structural": c_raw,
    }

    return A, b, c, metadata, basis
