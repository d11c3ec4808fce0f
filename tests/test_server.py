import json

import pytest

from lp_workbench.geometry import GeometryError
from lp_workbench.schemas import Constraint, Objective, Problem, SolveOptions
from lp_workbench.server import diagnose_infeasibility, feasible_region, solve_linear_program


def make_problem() -> Problem:
    return Problem(
        objective=Objective(coefficients=[3.0, 2.0], variables=["x1", "x2"]),
        constraints=[
            Constraint(coefficients=[1.0, 1.0], operator="<=", rhs=4.0),
            Constraint(coefficients=[2.0, 1.0], operator="<=", rhs=6.0),
        ],
    )


def make_loose_problem() -> Problem:
    return Problem(
        objective=Objective(coefficients=[3.0, 2.0], variables=["x1", "x2"]),
        constraints=[
            Constraint(coefficients=[1.0, 1.0], operator="<=", rhs=4.0),
            Constraint(coefficients=[1.0, 0.0], operator="<=", rhs=10.0),
        ],
    )


def reject_constant(token):
    raise ValueError(f"non-standard JSON constant {token}")


def test_solve_tool_returns_json_ready_dict():
    result = solve_linear_program(make_problem(), SolveOptions(pivot_rule="bland"))

    assert result["success"] is True
    assert result["optimal_value"] == pytest.approx(10.0)
    assert result["sensitivity_analysis"]["binding_constraints"] == ["C1", "C2"]


def test_solve_tool_output_is_strict_json():
    result = solve_linear_program(make_loose_problem())
    decoded = json.loads(json.dumps(result), parse_constant=reject_constant)

    loose_range = decoded["sensitivity_analysis"]["rhs_ranges"][1]
    assert loose_range["min"] == pytest.approx(4.0)
    assert loose_range["max"] == "Infinity"
    assert float(loose_range["max"]) == float("inf")


def test_feasible_region_tool_includes_optimum():
    result = feasible_region(make_problem())

    assert len(result["vertices"]) == 4
    assert result["optimal_point"]["x"] == pytest.approx(2.0)
    assert result["optimal_point"]["y"] == pytest.approx(2.0)


def test_feasible_region_tool_rejects_three_variables_before_solving(monkeypatch):
    problem = Problem(
        objective=Objective(coefficients=[1.0, 1.0, 1.0], variables=["x", "y", "z"]),
        constraints=[Constraint(coefficients=[1.0, 1.0, 1.0], operator="<=", rhs=3.0)],
    )

    def fail_solve(*args, **kwargs):
        raise AssertionError("solver should not run")

    monkeypatch.setattr("lp_workbench.server.simplex_solve", fail_solve)
    with pytest.raises(GeometryError, match="exactly 2 variables"):
        feasible_region(problem)


def test_diagnose_tool_on_feasible_model():
    result = diagnose_infeasibility(make_problem())

    assert result["status"] == "optimal"
