import pytest

from lp_workbench.geometry import GeometryError, compute_feasible_region
from lp_workbench.schemas import Bound, Constraint, Objective, PlotExtent, Problem
from lp_workbench.lp.simplex import simplex_solve


def make_problem(constraints, bounds=(), variables=("x1", "x2")) -> Problem:
    return Problem(
        objective=Objective(coefficients=[3.0, 2.0, 1.0][: len(variables)], variables=list(variables)),
        constraints=list(constraints),
        bounds=list(bounds),
    )


def make_production_constraints():
    return [
        Constraint(coefficients=[1.0, 1.0], operator="<=", rhs=4.0),
        Constraint(coefficients=[2.0, 1.0], operator="<=", rhs=6.0),
    ]


def as_tuples(region):
    return [(pytest.approx(p.x, abs=1e-9), pytest.approx(p.y, abs=1e-9)) for p in region.vertices]


def signed_area(region) -> float:
    pts = [(p.x, p.y) for p in region.vertices]
    total = 0.0
    for (x1, y1), (x2, y2) in zip(pts, pts[1:] + pts[:1]):
        total += x1 * y2 - x2 * y1
    return total / 2.0


def rotate_to_origin(points):
    start = min(range(len(points)), key=lambda i: (round(points[i][0], 9), round(points[i][1], 9)))
    return points[start:] + points[:start]


def test_production_region_vertices():
    region = compute_feasible_region(make_problem(make_production_constraints()))
    points = rotate_to_origin([(p.x, p.y) for p in region.vertices])

    assert points == [(0.0, 0.0), (3.0, 0.0), (pytest.approx(2.0), pytest.approx(2.0)), (0.0, 4.0)]
    assert signed_area(region) == pytest.approx(7.0)
    assert region.optimal_point is None
    assert region.extent == PlotExtent()


def test_optimal_point_is_reported_from_solution():
    problem = make_problem(make_production_constraints())
    region = compute_feasible_region(problem, solution=simplex_solve(problem))

    assert region.optimal_point is not None
    assert (region.optimal_point.x, region.optimal_point.y) == (pytest.approx(2.0), pytest.approx(2.0))


def test_unbounded_region_is_clipped_to_extent():
    problem = make_problem([Constraint(coefficients=[1.0, 2.0], operator=">=", rhs=4.0)])
    region = compute_feasible_region(problem, PlotExtent(max_x=10.0, max_y=10.0))
    points = {(round(p.x, 9), round(p.y, 9)) for p in region.vertices}

    assert points == {(4.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 2.0)}
    assert signed_area(region) > 0


def test_bounds_cut_the_region():
    problem = make_problem(make_production_constraints(), bounds=[Bound(variable="x1", type="<=", value=2.0)])
    region = compute_feasible_region(problem)
    points = {(round(p.x, 9), round(p.y, 9)) for p in region.vertices}

    assert points == {(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 4.0)}


def test_equality_constraint_gives_a_segment():
    problem = make_problem([Constraint(coefficients=[1.0, 1.0], operator="=", rhs=4.0)])
    region = compute_feasible_region(problem)
    points = {(round(p.x, 9), round(p.y, 9)) for p in region.vertices}

    assert points == {(4.0, 0.0), (0.0, 4.0)}


def test_infeasible_region_is_empty():
    problem = make_problem(
        [
            Constraint(coefficients=[1.0, 1.0], operator="<=", rhs=1.0),
            Constraint(coefficients=[1.0, 1.0], operator=">=", rhs=3.0),
        ]
    )
    region = compute_feasible_region(problem, solution=simplex_solve(problem))

    assert region.vertices == []
    assert region.optimal_point is None


def test_parallel_constraints_are_skipped():
    problem = make_problem(
        [
            Constraint(coefficients=[1.0, 1.0], operator="<=", rhs=4.0),
            Constraint(coefficients=[2.0, 2.0], operator="<=", rhs=10.0),
        ]
    )
    region = compute_feasible_region(problem)
    points = {(round(p.x, 9), round(p.y, 9)) for p in region.vertices}

    assert points == {(0.0, 0.0), (4.0, 0.0), (0.0, 4.0)}


def test_requires_two_variables():
    problem = make_problem(
        [Constraint(coefficients=[1.0, 1.0, 1.0], operator="<=", rhs=4.0)],
        variables=("x1", "x2", "x3"),
    )
    with pytest.raises(GeometryError, match="exactly 2 variables"):
        compute_feasible_region(problem)
