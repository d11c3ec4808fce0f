import math
from itertools import combinations
from typing import List, Optional, Tuple

from ..schemas import FeasibleRegion, PlotExtent, Point, Problem, SolveResult

# a * x + b * y (op) rhs
HalfPlane = Tuple[float, float, str, float]


class GeometryError(ValueError):
    """Raised when a feasible region is requested for a problem it cannot be drawn for."""


def compute_feasible_region(
    problem: Problem,
    extent: Optional[PlotExtent] = None,
    solution: Optional[SolveResult] = None,
    tol: float = 1e-9,
) -> FeasibleRegion:
    """
    Vertices of the feasible region of a two-variable problem, clipped to the
    non-negative quadrant and the plotting extent, ordered counter-clockwise.
    """

    if problem.num_variables != 2:
        raise GeometryError(
            f"Feasible region plotting needs exactly 2 variables, got {problem.num_variables}."
        )
    extent = extent or PlotExtent()

    half_planes = _half_planes(problem)
    lines = [(a, b, rhs) for a, b, _, rhs in half_planes]
    lines += [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 0.0, extent.max_x), (0.0, 1.0, extent.max_y)]

    candidates: List[Tuple[float, float]] = []
    for (a1, b1, r1), (a2, b2, r2) in combinations(lines, 2):
        det = a1 * b2 - b1 * a2
        if abs(det) < tol:
            continue
        x = (r1 * b2 - r2 * b1) / det
        y = (a1 * r2 - a2 * r1) / det
        if _is_feasible(x, y, half_planes, extent, tol):
            candidates.append((_snap(x, tol), _snap(y, tol)))

    vertices = _order_counter_clockwise(_deduplicate(candidates, tol))

    optimal_point = None
    if solution is not None and solution.success:
        x_opt, y_opt = solution.optimal_solution
        optimal_point = Point(x=x_opt, y=y_opt)

    return FeasibleRegion(
        vertices=[Point(x=x, y=y) for x, y in vertices],
        optimal_point=optimal_point,
        extent=extent,
    )


def _half_planes(problem: Problem) -> List[HalfPlane]:
    planes: List[HalfPlane] = []
    for cons in problem.constraints:
        a, b = cons.coefficients
        planes.append((a, b, cons.operator, cons.rhs))
    index = problem.variable_index()
    for bound in problem.bounds:
        if bound.type == "free":
            continue
        a, b = (1.0, 0.0) if index[bound.variable] == 0 else (0.0, 1.0)
        planes.append((a, b, bound.type, bound.value))
    return planes


def _is_feasible(x: float, y: float, half_planes: List[HalfPlane], extent: PlotExtent, tol: float) -> bool:
    if not (-tol <= x <= extent.max_x + tol and -tol <= y <= extent.max_y + tol):
        return False
    for a, b, op, rhs in half_planes:
        lhs = a * x + b * y
        eps = tol * max(1.0, abs(rhs))
        if op == "<=" and lhs > rhs + eps:
            return False
        if op == ">=" and lhs < rhs - eps:
            return False
        if op == "=" and abs(lhs - rhs) > eps:
            return False
    return True


def _snap(value: float, tol: float) -> float:
    return 0.0 if abs(value) <= tol else value


def _deduplicate(points: List[Tuple[float, float]], tol: float) -> List[Tuple[float, float]]:
    unique: List[Tuple[float, float]] = []
    for x, y in points:
        if not any(abs(x - ux) <= tol and abs(y - uy) <= tol for ux, uy in unique):
            unique.append((x, y))
    return unique


def _order_counter_clockwise(points: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
    if len(points) < 3:
        return points
    cx = sum(x for x, _ in points) / len(points)
    cy = sum(y for _, y in points) / len(points)
    return sorted(points, key=lambda p: math.atan2(p[1] - cy, p[0] - cx))
