import json
import logging

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel

from .schemas import PlotExtent, Problem, SolveOptions
from .lp.simplex import simplex_solve
from .lp.diagnostics import diagnose_infeasibility as _diagnose
from .geometry.region import GeometryError, compute_feasible_region

logger = logging.getLogger(__name__)

mcp = FastMCP("LP Workbench")


def _as_json(result: BaseModel) -> dict:
    # strict JSON only: infinite range ends become strings, never bare Infinity tokens
    return json.loads(result.model_dump_json())


@mcp.tool()
def solve_linear_program(problem: Problem, options: SolveOptions | None = None) -> dict:
    "Solve a linear program via two-phase simplex and return the solution with sensitivity analysis."
    logger.info("solve_linear_program: %d variables, %d constraints", problem.num_variables, len(problem.constraints))
    return _as_json(simplex_solve(problem, options or SolveOptions()))


@mcp.tool()
def feasible_region(problem: Problem, extent: PlotExtent | None = None) -> dict:
    "Return the ordered vertices of a two-variable feasible region, plus the optimum when one exists."
    logger.info("feasible_region: %d constraints", len(problem.constraints))
    if problem.num_variables != 2:
        raise GeometryError(
            f"Feasible region plotting needs exactly 2 variables, got {problem.num_variables}."
        )
    solution = simplex_solve(problem, SolveOptions())
    return _as_json(compute_feasible_region(problem, extent, solution))


@mcp.tool()
def diagnose_infeasibility(problem: Problem) -> dict:
    "Return basic infeasibility diagnostics (IIS heuristic, conflicting constraints)."
    logger.info("diagnose_infeasibility: %d constraints", len(problem.constraints))
    return _as_json(_diagnose(problem))


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    # Allow: `mcp dev src/lp_workbench/server.py` or the lp-workbench-server console script
    main()
