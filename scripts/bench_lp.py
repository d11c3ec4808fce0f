#!/usr/bin/env python3
import json
import time
from pathlib import Path

from lp_workbench.lp.simplex import simplex_solve
from lp_workbench.schemas import Problem, SolveOptions
from scripts.generate_instances import generate_random_problem


def load_example(name: str) -> Problem:
    path = Path(__file__).resolve().parent.parent / "examples" / name
    return Problem.model_validate(json.loads(path.read_text()))


def main() -> None:
    cases = [
        ("examples/textbook_max.json", load_example("textbook_max.json")),
        ("examples/diet_min.json", load_example("diet_min.json")),
    ]
    for seed in range(3):
        cases.append((f"random-{seed}", generate_random_problem(8, 6, seed)))

    print("name,method,status,objective,iterations,time_ms")
    for name, problem in cases:
        for method, opts in (("two-phase", SolveOptions()), ("big-m", SolveOptions(big_m=1e6))):
            start = time.perf_counter()
            result = simplex_solve(problem, opts)
            elapsed_ms = (time.perf_counter() - start) * 1000
            objective = result.optimal_value if result.success else None
            print(f"{name},{method},{result.status},{objective},{result.iterations},{elapsed_ms:.2f}")


if __name__ == "__main__":
    main()
