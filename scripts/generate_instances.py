#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import List, Optional

from lp_workbench.schemas import Constraint, Direction, Objective, Problem


def generate_random_problem(
    num_vars: int,
    num_constraints: int,
    seed: Optional[int] = None,
    direction: Direction = "maximize",
) -> Problem:
    """
    Random feasible, bounded LP: positive packing rows plus one covering row.

    The packing rows keep the maximisation bounded; the covering row forces
    Phase I to do real work. Minimisation uses the same rows.
    """

    rng = random.Random(seed)
    names = [f"x{i}" for i in range(num_vars)]
    constraints: List[Constraint] = []
    for j in range(num_constraints):
        coefficients = [rng.uniform(0.5, 5.0) for _ in range(num_vars)]
        rhs = rng.uniform(num_vars * 2.0, num_vars * 6.0)
        constraints.append(Constraint(coefficients=coefficients, operator="<=", rhs=rhs, name=f"c{j}"))
    constraints.append(
        Constraint(
            coefficients=[rng.uniform(0.5, 2.0) for _ in range(num_vars)],
            operator=">=",
            # x = 0.4 in every coordinate satisfies all packing rows and this one
            rhs=rng.uniform(0.05, 0.2) * num_vars,
            name="cover",
        )
    )
    objective = Objective(
        direction=direction,
        coefficients=[rng.uniform(1.0, 4.0) for _ in range(num_vars)],
        variables=names,
    )
    return Problem(objective=objective, constraints=constraints)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random feasible LP instances.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of packing constraints")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--minimize", action="store_true", help="Generate minimisation problems")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    direction = "minimize" if args.minimize else "maximize"
    instances = [
        generate_random_problem(args.vars, args.constraints, (args.seed or 0) + idx, direction)
        for idx in range(args.count)
    ]
    payload = [instance.model_dump() for instance in instances]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
