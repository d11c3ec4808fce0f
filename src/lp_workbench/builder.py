from collections import OrderedDict
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .schemas import Bound, Constraint, Direction, Objective, Operator, Problem, BoundType


class ProblemBuilder:
    """
    Mutable scratch copy of a Problem for incremental edits.

    ``build()`` returns an immutable, validated snapshot; later edits never
    touch a snapshot that was already handed to the solver.
    """

    def __init__(self, direction: Direction = "maximize") -> None:
        self.direction: Direction = direction
        self._objective: "OrderedDict[str, float]" = OrderedDict()
        self._constraints: List[Dict[str, object]] = []
        self._bounds: List[Bound] = []

    @classmethod
    def from_problem(cls, problem: Problem) -> "ProblemBuilder":
        builder = cls(problem.objective.direction)
        for name, coef in zip(problem.objective.variables, problem.objective.coefficients):
            builder.add_variable(name, coef)
        for cons in problem.constraints:
            builder.add_constraint(cons.coefficients, cons.operator, cons.rhs, cons.name)
        for bound in problem.bounds:
            builder.add_bound(bound.variable, bound.type, bound.value)
        return builder

    @property
    def variables(self) -> List[str]:
        return list(self._objective.keys())

    def set_direction(self, direction: Direction) -> "ProblemBuilder":
        self.direction = direction
        return self

    def add_variable(self, name: str, coefficient: float = 0.0) -> "ProblemBuilder":
        if name in self._objective:
            raise ValueError(f"Variable '{name}' already exists.")
        self._objective[name] = coefficient
        for cons in self._constraints:
            cons["coefficients"][name] = 0.0
        return self

    def remove_variable(self, name: str) -> "ProblemBuilder":
        self._require(name)
        del self._objective[name]
        for cons in self._constraints:
            del cons["coefficients"][name]
        self._bounds = [bound for bound in self._bounds if bound.variable != name]
        return self

    def set_objective_coefficient(self, name: str, coefficient: float) -> "ProblemBuilder":
        self._require(name)
        self._objective[name] = coefficient
        return self

    def add_constraint(
        self,
        coefficients: Union[Sequence[float], Mapping[str, float]],
        operator: Operator,
        rhs: float,
        name: Optional[str] = None,
    ) -> "ProblemBuilder":
        if isinstance(coefficients, Mapping):
            for var in coefficients:
                self._require(var)
            row = OrderedDict((var, float(coefficients.get(var, 0.0))) for var in self._objective)
        else:
            if len(coefficients) != len(self._objective):
                raise ValueError(
                    f"Expected {len(self._objective)} coefficients, got {len(coefficients)}."
                )
            row = OrderedDict(zip(self._objective.keys(), coefficients))
        self._constraints.append({"coefficients": row, "operator": operator, "rhs": rhs, "name": name})
        return self

    def remove_constraint(self, index: int) -> "ProblemBuilder":
        del self._constraints[index]
        return self

    def add_bound(self, variable: str, type: BoundType, value: float = 0.0) -> "ProblemBuilder":
        self._require(variable)
        self._bounds.append(Bound(variable=variable, type=type, value=value))
        return self

    def build(self) -> Problem:
        names = list(self._objective.keys())
        return Problem(
            objective=Objective(
                direction=self.direction,
                coefficients=[self._objective[name] for name in names],
                variables=names,
            ),
            constraints=[
                Constraint(
                    coefficients=[cons["coefficients"][name] for name in names],
                    operator=cons["operator"],
                    rhs=cons["rhs"],
                    name=cons["name"],
                )
                for cons in self._constraints
            ],
            bounds=list(self._bounds),
        )

    def _require(self, name: str) -> None:
        if name not in self._objective:
            raise ValueError(f"Unknown variable '{name}'.")
