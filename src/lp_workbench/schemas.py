from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, PositiveFloat, model_validator
from typing import Literal, List, Dict, Optional, Union

Direction = Literal["maximize", "minimize"]
Operator = Literal["<=", ">=", "="]
BoundType = Literal["<=", ">=", "=", "free"]
FailureStatus = Literal["infeasible", "unbounded", "non_convergent", "numerical_instability"]


class Objective(BaseModel):
    model_config = ConfigDict(frozen=True)

    direction: Direction = "maximize"
    coefficients: List[FiniteFloat]
    variables: List[str]


class Constraint(BaseModel):
    model_config = ConfigDict(frozen=True)

    coefficients: List[FiniteFloat]
    operator: Operator
    rhs: FiniteFloat
    name: Optional[str] = None


class Bound(BaseModel):
    model_config = ConfigDict(frozen=True)

    variable: str
    type: BoundType
    value: FiniteFloat = 0.0


class Problem(BaseModel):
    """A linear program as entered by the user.

    Every variable is non-negative unless a bound says otherwise.
    """

    model_config = ConfigDict(frozen=True)

    objective: Objective
    constraints: List[Constraint] = Field(default_factory=list)
    bounds: List[Bound] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_dimensions(self) -> "Problem":
        names = self.objective.variables
        if not names:
            raise ValueError("Problem must have at least one variable.")
        if len(self.objective.coefficients) != len(names):
            raise ValueError(
                f"Objective has {len(self.objective.coefficients)} coefficients "
                f"for {len(names)} variables."
            )
        if len(set(names)) != len(names):
            duplicates = sorted({name for name in names if names.count(name) > 1})
            raise ValueError(f"Variable names must be unique (duplicated: {', '.join(duplicates)}).")
        for idx, cons in enumerate(self.constraints):
            if len(cons.coefficients) != len(names):
                label = cons.name or f"C{idx + 1}"
                raise ValueError(
                    f"Constraint '{label}' has {len(cons.coefficients)} coefficients, "
                    f"expected {len(names)}."
                )
        for bound in self.bounds:
            if bound.variable not in names:
                raise ValueError(f"Bound references unknown variable '{bound.variable}'.")
        return self

    @property
    def num_variables(self) -> int:
        return len(self.objective.variables)

    def variable_index(self) -> Dict[str, int]:
        return {name: idx for idx, name in enumerate(self.objective.variables)}

    def constraint_names(self) -> List[str]:
        return [cons.name or f"C{idx + 1}" for idx, cons in enumerate(self.constraints)]


class SolveOptions(BaseModel):
    tol: PositiveFloat = 1e-9
    max_iters: Optional[int] = Field(default=None, gt=0)
    pivot_rule: Literal["dantzig", "bland"] = "dantzig"
    bland_after: int = Field(default=50, gt=0)
    pivot_floor: float = Field(default=1e-12, ge=0.0)
    big_m: Optional[PositiveFloat] = None


class VariableValue(BaseModel):
    name: str
    value: float


class CoefficientRange(BaseModel):
    model_config = ConfigDict(ser_json_inf_nan="strings")

    variable: str
    min: float
    max: float


class RhsRange(BaseModel):
    model_config = ConfigDict(ser_json_inf_nan="strings")

    constraint: str
    min: float
    max: float


class SensitivityAnalysis(BaseModel):
    # unlimited range ends go out as "Infinity" / "-Infinity" in JSON
    model_config = ConfigDict(ser_json_inf_nan="strings")

    coefficient_ranges: List[CoefficientRange]
    rhs_ranges: List[RhsRange]
    binding_constraints: List[str]


class Solution(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_inf_nan="strings")

    success: Literal[True] = True
    status: Literal["optimal"] = "optimal"
    optimal_value: float
    optimal_solution: List[float]
    variables: List[VariableValue]
    slack_variables: List[float]
    shadow_prices: List[float]
    reduced_costs: List[float]
    sensitivity_analysis: SensitivityAnalysis
    iterations: int
    execution_time_ms: float


class SolveFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    status: FailureStatus
    message: str
    iterations: int = 0
    execution_time_ms: float = 0.0


SolveResult = Union[Solution, SolveFailure]


class Point(BaseModel):
    x: float
    y: float


class PlotExtent(BaseModel):
    max_x: PositiveFloat = 10.0
    max_y: PositiveFloat = 10.0


class FeasibleRegion(BaseModel):
    vertices: List[Point]
    optimal_point: Optional[Point] = None
    extent: PlotExtent


class InfeasibilityReport(BaseModel):
    status: str
    message: str
    conflicting_constraints: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
