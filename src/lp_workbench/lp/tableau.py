import numpy as np
from typing import Iterable, List, Optional, Set


class Tableau:
    """
    Dense simplex tableau for max c.x s.t. Ax = b, x >= 0.

    Constraint rows come first, the objective row is last and the RHS is the
    last column. The objective row holds the reduced costs z_j - c_j, so the
    tableau is optimal when no eligible entry is negative; its RHS entry is
    the current objective value.
    """

    def __init__(self, A: np.ndarray, b: np.ndarray, basis: List[int], tol: float = 1e-9) -> None:
        m, n = A.shape
        self.matrix = np.zeros((m + 1, n + 1), dtype=float)
        self.matrix[:m, :n] = A
        self.matrix[:m, -1] = b
        self.basis = list(basis)
        self.phase = 1
        self.tol = tol

    @property
    def num_rows(self) -> int:
        return self.matrix.shape[0] - 1

    @property
    def num_cols(self) -> int:
        return self.matrix.shape[1] - 1

    @property
    def body(self) -> np.ndarray:
        return self.matrix[:-1, :-1]

    @property
    def rhs(self) -> np.ndarray:
        return self.matrix[:-1, -1]

    @property
    def objective_row(self) -> np.ndarray:
        return self.matrix[-1, :-1]

    @property
    def objective_value(self) -> float:
        return float(self.matrix[-1, -1])

    def set_objective(self, c: np.ndarray) -> None:
        """Load maximisation costs and price out the current basis."""
        row = np.zeros(self.num_cols + 1, dtype=float)
        row[:-1] = -np.asarray(c, dtype=float)
        for r, col in enumerate(self.basis):
            if row[col] != 0.0:
                row -= row[col] * self.matrix[r]
        row[np.abs(row) < self.tol] = 0.0
        self.matrix[-1] = row

    def entering_column(self, forbidden: Set[int], use_bland: bool) -> Optional[int]:
        row = self.objective_row
        in_basis = set(self.basis)
        candidates = [
            j for j in range(self.num_cols)
            if j not in in_basis and j not in forbidden and row[j] < -self.tol
        ]
        if not candidates:
            return None
        if use_bland:
            return candidates[0]
        return min(candidates, key=lambda j: (row[j], j))

    def leaving_row(self, col: int, use_bland: bool) -> Optional[int]:
        column = self.body[:, col]
        rhs = self.rhs
        best_row: Optional[int] = None
        best_ratio = np.inf
        for r in range(self.num_rows):
            if column[r] <= self.tol:
                continue
            ratio = max(rhs[r], 0.0) / column[r]
            if best_row is None or ratio < best_ratio - self.tol:
                best_row, best_ratio = r, ratio
            elif abs(ratio - best_ratio) <= self.tol and use_bland and self.basis[r] < self.basis[best_row]:
                best_row, best_ratio = r, ratio
        return best_row

    def pivot(self, row: int, col: int) -> None:
        self.matrix[row] /= self.matrix[row, col]
        for r in range(self.matrix.shape[0]):
            if r != row and self.matrix[r, col] != 0.0:
                self.matrix[r] -= self.matrix[r, col] * self.matrix[row]
        self.matrix[np.abs(self.matrix) < self.tol] = 0.0
        self.matrix[:, col] = 0.0
        self.matrix[row, col] = 1.0
        self.basis[row] = col

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.matrix)))

    def basic_solution(self) -> np.ndarray:
        x = np.zeros(self.num_cols, dtype=float)
        for r, col in enumerate(self.basis):
            x[col] = self.rhs[r]
        x[np.abs(x) < self.tol] = 0.0
        return x

    def basis_inverse(self, identity_columns: Iterable[int]) -> np.ndarray:
        """Columns that started as the identity now hold B^-1."""
        return self.body[:, list(identity_columns)].copy()
