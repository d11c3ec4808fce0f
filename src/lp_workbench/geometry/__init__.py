"""Two-variable feasible-region geometry for plotting."""

from .region import GeometryError, compute_feasible_region

__all__ = ["GeometryError", "compute_feasible_region"]
