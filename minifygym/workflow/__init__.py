"""MinifyGym workflows."""

from .optimal import OptimalMinifyWorkflow, optimal_minify, run_optimal_minify

__all__ = ["OptimalMinifyWorkflow", "optimal_minify", "run_optimal_minify"]
