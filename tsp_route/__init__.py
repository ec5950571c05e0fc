"""
Heuristic TSP route optimization: exact search for tiny instances, a portfolio
of construction, local-search and genetic heuristics otherwise, and a depot
adapter for delivery routes.
"""

from .data import InvalidMatrixError, Point
from .depot import OptimizationResult, optimize_route
from .portfolio import PortfolioConfig, solve_tsp, solve_tsp_open

__all__ = [
    "data",
    "depot",
    "evaluation",
    "evolutionary",
    "portfolio",
    "InvalidMatrixError",
    "OptimizationResult",
    "Point",
    "PortfolioConfig",
    "optimize_route",
    "solve_tsp",
    "solve_tsp_open",
]
