from .base import Solver, SolveResult, Tour, route_cost, tour_cost
from .exact import ExactSolver, brute_force
from .heuristics import (
    CompositionSolver,
    ConstructiveSolver,
    apply_improvements,
    cheapest_insertion,
    nearest_neighbor_tour,
    three_opt,
    two_opt,
)

__all__ = [
    "Solver",
    "SolveResult",
    "Tour",
    "route_cost",
    "tour_cost",
    "ExactSolver",
    "brute_force",
    "CompositionSolver",
    "ConstructiveSolver",
    "apply_improvements",
    "cheapest_insertion",
    "nearest_neighbor_tour",
    "three_opt",
    "two_opt",
]
