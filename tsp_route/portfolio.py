"""
Route orchestration: exact search for tiny instances, otherwise a portfolio
of independent heuristics whose cheapest tour wins.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional

from .data import as_matrix
from .evaluation import evaluate_portfolio, select_best
from .evolutionary import GENETIC_MAX_NODES, GeneticConfig, GeneticSolver
from .solvers.base import Matrix, Solver, Tour
from .solvers.exact import EXACT_MAX_NODES, ExactSolver
from .solvers.heuristics import CompositionSolver, ConstructiveSolver


logger = logging.getLogger(__name__)


@dataclass
class PortfolioConfig:
    exact_max_nodes: int = EXACT_MAX_NODES
    genetic_max_nodes: int = GENETIC_MAX_NODES
    extra_starts: int = 4
    genetic: GeneticConfig = field(default_factory=GeneticConfig)


def alternative_starts(n: int, start: int, count: int) -> List[int]:
    return [i for i in range(n) if i != start][:count]


def build_portfolio(n: int, start: int = 0, closed: bool = True, config: PortfolioConfig = None) -> List[Solver]:
    """Candidate generators in evaluation order; earlier entries win ties."""
    cfg = config or PortfolioConfig()
    solvers: List[Solver] = [CompositionSolver("nearest_neighbor", ["two_opt"], closed)]
    for seed in alternative_starts(n, start, cfg.extra_starts):
        solvers.append(CompositionSolver("nearest_neighbor", ["two_opt"], closed, seed=seed))
    solvers.append(CompositionSolver("nearest_neighbor", ["three_opt"], closed))
    solvers.append(ConstructiveSolver("cheapest_insertion", closed))
    if n <= cfg.genetic_max_nodes:
        solvers.append(GeneticSolver(closed, cfg.genetic))
    return solvers


def solve(matrix: Any, start: int = 0, closed: bool = True, config: PortfolioConfig = None) -> Tour:
    cfg = config or PortfolioConfig()
    costs: Matrix = as_matrix(matrix)
    n = len(costs)
    if n == 0:
        return []
    if not 0 <= start < n:
        raise ValueError(f"start index {start} out of range for {n} locations")
    if n == 1:
        return [start]

    variant = "closed" if closed else "open"
    if n <= cfg.exact_max_nodes:
        logger.info("solving %s tour over %d locations exactly", variant, n)
        return ExactSolver(closed).solve(costs, start)

    solvers = build_portfolio(n, start, closed, cfg)
    logger.info("solving %s tour over %d locations with %d candidates", variant, n, len(solvers))
    best = select_best(evaluate_portfolio(solvers, costs, start))
    logger.debug("selected %s (cost=%s)", best.solver_name, best.cost)
    if not best.reachable:
        logger.warning("best %s tour over %d locations uses an unreachable leg", variant, n)
    return best.tour


def _with_genetic_overrides(
    config: Optional[PortfolioConfig], population_size: Optional[int], generations: Optional[int]
) -> PortfolioConfig:
    cfg = config or PortfolioConfig()
    overrides = {}
    if population_size is not None:
        overrides["population_size"] = population_size
    if generations is not None:
        overrides["generations"] = generations
    if not overrides:
        return cfg
    return replace(cfg, genetic=replace(cfg.genetic, **overrides))


def solve_tsp(
    matrix: Any,
    start: int = 0,
    population_size: Optional[int] = None,
    generations: Optional[int] = None,
    config: PortfolioConfig = None,
) -> Tour:
    """Closed tour: the route returns to ``start``."""
    return solve(matrix, start, True, _with_genetic_overrides(config, population_size, generations))


def solve_tsp_open(
    matrix: Any,
    start: int = 0,
    population_size: Optional[int] = None,
    generations: Optional[int] = None,
    config: PortfolioConfig = None,
) -> Tour:
    """Open path: the route ends at its last stop."""
    return solve(matrix, start, False, _with_genetic_overrides(config, population_size, generations))
