import logging
import time
from typing import Iterable, List, Optional

from .solvers.base import Matrix, Solver, SolveResult, tour_cost


logger = logging.getLogger(__name__)


def evaluate_solver(solver: Solver, matrix: Matrix, start: int = 0) -> SolveResult:
    t0 = time.perf_counter()
    tour = solver.solve(matrix, start)
    runtime = time.perf_counter() - t0
    cost = tour_cost(tour, matrix, solver.closed)
    logger.debug("candidate %s: cost=%s runtime=%.4fs", solver.name, cost, runtime)
    return SolveResult(tour=tour, cost=cost, solver_name=solver.name, runtime=runtime)


def select_best(results: Iterable[SolveResult]) -> Optional[SolveResult]:
    """Lowest-cost result; the earliest one wins a tie."""
    best: Optional[SolveResult] = None
    for result in results:
        if best is None or result.cost < best.cost:
            best = result
    return best


def evaluate_portfolio(solvers: List[Solver], matrix: Matrix, start: int = 0) -> List[SolveResult]:
    return [evaluate_solver(solver, matrix, start) for solver in solvers]
