import itertools
from typing import Optional

from .base import Matrix, Solver, Tour, tour_cost


EXACT_MAX_NODES = 8


def brute_force(matrix: Matrix, start: int = 0, closed: bool = True) -> Tour:
    """
    Enumerate every order that begins at ``start`` and return the cheapest.

    Permutations of the remaining indices are generated lexicographically and
    the first minimum wins, so the result is deterministic for a given matrix.
    Runs in (n-1)! evaluations; callers keep n small.
    """
    n = len(matrix)
    if n == 0:
        return []
    rest = [i for i in range(n) if i != start]

    best: Optional[Tour] = None
    best_cost = float("inf")
    for perm in itertools.permutations(rest):
        order = [start, *perm]
        cost = tour_cost(order, matrix, closed)
        if best is None or cost < best_cost:
            best = order
            best_cost = cost
    return best


class ExactSolver(Solver):
    name = "exact"

    def __init__(self, closed: bool = True):
        self.closed = closed

    def solve(self, matrix: Matrix, start: int = 0) -> Tour:
        return brute_force(matrix, start, self.closed)
