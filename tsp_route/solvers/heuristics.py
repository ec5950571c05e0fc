import math
from typing import List, Optional, Sequence

from .base import Matrix, Solver, Tour, rotate_to, tour_cost


INF = float("inf")
EPSILON = 1e-9

CONSTRUCT_PRIMS = ["nearest_neighbor", "cheapest_insertion"]
IMPROVE_PRIMS = ["two_opt", "three_opt"]

# Oriented segments between A = order[:i] and D = order[k:], where
# B = order[i:j] and C = order[j:k].
B, B_REV, C, C_REV = range(4)

# The seven reconnections of B and C, as (first segment, second segment).
THREE_OPT_PATTERNS = [
    (B_REV, C),
    (B, C_REV),
    (B_REV, C_REV),
    (C, B),
    (C_REV, B),
    (C, B_REV),
    (C_REV, B_REV),
]


def nearest_neighbor_tour(matrix: Matrix, start: int = 0) -> Tour:
    if not matrix:
        return []
    tour = [start]
    unvisited = [v for v in range(len(matrix)) if v != start]
    current = start
    while unvisited:
        row = matrix[current]
        nxt = min(unvisited, key=lambda node: row[node])
        tour.append(nxt)
        unvisited.remove(nxt)
        current = nxt
    return tour


def _split(cost: float):
    if math.isinf(cost):
        return 1, 0.0
    return 0, cost


def cheapest_insertion(matrix: Matrix, start: int = 0, closed: bool = True) -> Tour:
    """
    Grow a tour from ``[start]`` by repeatedly inserting the (node, position)
    pair that yields the cheapest resulting tour.

    Positions run from 1 to ``len(tour)`` so ``start`` stays in front. Costs are
    kept as (infinite edge count, finite sum) so removing an infinite edge
    never produces ``inf - inf``.
    """
    if not matrix:
        return []
    tour = [start]
    unvisited = [v for v in range(len(matrix)) if v != start]
    cur_inf, cur_fin = 0, 0.0
    while unvisited:
        best_node = None
        best_pos = 0
        best_value = INF
        best_state = (cur_inf, cur_fin)
        size = len(tour)
        for node in unvisited:
            for pos in range(1, size + 1):
                a = tour[pos - 1]
                inf_count, fin = cur_inf, cur_fin
                k, c = _split(matrix[a][node])
                inf_count += k
                fin += c
                if pos < size:
                    b = tour[pos]
                elif closed:
                    b = tour[0]
                else:
                    b = None
                if b is not None:
                    k, c = _split(matrix[node][b])
                    inf_count += k
                    fin += c
                    if pos < size or size > 1:
                        k, c = _split(matrix[a][b])
                        inf_count -= k
                        fin -= c
                value = INF if inf_count else fin
                if best_node is None or value < best_value:
                    best_node = node
                    best_pos = pos
                    best_value = value
                    best_state = (inf_count, fin)
        tour.insert(best_pos, best_node)
        unvisited.remove(best_node)
        cur_inf, cur_fin = best_state
    return tour


class _PathCosts:
    """Prefix sums of edge costs along an order, walked forwards and backwards."""

    def __init__(self, order: Sequence[int], matrix: Matrix):
        n = len(order)
        self.fwd = [0.0] * n
        self.fwd_inf = [0] * n
        self.bwd = [0.0] * n
        self.bwd_inf = [0] * n
        for p in range(1, n):
            a, b = order[p - 1], order[p]
            k, c = _split(matrix[a][b])
            self.fwd[p] = self.fwd[p - 1] + c
            self.fwd_inf[p] = self.fwd_inf[p - 1] + k
            k, c = _split(matrix[b][a])
            self.bwd[p] = self.bwd[p - 1] + c
            self.bwd_inf[p] = self.bwd_inf[p - 1] + k

    def forward(self, lo: int, hi: int) -> float:
        if self.fwd_inf[hi] != self.fwd_inf[lo]:
            return INF
        return self.fwd[hi] - self.fwd[lo]

    def backward(self, lo: int, hi: int) -> float:
        if self.bwd_inf[hi] != self.bwd_inf[lo]:
            return INF
        return self.bwd[hi] - self.bwd[lo]


def _improves(candidate: float, current: float) -> bool:
    if math.isinf(current):
        return candidate < current
    return candidate < current - EPSILON * max(1.0, abs(current))


def two_opt(order: Sequence[int], matrix: Matrix, closed: bool = True) -> Tour:
    best = list(order)
    n = len(best)
    best_cost = tour_cost(best, matrix, closed)
    costs = _PathCosts(best, matrix)
    improved = True
    while improved:
        improved = False
        for i in range(1, n - 1):
            for k in range(i + 1, n):
                cand_cost = costs.forward(0, i - 1) + matrix[best[i - 1]][best[k]] + costs.backward(i, k)
                last = best[i]
                if k + 1 < n:
                    cand_cost += matrix[best[i]][best[k + 1]] + costs.forward(k + 1, n - 1)
                    last = best[-1]
                if closed:
                    cand_cost += matrix[last][best[0]]
                if not _improves(cand_cost, best_cost):
                    continue
                new_tour = best[:]
                new_tour[i : k + 1] = reversed(new_tour[i : k + 1])
                new_cost = tour_cost(new_tour, matrix, closed)
                if new_cost < best_cost:
                    best = new_tour
                    best_cost = new_cost
                    costs = _PathCosts(best, matrix)
                    improved = True
    return best


def _three_opt_costs(best: Tour, costs: _PathCosts, matrix: Matrix, closed: bool, i: int, j: int, k: int) -> List[float]:
    n = len(best)
    fwd_b, rev_b = costs.forward(i, j - 1), costs.backward(i, j - 1)
    fwd_c, rev_c = costs.forward(j, k - 1), costs.backward(j, k - 1)
    # (entry, exit, internal cost) per oriented segment
    ends = (
        (best[i], best[j - 1], fwd_b),
        (best[j - 1], best[i], rev_b),
        (best[j], best[k - 1], fwd_c),
        (best[k - 1], best[j], rev_c),
    )
    fixed = costs.forward(0, i - 1)
    tail: Optional[int] = None
    if k < n:
        fixed += costs.forward(k, n - 1)
        tail = best[k]
        if closed:
            fixed += matrix[best[-1]][best[0]]
    elif closed:
        tail = best[0]
    head_row = matrix[best[i - 1]]
    result = []
    for first, second in THREE_OPT_PATTERNS:
        x_in, x_out, x_cost = ends[first]
        y_in, y_out, y_cost = ends[second]
        cost = fixed + head_row[x_in] + x_cost + matrix[x_out][y_in] + y_cost
        if tail is not None:
            cost += matrix[y_out][tail]
        result.append(cost)
    return result


def _apply_three_opt(best: Tour, i: int, j: int, k: int, pattern: int) -> Tour:
    seg_b, seg_c = best[i:j], best[j:k]
    segments = (seg_b, seg_b[::-1], seg_c, seg_c[::-1])
    first, second = THREE_OPT_PATTERNS[pattern]
    return best[:i] + segments[first] + segments[second] + best[k:]


def three_opt(order: Sequence[int], matrix: Matrix, closed: bool = True) -> Tour:
    best = list(order)
    n = len(best)
    best_cost = tour_cost(best, matrix, closed)
    costs = _PathCosts(best, matrix)
    improved = True
    while improved:
        improved = False
        for i in range(1, n - 1):
            for j in range(i + 1, n):
                for k in range(j + 1, n + 1):
                    candidates = _three_opt_costs(best, costs, matrix, closed, i, j, k)
                    for pattern, cand_cost in enumerate(candidates):
                        if not _improves(cand_cost, best_cost):
                            continue
                        new_tour = _apply_three_opt(best, i, j, k, pattern)
                        new_cost = tour_cost(new_tour, matrix, closed)
                        if new_cost < best_cost:
                            best = new_tour
                            best_cost = new_cost
                            costs = _PathCosts(best, matrix)
                            improved = True
                            break
    return best


def apply_improvements(matrix: Matrix, tour: Tour, ops: List[str], closed: bool = True) -> Tour:
    cur = tour
    for op in ops:
        if op == "two_opt":
            cur = two_opt(cur, matrix, closed)
        elif op == "three_opt":
            cur = three_opt(cur, matrix, closed)
        else:
            raise ValueError(f"Unknown improvement operator: {op!r}")
    return cur


class ConstructiveSolver(Solver):
    name = "constructive"

    def __init__(self, strategy: str, closed: bool = True):
        if strategy not in CONSTRUCT_PRIMS:
            raise ValueError(f"Unknown construction strategy: {strategy!r}")
        self.strategy = strategy
        self.closed = closed
        self.name = strategy

    def solve(self, matrix: Matrix, start: int = 0) -> Tour:
        if self.strategy == "nearest_neighbor":
            return nearest_neighbor_tour(matrix, start)
        return cheapest_insertion(matrix, start, self.closed)


class CompositionSolver(Solver):
    """
    Solver built from phases: construct -> improve.

    ``seed`` builds the initial tour from another index; the tour is then
    rotated so the requested start comes first before improvement.
    """

    name = "composition"

    def __init__(
        self,
        construct: str,
        improve_ops: List[str],
        closed: bool = True,
        seed: Optional[int] = None,
    ):
        unknown = [op for op in improve_ops if op not in IMPROVE_PRIMS]
        if unknown:
            raise ValueError(f"Unknown improvement operators: {unknown}")
        self.constructor = ConstructiveSolver(construct, closed)
        self.improve_ops = list(improve_ops)
        self.closed = closed
        self.seed = seed
        label = "+".join([construct] + self.improve_ops)
        self.name = label if seed is None else f"{label}@{seed}"

    def solve(self, matrix: Matrix, start: int = 0) -> Tour:
        origin = start if self.seed is None else self.seed
        base = self.constructor.solve(matrix, origin)
        if origin != start:
            base = rotate_to(base, start)
        return apply_improvements(matrix, base, self.improve_ops, self.closed)
