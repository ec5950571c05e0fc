"""
Depot handling on top of the depot-agnostic solvers.

Index 0 of a depot matrix is the depot. Stops are solved on the submatrix of
indices ``1..n-1`` and mapped back; a return trip is written out explicitly as
a trailing ``0`` so ``route_cost`` includes the last leg.
"""

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence

from .data import Point, as_matrix
from .portfolio import PortfolioConfig, solve
from .solvers.base import Matrix, Tour, route_cost, tour_cost


logger = logging.getLogger(__name__)

DEPOT = 0


def submatrix(matrix: Matrix, indices: Sequence[int]) -> List[List[float]]:
    return [[matrix[i][j] for j in indices] for i in indices]


@dataclass(frozen=True)
class OptimizationResult:
    order: Tour
    matrix: List[List[float]]
    points: Optional[List[Point]] = None
    has_depot: bool = False
    return_to_depot: bool = False
    cost: float = 0.0

    def reorder(self, new_order: Sequence[int]) -> "OptimizationResult":
        """Accept a user reordering if it visits exactly the same indices."""
        new_order = list(new_order)
        if Counter(new_order) != Counter(self.order):
            raise ValueError(f"{new_order} is not a permutation of {self.order}")
        if self.has_depot and self.order:
            if new_order[0] != DEPOT:
                raise ValueError("the depot must stay at the start of the route")
            if self.return_to_depot and new_order[-1] != DEPOT:
                raise ValueError("the depot must stay at the end of a return trip")
        return replace(self, order=new_order, cost=_order_cost(new_order, self.matrix, self.has_depot))


def _order_cost(order: Sequence[int], matrix: Matrix, has_depot: bool) -> float:
    if has_depot:
        return route_cost(order, matrix)
    return tour_cost(order, matrix, closed=True)


def depot_order(matrix: Matrix, return_to_depot: bool = True, config: PortfolioConfig = None) -> Tour:
    n = len(matrix)
    stops = list(range(1, n))
    local = solve(submatrix(matrix, stops), 0, return_to_depot, config) if stops else []
    order = [DEPOT] + [stops[i] for i in local]
    if return_to_depot:
        order.append(DEPOT)
    return order


def optimize_route(
    matrix: Any,
    has_depot: bool = False,
    return_to_depot: bool = True,
    points: Optional[Sequence[Point]] = None,
    config: PortfolioConfig = None,
) -> OptimizationResult:
    costs = as_matrix(matrix)
    if points is not None and len(points) != len(costs):
        raise ValueError(f"{len(points)} points for a {len(costs)}x{len(costs)} matrix")
    if has_depot and costs:
        order = depot_order(costs, return_to_depot, config)
    else:
        order = solve(costs, 0, True, config)
    cost = _order_cost(order, costs, has_depot)
    logger.info("optimized %d locations (depot=%s, return=%s): cost=%s", len(costs), has_depot, return_to_depot, cost)
    return OptimizationResult(
        order=order,
        matrix=costs,
        points=list(points) if points is not None else None,
        has_depot=has_depot,
        return_to_depot=return_to_depot and has_depot,
        cost=cost,
    )
