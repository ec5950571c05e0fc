import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence


Tour = List[int]
Matrix = Sequence[Sequence[float]]


def route_cost(order: Sequence[int], matrix: Matrix) -> float:
    dist = 0.0
    for i in range(len(order) - 1):
        dist += matrix[order[i]][order[i + 1]]
    return float(dist)


def tour_cost(order: Sequence[int], matrix: Matrix, closed: bool = True) -> float:
    """Cost of ``order``; ``closed`` adds the edge from the last index back to the first."""
    dist = route_cost(order, matrix)
    if closed and len(order) > 1:
        dist += matrix[order[-1]][order[0]]
    return float(dist)


def rotate_to(tour: Sequence[int], start: int) -> Tour:
    pos = list(tour).index(start)
    return list(tour[pos:]) + list(tour[:pos])


class Solver(ABC):
    name: str = "base"
    closed: bool = True

    @abstractmethod
    def solve(self, matrix: Matrix, start: int = 0) -> Tour:
        raise NotImplementedError


@dataclass
class SolveResult:
    tour: Tour
    cost: float
    solver_name: str
    runtime: float = 0.0

    @property
    def reachable(self) -> bool:
        return not math.isinf(self.cost)
