import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .solvers.base import Matrix, Solver, Tour, tour_cost


GENETIC_MAX_NODES = 15


@dataclass
class GeneticConfig:
    population_size: int = 30
    generations: int = 100
    mutation_rate: float = 0.1
    elite_count: int = 1
    random_seed: Optional[int] = None


def random_tour(n: int, start: int, rng: random.Random) -> Tour:
    rest = [v for v in range(n) if v != start]
    rng.shuffle(rest)
    return [start] + rest


def order_crossover(parent1: Sequence[int], parent2: Sequence[int], rng: random.Random) -> Tour:
    """
    Order crossover keeping position 0 fixed.

    A random slice of ``parent1`` is copied in place; the remaining slots are
    filled left to right with ``parent2``'s genes in their relative order.
    """
    n = len(parent1)
    if n < 3:
        return list(parent1)
    a, b = sorted((rng.randint(1, n - 1), rng.randint(1, n - 1)))
    child: List[Optional[int]] = [None] * n
    child[0] = parent1[0]
    child[a : b + 1] = parent1[a : b + 1]
    taken = set(child[a : b + 1])
    taken.add(parent1[0])
    fill = (gene for gene in parent2 if gene not in taken)
    for i in range(1, n):
        if child[i] is None:
            child[i] = next(fill)
    return child


def swap_mutation(tour: Sequence[int], rng: random.Random) -> Tour:
    mutated = list(tour)
    if len(mutated) < 3:
        return mutated
    i = rng.randrange(1, len(mutated))
    j = rng.randrange(1, len(mutated))
    mutated[i], mutated[j] = mutated[j], mutated[i]
    return mutated


class GeneticSearch:
    """
    Roulette-wheel genetic search over tours that all begin at ``start``.

    Every generation is built as a new list; parents are never mutated.
    """

    def __init__(
        self,
        matrix: Matrix,
        start: int = 0,
        closed: bool = True,
        config: GeneticConfig = None,
        rng: random.Random = None,
    ):
        self.cfg = config or GeneticConfig()
        self.matrix = matrix
        self.start = start
        self.closed = closed
        self.rng = rng or random.Random(self.cfg.random_seed)
        n = len(matrix)
        self.population: List[Tour] = [
            random_tour(n, start, self.rng) for _ in range(max(1, self.cfg.population_size))
        ]
        self.generation = 0

    def cost(self, tour: Sequence[int]) -> float:
        return tour_cost(tour, self.matrix, self.closed)

    def ranked(self) -> List[Tuple[float, Tour]]:
        scored = [(self.cost(t), t) for t in self.population]
        scored.sort(key=lambda x: x[0])
        return scored

    def _select(self, scored: List[Tuple[float, Tour]], fitness: List[float], total: float) -> Tour:
        if total <= 0.0:
            return self.rng.choice(scored)[1]
        pick = self.rng.random() * total
        acc = 0.0
        for fit, (_, tour) in zip(fitness, scored):
            acc += fit
            if acc >= pick:
                return tour
        return scored[-1][1]

    def step(self) -> None:
        scored = self.ranked()
        fitness = [1.0 / (cost + 1.0) for cost, _ in scored]
        total = sum(fitness)
        elite_count = min(max(1, self.cfg.elite_count), len(scored))
        new_pop: List[Tour] = [list(t) for _, t in scored[:elite_count]]
        while len(new_pop) < len(self.population):
            parent1 = self._select(scored, fitness, total)
            parent2 = self._select(scored, fitness, total)
            child = order_crossover(parent1, parent2, self.rng)
            if self.rng.random() < self.cfg.mutation_rate:
                child = swap_mutation(child, self.rng)
            new_pop.append(child)
        self.population = new_pop
        self.generation += 1

    def best(self) -> Tuple[Tour, float]:
        cost, tour = self.ranked()[0]
        return list(tour), cost

    def run(self) -> Tour:
        for _ in range(self.cfg.generations):
            self.step()
        return self.best()[0]


def genetic_tour(
    matrix: Matrix,
    start: int = 0,
    closed: bool = True,
    config: GeneticConfig = None,
    rng: random.Random = None,
) -> Tour:
    if not matrix:
        return []
    return GeneticSearch(matrix, start, closed, config, rng).run()


class GeneticSolver(Solver):
    name = "genetic"

    def __init__(self, closed: bool = True, config: GeneticConfig = None, rng: random.Random = None):
        self.closed = closed
        self.cfg = config or GeneticConfig()
        self.rng = rng

    def solve(self, matrix: Matrix, start: int = 0) -> Tour:
        return genetic_tour(matrix, start, self.closed, self.cfg, self.rng)
