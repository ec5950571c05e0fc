import itertools
import math
import random


CLASSIC_4 = [
    [0, 10, 15, 20],
    [10, 0, 35, 25],
    [15, 35, 0, 30],
    [20, 25, 30, 0],
]


def path_cost(order, matrix, closed):
    cost = sum(matrix[a][b] for a, b in zip(order, order[1:]))
    if closed and len(order) > 1:
        cost += matrix[order[-1]][order[0]]
    return cost


def reference_best_cost(matrix, start=0, closed=True):
    rest = [i for i in range(len(matrix)) if i != start]
    return min(path_cost([start, *perm], matrix, closed) for perm in itertools.permutations(rest))


def random_matrix(n, seed, symmetric=False, low=1, high=100):
    rng = random.Random(seed)
    matrix = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            if symmetric and j < i:
                matrix[i][j] = matrix[j][i]
            else:
                matrix[i][j] = rng.randint(low, high)
    return matrix


def euclidean_matrix(n, seed):
    rng = random.Random(seed)
    pts = [(rng.uniform(0, 1000), rng.uniform(0, 1000)) for _ in range(n)]
    return [[math.dist(a, b) for b in pts] for a in pts]


def is_permutation(order, n):
    return sorted(order) == list(range(n))
