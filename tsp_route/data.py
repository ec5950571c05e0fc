import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

import networkx as nx
import numpy as np
import tsplib95


EARTH_RADIUS_M = 6371000.0
# Average urban driving speed (~28 km/h); turns metres into seconds.
AVERAGE_SPEED_MPS = 7.78
TSPLIB_SUFFIXES = (".tsp", ".atsp")


class InvalidMatrixError(ValueError):
    pass


@dataclass(frozen=True)
class Point:
    lat: float
    lng: float
    label: Optional[str] = None


@dataclass
class Instance:
    name: str
    path: Path
    matrix: List[List[float]]
    points: Optional[List[Point]] = None


def _to_array(matrix: Any) -> np.ndarray:
    if isinstance(matrix, np.ndarray):
        rows = matrix
    else:
        rows = [[np.inf if value is None else value for value in row] for row in matrix]
    try:
        arr = np.asarray(rows, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidMatrixError(f"Cost matrix is not a numeric table: {exc}") from exc
    if arr.size == 0 and len(arr) == 0:
        return np.zeros((0, 0))
    return arr


def validate_matrix(matrix: Any) -> None:
    """
    Raise InvalidMatrixError unless ``matrix`` is square with no NaN or
    negative entries. Infinite entries mark unreachable pairs and are allowed.
    """
    arr = _to_array(matrix)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise InvalidMatrixError(f"Cost matrix must be square, got shape {arr.shape}")
    if np.isnan(arr).any():
        raise InvalidMatrixError("Cost matrix contains NaN entries")
    if (arr < 0).any():
        raise InvalidMatrixError("Cost matrix contains negative entries")


def as_matrix(matrix: Any) -> List[List[float]]:
    validate_matrix(matrix)
    return _to_array(matrix).tolist()


def haversine_matrix(points: Sequence[Point], speed: float = AVERAGE_SPEED_MPS) -> List[List[float]]:
    """Straight-line travel time in seconds between every pair of points."""
    if not points:
        return []
    lat = np.radians([p.lat for p in points])
    lng = np.radians([p.lng for p in points])
    d_lat = lat[None, :] - lat[:, None]
    d_lng = lng[None, :] - lng[:, None]
    a = np.sin(d_lat / 2) ** 2 + np.cos(lat)[:, None] * np.cos(lat)[None, :] * np.sin(d_lng / 2) ** 2
    dist = 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))
    np.fill_diagonal(dist, 0.0)
    return (dist / speed).tolist()


def matrix_from_graph(graph: nx.Graph, weight: str = "weight") -> List[List[float]]:
    nodes = sorted(graph.nodes())
    arr = nx.to_numpy_array(graph, nodelist=nodes, weight=weight, nonedge=np.inf)
    np.fill_diagonal(arr, 0.0)
    return arr.tolist()


def load_tsplib(path: Path) -> Instance:
    problem = tsplib95.load(path)
    matrix = matrix_from_graph(problem.get_graph())
    return Instance(name=problem.name or path.stem, path=path, matrix=matrix)


def _parse_point(item: dict) -> Point:
    return Point(lat=float(item["lat"]), lng=float(item["lng"]), label=item.get("label"))


def load_json(path: Path) -> Instance:
    doc = json.loads(path.read_text())
    points = [_parse_point(p) for p in doc["points"]] if doc.get("points") else None
    if doc.get("matrix") is not None:
        matrix = as_matrix(doc["matrix"])
    elif points:
        matrix = haversine_matrix(points)
    else:
        raise ValueError(f"{path} must contain a 'matrix' or a 'points' entry")
    if points is not None and len(points) != len(matrix):
        raise ValueError(f"{path}: {len(points)} points for a {len(matrix)}x{len(matrix)} matrix")
    return Instance(name=doc.get("name") or path.stem, path=path, matrix=matrix, points=points)


def load_instance(path: Path) -> Instance:
    path = Path(path)
    if path.suffix.lower() in TSPLIB_SUFFIXES:
        return load_tsplib(path)
    return load_json(path)
