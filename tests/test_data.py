"""Tests for matrix validation, adapters and loaders."""
import json
import math

import networkx as nx
import numpy as np
import pytest

from tsp_route.data import (
    AVERAGE_SPEED_MPS,
    InvalidMatrixError,
    Point,
    as_matrix,
    haversine_matrix,
    load_instance,
    matrix_from_graph,
    validate_matrix,
)


TSPLIB_SQUARE = """NAME: square4
TYPE: TSP
COMMENT: four corners of a square
DIMENSION: 4
EDGE_WEIGHT_TYPE: EUC_2D
NODE_COORD_SECTION
1 0 0
2 0 10
3 10 10
4 10 0
EOF
"""


class TestValidation:
    def test_accepts_square_matrix_with_unreachable_pairs(self):
        validate_matrix([[0, math.inf], [3, 0]])

    def test_rejects_non_square(self):
        with pytest.raises(InvalidMatrixError):
            validate_matrix([[0, 1, 2], [1, 0, 2]])

    def test_rejects_ragged_rows(self):
        with pytest.raises(InvalidMatrixError):
            validate_matrix([[0, 1], [1]])

    def test_rejects_negative(self):
        with pytest.raises(InvalidMatrixError):
            validate_matrix([[0, -2], [1, 0]])

    def test_rejects_nan(self):
        with pytest.raises(InvalidMatrixError):
            validate_matrix([[0, float("nan")], [1, 0]])

    def test_error_is_a_value_error(self):
        assert issubclass(InvalidMatrixError, ValueError)

    def test_empty_matrix_is_valid(self):
        assert as_matrix([]) == []


class TestAsMatrix:
    def test_none_means_unreachable(self):
        assert as_matrix([[0, None], [2, 0]]) == [[0.0, math.inf], [2.0, 0.0]]

    def test_numpy_array(self):
        result = as_matrix(np.array([[0, 1], [2, 0]]))
        assert result == [[0.0, 1.0], [2.0, 0.0]]
        assert isinstance(result[0][1], float)


class TestHaversine:
    def test_one_degree_of_latitude(self):
        matrix = haversine_matrix([Point(0.0, 0.0), Point(1.0, 0.0)])
        expected = 2 * math.pi * 6371000.0 / 360 / AVERAGE_SPEED_MPS
        assert matrix[0][1] == pytest.approx(expected, rel=1e-6)

    def test_symmetric_with_zero_diagonal(self):
        points = [Point(-34.60, -58.38, "a"), Point(-34.61, -58.40, "b"), Point(-34.58, -58.42, "c")]
        matrix = haversine_matrix(points)
        for i in range(3):
            assert matrix[i][i] == 0
            for j in range(3):
                assert matrix[i][j] == pytest.approx(matrix[j][i])

    def test_custom_speed(self):
        points = [Point(0.0, 0.0), Point(0.0, 1.0)]
        slow = haversine_matrix(points, speed=1.0)
        fast = haversine_matrix(points, speed=10.0)
        assert slow[0][1] == pytest.approx(10 * fast[0][1])

    def test_empty(self):
        assert haversine_matrix([]) == []


class TestGraphAdapter:
    def test_directed_graph_with_missing_edge(self):
        graph = nx.DiGraph()
        graph.add_weighted_edges_from([(1, 2, 4.0), (2, 1, 6.0), (2, 3, 1.0), (3, 1, 2.0)])
        matrix = matrix_from_graph(graph)
        assert matrix[0][1] == 4.0
        assert matrix[1][0] == 6.0
        assert math.isinf(matrix[0][2])
        assert all(matrix[i][i] == 0 for i in range(3))

    def test_undirected_graph_is_symmetric(self):
        graph = nx.Graph()
        graph.add_edge("a", "b", weight=3.0)
        graph.add_edge("b", "c", weight=5.0)
        matrix = matrix_from_graph(graph)
        assert matrix[0][1] == matrix[1][0] == 3.0
        assert matrix[1][2] == matrix[2][1] == 5.0


class TestLoaders:
    def test_json_matrix(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_text(json.dumps({"name": "demo", "matrix": [[0, 1, None], [1, 0, 2], [3, 2, 0]]}))
        instance = load_instance(path)
        assert instance.name == "demo"
        assert math.isinf(instance.matrix[0][2])
        assert instance.points is None

    def test_json_points_use_haversine(self, tmp_path):
        path = tmp_path / "stops.json"
        points = [{"lat": 0.0, "lng": 0.0, "label": "depot"}, {"lat": 1.0, "lng": 0.0, "label": "stop"}]
        path.write_text(json.dumps({"points": points}))
        instance = load_instance(path)
        assert instance.name == "stops"
        assert instance.points[0] == Point(0.0, 0.0, "depot")
        assert instance.matrix == haversine_matrix(instance.points)

    def test_json_points_and_matrix_must_agree(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"points": [{"lat": 0, "lng": 0}], "matrix": [[0, 1], [1, 0]]}))
        with pytest.raises(ValueError):
            load_instance(path)

    def test_json_without_data(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("{}")
        with pytest.raises(ValueError):
            load_instance(path)

    def test_tsplib(self, tmp_path):
        path = tmp_path / "square4.tsp"
        path.write_text(TSPLIB_SQUARE)
        instance = load_instance(path)
        assert instance.name == "square4"
        assert len(instance.matrix) == 4
        assert instance.matrix[0][1] == 10
        assert instance.matrix[0][0] == 0
        assert instance.matrix[0][2] == instance.matrix[2][0]
