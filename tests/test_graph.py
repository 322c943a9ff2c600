"""Tests for team_optimizer/graph.py."""

import plotly.graph_objects as go  # type: ignore[import-untyped]
import pytest

from team_optimizer.graph import (
    GraphNode,
    build_graph,
    collaboration_figure,
    force_layout,
)
from team_optimizer.models import Person, Team


PEOPLE = [Person(id=str(i), name=n) for i, n in enumerate(["ann", "ben", "cat", "dan"], start=1)]
MATRIX = {"1": {"2": 2, "3": 1}, "3": {"1": 1}, "4": {"2": 1}}


class TestBuildGraph:
    """Tests for build_graph()."""

    def test_one_edge_per_collaborating_pair(self):
        _, edges = build_graph(PEOPLE, MATRIX)
        assert [(e.source, e.target, e.weight) for e in edges] == [
            ("1", "2", 2), ("1", "3", 1), ("2", "4", 1),
        ]

    def test_node_totals(self):
        nodes, _ = build_graph(PEOPLE, MATRIX)
        assert {n.id: n.total_collaborations for n in nodes} == {"1": 3, "2": 3, "3": 1, "4": 1}

    def test_no_collaborations(self):
        nodes, edges = build_graph(PEOPLE, {})
        assert edges == []
        assert all(n.total_collaborations == 0 for n in nodes)


class TestForceLayout:
    """Tests for force_layout()."""

    def test_empty(self):
        assert force_layout([], []) == []

    def test_single_node_centered(self):
        (node,) = force_layout([GraphNode(id="1", name="a", x=5, y=5)], [])
        assert (node.x, node.y) == (0.0, 0.0)

    def test_positions_bounded(self):
        nodes, edges = build_graph(PEOPLE, MATRIX)
        for node in force_layout(nodes, edges):
            assert -1.0 <= node.x <= 1.0
            assert -1.0 <= node.y <= 1.0

    def test_deterministic_for_seed(self):
        nodes, edges = build_graph(PEOPLE, MATRIX)
        assert force_layout(nodes, edges, seed=7) == force_layout(nodes, edges, seed=7)

    def test_nodes_without_edges_are_placed(self):
        nodes, edges = build_graph(PEOPLE, {})
        placed = force_layout(nodes, edges)
        assert [n.id for n in placed] == ["1", "2", "3", "4"]
        assert len({(n.x, n.y) for n in placed}) == 4
        assert max(max(abs(n.x), abs(n.y)) for n in placed) == pytest.approx(1.0)

    def test_does_not_mutate_input(self):

        nodes, edges = build_graph(PEOPLE, MATRIX)
        force_layout(nodes, edges)
        assert all((n.x, n.y) == (0.0, 0.0) for n in nodes)


class TestCollaborationFigure:
    """Tests for collaboration_figure()."""

    def test_trace_per_edge_plus_nodes(self):
        nodes, edges = build_graph(PEOPLE, MATRIX)
        fig = collaboration_figure(force_layout(nodes, edges), edges)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == len(edges) + 1
        assert list(fig.data[-1].text) == ["ann", "ben", "cat", "dan"]

    def test_nodes_coloured_by_team(self):
        nodes, edges = build_graph(PEOPLE, MATRIX)
        teams = [Team(members=PEOPLE[:2]), Team(members=PEOPLE[2:])]
        fig = collaboration_figure(nodes, edges, teams)
        colors = list(fig.data[-1].marker.color)
        assert colors[0] == colors[1]
        assert colors[2] == colors[3]
        assert colors[0] != colors[2]
