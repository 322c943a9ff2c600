"""Collaboration graph: nodes, weighted edges, force layout and plotly figure."""

from __future__ import annotations

from collections.abc import Sequence

import networkx as nx
import numpy as np
import plotly.graph_objects as go  # type: ignore[import-untyped]
from pydantic import BaseModel, Field

from team_optimizer.engine.scoring import conflict_between
from team_optimizer.models import ConflictMatrix, Person, Team


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class GraphNode(BaseModel):
    id: str
    name: str
    x: float = 0.0
    y: float = 0.0
    total_collaborations: int = Field(default=0, ge=0)


class GraphEdge(BaseModel):
    source: str
    target: str
    weight: int = Field(ge=1)


_TEAM_COLORS: list[str] = [
    "#E74C3C", "#2980B9", "#27AE60", "#8E44AD", "#E67E22",
    "#16A085", "#D35400", "#2C3E50", "#C0392B", "#7F8C8D",
]


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------
def build_graph(
    people: Sequence[Person],
    matrix: ConflictMatrix,
) -> tuple[list[GraphNode], list[GraphEdge]]:
    """One node per person, one edge per pair that has collaborated."""
    edges: list[GraphEdge] = []
    totals: dict[str, int] = {p.id: 0 for p in people}
    for i, a in enumerate(people):
        for b in people[i + 1:]:
            weight = conflict_between(matrix, a.id, b.id)
            if weight > 0:
                edges.append(GraphEdge(source=a.id, target=b.id, weight=weight))
                totals[a.id] += weight
                totals[b.id] += weight
    nodes = [
        GraphNode(id=p.id, name=p.name, total_collaborations=totals[p.id])
        for p in people
    ]
    return nodes, edges


def force_layout(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    iterations: int = 200,
    seed: int = 42,
) -> list[GraphNode]:
    """Spring layout of the collaboration graph.

    Heavier edges pull harder. Deterministic for a given *seed*; positions
    are rescaled into [-1, 1] on both axes.
    """
    if not nodes:
        return []
    if len(nodes) == 1:
        return [nodes[0].model_copy(update={"x": 0.0, "y": 0.0})]

    graph = nx.Graph()
    graph.add_nodes_from(node.id for node in nodes)
    for e in edges:
        graph.add_edge(e.source, e.target, weight=e.weight)

    layout = nx.spring_layout(graph, weight="weight", iterations=iterations, seed=seed)
    pos = np.array([layout[node.id] for node in nodes], dtype=float)
    pos -= pos.mean(axis=0)
    scale = np.abs(pos).max()
    if scale > 0:
        pos /= scale

    return [
        node.model_copy(update={"x": float(pos[i, 0]), "y": float(pos[i, 1])})
        for i, node in enumerate(nodes)
    ]


# ---------------------------------------------------------------------------
# Plotly figure
# ---------------------------------------------------------------------------
def collaboration_figure(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    teams: Sequence[Team] | None = None,
) -> go.Figure:
    """Edge lines plus a node scatter; nodes coloured by team when given."""
    by_id = {node.id: node for node in nodes}
    fig = go.Figure()

    for e in edges:
        a, b = by_id[e.source], by_id[e.target]
        fig.add_trace(go.Scatter(
            x=[a.x, b.x],
            y=[a.y, b.y],
            mode="lines",
            line={"width": 1 + e.weight, "color": "#BBBBBB"},
            hoverinfo="text",
            text=f"{a.name} – {b.name}: {e.weight}",
            showlegend=False,
        ))

    team_of: dict[str, int] = {}
    for idx, team in enumerate(teams or []):
        for member in team.members:
            team_of[member.id] = idx

    fig.add_trace(go.Scatter(
        x=[node.x for node in nodes],
        y=[node.y for node in nodes],
        mode="markers+text",
        text=[node.name for node in nodes],
        textposition="top center",
        hovertext=[f"{node.name}: {node.total_collaborations} collaborations" for node in nodes],
        hoverinfo="text",
        marker={
            "size": [12 + 2 * node.total_collaborations for node in nodes],
            "color": [
                _TEAM_COLORS[team_of[node.id] % len(_TEAM_COLORS)] if node.id in team_of else "#4A90D9"
                for node in nodes
            ],
            "line": {"width": 1, "color": "#333333"},
        },
        showlegend=False,
    ))
    fig.update_layout(
        height=500,
        xaxis={"visible": False},
        yaxis={"visible": False},
        margin={"l": 10, "r": 10, "t": 30, "b": 10},
    )
    return fig
