"""
Serialization of the connection network.

``build_graph_payload`` produces the normalized node/edge object from a list of
undirected edges: the live adjacency graph by default, or every matrix pair
above an explicit threshold via ``matrix_edges``. The ``to_*`` helpers render
it as the generic JSON structure, GraphML, DOT or a flat CSV edge list.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Set, Tuple, Union

import networkx as nx
import pandas as pd

from .catalog import Project
from .errors import UnsupportedFormat
from .profiles import FeatureProfile
from .similarity import SimilarityMatrix

GRAPH_NAME = "RingGraphConnections"

GraphPayload = Dict[str, List[Dict[str, Any]]]
WeightedEdge = Tuple[str, str, float]


def matrix_edges(matrix: SimilarityMatrix, threshold: float) -> List[WeightedEdge]:
    return [(a, b, weight) for (a, b), weight in matrix.items() if weight >= threshold]


def build_graph_payload(
    projects: Sequence[Project],
    profiles: Mapping[str, FeatureProfile],
    edges: Iterable[WeightedEdge],
) -> GraphPayload:
    nodes = []
    for project in projects:
        profile = profiles.get(project.id)
        nodes.append(
            {
                "id": project.id,
                "label": project.title or project.id,
                "category": project.category,
                "type": project.type,
                "isNew": project.is_new,
                "metadata": {
                    "description": project.description,
                    "complexity": profile.complexity if profile else 0.0,
                    "tags": list(profile.tags) if profile else [],
                },
            }
        )
    links = [
        {"source": source, "target": target, "weight": round(weight, 6), "type": "similarity"}
        for source, target, weight in edges
    ]
    return {"nodes": nodes, "edges": links}


def to_networkx(payload: GraphPayload) -> nx.Graph:
    graph = nx.Graph(name=GRAPH_NAME)
    for node in payload["nodes"]:
        graph.add_node(
            node["id"],
            label=str(node["label"]),
            category=str(node["category"]),
            type=str(node["type"]),
            complexity=float(node["metadata"]["complexity"]),
        )
    for edge in payload["edges"]:
        graph.add_edge(edge["source"], edge["target"], weight=float(edge["weight"]), type=edge["type"])
    return graph


def to_json(payload: GraphPayload) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def to_graphml(payload: GraphPayload) -> str:
    return "\n".join(nx.generate_graphml(to_networkx(payload), prettyprint=True))


def _dot_quote(value: Any) -> str:
    text = str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")
    return f'"{text}"'


def to_dot(payload: GraphPayload) -> str:
    lines = [f"graph {GRAPH_NAME} {{"]
    for node in payload["nodes"]:
        lines.append(
            f"  {_dot_quote(node['id'])} [label={_dot_quote(node['label'])}, "
            f"category={_dot_quote(node['category'])}];"
        )
    for edge in payload["edges"]:
        lines.append(
            f"  {_dot_quote(edge['source'])} -- {_dot_quote(edge['target'])} "
            f"[weight={edge['weight']}];"
        )
    lines.append("}")
    return "\n".join(lines) + "\n"


def to_csv(payload: GraphPayload) -> str:
    frame = pd.DataFrame(payload["edges"], columns=["source", "target", "weight", "type"])
    frame.columns = ["Source", "Target", "Weight", "Type"]
    return frame.to_csv(index=False)


EXPORTERS: Dict[str, Callable[[GraphPayload], str]] = {
    "json": to_json,
    "graphml": to_graphml,
    "dot": to_dot,
    "csv": to_csv,
}
SUPPORTED_FORMATS = tuple(EXPORTERS)


def render(payload: GraphPayload, fmt: str) -> str:
    exporter = EXPORTERS.get(str(fmt).lower())
    if exporter is None:
        raise UnsupportedFormat(fmt, SUPPORTED_FORMATS)
    return exporter(payload)


def parse_json_graph(data: Union[str, Mapping[str, Any]]) -> Tuple[Set[str], Set[Tuple[str, str, float]]]:
    """Read the generic node/edge form back into ``(node ids, undirected edges)``."""

    payload = json.loads(data) if isinstance(data, str) else data
    node_ids = {str(node["id"]) for node in payload.get("nodes", [])}
    edges = set()
    for edge in payload.get("edges", []):
        source, target = str(edge["source"]), str(edge["target"])
        if target < source:
            source, target = target, source
        edges.add((source, target, float(edge["weight"])))
    return node_ids, edges
