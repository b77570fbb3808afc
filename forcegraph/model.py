"""Graph data structures consumed by the layout engine."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

NodeId = str
Point = Tuple[float, float]


@dataclass(frozen=True)
class Node:
    """A graph vertex. ``type`` only influences styling and collision size."""

    id: NodeId
    type: str
    label: str
    data: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)
    x: Optional[float] = None
    y: Optional[float] = None


@dataclass(frozen=True)
class Edge:
    id: str
    source: NodeId
    target: NodeId
    type: str = "link"


@dataclass(frozen=True)
class GraphData:
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    def node(self, node_id: NodeId) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


class GraphFormatError(ValueError):
    """Raised when a graph document cannot be turned into nodes and edges."""


def _coordinate(raw: Mapping[str, Any], key: str, node_id: str) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise GraphFormatError(f"node {node_id!r}: {key} must be a number, got {value!r}") from exc


def _node_data(raw: Mapping[str, Any], node_id: str) -> Dict[str, Any]:
    data = raw.get("data") or {}
    if not isinstance(data, Mapping):
        raise GraphFormatError(f"node {node_id!r}: data must be a mapping, got {data!r}")
    return dict(data)


def _node_from_dict(raw: Mapping[str, Any]) -> Node:
    if not isinstance(raw, Mapping):
        raise GraphFormatError(f"node entry must be a mapping: {raw!r}")
    try:
        node_id = str(raw["id"])
    except KeyError as exc:
        raise GraphFormatError(f"node entry without id: {raw!r}") from exc
    return Node(
        id=node_id,
        type=str(raw.get("type", "identifier")),
        label=str(raw.get("label", node_id)),
        data=_node_data(raw, node_id),
        x=_coordinate(raw, "x", node_id),
        y=_coordinate(raw, "y", node_id),
    )


def _edge_from_dict(raw: Mapping[str, Any], idx: int) -> Edge:
    if not isinstance(raw, Mapping):
        raise GraphFormatError(f"edge entry #{idx} must be a mapping: {raw!r}")
    try:
        source = str(raw["source"])
        target = str(raw["target"])
    except KeyError as exc:
        raise GraphFormatError(f"edge entry #{idx} needs source and target: {raw!r}") from exc
    return Edge(
        id=str(raw.get("id", f"{source}-{target}")),
        source=source,
        target=target,
        type=str(raw.get("type", "link")),
    )


def graph_from_dict(document: Mapping[str, Any]) -> GraphData:
    """Build :class:`GraphData` from a ``{"nodes": [...], "edges": [...]}`` mapping."""

    if not isinstance(document, Mapping):
        raise GraphFormatError("graph document must be a mapping")
    raw_nodes = document.get("nodes", [])
    raw_edges = document.get("edges", [])
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise GraphFormatError("'nodes' and 'edges' must be lists")

    nodes = tuple(_node_from_dict(item) for item in raw_nodes)
    edges = tuple(_edge_from_dict(item, idx) for idx, item in enumerate(raw_edges))
    logger.info("Loaded graph with %d nodes and %d edges", len(nodes), len(edges))
    return GraphData(nodes=nodes, edges=edges)


def graph_to_dict(graph: GraphData) -> Dict[str, List[Dict[str, Any]]]:
    nodes: List[Dict[str, Any]] = []
    for node in graph.nodes:
        entry: Dict[str, Any] = {"id": node.id, "type": node.type, "label": node.label}
        if node.data:
            entry["data"] = dict(node.data)
        nodes.append(entry)
    edges = [
        {"id": e.id, "source": e.source, "target": e.target, "type": e.type}
        for e in graph.edges
    ]
    return {"nodes": nodes, "edges": edges}


def load_graph(path: Union[str, Path]) -> GraphData:
    with open(path, encoding="utf-8") as fin:
        try:
            document = json.load(fin)
        except json.JSONDecodeError as exc:
            raise GraphFormatError(f"{path}: invalid JSON ({exc})") from exc
    return graph_from_dict(document)


_SAMPLE_PLATFORMS: Iterable[str] = (
    "snapchat",
    "pinterest",
    "picsart",
    "notion",
    "github",
    "microsoft",
)


def sample_graph() -> GraphData:
    """Return the demo graph: one identity linked to the platforms it was found on."""

    nodes = [Node("central", "identity", "Haseeb Ahmad", {"type": "person"})]
    edges = []
    for name in _SAMPLE_PLATFORMS:
        nodes.append(
            Node(name, "platform", name, {"type": "platform", "reliable": True, "status": "found"})
        )
        edges.append(Edge(f"central-{name}", "central", name, "has_account"))
    return GraphData(nodes=tuple(nodes), edges=tuple(edges))


__all__ = [
    "Edge",
    "GraphData",
    "GraphFormatError",
    "Node",
    "NodeId",
    "Point",
    "graph_from_dict",
    "graph_to_dict",
    "load_graph",
    "sample_graph",
]
