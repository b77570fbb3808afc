"""Resolve edges against the node set before a simulation is built."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .logging_utils import apply_debug_logging
from .model import Edge, Node, NodeId

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    pass


@dataclass
class EdgeWarning:
    edge_id: str
    kind: str  # 'missing_source' | 'missing_target' | 'self_loop'
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        return self.message


@dataclass(frozen=True)
class ResolvedEdge:
    """An edge whose endpoints were mapped to simulation indices."""

    edge: Edge
    source: int
    target: int


def index_nodes(nodes: Sequence[Node]) -> Dict[NodeId, int]:
    index: Dict[NodeId, int] = {}
    for idx, node in enumerate(nodes):
        if node.id in index:
            raise ValidationError(f"duplicate node id {node.id!r} (positions {index[node.id]} and {idx})")
        index[node.id] = idx
    return index


def resolve_edges(
    edges: Sequence[Edge], index: Dict[NodeId, int]
) -> Tuple[List[ResolvedEdge], List[EdgeWarning]]:
    """Split ``edges`` into usable links and warnings for the ones to skip."""

    resolved: List[ResolvedEdge] = []
    warnings: List[EdgeWarning] = []
    for edge in edges:
        if edge.source not in index:
            warnings.append(
                EdgeWarning(edge.id, "missing_source", f"edge {edge.id!r}: unknown source {edge.source!r}")
            )
            continue
        if edge.target not in index:
            warnings.append(
                EdgeWarning(edge.id, "missing_target", f"edge {edge.id!r}: unknown target {edge.target!r}")
            )
            continue
        if edge.source == edge.target:
            warnings.append(
                EdgeWarning(edge.id, "self_loop", f"edge {edge.id!r}: self-loop on {edge.source!r}")
            )
            continue
        resolved.append(ResolvedEdge(edge, index[edge.source], index[edge.target]))

    for warning in warnings:
        logger.warning("Skipping edge: %s", warning.message)
    return resolved, warnings


def check_graph(nodes: Sequence[Node], edges: Sequence[Edge]) -> List[EdgeWarning]:
    """Return edge warnings for ``nodes``/``edges``; raise on duplicate node ids."""

    index = index_nodes(nodes)
    _, warnings = resolve_edges(edges, index)
    return warnings


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "EdgeWarning",
    "ResolvedEdge",
    "ValidationError",
    "check_graph",
    "index_nodes",
    "resolve_edges",
]
