"""Label search producing the node/edge subset handed to the view."""

from __future__ import annotations

import logging

from .logging_utils import apply_debug_logging
from .model import GraphData

logger = logging.getLogger(__name__)


def filter_graph(graph: GraphData, term: str) -> GraphData:
    """Keep nodes whose label contains ``term`` (case-insensitive).

    Edges survive only when both endpoints do. An empty or blank term returns
    ``graph`` unchanged.
    """

    needle = term.strip().lower()
    if not needle:
        return graph
    nodes = tuple(node for node in graph.nodes if needle in node.label.lower())
    kept = {node.id for node in nodes}
    edges = tuple(e for e in graph.edges if e.source in kept and e.target in kept)
    logger.info("Filter %r kept %d/%d node(s)", term, len(nodes), len(graph.nodes))
    return GraphData(nodes=nodes, edges=edges)


apply_debug_logging(globals(), logger=logger)


__all__ = ["filter_graph"]
