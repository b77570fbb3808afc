"""Layout façade: build, tick and settle force simulations."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..config import ForceConfig
from ..model import GraphData, NodeId, Point
from .forces import (
    CenterForce,
    CollideForce,
    Force,
    ForceDelta,
    ForceInput,
    LinkForce,
    ManyBodyForce,
)
from .scheduler import AsyncioScheduler, FrameScheduler, ManualScheduler
from .seed import initial_positions, phyllotaxis
from .simulation import Simulation, settle

logger = logging.getLogger(__name__)


def layout_graph(
    graph: GraphData,
    config: Optional[ForceConfig] = None,
    *,
    center: Point = (0.0, 0.0),
    max_ticks: int = 10_000,
) -> Dict[NodeId, Point]:
    """Run a fresh simulation for ``graph`` to rest and return final positions."""

    logger.info(
        "Laying out graph with %d node(s) and %d edge(s)", len(graph.nodes), len(graph.edges)
    )
    simulation = Simulation(graph.nodes, graph.edges, config, center=center)
    settle(simulation, max_ticks=max_ticks)
    return simulation.positions()


__all__ = [
    "AsyncioScheduler",
    "CenterForce",
    "CollideForce",
    "Force",
    "ForceDelta",
    "ForceInput",
    "FrameScheduler",
    "LinkForce",
    "ManualScheduler",
    "ManyBodyForce",
    "Simulation",
    "initial_positions",
    "layout_graph",
    "phyllotaxis",
    "settle",
]
