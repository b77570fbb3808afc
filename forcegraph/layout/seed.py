"""Initial node placement for the simulation."""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional, Sequence

import numpy as np

from ..model import Node, NodeId, Point

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


def _safe_float(value: float) -> float:
    return float(np.nan_to_num(value, nan=0.0, posinf=0.0, neginf=0.0))


def phyllotaxis(count: int, center: Point = (0.0, 0.0), radius: float = 10.0) -> np.ndarray:
    """Return ``count`` points on a sunflower spiral around ``center``.

    Point ``i`` sits at distance ``radius * sqrt(0.5 + i)`` and angle
    ``i * golden_angle``, so no two points coincide and the spiral is the same
    for a given count.
    """

    coords = np.zeros((count, 2), dtype=float)
    if count == 0:
        return coords
    idx = np.arange(count, dtype=float)
    r = radius * np.sqrt(0.5 + idx)
    angle = idx * GOLDEN_ANGLE
    coords[:, 0] = center[0] + r * np.cos(angle)
    coords[:, 1] = center[1] + r * np.sin(angle)
    return coords


def initial_positions(
    nodes: Sequence[Node],
    rng: np.random.Generator,
    *,
    center: Point = (0.0, 0.0),
    radius: float = 10.0,
    jitter: float = 0.0,
    known: Optional[Mapping[NodeId, Point]] = None,
) -> np.ndarray:
    """Seed an ``(n, 2)`` coordinate array for ``nodes``.

    Coordinates come, in order of preference, from ``known`` (positions carried
    over from a previous simulation), the node's own ``x``/``y``, and the
    phyllotaxis spiral. ``jitter`` adds a uniform offset drawn from ``rng`` to
    spiral-seeded nodes only.
    """

    coords = phyllotaxis(len(nodes), center, radius)
    known = known or {}
    spiral_rows = []
    for idx, node in enumerate(nodes):
        if node.id in known:
            x, y = known[node.id]
            coords[idx] = (_safe_float(x), _safe_float(y))
        elif node.x is not None and node.y is not None:
            coords[idx] = (_safe_float(node.x), _safe_float(node.y))
        else:
            spiral_rows.append(idx)

    if jitter > 0.0 and spiral_rows:
        coords[spiral_rows] += rng.uniform(-jitter, jitter, size=(len(spiral_rows), 2))

    logger.debug(
        "Seeded %d node(s): %d carried over, %d on spiral",
        len(nodes),
        len(nodes) - len(spiral_rows),
        len(spiral_rows),
    )
    return coords


def jiggle(rng: np.random.Generator, size: int) -> np.ndarray:
    """Tiny random offsets that give coincident nodes a direction to separate in."""

    return (rng.random(size) - 0.5) * 1e-6


__all__ = ["GOLDEN_ANGLE", "initial_positions", "jiggle", "phyllotaxis"]
