"""Force generators used by the layout simulation.

Every force is a callable taking a :class:`ForceInput` snapshot and returning
a :class:`ForceDelta`. Forces never write to the snapshot; the simulation sums
all deltas before it moves anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Protocol, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

from ..validate import ResolvedEdge
from .seed import jiggle

# Floor for lengths that end up in a denominator.
MIN_DISTANCE = 1e-9


@dataclass(frozen=True)
class ForceInput:
    positions: np.ndarray
    velocities: np.ndarray
    alpha: float
    rng: np.random.Generator

    @property
    def count(self) -> int:
        return int(self.positions.shape[0])


class ForceDelta(NamedTuple):
    velocity: np.ndarray
    displacement: Optional[np.ndarray] = None


class Force(Protocol):
    def __call__(self, state: ForceInput) -> ForceDelta:
        ...


def _separate(delta: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Replace exact-zero components with jiggle so direction is always defined."""

    zero = delta == 0.0
    count = int(zero.sum())
    if count:
        delta = delta.copy()
        delta[zero] = jiggle(rng, count)
    return delta


class LinkForce:
    """Spring pulling each linked pair toward ``distance``.

    Strength defaults to ``1 / min(degree(source), degree(target))`` so hubs
    are not dragged around by their many leaves; the correction is split
    between the endpoints in proportion to their degree.
    """

    def __init__(self, links: Sequence[ResolvedEdge], count: int, distance: float = 100.0):
        self.distance = float(distance)
        self._source = np.array([link.source for link in links], dtype=np.intp)
        self._target = np.array([link.target for link in links], dtype=np.intp)
        degree = np.zeros(count, dtype=float)
        np.add.at(degree, self._source, 1.0)
        np.add.at(degree, self._target, 1.0)
        if len(links):
            ds = degree[self._source]
            dt = degree[self._target]
            self._strength = 1.0 / np.minimum(ds, dt)
            self._bias = ds / (ds + dt)
        else:
            self._strength = np.zeros(0)
            self._bias = np.zeros(0)

    @property
    def link_count(self) -> int:
        return int(self._source.shape[0])

    def __call__(self, state: ForceInput) -> ForceDelta:
        dv = np.zeros((state.count, 2))
        if not self.link_count:
            return ForceDelta(dv)

        predicted = state.positions + state.velocities
        delta = _separate(predicted[self._target] - predicted[self._source], state.rng)
        length = np.maximum(np.hypot(delta[:, 0], delta[:, 1]), MIN_DISTANCE)
        k = (length - self.distance) / length * state.alpha * self._strength
        delta = delta * k[:, None]

        np.add.at(dv, self._target, -delta * self._bias[:, None])
        np.add.at(dv, self._source, delta * (1.0 - self._bias)[:, None])
        return ForceDelta(dv)


class ManyBodyForce:
    """Pairwise charge; negative strength repels. Naive O(n^2)."""

    def __init__(self, strength: float = -300.0, distance_min: float = 1.0):
        self.strength = float(strength)
        self.distance_min = max(float(distance_min), MIN_DISTANCE)

    def __call__(self, state: ForceInput) -> ForceDelta:
        n = state.count
        dv = np.zeros((n, 2))
        if n < 2:
            return ForceDelta(dv)

        pos = state.positions
        diff = pos[None, :, :] - pos[:, None, :]
        off_diagonal = ~np.eye(n, dtype=bool)
        coincident = (diff == 0.0).all(axis=2) & off_diagonal
        if coincident.any():
            ii, jj = np.nonzero(np.triu(coincident))
            offsets = jiggle(state.rng, 2 * len(ii)).reshape(-1, 2)
            diff[ii, jj] = offsets
            diff[jj, ii] = -offsets

        dist2 = np.maximum((diff ** 2).sum(axis=2), self.distance_min ** 2)
        weight = np.where(off_diagonal, self.strength * state.alpha / dist2, 0.0)
        dv = (diff * weight[:, :, None]).sum(axis=1)
        return ForceDelta(dv)


class CenterForce:
    """Translate the layout rigidly so its mean sits on ``(x, y)``."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0):
        self.x = float(x)
        self.y = float(y)
        self.strength = float(strength)

    @property
    def target(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __call__(self, state: ForceInput) -> ForceDelta:
        n = state.count
        dv = np.zeros((n, 2))
        if n == 0:
            return ForceDelta(dv)
        mean = state.positions.mean(axis=0)
        offset = (np.array([self.x, self.y]) - mean) * self.strength
        return ForceDelta(dv, np.broadcast_to(offset, (n, 2)).copy())


class CollideForce:
    """Push apart nodes whose circles (radius per node) overlap.

    Works on predicted positions ``x + v`` so that nodes about to collide are
    separated before they overlap. Candidate pairs come from a k-d tree; the
    larger node moves less.
    """

    def __init__(self, radii: Sequence[float], strength: float = 1.0):
        self.radii = np.asarray(radii, dtype=float)
        self.strength = float(strength)

    def __call__(self, state: ForceInput) -> ForceDelta:
        n = state.count
        dv = np.zeros((n, 2))
        if n < 2:
            return ForceDelta(dv)

        predicted = state.positions + state.velocities
        reach = 2.0 * float(self.radii.max())
        pairs = cKDTree(predicted).query_pairs(reach, output_type="ndarray")
        if pairs.size == 0:
            return ForceDelta(dv)

        i, j = pairs[:, 0], pairs[:, 1]
        ri, rj = self.radii[i], self.radii[j]
        rsum = ri + rj
        delta = predicted[i] - predicted[j]
        overlap = (delta ** 2).sum(axis=1) < rsum ** 2
        if not overlap.any():
            return ForceDelta(dv)

        i, j, ri, rj, rsum = i[overlap], j[overlap], ri[overlap], rj[overlap], rsum[overlap]
        delta = _separate(delta[overlap], state.rng)
        length = np.maximum(np.hypot(delta[:, 0], delta[:, 1]), MIN_DISTANCE)
        delta = delta * ((rsum - length) / length * self.strength)[:, None]

        share = rj ** 2 / (ri ** 2 + rj ** 2)
        np.add.at(dv, i, delta * share[:, None])
        np.add.at(dv, j, -delta * (1.0 - share)[:, None])
        return ForceDelta(dv)


__all__ = [
    "CenterForce",
    "CollideForce",
    "Force",
    "ForceDelta",
    "ForceInput",
    "LinkForce",
    "ManyBodyForce",
    "MIN_DISTANCE",
]
