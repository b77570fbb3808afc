"""Force-directed layout simulation with alpha cooling and pinning."""

from __future__ import annotations

import copy
import logging
from typing import Callable, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..config import ForceConfig, get_view_config
from ..logging_utils import apply_debug_logging
from ..model import Edge, Node, NodeId, Point
from ..validate import EdgeWarning, index_nodes, resolve_edges
from .forces import CenterForce, CollideForce, Force, ForceInput, LinkForce, ManyBodyForce
from .scheduler import FrameScheduler
from .seed import initial_positions

logger = logging.getLogger(__name__)

Listener = Callable[["Simulation"], None]

_EVENTS = ("tick", "end")


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class Simulation:
    """Owns node positions and advances them one tick at a time.

    Positions live in an indexed ``(n, 2)`` array that only this class
    writes. Callers read through :meth:`position`, :meth:`positions` or the
    read-only :attr:`coords` view, and may override a node with
    :meth:`pin` / :meth:`unpin`.

    With a ``scheduler`` the simulation ticks itself once per frame,
    notifying ``"tick"`` listeners after every tick, until ``alpha`` drops
    below ``alpha_min``; it then fires ``"end"`` and stops requesting frames
    until something perturbs it.
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge] = (),
        config: Optional[ForceConfig] = None,
        *,
        center: Point = (0.0, 0.0),
        scheduler: Optional[FrameScheduler] = None,
        known_positions: Optional[Mapping[NodeId, Point]] = None,
    ) -> None:
        self.config = copy.deepcopy(config) if config is not None else get_view_config().forces
        cfg = self.config

        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._index: Dict[NodeId, int] = index_nodes(self._nodes)
        links, warnings = resolve_edges(edges, self._index)
        self.warnings: List[EdgeWarning] = warnings
        self._edges: Tuple[Edge, ...] = tuple(link.edge for link in links)

        n = len(self._nodes)
        self._rng = np.random.default_rng(cfg.seed)
        self._coords = initial_positions(
            self._nodes,
            self._rng,
            center=center,
            radius=cfg.initial_radius,
            jitter=cfg.initial_jitter,
            known=known_positions,
        )
        self._velocities = np.zeros((n, 2))
        self._fixed = np.full((n, 2), np.nan)
        self._pinned = np.zeros(n, dtype=bool)

        self.alpha = float(cfg.alpha)
        self.alpha_target = float(cfg.alpha_target)
        self.tick_count = 0

        radii = [cfg.collide_radius_for(node.type) for node in self._nodes]
        self._forces: Dict[str, Force] = {
            "link": LinkForce(links, n, cfg.link_distance),
            "charge": ManyBodyForce(cfg.charge_strength, cfg.distance_min),
            "center": CenterForce(center[0], center[1], cfg.center_strength),
            "collide": CollideForce(radii, cfg.collide_strength),
        }

        self._scheduler = scheduler
        self._handle: Optional[Hashable] = None
        self._stopped = False
        # Bumped by stop(); frames queued under an older generation are stale.
        self._generation = 0
        self._disposed = False
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in _EVENTS}

        logger.info(
            "Built simulation with %d node(s), %d link(s), %d skipped edge(s)",
            n,
            len(self._edges),
            len(self.warnings),
        )
        if scheduler is not None:
            self.restart()

    # ------------------------------------------------------------------
    # read accessors
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        """Edges that survived endpoint resolution."""

        return self._edges

    @property
    def node_ids(self) -> Tuple[NodeId, ...]:
        return tuple(node.id for node in self._nodes)

    @property
    def coords(self) -> np.ndarray:
        return _read_only(self._coords)

    def index_of(self, node_id: NodeId) -> int:
        try:
            return self._index[node_id]
        except KeyError as exc:
            raise KeyError(f"unknown node {node_id!r}") from exc

    def position(self, node_id: NodeId) -> Point:
        x, y = self._coords[self.index_of(node_id)]
        return (float(x), float(y))

    def positions(self) -> Dict[NodeId, Point]:
        return {
            node.id: (float(self._coords[idx, 0]), float(self._coords[idx, 1]))
            for idx, node in enumerate(self._nodes)
        }

    def velocity(self, node_id: NodeId) -> Point:
        """Current velocity of ``node_id``, for diagnostics and tests only.

        Velocities are integrator state; nothing outside this class drives
        them and the view never reads them.
        """

        vx, vy = self._velocities[self.index_of(node_id)]
        return (float(vx), float(vy))

    def is_pinned(self, node_id: NodeId) -> bool:
        return bool(self._pinned[self.index_of(node_id)])

    @property
    def pinned_ids(self) -> Tuple[NodeId, ...]:
        return tuple(self._nodes[idx].id for idx in np.flatnonzero(self._pinned))

    @property
    def center(self) -> Point:
        force = self._forces.get("center")
        if isinstance(force, CenterForce):
            return force.target
        return (0.0, 0.0)

    @property
    def settled(self) -> bool:
        return self.alpha < self.config.alpha_min

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------
    # forces
    # ------------------------------------------------------------------

    def force(self, name: str) -> Optional[Force]:
        return self._forces.get(name)

    def set_force(self, name: str, force: Optional[Force]) -> None:
        """Install, replace or (with ``None``) remove a named force."""

        if force is None:
            self._forces.pop(name, None)
        else:
            self._forces[name] = force

    def set_center(self, x: float, y: float) -> None:
        """Move the centering target in place and let the layout follow."""

        force = self._forces.get("center")
        if isinstance(force, CenterForce):
            force.x = float(x)
            force.y = float(y)
        else:
            self._forces["center"] = CenterForce(x, y, self.config.center_strength)
        logger.debug("Center moved to (%.1f, %.1f)", x, y)
        self.reheat()

    # ------------------------------------------------------------------
    # pinning and perturbation
    # ------------------------------------------------------------------

    def pin(self, node_id: NodeId, x: float, y: float) -> None:
        """Hold ``node_id`` exactly at ``(x, y)`` until :meth:`unpin`."""

        idx = self.index_of(node_id)
        x, y = float(x), float(y)
        if not (np.isfinite(x) and np.isfinite(y)):
            logger.warning("Ignoring non-finite pin for %r: (%r, %r)", node_id, x, y)
            return
        self._fixed[idx] = (x, y)
        self._coords[idx] = (x, y)
        self._velocities[idx] = 0.0
        if not self._pinned[idx]:
            self._pinned[idx] = True
            logger.debug("Pinned %r at (%.2f, %.2f)", node_id, x, y)
        self.alpha_target = self.config.reheat_target
        self.restart()

    def unpin(self, node_id: NodeId) -> None:
        """Release ``node_id`` at its pinned position with zero velocity."""

        idx = self.index_of(node_id)
        if not self._pinned[idx]:
            return
        self._pinned[idx] = False
        self._fixed[idx] = np.nan
        self._velocities[idx] = 0.0
        logger.debug("Unpinned %r", node_id)
        if not self._pinned.any():
            self.alpha_target = self.config.alpha_target
        self.restart()

    def reheat(self, alpha: Optional[float] = None) -> None:
        floor = self.config.reheat_target if alpha is None else float(alpha)
        self.alpha = max(self.alpha, floor)
        self.restart()

    # ------------------------------------------------------------------
    # scheduling
    # ------------------------------------------------------------------

    def on(self, event: str, listener: Listener) -> None:
        if event not in self._listeners:
            raise ValueError(f"unknown simulation event {event!r}")
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        if event in self._listeners and listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            listener(self)

    def restart(self) -> None:
        """Resume frame-driven ticking (no-op without a scheduler or if running)."""

        if self._disposed:
            return
        self._stopped = False
        if self._scheduler is None or self._handle is not None:
            return
        self._handle = self._request_step()

    def stop(self) -> None:
        """Cancel any pending frame; only an explicit :meth:`restart` resumes."""

        self._stopped = True
        self._generation += 1
        if self._scheduler is not None and self._handle is not None:
            self._scheduler.cancel(self._handle)
        self._handle = None

    def dispose(self) -> None:
        """Stop for good: no later pin, reheat or restart schedules a frame."""

        self.stop()
        self._disposed = True
        for listeners in self._listeners.values():
            listeners.clear()
        logger.info("Disposed simulation after %d tick(s)", self.tick_count)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _request_step(self) -> Hashable:
        assert self._scheduler is not None
        generation = self._generation
        return self._scheduler.request_frame(lambda: self._step(generation))

    def _step(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = None
        if self._stopped:
            return
        self.tick()
        self._emit("tick")
        if self._stopped:
            return
        if self.settled:
            logger.info("Simulation settled after %d tick(s)", self.tick_count)
            self._emit("end")
            return
        if self._scheduler is not None and self._handle is None:
            self._handle = self._request_step()

    # ------------------------------------------------------------------
    # integration
    # ------------------------------------------------------------------

    def tick(self, iterations: int = 1) -> "Simulation":
        """Advance ``iterations`` steps without notifying listeners."""

        cfg = self.config
        keep = 1.0 - cfg.velocity_decay
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * cfg.alpha_decay
            n = self._coords.shape[0]
            if n == 0:
                self.tick_count += 1
                continue

            state = ForceInput(
                positions=_read_only(self._coords),
                velocities=_read_only(self._velocities),
                alpha=self.alpha,
                rng=self._rng,
            )
            dv = np.zeros((n, 2))
            shift = np.zeros((n, 2))
            for force in self._forces.values():
                delta = force(state)
                dv += delta.velocity
                if delta.displacement is not None:
                    shift += delta.displacement

            velocities = (self._velocities + dv) * keep
            coords = self._coords + velocities + shift
            pinned = self._pinned
            coords[pinned] = self._fixed[pinned]
            velocities[pinned] = 0.0

            bad = ~(np.isfinite(coords).all(axis=1) & np.isfinite(velocities).all(axis=1))
            if bad.any():
                logger.warning("Discarding non-finite update for %d node(s)", int(bad.sum()))
                coords[bad] = self._coords[bad]
                velocities[bad] = 0.0

            self._coords = coords
            self._velocities = velocities
            self.tick_count += 1
        return self


def settle(simulation: Simulation, max_ticks: int = 10_000) -> int:
    """Tick ``simulation`` until it cools below ``alpha_min``; return ticks used."""

    ticks = 0
    while not simulation.settled and ticks < max_ticks:
        simulation.tick()
        ticks += 1
    if simulation.settled:
        logger.info("Settled in %d tick(s), alpha=%.5f", ticks, simulation.alpha)
    else:
        logger.warning("Not settled after %d tick(s), alpha=%.5f", ticks, simulation.alpha)
    return ticks


apply_debug_logging(
    globals(),
    logger=logger,
    skip={
        "Simulation.tick",
        "Simulation.position",
        "Simulation.positions",
        "Simulation.velocity",
        "Simulation.is_pinned",
        "Simulation.index_of",
        "Simulation.on",
        "Simulation.off",
        "Simulation.restart",
        "Simulation.force",
    },
)


__all__ = ["Listener", "Simulation", "settle"]
