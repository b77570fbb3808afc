"""Host-facing graph view: simulation + viewport + interaction + render loop."""

from __future__ import annotations

import copy
import logging
from typing import Callable, List, Optional, Sequence

from ..config import ViewConfig, get_view_config
from ..logging_utils import apply_debug_logging
from ..model import Edge, Node, NodeId, Point
from ..layout.scheduler import FrameScheduler
from ..layout.simulation import Simulation
from .interaction import GestureState, InputEvent, InteractionController
from .render import Frame, render_frame
from .viewport import ViewportTransform

logger = logging.getLogger(__name__)

FrameListener = Callable[[Frame], None]


class GraphView:
    """Interactive force-laid-out view of one node/edge set at a time.

    Every simulation tick and every viewport, hover or selection change
    produces a fresh :class:`Frame` for the ``on_frame`` subscribers.
    ``on_node_select(node)`` is called exactly once per click on a node.
    """

    def __init__(
        self,
        nodes: Sequence[Node] = (),
        edges: Sequence[Edge] = (),
        *,
        on_node_select: Optional[Callable[[Node], None]] = None,
        on_deselect: Optional[Callable[[], None]] = None,
        scheduler: Optional[FrameScheduler] = None,
        config: Optional[ViewConfig] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> None:
        self.config = copy.deepcopy(config) if config is not None else get_view_config()
        viewport = self.config.viewport
        self.width = max(float(viewport.width if width is None else width), 0.0)
        self.height = max(float(viewport.height if height is None else height), 0.0)

        self._on_node_select = on_node_select
        self._on_deselect = on_deselect
        self._scheduler = scheduler
        self._frame_listeners: List[FrameListener] = []
        self._selected_id: Optional[NodeId] = None
        self._closed = False

        self.transform = ViewportTransform.from_config(viewport)
        self.simulation = self._build(nodes, edges)
        self.controller = InteractionController(
            self.simulation,
            self.transform,
            style=self.config.style,
            viewport=viewport,
            on_select=self._handle_click,
            on_deselect=self.deselect,
            on_change=self._render,
        )

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------

    @property
    def center(self) -> Point:
        return (self.width / 2.0, self.height / 2.0)

    @property
    def selected_id(self) -> Optional[NodeId]:
        return self._selected_id

    @property
    def selected_node(self) -> Optional[Node]:
        if self._selected_id is None:
            return None
        return self._node(self._selected_id)

    @property
    def hovered_id(self) -> Optional[NodeId]:
        return self.controller.hovered_id

    @property
    def gesture(self) -> GestureState:
        return self.controller.state

    @property
    def closed(self) -> bool:
        return self._closed

    def _node(self, node_id: NodeId) -> Optional[Node]:
        for node in self.simulation.nodes:
            if node.id == node_id:
                return node
        return None

    # ------------------------------------------------------------------
    # host inputs
    # ------------------------------------------------------------------

    def _build(self, nodes: Sequence[Node], edges: Sequence[Edge], known=None) -> Simulation:
        simulation = Simulation(
            nodes,
            edges,
            self.config.forces,
            center=self.center,
            scheduler=self._scheduler,
            known_positions=known,
        )
        simulation.on("tick", self._on_tick)
        return simulation

    def set_data(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """Replace the node/edge set with a fresh simulation.

        The previous simulation is disposed before the new one exists; nodes
        present in both keep their last position.
        """

        if self._closed:
            raise RuntimeError("GraphView is closed")
        previous = self.simulation
        known = previous.positions()
        self.controller.cancel()
        previous.dispose()

        self.simulation = self._build(nodes, edges, known)
        self.controller.attach(self.simulation)
        if self._selected_id is not None and self._selected_id not in self.simulation.node_ids:
            logger.info("Selected node %r left the view; clearing selection", self._selected_id)
            self._selected_id = None
        logger.info(
            "Swapped graph data: %d -> %d node(s)", len(previous.nodes), len(self.simulation.nodes)
        )
        self._render()

    def resize(self, width: float, height: float) -> None:
        """Follow a container resize by moving the centering target in place."""

        self.width = max(float(width), 0.0)
        self.height = max(float(height), 0.0)
        cx, cy = self.center
        self.simulation.set_center(cx, cy)
        logger.debug("Resized to %.0fx%.0f", self.width, self.height)
        self._render()

    def dispatch(self, event: InputEvent) -> None:
        if self._closed:
            return
        self.controller.dispatch(event)

    def select(self, node_id: NodeId) -> None:
        if node_id not in self.simulation.node_ids:
            raise KeyError(f"unknown node {node_id!r}")
        self._selected_id = node_id
        self._render()

    def deselect(self) -> None:
        if self._selected_id is None:
            return
        self._selected_id = None
        if self._on_deselect is not None:
            self._on_deselect()
        self._render()

    def fit_to_view(self, margin: float = 50.0) -> None:
        """Zoom and pan so every node fits inside the container."""

        coords = self.simulation.coords
        if coords.shape[0] == 0 or self.width <= 0.0 or self.height <= 0.0:
            return
        lo = coords.min(axis=0) - margin
        hi = coords.max(axis=0) + margin
        span_x, span_y = max(hi[0] - lo[0], 1.0), max(hi[1] - lo[1], 1.0)
        t = self.transform
        t.scale = max(t.min_scale, min(t.max_scale, self.width / span_x, self.height / span_y, 1.0))
        mid_x, mid_y = (lo + hi) / 2.0
        t.translate_x = self.width / 2.0 - mid_x * t.scale
        t.translate_y = self.height / 2.0 - mid_y * t.scale
        self._render()

    def reset_view(self) -> None:
        self.transform.reset()
        self._render()

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------

    def on_frame(self, listener: FrameListener) -> None:
        self._frame_listeners.append(listener)

    def off_frame(self, listener: FrameListener) -> None:
        if listener in self._frame_listeners:
            self._frame_listeners.remove(listener)

    def frame(self) -> Frame:
        return render_frame(
            self.simulation,
            self.transform,
            self.config.style,
            selected_id=self._selected_id,
            hovered_id=self.controller.hovered_id,
            width=self.width,
            height=self.height,
        )

    def _render(self) -> None:
        if self._closed or not self._frame_listeners:
            return
        frame = self.frame()
        for listener in list(self._frame_listeners):
            listener(frame)

    def _on_tick(self, simulation: Simulation) -> None:
        if simulation is self.simulation:
            self._render()

    def _handle_click(self, node_id: NodeId) -> None:
        node = self._node(node_id)
        if node is None:
            return
        self._selected_id = node_id
        self._render()
        if self._on_node_select is not None:
            self._on_node_select(node)

    def close(self) -> None:
        if self._closed:
            return
        self.controller.cancel()
        self.simulation.dispose()
        self._frame_listeners.clear()
        self._closed = True
        logger.info("Closed graph view")


apply_debug_logging(
    globals(),
    logger=logger,
    skip={"GraphView.frame", "GraphView.dispatch", "GraphView.on_frame", "GraphView.off_frame"},
)


__all__ = ["FrameListener", "GraphView"]
