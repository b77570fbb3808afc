"""Pointer gesture state machine: drag-to-pin, pan, zoom, hover, click.

All input goes through :meth:`InteractionController.dispatch`, in arrival
order. At most one gesture (press/drag on a node, or pan on the background)
is active at a time and it belongs to the pointer that started it.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..config import StyleConfig, ViewportConfig
from ..model import NodeId, Point
from ..layout.simulation import Simulation
from .viewport import ViewportTransform

logger = logging.getLogger(__name__)


class GestureState(enum.Enum):
    IDLE = "idle"
    PRESSED = "pressed"
    DRAGGING = "dragging"
    PANNING = "panning"


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float
    pointer_id: int = 0


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float
    pointer_id: int = 0


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float
    pointer_id: int = 0


@dataclass(frozen=True)
class PointerCancel:
    pointer_id: int = 0


@dataclass(frozen=True)
class PointerLeave:
    pointer_id: int = 0


@dataclass(frozen=True)
class Wheel:
    x: float
    y: float
    delta_y: float


@dataclass(frozen=True)
class Pinch:
    x: float
    y: float
    factor: float


@dataclass(frozen=True)
class KeyPress:
    key: str


InputEvent = Union[PointerDown, PointerMove, PointerUp, PointerCancel, PointerLeave, Wheel, Pinch, KeyPress]


class InteractionController:
    """Turns raw input into pins, viewport changes, hover and selection.

    ``on_select(node_id)`` fires once per click on a node (press and release
    without moving past ``drag_threshold`` screen pixels). ``on_change()``
    fires whenever hover or the viewport changed and a re-render is due.
    """

    def __init__(
        self,
        simulation: Simulation,
        transform: ViewportTransform,
        *,
        style: Optional[StyleConfig] = None,
        viewport: Optional[ViewportConfig] = None,
        on_select: Optional[Callable[[NodeId], None]] = None,
        on_deselect: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.simulation = simulation
        self.transform = transform
        self.style = style or StyleConfig()
        self.viewport = viewport or ViewportConfig()
        self._on_select = on_select
        self._on_deselect = on_deselect
        self._on_change = on_change

        self.state = GestureState.IDLE
        self.hovered_id: Optional[NodeId] = None
        self.active_id: Optional[NodeId] = None
        self._pointer_id: Optional[int] = None
        self._press_point: Point = (0.0, 0.0)
        self._last_point: Point = (0.0, 0.0)

    # ------------------------------------------------------------------

    def attach(self, simulation: Simulation) -> None:
        """Switch to a freshly built simulation, ending any gesture first."""

        self.cancel()
        self.simulation = simulation
        if self.hovered_id is not None and self.hovered_id not in simulation.node_ids:
            self.hovered_id = None

    def hit_test(self, screen_point: Point) -> Optional[NodeId]:
        """Return the topmost node under ``screen_point`` (last drawn wins)."""

        x, y = self.transform.invert(screen_point)
        coords = self.simulation.coords
        nodes = self.simulation.nodes
        for idx in range(len(nodes) - 1, -1, -1):
            node = nodes[idx]
            if node.id == self.hovered_id:
                radius = self.style.hover_radius.get(node.type, self.style.default_hover_radius)
            else:
                radius = self.style.node_radius.get(node.type, self.style.default_radius)
            if math.hypot(x - coords[idx, 0], y - coords[idx, 1]) <= radius:
                return node.id
        return None

    def dispatch(self, event: InputEvent) -> None:
        if isinstance(event, PointerDown):
            self._pointer_down(event)
        elif isinstance(event, PointerMove):
            self._pointer_move(event)
        elif isinstance(event, PointerUp):
            self._pointer_up(event)
        elif isinstance(event, PointerCancel):
            if self._owns(event.pointer_id):
                self.cancel()
        elif isinstance(event, PointerLeave):
            if self.state not in (GestureState.PRESSED, GestureState.DRAGGING):
                self._set_hover(None)
        elif isinstance(event, Wheel):
            factor = 2.0 ** (-event.delta_y * self.viewport.wheel_sensitivity)
            self._zoom((event.x, event.y), factor)
        elif isinstance(event, Pinch):
            self._zoom((event.x, event.y), event.factor)
        elif isinstance(event, KeyPress):
            self._key(event)
        else:
            raise TypeError(f"unsupported input event {event!r}")

    def cancel(self) -> None:
        """Abort the active gesture without selecting anything."""

        if self.state in (GestureState.PRESSED, GestureState.DRAGGING) and self.active_id is not None:
            self._release_pin(self.active_id)
        if self.state is not GestureState.IDLE:
            logger.debug("Gesture %s cancelled", self.state.value)
        self._reset()

    # ------------------------------------------------------------------

    def _owns(self, pointer_id: int) -> bool:
        return self.state is not GestureState.IDLE and pointer_id == self._pointer_id

    def _reset(self) -> None:
        self.state = GestureState.IDLE
        self.active_id = None
        self._pointer_id = None

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _set_hover(self, node_id: Optional[NodeId]) -> None:
        if node_id != self.hovered_id:
            self.hovered_id = node_id
            self._changed()

    def _release_pin(self, node_id: NodeId) -> None:
        if node_id in self.simulation.node_ids:
            self.simulation.unpin(node_id)

    def _pointer_down(self, event: PointerDown) -> None:
        if self.state is not GestureState.IDLE:
            return
        point = (event.x, event.y)
        self._pointer_id = event.pointer_id
        self._press_point = point
        self._last_point = point
        node_id = self.hit_test(point)
        if node_id is None:
            self.state = GestureState.PANNING
            logger.debug("Pan started at %s", point)
            return
        self.state = GestureState.PRESSED
        self.active_id = node_id
        x, y = self.simulation.position(node_id)
        self.simulation.pin(node_id, x, y)
        logger.debug("Pressed %r at %s", node_id, point)

    def _pointer_move(self, event: PointerMove) -> None:
        point = (event.x, event.y)
        if self.state is GestureState.IDLE:
            self._set_hover(self.hit_test(point))
            return
        if event.pointer_id != self._pointer_id:
            return

        if self.state is GestureState.PANNING:
            self.transform.pan_by(point[0] - self._last_point[0], point[1] - self._last_point[1])
            self._last_point = point
            self._changed()
            return

        if self.state is GestureState.PRESSED:
            moved = math.hypot(point[0] - self._press_point[0], point[1] - self._press_point[1])
            if moved <= self.viewport.drag_threshold:
                return
            self.state = GestureState.DRAGGING
            logger.debug("Drag started on %r", self.active_id)

        assert self.active_id is not None
        x, y = self.transform.invert(point)
        self.simulation.pin(self.active_id, x, y)
        self._last_point = point
        self._changed()

    def _pointer_up(self, event: PointerUp) -> None:
        if not self._owns(event.pointer_id):
            return
        point = (event.x, event.y)
        state, node_id = self.state, self.active_id

        if state is GestureState.DRAGGING and node_id is not None:
            x, y = self.transform.invert(point)
            self.simulation.pin(node_id, x, y)
            self._release_pin(node_id)
            logger.debug("Dropped %r at (%.2f, %.2f)", node_id, x, y)
        elif state is GestureState.PRESSED and node_id is not None:
            self._release_pin(node_id)
        elif state is GestureState.PANNING:
            logger.debug("Pan ended at %s", self.transform)

        self._reset()
        self._set_hover(self.hit_test(point))

        if state is GestureState.PRESSED and node_id is not None:
            logger.debug("Clicked %r", node_id)
            if self._on_select is not None:
                self._on_select(node_id)

    def _zoom(self, point: Point, factor: float) -> None:
        if self.state in (GestureState.PRESSED, GestureState.DRAGGING):
            return
        if self.transform.zoom_at(point, factor):
            self._changed()

    def _key(self, event: KeyPress) -> None:
        if event.key != "Escape":
            return
        if self.state is not GestureState.IDLE:
            self.cancel()
        elif self._on_deselect is not None:
            self._on_deselect()


__all__ = [
    "GestureState",
    "InputEvent",
    "InteractionController",
    "KeyPress",
    "Pinch",
    "PointerCancel",
    "PointerDown",
    "PointerLeave",
    "PointerMove",
    "PointerUp",
    "Wheel",
]
