"""Viewport, interaction and rendering on top of the layout simulation."""

from .graph_view import GraphView
from .interaction import (
    GestureState,
    InputEvent,
    InteractionController,
    KeyPress,
    Pinch,
    PointerCancel,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    Wheel,
)
from .plot import plot_frame
from .render import (
    EdgePrimitive,
    Frame,
    LegendEntry,
    NodePrimitive,
    NodeStyle,
    legend_entries,
    node_style,
    render_frame,
)
from .svg import frame_to_svg
from .viewport import ViewportTransform

__all__ = [
    "EdgePrimitive",
    "Frame",
    "GestureState",
    "GraphView",
    "InputEvent",
    "InteractionController",
    "KeyPress",
    "LegendEntry",
    "NodePrimitive",
    "NodeStyle",
    "Pinch",
    "PointerCancel",
    "PointerDown",
    "PointerLeave",
    "PointerMove",
    "PointerUp",
    "ViewportTransform",
    "Wheel",
    "frame_to_svg",
    "legend_entries",
    "node_style",
    "plot_frame",
    "render_frame",
]
