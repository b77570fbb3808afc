"""Project simulation state into immutable render primitives.

Styling is recomputed from ``(type, selected, hovered)`` on every call;
nothing is patched incrementally between frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import StyleConfig
from ..model import NodeId
from ..layout.simulation import Simulation
from .viewport import ViewportTransform


@dataclass(frozen=True)
class NodeStyle:
    radius: float
    fill: str
    stroke: str
    stroke_width: float
    label_offset: float
    font_size: float
    label_color: str
    font_weight: int


def node_style(node_type: str, selected: bool, hovered: bool, style: StyleConfig) -> NodeStyle:
    if hovered:
        radius = style.hover_radius.get(node_type, style.default_hover_radius)
    else:
        radius = style.node_radius.get(node_type, style.default_radius)
    emphasized = selected or hovered
    return NodeStyle(
        radius=float(radius),
        fill=style.fill.get(node_type, style.default_fill),
        stroke=style.selected_stroke if selected else style.stroke,
        stroke_width=style.emphasized_stroke_width if emphasized else style.stroke_width,
        label_offset=float(style.label_offset.get(node_type, style.default_label_offset)),
        font_size=style.hover_label_font_size if hovered else style.label_font_size,
        label_color=style.hover_label_color if hovered else style.label_color,
        font_weight=style.label_font_weight,
    )


@dataclass(frozen=True)
class EdgePrimitive:
    edge_id: str
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    opacity: float
    width: float


@dataclass(frozen=True)
class NodePrimitive:
    node_id: NodeId
    node_type: str
    x: float
    y: float
    radius: float
    fill: str
    stroke: str
    stroke_width: float
    label: str
    label_x: float
    label_y: float
    font_size: float
    label_color: str
    font_weight: int
    selected: bool
    hovered: bool


@dataclass(frozen=True)
class LegendEntry:
    node_type: str
    title: str
    color: str


@dataclass(frozen=True)
class Frame:
    width: float
    height: float
    scale: float
    background: str
    edges: Tuple[EdgePrimitive, ...]
    nodes: Tuple[NodePrimitive, ...]
    legend: Tuple[LegendEntry, ...]

    def node(self, node_id: NodeId) -> Optional[NodePrimitive]:
        for prim in self.nodes:
            if prim.node_id == node_id:
                return prim
        return None


def legend_entries(style: StyleConfig) -> Tuple[LegendEntry, ...]:
    return tuple(
        LegendEntry(node_type, node_type.capitalize(), color)
        for node_type, color in style.fill.items()
    )


def render_frame(
    simulation: Simulation,
    transform: ViewportTransform,
    style: StyleConfig,
    *,
    selected_id: Optional[NodeId] = None,
    hovered_id: Optional[NodeId] = None,
    width: float = 0.0,
    height: float = 0.0,
) -> Frame:
    """Build the frame for the simulation's current positions.

    Everything is in screen coordinates; radii, stroke widths and fonts are
    multiplied by the viewport scale, as if the whole scene were drawn inside
    one transformed group.
    """

    k = transform.scale
    screen = transform.apply_many(simulation.coords)

    edges = []
    for edge in simulation.edges:
        s = screen[simulation.index_of(edge.source)]
        t = screen[simulation.index_of(edge.target)]
        edges.append(
            EdgePrimitive(
                edge_id=edge.id,
                x1=float(s[0]),
                y1=float(s[1]),
                x2=float(t[0]),
                y2=float(t[1]),
                stroke=style.edge_stroke,
                opacity=style.edge_opacity,
                width=style.edge_width * k,
            )
        )

    nodes = []
    for idx, node in enumerate(simulation.nodes):
        selected = node.id == selected_id
        hovered = node.id == hovered_id
        look = node_style(node.type, selected, hovered, style)
        x, y = float(screen[idx, 0]), float(screen[idx, 1])
        nodes.append(
            NodePrimitive(
                node_id=node.id,
                node_type=node.type,
                x=x,
                y=y,
                radius=look.radius * k,
                fill=look.fill,
                stroke=look.stroke,
                stroke_width=look.stroke_width * k,
                label=node.label,
                label_x=x,
                label_y=y + look.label_offset * k,
                font_size=look.font_size * k,
                label_color=look.label_color,
                font_weight=look.font_weight,
                selected=selected,
                hovered=hovered,
            )
        )

    return Frame(
        width=float(width),
        height=float(height),
        scale=k,
        background=style.background,
        edges=tuple(edges),
        nodes=tuple(nodes),
        legend=legend_entries(style),
    )


__all__ = [
    "EdgePrimitive",
    "Frame",
    "LegendEntry",
    "NodePrimitive",
    "NodeStyle",
    "legend_entries",
    "node_style",
    "render_frame",
]
