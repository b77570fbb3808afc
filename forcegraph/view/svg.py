"""Serialize a :class:`~forcegraph.view.render.Frame` as a standalone SVG."""

from __future__ import annotations

from typing import List
from xml.sax.saxutils import escape, quoteattr

from .render import Frame

LEGEND_X = 16.0
LEGEND_Y = 16.0
LEGEND_ROW = 18.0
LEGEND_DOT = 6.0


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _legend(frame: Frame) -> List[str]:
    lines = ['  <g class="legend" font-size="12" fill="#4B5563">']
    for row, entry in enumerate(frame.legend):
        cy = LEGEND_Y + row * LEGEND_ROW
        lines.append(
            f'    <circle cx="{_fmt(LEGEND_X)}" cy="{_fmt(cy)}" r="{_fmt(LEGEND_DOT)}" '
            f"fill={quoteattr(entry.color)}/>"
        )
        lines.append(
            f'    <text x="{_fmt(LEGEND_X + 2 * LEGEND_DOT)}" y="{_fmt(cy + 4)}">'
            f"{escape(entry.title)}</text>"
        )
    lines.append("  </g>")
    return lines


def frame_to_svg(frame: Frame, *, legend: bool = True) -> str:
    width = _fmt(max(frame.width, 0.0))
    height = _fmt(max(frame.height, 0.0))
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">',
        f'  <rect width="100%" height="100%" fill={quoteattr(frame.background)}/>',
        '  <g class="edges">',
    ]
    for edge in frame.edges:
        lines.append(
            f"    <line data-id={quoteattr(edge.edge_id)} "
            f'x1="{_fmt(edge.x1)}" y1="{_fmt(edge.y1)}" x2="{_fmt(edge.x2)}" y2="{_fmt(edge.y2)}" '
            f"stroke={quoteattr(edge.stroke)} stroke-opacity=\"{_fmt(edge.opacity)}\" "
            f'stroke-width="{_fmt(edge.width)}"/>'
        )
    lines.append("  </g>")
    lines.append('  <g class="nodes">')
    for node in frame.nodes:
        classes = ["node", node.node_type]
        if node.selected:
            classes.append("selected")
        if node.hovered:
            classes.append("hovered")
        lines.append(f"    <g data-id={quoteattr(node.node_id)} class={quoteattr(' '.join(classes))}>")
        lines.append(
            f'      <circle cx="{_fmt(node.x)}" cy="{_fmt(node.y)}" r="{_fmt(node.radius)}" '
            f"fill={quoteattr(node.fill)} stroke={quoteattr(node.stroke)} "
            f'stroke-width="{_fmt(node.stroke_width)}"/>'
        )
        lines.append(
            f'      <text x="{_fmt(node.label_x)}" y="{_fmt(node.label_y)}" text-anchor="middle" '
            f'font-size="{_fmt(node.font_size)}" font-weight="{node.font_weight}" '
            f"fill={quoteattr(node.label_color)}>{escape(node.label)}</text>"
        )
        lines.append("    </g>")
    lines.append("  </g>")
    if legend and frame.legend:
        lines.extend(_legend(frame))
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


__all__ = ["frame_to_svg"]
