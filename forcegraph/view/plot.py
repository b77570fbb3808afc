"""Draw frames with matplotlib (Agg backend, file output only)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .render import Frame

logger = logging.getLogger(__name__)

DPI = 100


def plot_frame(frame: Frame, path: Union[str, Path], *, legend: bool = True) -> Path:
    """Render ``frame`` to an image file; the format follows the suffix."""

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.lines import Line2D
    from matplotlib.patches import Circle

    width = max(frame.width, 1.0)
    height = max(frame.height, 1.0)
    fig = plt.figure(figsize=(width / DPI, height / DPI), dpi=DPI)
    ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
    ax.set_xlim(0.0, width)
    ax.set_ylim(height, 0.0)  # screen y grows downward
    ax.set_aspect("equal")
    ax.axis("off")
    fig.patch.set_facecolor(frame.background)

    # Font sizes and line widths in frames are pixels; matplotlib wants points.
    px_to_pt = 72.0 / DPI

    for edge in frame.edges:
        ax.plot(
            [edge.x1, edge.x2],
            [edge.y1, edge.y2],
            color=edge.stroke,
            alpha=edge.opacity,
            linewidth=edge.width * px_to_pt,
            zorder=1,
        )
    for node in frame.nodes:
        ax.add_patch(
            Circle(
                (node.x, node.y),
                node.radius,
                facecolor=node.fill,
                edgecolor=node.stroke,
                linewidth=node.stroke_width * px_to_pt,
                zorder=2,
            )
        )
        ax.text(
            node.label_x,
            node.label_y,
            node.label,
            ha="center",
            va="center",
            fontsize=node.font_size * px_to_pt,
            color=node.label_color,
            fontweight=node.font_weight,
            zorder=3,
        )

    if legend and frame.legend:
        handles = [
            Line2D([0], [0], marker="o", linestyle="", markerfacecolor=e.color, markeredgecolor=e.color, label=e.title)
            for e in frame.legend
        ]
        ax.legend(handles=handles, loc="upper left", frameon=True, fontsize=8)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=DPI, facecolor=fig.get_facecolor())
    plt.close(fig)
    logger.info("Wrote frame image to %s", path)
    return path


__all__ = ["plot_frame"]
