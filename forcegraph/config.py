"""Tunable constants for the layout engine, styling and viewport."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, Optional

# Cools from 1.0 to ``alpha_min`` in roughly 300 ticks.
DEFAULT_ALPHA_DECAY = 1.0 - 0.001 ** (1.0 / 300.0)


def _per_type(identity: float, other: float) -> Dict[str, float]:
    return {"identity": identity, "platform": other, "identifier": other}


@dataclass
class ForceConfig:
    """Physics knobs for :class:`forcegraph.layout.Simulation`."""

    link_distance: float = 100.0
    charge_strength: float = -300.0
    distance_min: float = 1.0
    collide_strength: float = 1.0
    collide_radius: Dict[str, float] = field(default_factory=lambda: _per_type(30.0, 30.0))
    default_collide_radius: float = 30.0
    center_strength: float = 1.0

    alpha: float = 1.0
    alpha_min: float = 0.001
    alpha_decay: float = DEFAULT_ALPHA_DECAY
    alpha_target: float = 0.0
    velocity_decay: float = 0.4
    reheat_target: float = 0.3

    initial_radius: float = 10.0
    initial_jitter: float = 0.0
    seed: Optional[int] = 0

    def collide_radius_for(self, node_type: str) -> float:
        return float(self.collide_radius.get(node_type, self.default_collide_radius))


@dataclass
class StyleConfig:
    node_radius: Dict[str, float] = field(default_factory=lambda: _per_type(20.0, 15.0))
    hover_radius: Dict[str, float] = field(default_factory=lambda: _per_type(25.0, 20.0))
    default_radius: float = 15.0
    default_hover_radius: float = 20.0
    fill: Dict[str, str] = field(
        default_factory=lambda: {
            "identity": "#8B5CF6",
            "platform": "#06B6D4",
            "identifier": "#10B981",
        }
    )
    default_fill: str = "#10B981"
    stroke: str = "#9CA3AF"
    selected_stroke: str = "#F59E0B"
    stroke_width: float = 2.0
    emphasized_stroke_width: float = 3.0

    label_offset: Dict[str, float] = field(default_factory=lambda: _per_type(35.0, 30.0))
    default_label_offset: float = 30.0
    label_font_size: float = 12.0
    hover_label_font_size: float = 14.0
    label_color: str = "#374151"
    hover_label_color: str = "#FFFFFF"
    label_font_weight: int = 500

    edge_stroke: str = "#D1D5DB"
    edge_opacity: float = 0.6
    edge_width: float = 2.0
    background: str = "#F9FAFB"


@dataclass
class ViewportConfig:
    min_scale: float = 0.1
    max_scale: float = 4.0
    wheel_sensitivity: float = 0.002
    drag_threshold: float = 3.0
    width: float = 800.0
    height: float = 600.0


@dataclass
class ViewConfig:
    forces: ForceConfig = field(default_factory=ForceConfig)
    style: StyleConfig = field(default_factory=StyleConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)


_VIEW_CONFIG = ViewConfig()


def get_view_config() -> ViewConfig:
    return copy.deepcopy(_VIEW_CONFIG)


def set_view_config(config: ViewConfig) -> None:
    global _VIEW_CONFIG
    _VIEW_CONFIG = copy.deepcopy(config)


__all__ = [
    "DEFAULT_ALPHA_DECAY",
    "ForceConfig",
    "StyleConfig",
    "ViewConfig",
    "ViewportConfig",
    "get_view_config",
    "set_view_config",
]
