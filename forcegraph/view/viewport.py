"""Pan/zoom transform between simulation space and screen space."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..config import ViewportConfig
from ..model import Point

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ViewportTransform:
    """``screen = sim * scale + translate``.

    Only the render projection and hit-testing go through this object; it
    never reads or writes node positions.
    """

    def __init__(
        self,
        scale: float = 1.0,
        translate_x: float = 0.0,
        translate_y: float = 0.0,
        *,
        min_scale: float = 0.1,
        max_scale: float = 4.0,
    ) -> None:
        if not 0.0 < min_scale <= max_scale:
            raise ValueError(f"invalid scale bounds [{min_scale}, {max_scale}]")
        self.min_scale = float(min_scale)
        self.max_scale = float(max_scale)
        self.scale = _clamp(float(scale), self.min_scale, self.max_scale)
        self.translate_x = float(translate_x)
        self.translate_y = float(translate_y)

    @classmethod
    def from_config(cls, config: Optional[ViewportConfig] = None) -> "ViewportTransform":
        config = config or ViewportConfig()
        return cls(min_scale=config.min_scale, max_scale=config.max_scale)

    def apply(self, point: Point) -> Point:
        x, y = point
        return (x * self.scale + self.translate_x, y * self.scale + self.translate_y)

    def invert(self, point: Point) -> Point:
        x, y = point
        return ((x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale)

    def apply_many(self, points: np.ndarray) -> np.ndarray:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        return points * self.scale + np.array([self.translate_x, self.translate_y])

    def zoom_at(self, screen_point: Point, factor: float) -> bool:
        """Scale by ``factor`` keeping ``screen_point`` over the same sim point.

        Returns ``False`` when clamping leaves the scale unchanged.
        """

        if not np.isfinite(factor) or factor <= 0.0:
            return False
        new_scale = _clamp(self.scale * factor, self.min_scale, self.max_scale)
        if new_scale == self.scale:
            return False
        anchor = self.invert(screen_point)
        self.scale = new_scale
        self.translate_x = screen_point[0] - anchor[0] * new_scale
        self.translate_y = screen_point[1] - anchor[1] * new_scale
        logger.debug("Zoomed to scale=%.4f around %s", new_scale, screen_point)
        return True

    def pan_by(self, dx: float, dy: float) -> None:
        self.translate_x += dx
        self.translate_y += dy

    def reset(self) -> None:
        self.scale = _clamp(1.0, self.min_scale, self.max_scale)
        self.translate_x = 0.0
        self.translate_y = 0.0

    def __repr__(self) -> str:
        return (
            f"ViewportTransform(scale={self.scale:.4g}, "
            f"translate=({self.translate_x:.4g}, {self.translate_y:.4g}))"
        )


__all__ = ["ViewportTransform"]
