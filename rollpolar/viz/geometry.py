from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from rollpolar.config import DEFAULT_LAYOUT, ChartLayout


@dataclass(frozen=True)
class ChartGeometry:
    width: int
    height: int
    centre_x: float
    centre_y: float
    max_radius: float

    @property
    def drawable(self) -> bool:
        return self.width > 0 and self.height > 0 and self.max_radius > 0.0

    def point_at(self, display_deg: float, radius: float) -> Tuple[float, float]:
        """Screen point for a display angle (0 = up, clockwise) and radius."""
        rad = math.radians(display_deg - 90.0)
        return self.centre_x + radius * math.cos(rad), self.centre_y + radius * math.sin(rad)

    def radius_for_speed(self, speed_kn: float, max_speed_kn: float) -> float:
        return (float(speed_kn) / float(max_speed_kn)) * self.max_radius


def chart_geometry(width: int, height: int, layout: ChartLayout = DEFAULT_LAYOUT) -> ChartGeometry:
    """Chart centre is shifted right to leave room for the legend strip."""
    legend = float(layout.legend_width)
    max_radius = min(width - legend - layout.side_margin, height - layout.vertical_margin) * layout.radius_factor
    return ChartGeometry(
        width=int(width),
        height=int(height),
        centre_x=legend + (width - legend) / 2.0,
        centre_y=height / 2.0,
        max_radius=max(0.0, float(max_radius)),
    )
