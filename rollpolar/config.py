from __future__ import annotations

from dataclasses import dataclass

# Dimension guards for the binary polar format.
MAX_SPEEDS = 100
MAX_HEADINGS = 360

# Roll values outside this range are kept but ignored by statistics.
PLAUSIBLE_ROLL_RANGE = (0.0, 90.0)

# Radial axis of the chart is fixed, independent of the data's speed range.
FIXED_MAX_SPEED_KN = 25.0

TRAFFIC_LIGHT_MARGIN_DEG = 5.0

LEGEND_TOTAL_WIDTH_PX = 80

# Rows rasterised between cooperative cancel checks.
RASTER_ROW_CHUNK = 64


@dataclass(frozen=True)
class ChartLayout:
    legend_width: int = LEGEND_TOTAL_WIDTH_PX
    side_margin: int = 60
    vertical_margin: int = 80
    radius_factor: float = 0.42


DEFAULT_LAYOUT = ChartLayout()
