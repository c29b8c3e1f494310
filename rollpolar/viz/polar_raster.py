from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from rollpolar.config import DEFAULT_LAYOUT, RASTER_ROW_CHUNK, ChartLayout
from rollpolar.core.angles import compass_from_display, encounter_angle, normalize_angle
from rollpolar.models.grid import PolarGrid
from rollpolar.models.render import RenderConfig
from rollpolar.polar.interp import interpolate_roll_field
from rollpolar.viz.colormap import ColorScale, map_colors
from rollpolar.viz.geometry import ChartGeometry, chart_geometry
from rollpolar.viz.overlay import compose_chart, draw_placeholder
from rollpolar.viz.styles import ChartStyle, get_style


class RenderCancelled(Exception):
    pass


@dataclass(frozen=True)
class QueryField:
    speed_kn: np.ndarray
    compass_deg: np.ndarray
    encounter_deg: np.ndarray
    inside: np.ndarray


def query_field(
    geometry: ChartGeometry,
    config: RenderConfig,
    row_start: int = 0,
    row_stop: Optional[int] = None,
) -> QueryField:
    """
    Map rows [row_start, row_stop) to chart coordinates. Pixels are sampled
    at their integer coordinates, with no half-pixel offset.

    The interpolation heading is the encounter angle: wave direction relative
    to the compass heading under the pixel, folded into [0, 180].
    """
    stop = geometry.height if row_stop is None else int(row_stop)
    ys = np.arange(int(row_start), stop, dtype=np.float64)[:, None]
    xs = np.arange(geometry.width, dtype=np.float64)[None, :]
    dx = xs - geometry.centre_x
    dy = ys - geometry.centre_y
    radius = np.hypot(dx, dy)
    inside = radius <= geometry.max_radius

    display = normalize_angle(np.degrees(np.arctan2(dy, dx)) + 90.0)
    compass = compass_from_display(display, config.orientation, config.vessel_heading_deg)
    encounter = encounter_angle(config.wave_direction_deg, compass)

    if geometry.max_radius > 0.0:
        speed = radius / geometry.max_radius * config.max_speed_kn
    else:
        speed = np.zeros_like(radius)
    return QueryField(speed_kn=speed, compass_deg=compass, encounter_deg=encounter, inside=inside)


def render_heatmap(
    grid: Optional[PolarGrid],
    config: RenderConfig,
    *,
    layout: ChartLayout = DEFAULT_LAYOUT,
    cancel: Optional[Callable[[], bool]] = None,
    scale: Optional[ColorScale] = None,
) -> np.ndarray:
    """
    Colour every pixel inside the chart circle; everything else stays fully
    transparent. Returns uint8 RGBA of shape (height, width, 4).
    """
    image = np.zeros((config.height, config.width, 4), dtype=np.uint8)
    geometry = chart_geometry(config.width, config.height, layout)
    if grid is None or grid.is_empty or not geometry.drawable:
        return image

    scale = scale or ColorScale.for_render(grid, config)
    for start in range(0, config.height, RASTER_ROW_CHUNK):
        if cancel is not None and cancel():
            raise RenderCancelled(f"render cancelled at row {start}")
        stop = min(start + RASTER_ROW_CHUNK, config.height)
        q = query_field(geometry, config, start, stop)
        if not q.inside.any():
            continue
        roll = interpolate_roll_field(grid, q.speed_kn, q.encounter_deg, q.inside)
        rgb = map_colors(roll, scale)
        block = image[start:stop]
        block[q.inside, :3] = rgb[q.inside]
        block[q.inside, 3] = 255
    return image


def render_polar_chart(
    grid: Optional[PolarGrid],
    config: RenderConfig,
    style: "str | ChartStyle" = "canvas",
    *,
    layout: ChartLayout = DEFAULT_LAYOUT,
    cancel: Optional[Callable[[], bool]] = None,
) -> np.ndarray:
    """Heat-map plus grid, labels, vessel, wave arrow and legend."""
    skin = get_style(style)
    geometry = chart_geometry(config.width, config.height, layout)
    if config.width == 0 or config.height == 0:
        return np.zeros((config.height, config.width, 4), dtype=np.uint8)
    if grid is None or grid.is_empty or not geometry.drawable:
        return draw_placeholder(config.width, config.height, skin)

    scale = ColorScale.for_render(grid, config)
    heat = render_heatmap(grid, config, layout=layout, cancel=cancel, scale=scale)
    return compose_chart(heat, geometry, config, scale, skin)
