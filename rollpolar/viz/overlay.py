from __future__ import annotations

import math
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from rollpolar.config import TRAFFIC_LIGHT_MARGIN_DEG
from rollpolar.core.angles import display_from_compass
from rollpolar.models.render import ColorMode, RenderConfig
from rollpolar.viz.colormap import ColorScale, map_color
from rollpolar.viz.geometry import ChartGeometry
from rollpolar.viz.styles import RGBA, ChartStyle

Point = Tuple[float, float]

COMPASS_LABELS = ((0, "N"), (90, "E"), (180, "S"), (270, "W"))
INTERMEDIATE_ANGLES = (30, 60, 120, 150, 210, 240, 300, 330)

# Local boat outline, bow pointing to -y.
_BOAT_OUTLINE: Sequence[Point] = (
    (0.0, -11.0),
    (3.5, -7.0),
    (5.0, -1.0),
    (5.0, 5.5),
    (2.5, 11.0),
    (-2.5, 11.0),
    (-5.0, 5.5),
    (-5.0, -1.0),
    (-3.5, -7.0),
)
_TRIANGLE_OUTLINE: Sequence[Point] = ((0.0, -18.0), (10.8, 9.0), (-10.8, 9.0))


@lru_cache(maxsize=16)
def _font(size: int) -> ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


def _draw_text(
    draw: ImageDraw.ImageDraw,
    xy: Point,
    text: str,
    size: int,
    fill: RGBA,
    outline: Optional[RGBA] = None,
    align: str = "center",
    valign: str = "middle",
) -> None:
    font = _font(size)
    stroke = 2 if outline is not None else 0
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font, stroke_width=stroke)
    w = right - left
    h = bottom - top
    x, y = xy
    if align == "center":
        ox = x - w / 2.0 - left
    elif align == "left":
        ox = x - left
    else:
        ox = x - w - left
    if valign == "middle":
        oy = y - h / 2.0 - top
    elif valign == "bottom":
        oy = y - h - top
    else:
        oy = y - top
    draw.text((ox, oy), text, font=font, fill=fill, stroke_width=stroke, stroke_fill=outline)


def _circle(draw: ImageDraw.ImageDraw, geometry: ChartGeometry, r: float, colour: RGBA, width: int) -> None:
    cx, cy = geometry.centre_x, geometry.centre_y
    draw.ellipse([cx - r, cy - r, cx + r, cy + r], outline=colour, width=width)


def _rotate(points: Sequence[Point], display_deg: float, origin: Point) -> List[Point]:
    """Rotate clockwise on screen (y down) by ``display_deg`` and translate."""
    a = math.radians(display_deg)
    c, s = math.cos(a), math.sin(a)
    ox, oy = origin
    return [(ox + x * c - y * s, oy + x * s + y * c) for x, y in points]


def _arrow_head(tip: Point, travel_rad: float, size: float) -> List[Point]:
    tx, ty = tip
    return [
        tip,
        (tx - size * math.cos(travel_rad - math.pi / 6), ty - size * math.sin(travel_rad - math.pi / 6)),
        (tx - size * math.cos(travel_rad + math.pi / 6), ty - size * math.sin(travel_rad + math.pi / 6)),
    ]


def _dashed_hline(draw: ImageDraw.ImageDraw, x0: float, x1: float, y: float, colour: RGBA, width: int) -> None:
    x = x0
    while x < x1:
        draw.line([(x, y), (min(x + 4.0, x1), y)], fill=colour, width=width)
        x += 6.0


def draw_grid(draw: ImageDraw.ImageDraw, geometry: ChartGeometry, config: RenderConfig, style: ChartStyle) -> None:
    R = geometry.max_radius
    max_speed = config.max_speed_kn
    if style.minor_ring is not None:
        for spd in range(1, int(math.floor(max_speed)) + 1):
            if spd % 5 == 0:
                continue
            _circle(draw, geometry, geometry.radius_for_speed(spd, max_speed), style.minor_ring, style.minor_ring_width)
    for i in range(1, 6):
        _circle(draw, geometry, R / 5.0 * i, style.major_ring, style.major_ring_width)

    centre = (geometry.centre_x, geometry.centre_y)
    for angle in range(0, 360, 30):
        display = display_from_compass(angle, config.orientation, config.vessel_heading_deg)
        draw.line([centre, geometry.point_at(display, R)], fill=style.spoke, width=style.spoke_width)

    if style.outer_ring is not None:
        _circle(draw, geometry, R, style.outer_ring, 2)


def draw_labels(draw: ImageDraw.ImageDraw, geometry: ChartGeometry, config: RenderConfig, style: ChartStyle) -> None:
    R = geometry.max_radius
    for spd in range(5, int(math.ceil(config.max_speed_kn / 5.0)) * 5 + 1, 5):
        r = geometry.radius_for_speed(spd, config.max_speed_kn)
        if r <= R:
            _draw_text(
                draw,
                (geometry.centre_x + 3, geometry.centre_y - r - 4),
                f"{spd}kn",
                style.speed_font_size,
                style.label_fill,
                style.label_outline,
                valign="bottom",
            )

    for angle, label in COMPASS_LABELS:
        display = display_from_compass(angle, config.orientation, config.vessel_heading_deg)
        xy = geometry.point_at(display, R + style.compass_label_offset)
        _draw_text(draw, xy, label, style.compass_font_size, style.label_fill, style.label_outline)

    for angle in INTERMEDIATE_ANGLES:
        display = display_from_compass(angle, config.orientation, config.vessel_heading_deg)
        xy = geometry.point_at(display, R + style.angle_label_offset)
        _draw_text(draw, xy, f"{angle}°", style.angle_font_size, style.label_muted, style.label_outline)


def draw_wave_arrow(draw: ImageDraw.ImageDraw, geometry: ChartGeometry, config: RenderConfig, style: ChartStyle) -> None:
    R = geometry.max_radius
    display = display_from_compass(config.wave_direction_deg, config.orientation, config.vessel_heading_deg)
    rad = math.radians(display - 90.0)
    if style.wave_arrow_inward:
        start = geometry.point_at(display, R + 60.0)
        tip = geometry.point_at(display, R + 10.0)
        travel = rad + math.pi
        label_at = (start[0] + 15.0 * math.cos(rad), start[1] + 15.0 * math.sin(rad))
    else:
        start = geometry.point_at(display, R * 0.88)
        tip = geometry.point_at(display, R * 1.20)
        travel = rad
        label_at = geometry.point_at(display, R * 1.35)
    draw.line([start, tip], fill=style.wave_arrow, width=3)
    draw.polygon(_arrow_head(tip, travel, 12.0), fill=style.wave_arrow)
    _draw_text(draw, (label_at[0], label_at[1] - 7), "Wave", 11, style.label_fill, style.label_outline)
    _draw_text(draw, (label_at[0], label_at[1] + 7), "Direction", 11, style.label_fill, style.label_outline)


def draw_vessel(draw: ImageDraw.ImageDraw, geometry: ChartGeometry, config: RenderConfig, style: ChartStyle) -> None:
    display = display_from_compass(config.vessel_heading_deg, config.orientation, config.vessel_heading_deg)
    origin = geometry.point_at(display, geometry.radius_for_speed(config.vessel_speed_kn, config.max_speed_kn))
    outline = _BOAT_OUTLINE if style.vessel_shape == "boat" else _TRIANGLE_OUTLINE
    draw.polygon(_rotate(outline, display, origin), fill=style.vessel_fill, outline=style.vessel_outline, width=2)
    if style.vessel_shape == "boat":
        keel = _rotate(((0.0, -8.0), (0.0, 8.0)), display, origin)
        draw.line(keel, fill=style.vessel_accent, width=2)
    (dot_x, dot_y), = _rotate(((0.0, 0.0) if style.vessel_shape == "boat" else (0.0, 3.6),), display, origin)
    draw.ellipse([dot_x - 3, dot_y - 3, dot_x + 3, dot_y + 3], fill=style.vessel_accent)


def legend_range(scale: ColorScale) -> Tuple[float, float]:
    """Value span sampled by the legend bar, bottom to top."""
    if scale.mode is ColorMode.CONTINUOUS:
        lo = scale.min_roll
        hi = max(scale.max_roll_angle * 1.15, lo + 1.0)
        return lo, hi
    return 0.0, max(scale.max_roll_angle * 1.5, 1.0)


def legend_ticks(scale: ColorScale) -> List[float]:
    lo, hi = legend_range(scale)
    if scale.mode is ColorMode.CONTINUOUS:
        return [lo + (hi - lo) * i / 6.0 for i in range(7)]
    ticks = [lo, scale.max_roll_angle - TRAFFIC_LIGHT_MARGIN_DEG, scale.max_roll_angle, hi]
    return sorted({t for t in ticks if lo <= t <= hi})


def draw_legend(draw: ImageDraw.ImageDraw, geometry: ChartGeometry, scale: ColorScale, style: ChartStyle) -> None:
    bar_x = 18.0
    bar_w = 22.0
    top = geometry.centre_y - geometry.max_radius + 20.0
    bottom = geometry.centre_y + geometry.max_radius - 20.0
    bar_h = bottom - top
    if bar_h <= 1.0:
        return

    _draw_text(draw, (10, top - 8), "Roll [deg]", 12, style.label_fill, None, align="left", valign="bottom")

    lo, hi = legend_range(scale)
    rows = int(math.floor(bar_h))
    for i in range(rows + 1):
        value = lo + (hi - lo) * (rows - i) / rows
        r, g, b = map_color(value, scale)
        draw.line([(bar_x, top + i), (bar_x + bar_w - 1, top + i)], fill=(r, g, b, 255))
    draw.rectangle([bar_x, top, bar_x + bar_w, bottom], outline=style.legend_border, width=1)

    def y_for(v: float) -> float:
        return bottom - (v - lo) / (hi - lo) * bar_h

    for v in legend_ticks(scale):
        y = y_for(v)
        draw.line([(bar_x + bar_w, y), (bar_x + bar_w + 4, y)], fill=style.legend_border, width=1)
        _draw_text(draw, (bar_x + bar_w + 6, y), f"{v:.0f}", style.legend_font_size, style.label_fill, None, align="left")

    if scale.mode is ColorMode.CONTINUOUS and lo <= scale.max_roll_angle <= hi:
        y = y_for(scale.max_roll_angle)
        _dashed_hline(draw, bar_x - 3, bar_x + bar_w + 3, y, style.threshold_line, 2)
        _draw_text(draw, (bar_x + bar_w + 30, y - 8), "Max", 10, style.threshold_label, None, align="left")
        _draw_text(draw, (bar_x + bar_w + 30, y + 4), "roll", 10, style.threshold_label, None, align="left")


def _overlay_layer(width: int, height: int) -> Tuple[Image.Image, ImageDraw.ImageDraw]:
    # ImageDraw replaces RGBA pixels outright; strokes go on their own layer.
    layer = Image.new("RGBA", (int(width), int(height)), (0, 0, 0, 0))
    return layer, ImageDraw.Draw(layer, "RGBA")


def compose_chart(
    heat: np.ndarray,
    geometry: ChartGeometry,
    config: RenderConfig,
    scale: ColorScale,
    style: ChartStyle,
) -> np.ndarray:
    base = Image.new("RGBA", (geometry.width, geometry.height), style.background)
    base.alpha_composite(Image.fromarray(np.ascontiguousarray(heat, dtype=np.uint8)))
    layer, draw = _overlay_layer(geometry.width, geometry.height)
    draw_grid(draw, geometry, config, style)
    draw_labels(draw, geometry, config, style)
    draw_wave_arrow(draw, geometry, config, style)
    draw_vessel(draw, geometry, config, style)
    draw_legend(draw, geometry, scale, style)
    base.alpha_composite(layer)
    return np.array(base, dtype=np.uint8)


def draw_placeholder(width: int, height: int, style: ChartStyle, message: str = "No polar data loaded") -> np.ndarray:
    img = Image.new("RGBA", (int(width), int(height)), style.background)
    layer, draw = _overlay_layer(width, height)
    _draw_text(draw, (width / 2.0, height / 2.0), message, 14, style.label_fill, style.label_outline)
    img.alpha_composite(layer)
    return np.array(img, dtype=np.uint8)
