from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ChartStyle:
    """
    Presentation skin for the polar chart. The heat-map itself is identical
    for every style; only background and overlay drawing differ.
    """

    name: str
    background: RGBA
    minor_ring: Optional[RGBA]
    minor_ring_width: int
    major_ring: RGBA
    major_ring_width: int
    spoke: RGBA
    spoke_width: int
    outer_ring: Optional[RGBA]
    label_fill: RGBA
    label_muted: RGBA
    label_outline: Optional[RGBA]
    compass_font_size: int
    angle_font_size: int
    speed_font_size: int
    legend_font_size: int
    compass_label_offset: float
    angle_label_offset: float
    wave_arrow: RGBA
    wave_arrow_inward: bool
    vessel_shape: str  # "boat" | "triangle"
    vessel_fill: RGBA
    vessel_outline: RGBA
    vessel_accent: RGBA
    legend_border: RGBA
    threshold_line: RGBA
    threshold_label: RGBA


CANVAS_STYLE = ChartStyle(
    name="canvas",
    background=(0, 0, 0, 0),
    minor_ring=(0, 0, 0, 77),
    minor_ring_width=1,
    major_ring=(0, 0, 0, 140),
    major_ring_width=2,
    spoke=(0, 0, 0, 140),
    spoke_width=2,
    outer_ring=None,
    label_fill=(255, 255, 255, 255),
    label_muted=(204, 204, 204, 255),
    label_outline=(0, 0, 0, 128),
    compass_font_size=20,
    angle_font_size=13,
    speed_font_size=12,
    legend_font_size=11,
    compass_label_offset=30.0,
    angle_label_offset=26.0,
    wave_arrow=(204, 204, 204, 255),
    wave_arrow_inward=False,
    vessel_shape="boat",
    vessel_fill=(255, 255, 255, 255),
    vessel_outline=(1, 43, 79, 255),
    vessel_accent=(20, 115, 230, 255),
    legend_border=(170, 170, 170, 255),
    threshold_line=(228, 38, 43, 255),
    threshold_label=(255, 102, 102, 255),
)

SIMPLE_STYLE = ChartStyle(
    name="simple",
    background=(90, 108, 125, 255),
    minor_ring=None,
    minor_ring_width=1,
    major_ring=(255, 255, 255, 64),
    major_ring_width=1,
    spoke=(0, 0, 0, 77),
    spoke_width=1,
    outer_ring=(255, 255, 255, 102),
    label_fill=(255, 255, 255, 255),
    label_muted=(221, 221, 221, 255),
    label_outline=None,
    compass_font_size=20,
    angle_font_size=11,
    speed_font_size=11,
    legend_font_size=12,
    compass_label_offset=45.0,
    angle_label_offset=18.0,
    wave_arrow=(255, 255, 255, 179),
    wave_arrow_inward=True,
    vessel_shape="triangle",
    vessel_fill=(255, 255, 255, 255),
    vessel_outline=(33, 150, 243, 255),
    vessel_accent=(33, 150, 243, 255),
    legend_border=(255, 255, 255, 255),
    threshold_line=(221, 0, 85, 255),
    threshold_label=(255, 221, 221, 255),
)

STYLES: Dict[str, ChartStyle] = {s.name: s for s in (CANVAS_STYLE, SIMPLE_STYLE)}


def get_style(style: "str | ChartStyle") -> ChartStyle:
    if isinstance(style, ChartStyle):
        return style
    key = str(style).strip().lower()
    if key not in STYLES:
        raise ValueError(f"Unknown chart style {style!r}; expected one of: {', '.join(sorted(STYLES))}")
    return STYLES[key]
