from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from rollpolar.config import TRAFFIC_LIGHT_MARGIN_DEG
from rollpolar.models.grid import PolarGrid, plausible_mask
from rollpolar.models.render import ColorMode, RenderConfig, coerce_enum

RGB = Tuple[int, int, int]

# Bins 0..8 run low -> high danger; bin 9 is the overflow colour (> max roll).
CONTINUOUS_PALETTE_HEX = (
    "#313695",  # deep blue
    "#4575B4",  # blue
    "#74ADD1",  # light blue
    "#E0F3F8",  # pale cyan
    "#FFFFBF",  # pale yellow
    "#FDAE61",  # orange
    "#F46D43",  # deep orange
    "#D73027",  # red
    "#A50026",  # dark red
    "#AA0066",  # overflow
)
TRAFFIC_LIGHT_HEX = ("#09BE5E", "#FFEC74", "#F7116A")  # green, yellow, red

NUM_CONTINUOUS_BINS = 9
OVERFLOW_BIN = 9


class UnrecognizedColorModeError(ValueError):
    pass


def hex_to_rgb(value: str) -> RGB:
    s = value.strip().lstrip("#")
    if len(s) != 6:
        raise ValueError(f"expected #RRGGBB, got {value!r}")
    return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)


CONTINUOUS_PALETTE: Tuple[RGB, ...] = tuple(hex_to_rgb(h) for h in CONTINUOUS_PALETTE_HEX)
TRAFFIC_LIGHT_PALETTE: Tuple[RGB, ...] = tuple(hex_to_rgb(h) for h in TRAFFIC_LIGHT_HEX)

_CONTINUOUS_LUT = np.asarray(CONTINUOUS_PALETTE, dtype=np.uint8)
_TRAFFIC_LUT = np.asarray(TRAFFIC_LIGHT_PALETTE, dtype=np.uint8)


def _as_mode(mode: Union[ColorMode, str]) -> ColorMode:
    try:
        return coerce_enum(mode, ColorMode, "colour mode")
    except ValueError as exc:
        raise UnrecognizedColorModeError(str(exc)) from exc


@dataclass(frozen=True)
class ColorScale:
    mode: Union[ColorMode, str]
    min_roll: float
    max_roll_angle: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", _as_mode(self.mode))
        object.__setattr__(self, "min_roll", float(self.min_roll))
        object.__setattr__(self, "max_roll_angle", float(self.max_roll_angle))

    @classmethod
    def from_grid(cls, grid: PolarGrid, mode: Union[ColorMode, str], max_roll_angle: float) -> "ColorScale":
        """Lower bound is the smallest plausible roll in the grid, else 0."""
        min_roll = 0.0
        if not grid.is_empty:
            valid = grid.roll_deg[plausible_mask(grid.roll_deg)]
            if valid.size:
                min_roll = float(np.min(valid))
        if min_roll >= float(max_roll_angle):
            min_roll = 0.0
        return cls(mode=mode, min_roll=min_roll, max_roll_angle=float(max_roll_angle))

    @classmethod
    def for_render(cls, grid: PolarGrid, config: RenderConfig) -> "ColorScale":
        return cls.from_grid(grid, config.mode, config.max_roll_deg)


def continuous_bin(value: float, min_roll: float, max_roll_angle: float) -> int:
    v = float(value)
    if max_roll_angle <= min_roll or v <= min_roll or math.isnan(v):
        return 0
    if v > max_roll_angle:
        return OVERFLOW_BIN
    interval = (max_roll_angle - min_roll) / NUM_CONTINUOUS_BINS
    return min(int(math.floor((v - min_roll) / interval)), NUM_CONTINUOUS_BINS - 1)


def traffic_light_band(value: float, max_roll_angle: float) -> int:
    """0 = green, 1 = yellow, 2 = red."""
    v = float(value)
    if v <= max_roll_angle - TRAFFIC_LIGHT_MARGIN_DEG:
        return 0
    if v <= max_roll_angle:
        return 1
    return 2


def map_color(value: float, scale: ColorScale) -> RGB:
    if scale.mode is ColorMode.CONTINUOUS:
        return CONTINUOUS_PALETTE[continuous_bin(value, scale.min_roll, scale.max_roll_angle)]
    if scale.mode is ColorMode.TRAFFIC_LIGHT:
        return TRAFFIC_LIGHT_PALETTE[traffic_light_band(value, scale.max_roll_angle)]
    raise UnrecognizedColorModeError(f"Unrecognised colour mode: {scale.mode!r}")


def continuous_bins(values: np.ndarray, min_roll: float, max_roll_angle: float) -> np.ndarray:
    v = np.asarray(values, dtype=np.float64)
    idx = np.zeros(v.shape, dtype=np.intp)
    if max_roll_angle <= min_roll:
        return idx
    interval = (max_roll_angle - min_roll) / NUM_CONTINUOUS_BINS
    with np.errstate(invalid="ignore"):
        inside = (v > min_roll) & (v <= max_roll_angle)
        raw = np.floor((v[inside] - min_roll) / interval)
        idx[inside] = np.minimum(raw, NUM_CONTINUOUS_BINS - 1).astype(np.intp)
        idx[v > max_roll_angle] = OVERFLOW_BIN
    return idx


def traffic_light_bands(values: np.ndarray, max_roll_angle: float) -> np.ndarray:
    v = np.asarray(values, dtype=np.float64)
    band = np.full(v.shape, 2, dtype=np.intp)
    with np.errstate(invalid="ignore"):
        band[v <= max_roll_angle] = 1
        band[v <= max_roll_angle - TRAFFIC_LIGHT_MARGIN_DEG] = 0
    return band


def map_colors(values: np.ndarray, scale: ColorScale) -> np.ndarray:
    """Vectorised ``map_color``: returns uint8 RGB with a trailing axis of 3."""
    if scale.mode is ColorMode.CONTINUOUS:
        return _CONTINUOUS_LUT[continuous_bins(values, scale.min_roll, scale.max_roll_angle)]
    if scale.mode is ColorMode.TRAFFIC_LIGHT:
        return _TRAFFIC_LUT[traffic_light_bands(values, scale.max_roll_angle)]
    raise UnrecognizedColorModeError(f"Unrecognised colour mode: {scale.mode!r}")
