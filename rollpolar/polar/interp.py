from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from rollpolar.core.angles import normalize_angle
from rollpolar.models.grid import PolarGrid
from rollpolar.polar._interp_jit import heading_bracket as _heading_bracket
from rollpolar.polar._interp_jit import interpolate_many as _interpolate_many
from rollpolar.polar._interp_jit import interpolate_one as _interpolate_one
from rollpolar.polar._interp_jit import speed_bracket as _speed_bracket


@dataclass(frozen=True)
class Bracket:
    lo: int
    hi: int
    t: float


def find_speed_bracket(grid: PolarGrid, target_speed: float) -> Bracket:
    lo, hi, t = _speed_bracket(float(target_speed), grid.speeds_kn)
    return Bracket(int(lo), int(hi), float(t))


def find_heading_bracket(grid: PolarGrid, target_heading: float) -> Bracket:
    lo, hi, t = _heading_bracket(normalize_angle(target_heading), grid.headings_deg)
    return Bracket(int(lo), int(hi), float(t))


def interpolate_roll(grid: PolarGrid, target_speed: float, target_heading: float) -> float:
    """
    Bilinear roll angle at (speed, heading).

    Speeds outside the grid clamp to the edge row. Headings bracket circularly
    in stored order, falling back to the nearest heading when no pair
    brackets. The result is not clamped to the plausible roll range.
    """
    if grid.is_empty:
        return 0.0
    return float(
        _interpolate_one(grid.speeds_kn, grid.headings_deg, grid.roll_deg, float(target_speed), float(target_heading))
    )


def interpolate_roll_field(
    grid: PolarGrid,
    speeds: np.ndarray,
    headings: np.ndarray,
    active: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Interpolate over arrays of query points of any (matching) shape.
    Entries where ``active`` is False come back as NaN.
    """
    q_s = np.asarray(speeds, dtype=np.float64)
    q_h = np.asarray(headings, dtype=np.float64)
    if q_s.shape != q_h.shape:
        raise ValueError(f"speed/heading query shapes differ: {q_s.shape} vs {q_h.shape}")
    shape = q_s.shape
    if active is None:
        mask = np.ones(shape, dtype=np.bool_)
    else:
        mask = np.asarray(active, dtype=np.bool_)
        if mask.shape != shape:
            raise ValueError(f"active mask shape {mask.shape} does not match queries {shape}")
    if grid.is_empty:
        return np.where(mask, 0.0, np.nan)
    out = _interpolate_many(
        grid.speeds_kn,
        grid.headings_deg,
        grid.roll_deg,
        np.ascontiguousarray(q_s.reshape(-1)),
        np.ascontiguousarray(q_h.reshape(-1)),
        np.ascontiguousarray(mask.reshape(-1)),
    )
    return out.reshape(shape)
