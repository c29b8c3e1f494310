from __future__ import annotations

from typing import Union

import numpy as np

from rollpolar.models.render import Orientation

Angle = Union[float, np.ndarray]


def _result(a: np.ndarray) -> Angle:
    return float(a) if a.ndim == 0 else a


def normalize_angle(angle_deg: Angle) -> Angle:
    """Wrap into [0, 360). Scalars come back as float, arrays as arrays."""
    a = np.mod(np.asarray(angle_deg, dtype=np.float64), 360.0)
    # -1e-17 % 360.0 == 360.0
    return _result(np.where(a >= 360.0, 0.0, a))


def encounter_angle(wave_direction_deg: Angle, compass_heading_deg: Angle) -> Angle:
    """Wave direction relative to the heading, folded into [0, 180]."""
    e = np.asarray(normalize_angle(np.subtract(wave_direction_deg, compass_heading_deg)))
    return _result(np.where(e > 180.0, 360.0 - e, e))


def compass_from_display(display_deg: Angle, orientation: Orientation, vessel_heading_deg: float) -> Angle:
    if orientation is Orientation.HEADS_UP:
        return normalize_angle(np.add(display_deg, vessel_heading_deg))
    return normalize_angle(display_deg)


def display_from_compass(compass_deg: Angle, orientation: Orientation, vessel_heading_deg: float) -> Angle:
    if orientation is Orientation.HEADS_UP:
        return normalize_angle(np.subtract(compass_deg, vessel_heading_deg))
    return normalize_angle(compass_deg)
