from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from rollpolar.config import FIXED_MAX_SPEED_KN


class ColorMode(str, Enum):
    CONTINUOUS = "continuous"
    TRAFFIC_LIGHT = "traffic-light"


class Orientation(str, Enum):
    NORTH_UP = "north-up"
    HEADS_UP = "heads-up"


def coerce_enum(value: object, enum_cls: type, field: str):
    if isinstance(value, enum_cls):
        return value
    # accepts "traffic-light", "traffic_light" and "trafficLight"
    key = str(value).strip().lower().replace("_", "").replace("-", "")
    for member in enum_cls:
        if member.value.replace("-", "") == key:
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"{field} must be one of: {allowed} (got {value!r})")


@dataclass(frozen=True)
class RenderConfig:
    width: int
    height: int
    mode: Union[ColorMode, str] = ColorMode.CONTINUOUS
    orientation: Union[Orientation, str] = Orientation.NORTH_UP
    vessel_heading_deg: float = 0.0
    vessel_speed_kn: float = 0.0
    max_roll_deg: float = 20.0
    wave_direction_deg: float = 0.0
    max_speed_kn: float = FIXED_MAX_SPEED_KN

    def __post_init__(self) -> None:
        if int(self.width) < 0 or int(self.height) < 0:
            raise ValueError(f"canvas size must be non-negative, got {self.width}x{self.height}")
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        object.__setattr__(self, "mode", coerce_enum(self.mode, ColorMode, "mode"))
        object.__setattr__(self, "orientation", coerce_enum(self.orientation, Orientation, "orientation"))
        for name in ("vessel_heading_deg", "vessel_speed_kn", "max_roll_deg", "wave_direction_deg", "max_speed_kn"):
            v = float(getattr(self, name))
            if not math.isfinite(v):
                raise ValueError(f"{name} must be finite, got {v}")
            object.__setattr__(self, name, v)
        if self.max_speed_kn <= 0.0:
            raise ValueError("max_speed_kn must be > 0")
