from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from rollpolar.io.control_file import ParameterBounds

# Ranges that do not depend on the vessel's control file.
FIXED_RANGES: Dict[str, Tuple[float, float]] = {
    "draft_aft": (0.0, 50.0),
    "draft_fore": (0.0, 50.0),
    "heading": (0.0, 360.0),
    "speed": (0.0, 30.0),
    "max_roll": (0.0, 60.0),
    "wave_direction": (0.0, 360.0),
}

PARAMETER_NAMES = (
    "draft_aft",
    "draft_fore",
    "gm",
    "heading",
    "speed",
    "max_roll",
    "hs",
    "tz",
    "wave_direction",
)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    min_value: float
    max_value: float

    @property
    def out_of_range(self) -> bool:
        return not self.is_valid


def validate_parameter(value: float, min_value: float, max_value: float) -> ValidationResult:
    v = float(value)
    ok = math.isfinite(v) and min_value <= v <= max_value
    return ValidationResult(is_valid=ok, min_value=float(min_value), max_value=float(max_value))


def parameter_ranges(bounds: Optional[ParameterBounds] = None) -> Dict[str, Tuple[float, float]]:
    b = bounds or ParameterBounds()
    ranges = dict(FIXED_RANGES)
    ranges["gm"] = (b.gm_lower, b.gm_upper)
    ranges["hs"] = (b.hs_lower, b.hs_upper)
    ranges["tz"] = (b.tz_lower, b.tz_upper)
    return ranges


def validate_all(
    params: Mapping[str, float], bounds: Optional[ParameterBounds] = None
) -> Dict[str, ValidationResult]:
    """
    Check every analysis input against its range. ``params`` must provide all
    of ``PARAMETER_NAMES``; GM, Hs and Tz ranges come from the control file.
    """
    missing = [name for name in PARAMETER_NAMES if name not in params]
    if missing:
        raise KeyError(f"missing parameters: {', '.join(missing)}")
    ranges = parameter_ranges(bounds)
    return {name: validate_parameter(params[name], *ranges[name]) for name in PARAMETER_NAMES}


def all_valid(validation: Mapping[str, ValidationResult]) -> bool:
    return all(v.is_valid for v in validation.values())
