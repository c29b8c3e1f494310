from rollpolar.core.angles import (
    compass_from_display,
    display_from_compass,
    encounter_angle,
    normalize_angle,
)

__all__ = [
    "compass_from_display",
    "display_from_compass",
    "encounter_angle",
    "normalize_angle",
]
