from rollpolar.polar.interp import (
    Bracket,
    find_heading_bracket,
    find_speed_bracket,
    interpolate_roll,
    interpolate_roll_field,
)

__all__ = [
    "Bracket",
    "find_heading_bracket",
    "find_speed_bracket",
    "interpolate_roll",
    "interpolate_roll_field",
]
