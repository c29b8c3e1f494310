from rollpolar.validation.bounds import (
    PARAMETER_NAMES,
    ValidationResult,
    all_valid,
    parameter_ranges,
    validate_all,
    validate_parameter,
)

__all__ = [
    "PARAMETER_NAMES",
    "ValidationResult",
    "all_valid",
    "parameter_ranges",
    "validate_all",
    "validate_parameter",
]
