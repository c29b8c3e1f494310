"""
RollPolar I/O Module

Control file parsing and polar data file lookup.
"""

from rollpolar.io.control_file import (
    ControlData,
    ControlFileError,
    ParameterBounds,
    RepresentativeDrafts,
    VesselInfo,
    load_control_file,
    parse_control_text,
)
from rollpolar.io.locator import (
    FittedParameters,
    LocatedFile,
    LocateError,
    find_data_file,
    fitted_parameters_from_path,
)

__all__ = [
    "ControlData",
    "ControlFileError",
    "ParameterBounds",
    "RepresentativeDrafts",
    "VesselInfo",
    "load_control_file",
    "parse_control_text",
    "FittedParameters",
    "LocatedFile",
    "LocateError",
    "find_data_file",
    "fitted_parameters_from_path",
]
