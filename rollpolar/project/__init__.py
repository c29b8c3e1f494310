"""
RollPolar Project Module

Saved analysis cases and interactive session state.
"""

from rollpolar.project.cases import (
    AnalysisCase,
    CaseError,
    CaseStore,
    SeaState,
    VesselCondition,
)
from rollpolar.project.session import PolarSession

__all__ = [
    "AnalysisCase",
    "CaseError",
    "CaseStore",
    "SeaState",
    "VesselCondition",
    "PolarSession",
]
