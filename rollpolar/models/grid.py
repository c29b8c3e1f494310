from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from rollpolar.config import PLAUSIBLE_ROLL_RANGE


def _frozen_array(values: object, ndim: int) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    if ndim == 2 and arr.size == 0:
        arr = arr.reshape(0, 0)
    if arr.ndim != ndim:
        raise ValueError(f"expected a {ndim}-D array, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class PolarGrid:
    """
    Decoded roll-angle dataset.

    ``roll_deg[s, h]`` is the maximum roll for ``speeds_kn[s]`` and
    ``headings_deg[h]``. Headings keep file order and may wrap anywhere.
    """

    speeds_kn: np.ndarray     # shape (N,)
    headings_deg: np.ndarray  # shape (M,)
    roll_deg: np.ndarray      # shape (N, M)

    def __post_init__(self) -> None:
        speeds = _frozen_array(self.speeds_kn, 1)
        headings = _frozen_array(self.headings_deg, 1)
        roll = _frozen_array(self.roll_deg, 2)
        if speeds.size and headings.size and roll.shape != (speeds.size, headings.size):
            raise ValueError(
                f"roll matrix shape {roll.shape} does not match "
                f"{speeds.size} speeds x {headings.size} headings"
            )
        object.__setattr__(self, "speeds_kn", speeds)
        object.__setattr__(self, "headings_deg", headings)
        object.__setattr__(self, "roll_deg", roll)

    @classmethod
    def from_lists(
        cls,
        speeds: Sequence[float],
        headings: Sequence[float],
        roll: Sequence[Sequence[float]],
    ) -> "PolarGrid":
        return cls(speeds_kn=np.asarray(speeds), headings_deg=np.asarray(headings), roll_deg=np.asarray(roll))

    @classmethod
    def empty(cls) -> "PolarGrid":
        return cls(speeds_kn=np.zeros(0), headings_deg=np.zeros(0), roll_deg=np.zeros((0, 0)))

    @property
    def num_speeds(self) -> int:
        return int(self.speeds_kn.size)

    @property
    def num_headings(self) -> int:
        return int(self.headings_deg.size)

    @property
    def is_empty(self) -> bool:
        return self.num_speeds == 0 or self.num_headings == 0


def plausible_mask(values: np.ndarray) -> np.ndarray:
    lo, hi = PLAUSIBLE_ROLL_RANGE
    arr = np.asarray(values, dtype=float)
    return np.isfinite(arr) & (arr >= lo) & (arr <= hi)


@dataclass(frozen=True)
class RollStatistics:
    total_points: int
    valid_points: int
    min_roll: Optional[float]
    max_roll: Optional[float]
    mean_roll: Optional[float]

    def to_dict(self) -> dict:
        return {
            "total_points": self.total_points,
            "valid_points": self.valid_points,
            "min_roll": self.min_roll,
            "max_roll": self.max_roll,
            "mean_roll": self.mean_roll,
        }


def roll_statistics(grid: PolarGrid) -> RollStatistics:
    arr = grid.roll_deg.reshape(-1)
    valid = arr[plausible_mask(arr)]
    if valid.size == 0:
        return RollStatistics(int(arr.size), 0, None, None, None)
    return RollStatistics(
        total_points=int(arr.size),
        valid_points=int(valid.size),
        min_roll=float(np.min(valid)),
        max_roll=float(np.max(valid)),
        mean_roll=float(np.mean(valid)),
    )
