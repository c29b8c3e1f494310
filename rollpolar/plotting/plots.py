from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import matplotlib
matplotlib.use("Agg")  # headless-safe for servers/CI
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from rollpolar.models.grid import PolarGrid


def choose_speed_indices(num_speeds: int, max_curves: int = 4) -> List[int]:
    """
    Pick up to max_curves speeds spread across the grid.
    Deterministic: first, last, and evenly spaced in-between.
    """
    if num_speeds <= max_curves:
        return list(range(num_speeds))
    idxs = [0]
    for k in range(1, max_curves - 1):
        idxs.append(round(k * (num_speeds - 1) / (max_curves - 1)))
    idxs.append(num_speeds - 1)
    return sorted(set(int(i) for i in idxs))


def plot_roll_curves(
    grid: PolarGrid,
    outpath: Path,
    speed_indices: Optional[Iterable[int]] = None,
    max_roll_deg: Optional[float] = None,
) -> Path:
    """
    Save a line plot: roll angle vs heading, one curve per selected speed.
    Headings are plotted in ascending order; stored order is kept in the grid.
    """
    if grid.is_empty:
        raise ValueError("Need a non-empty polar grid to plot roll curves")

    outpath = Path(outpath).expanduser().resolve()
    outpath.parent.mkdir(parents=True, exist_ok=True)

    headings = grid.headings_deg
    order = np.argsort(headings, kind="stable")
    if speed_indices is None:
        speed_indices = choose_speed_indices(grid.num_speeds, max_curves=4)

    fig = plt.figure()
    ax = fig.add_subplot(111)
    for si in speed_indices:
        if si < 0 or si >= grid.num_speeds:
            continue
        roll = np.where(np.isfinite(grid.roll_deg[si]), grid.roll_deg[si], np.nan)
        ax.plot(headings[order], roll[order], marker=".", label=f"V={grid.speeds_kn[si]:g} kn")

    if max_roll_deg is not None:
        ax.axhline(float(max_roll_deg), color="tab:red", linestyle="--", linewidth=1.0, label="Max roll")

    ax.set_xlabel("Heading (deg)")
    ax.set_ylabel("Roll angle (deg)")
    ax.set_title("Roll curves (maximum roll vs heading)")
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(outpath, dpi=200)
    plt.close(fig)
    return outpath
