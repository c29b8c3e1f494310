from __future__ import annotations

import numba
import numpy as np


@numba.njit(cache=True)
def _normalize_deg(a: float) -> float:
    r = a % 360.0
    if r >= 360.0:
        r = 0.0
    return r


@numba.njit(cache=True)
def speed_bracket(target: float, speeds: np.ndarray) -> tuple[int, int, float]:
    n = speeds.shape[0]
    if n == 0:
        return 0, 0, 0.0
    if target <= speeds[0]:
        return 0, 0, 0.0
    if target >= speeds[n - 1]:
        return n - 1, n - 1, 0.0
    for i in range(n - 1):
        a0 = speeds[i]
        a1 = speeds[i + 1]
        if a0 <= target and target <= a1:
            d = a1 - a0
            t = (target - a0) / d if d != 0.0 else 0.0
            return i, i + 1, t
    # non-ascending axis with no bracketing pair
    return 0, 0, 0.0


@numba.njit(cache=True)
def heading_bracket(target: float, headings: np.ndarray) -> tuple[int, int, float]:
    """
    Circular bracket over headings in stored order. ``target`` must already
    be normalised to [0, 360).
    """
    m = headings.shape[0]
    if m == 0:
        return 0, 0, 0.0

    i0 = 0
    i1 = 0
    found = False
    for i in range(m):
        k = (i + 1) % m
        h1 = headings[i]
        h2 = headings[k]
        if h2 > h1:
            if h1 <= target and target <= h2:
                i0 = i
                i1 = k
                found = True
                break
        else:
            # pair crosses the 0/360 seam
            if target >= h1 or target <= h2:
                i0 = i
                i1 = k
                found = True
                break

    if not found:
        min_diff = 360.0
        for i in range(m):
            diff = abs(target - headings[i])
            circ = min(diff, 360.0 - diff)
            if circ < min_diff:
                min_diff = circ
                i0 = i
                i1 = i

    if i0 == i1:
        return i0, i1, 0.0

    h0 = headings[i0]
    h1 = headings[i1]
    if h1 > h0:
        return i0, i1, (target - h0) / (h1 - h0)
    adj_target = target + 360.0 if target < h0 else target
    denom = (h1 + 360.0) - h0
    t = (adj_target - h0) / denom if denom != 0.0 else 0.0
    return i0, i1, t


@numba.njit(cache=True)
def _cell(roll: np.ndarray, s: int, h: int) -> float:
    if s < 0 or s >= roll.shape[0] or h < 0 or h >= roll.shape[1]:
        return 0.0
    v = roll[s, h]
    if v != v:
        return 0.0
    return v


@numba.njit(cache=True)
def interpolate_one(
    speeds: np.ndarray,
    headings: np.ndarray,
    roll: np.ndarray,
    target_speed: float,
    target_heading: float,
) -> float:
    if speeds.shape[0] == 0 or headings.shape[0] == 0:
        return 0.0
    th = _normalize_deg(target_heading)
    s0, s1, st = speed_bracket(target_speed, speeds)
    h0, h1, ht = heading_bracket(th, headings)

    r00 = _cell(roll, s0, h0)
    r01 = _cell(roll, s0, h1)
    r10 = _cell(roll, s1, h0)
    r11 = _cell(roll, s1, h1)
    r0 = r00 * (1.0 - ht) + r01 * ht
    r1 = r10 * (1.0 - ht) + r11 * ht
    return r0 * (1.0 - st) + r1 * st


@numba.njit(cache=True)
def interpolate_many(
    speeds: np.ndarray,
    headings: np.ndarray,
    roll: np.ndarray,
    query_speed: np.ndarray,  # float64[:]
    query_heading: np.ndarray,  # float64[:]
    active: np.ndarray,  # bool[:]
) -> np.ndarray:
    """
    Numba-accelerated batch interpolation. Inactive entries are left as NaN.
    """
    n = query_speed.shape[0]
    out = np.empty(n, dtype=np.float64)
    for k in range(n):
        if active[k]:
            out[k] = interpolate_one(speeds, headings, roll, query_speed[k], query_heading[k])
        else:
            out[k] = np.nan
    return out
