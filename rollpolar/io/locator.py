"""
Locate the polar data file closest to a requested loading condition.

Expected tree under the chosen root::

    <root>/Draft=11m/GM=1.5m/bin/MAXROLL_H10.0_T10.5.bpolar

Older trees name the draft folders ``design``, ``intermediate`` and
``scantling`` instead of carrying the draft in the name.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_HS = re.compile(r"_H(\d+(?:\.\d+)?)_")
_TZ = re.compile(r"_T(\d+(?:\.\d+)?)\.")
_HS_TZ_IN_NAME = re.compile(r"_H(\d+(?:\.\d+)?)_T(\d+(?:\.\d+)?)")
_GM_IN_PATH = re.compile(r"GM[=_]?(\d+(?:\.\d+)?)", re.IGNORECASE)

DEFAULT_DRAFT_LOWER = 11.0
DEFAULT_DRAFT_UPPER = 16.0


class LocateError(Exception):
    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage}: {message}")
        self.stage = stage


@dataclass(frozen=True)
class LocatedFile:
    path: Path
    fitted_draft: float


@dataclass(frozen=True)
class FittedParameters:
    gm: float
    hs: float
    tz: float


def _leading_number(name: str) -> Optional[float]:
    m = _NUMBER.search(name)
    return float(m.group(0)) if m else None


def _subdirs(path: Path) -> List[Path]:
    try:
        return sorted(p for p in path.iterdir() if p.is_dir())
    except OSError:
        return []


def _nearest_numeric(candidates: List[Path], target: float) -> Optional[Tuple[Path, float]]:
    best: Optional[Tuple[Path, float]] = None
    best_diff = math.inf
    for c in candidates:
        value = _leading_number(c.name)
        if value is None:
            continue
        diff = abs(value - target)
        # strict comparison keeps the first of equally near candidates
        if diff < best_diff:
            best, best_diff = (c, value), diff
    return best


def old_style_draft_map(draft_lower: Optional[float], draft_upper: Optional[float]) -> Dict[str, float]:
    lower = DEFAULT_DRAFT_LOWER if draft_lower is None else float(draft_lower)
    upper = DEFAULT_DRAFT_UPPER if draft_upper is None else float(draft_upper)
    return {"design": lower, "intermediate": (lower + upper) / 2.0, "scantling": upper}


def _select_draft_folder(
    root: Path, draft: float, draft_lower: Optional[float], draft_upper: Optional[float]
) -> Tuple[Path, float]:
    candidates = _subdirs(root)
    logger.debug("Draft folder candidates: %s", [c.name for c in candidates])
    hit = _nearest_numeric(candidates, draft)
    if hit is not None:
        return hit

    mapping = old_style_draft_map(draft_lower, draft_upper)
    best: Optional[Tuple[Path, float]] = None
    best_diff = math.inf
    for c in candidates:
        value = mapping.get(c.name.lower())
        if value is None:
            continue
        diff = abs(value - draft)
        if diff < best_diff:
            best, best_diff = (c, value), diff
    if best is None:
        raise LocateError("draft", f"no matching draft folder under {root}")
    return best


def _select_data_file(bin_dir: Path, hs: float, tz: float) -> Path:
    try:
        files = sorted(p for p in bin_dir.iterdir() if p.is_file())
    except OSError as e:
        raise LocateError("data file", f"cannot list {bin_dir}: {e}") from e

    best: Optional[Path] = None
    best_diff = math.inf
    for f in files:
        h = _HS.search(f.name)
        t = _TZ.search(f.name)
        if not h or not t:
            continue
        diff = math.hypot(float(h.group(1)) - hs, float(t.group(1)) - tz)
        if diff < best_diff:
            best, best_diff = f, diff
    if best is None:
        raise LocateError("data file", f"no Hs/Tz data file in {bin_dir}")
    return best


def find_data_file(
    root: Path,
    draft: float,
    gm: float,
    hs: float,
    tz: float,
    draft_lower: Optional[float] = None,
    draft_upper: Optional[float] = None,
) -> LocatedFile:
    """
    Walk draft folder -> GM folder -> ``bin`` and pick the nearest file.

    ``draft`` is the mean of aft and fore drafts. Each stage picks the
    nearest candidate; a stage without candidates raises ``LocateError``.
    """
    root = Path(root).expanduser()
    if not root.is_dir():
        raise LocateError("root", f"{root} is not a directory")

    draft_dir, fitted_draft = _select_draft_folder(root, float(draft), draft_lower, draft_upper)
    logger.debug("Selected draft folder: %s (%.2f m)", draft_dir.name, fitted_draft)

    gm_candidates = _subdirs(draft_dir)
    logger.debug("GM folder candidates: %s", [c.name for c in gm_candidates])
    gm_hit = _nearest_numeric(gm_candidates, float(gm))
    if gm_hit is None:
        raise LocateError("gm", f"no matching GM folder under {draft_dir}")
    gm_dir = gm_hit[0]
    logger.debug("Selected GM folder: %s", gm_dir.name)

    data_file = _select_data_file(gm_dir / "bin", float(hs), float(tz))
    logger.debug("Selected data file: %s", data_file.name)
    return LocatedFile(path=data_file, fitted_draft=fitted_draft)


def fitted_parameters_from_path(path: Path, hs: float, tz: float, gm: float) -> FittedParameters:
    """Sea state and GM actually represented by a located file."""
    p = Path(path)
    m = _HS_TZ_IN_NAME.search(p.name)
    g = _GM_IN_PATH.search(p.as_posix())
    return FittedParameters(
        gm=float(g.group(1)) if g else float(gm),
        hs=float(m.group(1)) if m else float(hs),
        tz=float(m.group(2)) if m else float(tz),
    )
