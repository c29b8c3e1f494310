"""
Vessel control file (``*.ctl``) reader.

Each meaningful line reads ``values !comment``; the comment, not the line
position, identifies what the values are::

    9876543            !Vessel IMO number
    8.0   16.0         !Min, Max Draft
    0.5   4.0          !Min, Max GM
    0     25           !Min, Max Speed
    0     30           !Min, Max Allowed Roll
    3.0   12.0         !Min, Max Significant Wave Height (Hs)
    5.0   18.0         !Min, Max Wave Period
    10.5               !Td - design draft

Representative drafts may also appear as ``Td = 10.5`` lines.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class ControlFileError(Exception):
    pass


@dataclass(frozen=True)
class VesselInfo:
    imo: str = "Unknown"
    name: str = "Unknown"


@dataclass(frozen=True)
class ParameterBounds:
    draft_lower: float = 0.0
    draft_upper: float = 50.0
    gm_lower: float = 0.5
    gm_upper: float = 5.0
    speed_lower: float = 0.0
    speed_upper: float = 30.0
    roll_lower: float = 0.0
    roll_upper: float = 60.0
    hs_lower: float = 3.0
    hs_upper: float = 12.0
    tz_lower: float = 5.0
    tz_upper: float = 18.0


@dataclass(frozen=True)
class RepresentativeDrafts:
    design: float = 0.0
    intermediate: float = 0.0
    scantling: float = 0.0


@dataclass(frozen=True)
class ControlData:
    vessel: VesselInfo
    bounds: ParameterBounds
    drafts: RepresentativeDrafts


@dataclass(frozen=True)
class _Line:
    values: List[str]
    comment: str


def _split_lines(text: str) -> List[_Line]:
    out: List[_Line] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        data, bang, comment = line.partition("!")
        out.append(_Line(values=data.split(), comment=comment.strip().lower() if bang else ""))
    return out


def _keyword_pattern(keyword: str) -> re.Pattern:
    # two-letter tags such as "td" or "hs" must not match inside other words
    if len(keyword) <= 2:
        return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
    return re.compile(re.escape(keyword), re.IGNORECASE)


def _find_by_comment(lines: Sequence[_Line], *keywords: str) -> Optional[_Line]:
    """First line whose comment mentions a keyword; keywords are tried in order."""
    for keyword in keywords:
        pattern = _keyword_pattern(keyword)
        for line in lines:
            if line.comment and pattern.search(line.comment):
                return line
    return None


def _number(token: Optional[str], default: float, what: str) -> float:
    if token is None:
        return default
    try:
        return float(token)
    except ValueError as e:
        raise ControlFileError(f"{what}: expected a number, got {token!r}") from e


def _bounds_pair(lines: Sequence[_Line], keywords: Sequence[str], lo: float, hi: float, what: str):
    line = _find_by_comment(lines, *keywords)
    values = line.values if line is not None else []
    first = values[0] if len(values) > 0 else None
    second = values[1] if len(values) > 1 else None
    return _number(first, lo, f"{what} lower bound"), _number(second, hi, f"{what} upper bound")


def _key_value(text: str, *keys: str) -> Optional[float]:
    for key in keys:
        m = re.search(rf"^\s*{re.escape(key)}\s*=\s*([\d.]+)", text, re.IGNORECASE | re.MULTILINE)
        if m:
            return _number(m.group(1), 0.0, key)
    return None


def _representative(lines: Sequence[_Line], text: str, tag: str, word: str, comment_keys: Sequence[str]) -> float:
    line = _find_by_comment(lines, *comment_keys)
    if line is not None:
        return _number(line.values[0] if line.values else None, 0.0, f"{word} draft")
    value = _key_value(text, tag, word)
    return 0.0 if value is None else value


def parse_control_text(text: str) -> ControlData:
    if not isinstance(text, str):
        raise ControlFileError("control file content must be text")
    lines = _split_lines(text)
    if not lines:
        raise ControlFileError("control file is empty")

    imo_line = _find_by_comment(lines, "imo", "vessel")
    vessel = VesselInfo(imo=imo_line.values[0] if imo_line is not None and imo_line.values else "Unknown")

    defaults = ParameterBounds()
    draft = _bounds_pair(lines, ("draft",), defaults.draft_lower, defaults.draft_upper, "draft")
    gm = _bounds_pair(lines, ("gm",), defaults.gm_lower, defaults.gm_upper, "GM")
    speed = _bounds_pair(lines, ("speed",), defaults.speed_lower, defaults.speed_upper, "speed")
    roll = _bounds_pair(lines, ("allowed roll", "roll"), defaults.roll_lower, defaults.roll_upper, "roll")
    hs = _bounds_pair(lines, ("wave height", "hs"), defaults.hs_lower, defaults.hs_upper, "Hs")
    tz = _bounds_pair(lines, ("wave period",), defaults.tz_lower, defaults.tz_upper, "Tz")
    bounds = ParameterBounds(
        draft_lower=draft[0],
        draft_upper=draft[1],
        gm_lower=gm[0],
        gm_upper=gm[1],
        speed_lower=speed[0],
        speed_upper=speed[1],
        roll_lower=roll[0],
        roll_upper=roll[1],
        hs_lower=hs[0],
        hs_upper=hs[1],
        tz_lower=tz[0],
        tz_upper=tz[1],
    )

    drafts = RepresentativeDrafts(
        design=_representative(lines, text, "td", "design", ("td", "design draft")),
        intermediate=_representative(lines, text, "ti", "intermediate", ("ti", "intermediate")),
        scantling=_representative(lines, text, "ts", "scantling", ("ts", "scantling")),
    )

    logger.debug("Control file parsed: vessel=%s bounds=%s drafts=%s", vessel, bounds, drafts)
    return ControlData(vessel=vessel, bounds=bounds, drafts=drafts)


def load_control_file(path: Path) -> ControlData:
    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ControlFileError(f"cannot read control file {path}: {e}") from e
    return parse_control_text(text)
