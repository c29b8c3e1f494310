from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

MAX_CASE_ID_LENGTH = 12
CASE_FILE_VERSION = 1


class CaseError(Exception):
    pass


def check_case_id(case_id: str) -> None:
    if not case_id:
        raise CaseError("case id must not be empty")
    if len(case_id) > MAX_CASE_ID_LENGTH:
        raise CaseError(f"case id must be {MAX_CASE_ID_LENGTH} characters or less: {case_id!r}")


@dataclass(frozen=True)
class VesselCondition:
    draft_aft: float
    draft_fore: float
    gm: float
    heading: float
    speed: float
    max_roll: float

    @property
    def mean_draft(self) -> float:
        return 0.5 * (self.draft_aft + self.draft_fore)


@dataclass(frozen=True)
class SeaState:
    hs: float
    tz: float
    wave_direction: float


@dataclass(frozen=True)
class AnalysisCase:
    id: str
    vessel: VesselCondition
    sea_state: SeaState
    data_file: str = ""
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        check_case_id(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AnalysisCase":
        try:
            vessel = payload["vessel"]
            sea = payload["sea_state"]
            return cls(
                id=str(payload["id"]),
                vessel=VesselCondition(**{k: float(vessel[k]) for k in VesselCondition.__dataclass_fields__}),
                sea_state=SeaState(**{k: float(sea[k]) for k in SeaState.__dataclass_fields__}),
                data_file=str(payload.get("data_file", "")),
                timestamp=float(payload.get("timestamp", 0.0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CaseError(f"malformed case record: {e}") from e


class CaseStore:
    """In-memory set of named analysis cases, persisted as one JSON file."""

    def __init__(self) -> None:
        self._cases: Dict[str, AnalysisCase] = {}

    def __len__(self) -> int:
        return len(self._cases)

    def add(self, case: AnalysisCase) -> None:
        check_case_id(case.id)
        self._cases[case.id] = case

    def get(self, case_id: str) -> Optional[AnalysisCase]:
        return self._cases.get(case_id)

    def delete(self, case_id: str) -> bool:
        return self._cases.pop(case_id, None) is not None

    def exists(self, case_id: str) -> bool:
        return case_id in self._cases

    def ids(self) -> List[str]:
        return sorted(self._cases)

    def cases(self) -> List[AnalysisCase]:
        return [self._cases[k] for k in self.ids()]

    def clear(self) -> None:
        self._cases.clear()

    def save(self, path: Path) -> Path:
        path = Path(path).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"version": CASE_FILE_VERSION, "cases": [c.to_dict() for c in self.cases()]}
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "CaseStore":
        path = Path(path).expanduser().resolve()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CaseError(f"{path} is not a valid case file: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("cases"), list):
            raise CaseError(f"{path} is not a valid case file: missing 'cases' list")
        store = cls()
        for item in data["cases"]:
            store.add(AnalysisCase.from_dict(item))
        return store
