from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from advisor_match.core.models import AssignmentRole, parse_role
from advisor_match.ranking.explanation import Excluded, Explanation, explanation_from_dict
from advisor_match.ranking.metrics import MatchMetrics


@dataclass(frozen=True)
class MatchResult:
    match_run_id: str
    client_id: str
    advisor_id: str
    role: AssignmentRole
    score: int
    explanation: Explanation
    created_at: datetime
    rank: Optional[int] = None
    metrics: Optional[MatchMetrics] = None

    @property
    def is_excluded(self) -> bool:
        return isinstance(self.explanation, Excluded)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_run_id": self.match_run_id,
            "client_id": self.client_id,
            "advisor_id": self.advisor_id,
            "role": self.role.value,
            "rank": self.rank,
            "score": self.score,
            "explanation": self.explanation.to_dict(),
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchResult":
        metrics = data.get("metrics")
        return cls(
            match_run_id=str(data["match_run_id"]),
            client_id=str(data["client_id"]),
            advisor_id=str(data["advisor_id"]),
            role=parse_role(data["role"]),
            score=int(data["score"]),
            explanation=explanation_from_dict(data.get("explanation") or {}),
            created_at=datetime.fromisoformat(data["created_at"]),
            rank=data.get("rank"),
            metrics=MatchMetrics.from_dict(metrics) if metrics else None,
        )


@dataclass(frozen=True)
class MatchRun:
    id: str
    created_at: datetime
    client_ids: Tuple[str, ...]
    roles: Tuple[AssignmentRole, ...]
    top_k: int
    results: Tuple[MatchResult, ...] = ()
    excluded: Tuple[MatchResult, ...] = ()
    warnings: Tuple[str, ...] = ()

    def ranked(self, client_id: str, role: AssignmentRole | str) -> List[MatchResult]:
        role = parse_role(role)
        return [r for r in self.results if r.client_id == client_id and r.role is role]

    def excluded_for(self, client_id: str, role: AssignmentRole | str) -> List[MatchResult]:
        role = parse_role(role)
        return [r for r in self.excluded if r.client_id == client_id and r.role is role]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "client_ids": list(self.client_ids),
            "roles": [r.value for r in self.roles],
            "top_k": self.top_k,
            "results": [r.to_dict() for r in self.results],
            "excluded": [r.to_dict() for r in self.excluded],
            "warnings": list(self.warnings),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchRun":
        return cls(
            id=str(data["id"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            client_ids=tuple(data.get("client_ids") or ()),
            roles=tuple(parse_role(r) for r in data.get("roles") or ()),
            top_k=int(data["top_k"]),
            results=tuple(MatchResult.from_dict(r) for r in data.get("results") or ()),
            excluded=tuple(MatchResult.from_dict(r) for r in data.get("excluded") or ()),
            warnings=tuple(data.get("warnings") or ()),
        )
