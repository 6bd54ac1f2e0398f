from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from advisor_match.core.models import Advisor, AdvisorSkillRecord
from advisor_match.taxonomy import Taxonomy

logger = logging.getLogger("advisor_match.profiles.coverage")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def as_utc(ts: Optional[datetime]) -> datetime:
    """Naive timestamps are read as UTC; a missing timestamp sorts oldest."""
    if ts is None:
        return _EPOCH
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True)
class SkillCoverageIndex:
    advisor_id: str
    levels: Mapping[str, float]
    assessed_at: Mapping[str, Optional[datetime]] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()

    def level(self, subtopic_id: str) -> float:
        # Unrecorded subtopics read as zero coverage.
        return self.levels.get(subtopic_id, 0.0)

    def latest_assessment(self) -> Optional[datetime]:
        stamps = [as_utc(ts) for ts in self.assessed_at.values() if ts is not None]
        return max(stamps) if stamps else None


def _supersedes(candidate: AdvisorSkillRecord, current: AdvisorSkillRecord) -> bool:
    cand_key = (as_utc(candidate.last_assessed_at), float(candidate.skill_level))
    curr_key = (as_utc(current.last_assessed_at), float(current.skill_level))
    return cand_key > curr_key


def build_coverage_index(advisor: Advisor, taxonomy: Taxonomy) -> SkillCoverageIndex:
    """
    Collapse an advisor's skill records into subtopic -> effective level.
    The most recently assessed record wins; ties go to the higher level.
    """
    current: Dict[str, AdvisorSkillRecord] = {}
    warnings: List[str] = []

    for record in advisor.skills:
        if record.advisor_id != advisor.id:
            warnings.append(
                f"advisor {advisor.id}: skipped skill record owned by advisor "
                f"'{record.advisor_id}' (subtopic '{record.subtopic_id}')"
            )
            continue
        if not taxonomy.has_subtopic(record.subtopic_id):
            warnings.append(
                f"advisor {advisor.id}: skipped skill record for unknown subtopic "
                f"'{record.subtopic_id}'"
            )
            continue
        if not math.isfinite(record.skill_level):
            warnings.append(
                f"advisor {advisor.id}: skipped skill record for '{record.subtopic_id}' "
                f"with non-finite level {record.skill_level}"
            )
            continue
        existing = current.get(record.subtopic_id)
        if existing is None or _supersedes(record, existing):
            current[record.subtopic_id] = record

    for message in warnings:
        logger.warning(message)

    levels = {sid: float(rec.skill_level) for sid, rec in sorted(current.items())}
    assessed = {sid: rec.last_assessed_at for sid, rec in sorted(current.items())}
    return SkillCoverageIndex(
        advisor_id=advisor.id,
        levels=MappingProxyType(levels),
        assessed_at=MappingProxyType(assessed),
        warnings=tuple(warnings),
    )
