from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from advisor_match.config.settings import Settings
from advisor_match.core.models import Advisor
from advisor_match.profiles import SkillCoverageIndex
from advisor_match.profiles.coverage import as_utc
from advisor_match.ranking.capacity import capacity_percentage, utilization
from advisor_match.ranking.scoring import SubtopicContribution, round_half_up


@dataclass(frozen=True)
class MatchMetrics:
    skill_coverage: float
    average_skill_gap: float
    capacity_utilization: int
    experience_level: str
    segment_alignment: bool
    confidence: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchMetrics":
        return cls(
            skill_coverage=float(data["skill_coverage"]),
            average_skill_gap=float(data["average_skill_gap"]),
            capacity_utilization=int(data["capacity_utilization"]),
            experience_level=str(data["experience_level"]),
            segment_alignment=bool(data["segment_alignment"]),
            confidence=int(data["confidence"]),
        )


def experience_level(years: float) -> str:
    if years >= 15:
        return "expert"
    if years >= 10:
        return "senior"
    if years >= 5:
        return "mid"
    return "junior"


def score_label(score: int) -> str:
    if score >= 85:
        return "Excellent Match"
    if score >= 70:
        return "Good Match"
    if score >= 55:
        return "Moderate Match"
    return "Poor Match"


def confidence_label(confidence: int) -> str:
    if confidence >= 80:
        return "High Confidence"
    if confidence >= 60:
        return "Moderate Confidence"
    return "Low Confidence"


def _round1(value: float) -> float:
    return round_half_up(value * 10) / 10


class MetricsCalculator:
    """Descriptive match quality figures; they never feed back into the score."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _recency_confidence(self, coverage: SkillCoverageIndex, as_of: Optional[datetime]) -> float:
        latest = coverage.latest_assessment()
        if as_of is None or latest is None:
            return 50.0
        window = timedelta(days=self.settings.assessment_recency_days)
        return 80.0 if as_utc(as_of) - latest <= window else 50.0

    def compute(
        self,
        advisor: Advisor,
        coverage: SkillCoverageIndex,
        contributions: Sequence[SubtopicContribution],
        segment_alignment: bool,
        as_of: Optional[datetime] = None,
    ) -> MatchMetrics:
        strong = self.settings.strong_coverage_threshold
        if contributions:
            strong_count = sum(1 for c in contributions if c.coverage >= strong)
            skill_coverage = 100.0 * strong_count / len(contributions)
            avg_gap = sum(max(0.0, c.importance - c.skill_level) for c in contributions) / len(
                contributions
            )
        else:
            skill_coverage = 0.0
            avg_gap = 0.0

        util = utilization(advisor)
        capacity_conf = 100.0 if util < 0.9 else max(0.0, 100.0 - (util - 0.9) * 500.0)
        years = float(advisor.years_experience)
        if not math.isfinite(years):
            years = 0.0
        experience_conf = min(100.0, max(0.0, years) / 15.0 * 100.0)
        factors = [
            skill_coverage,
            self._recency_confidence(coverage, as_of),
            experience_conf,
            capacity_conf,
        ]

        return MatchMetrics(
            skill_coverage=_round1(skill_coverage),
            average_skill_gap=_round1(avg_gap),
            capacity_utilization=capacity_percentage(advisor),
            experience_level=experience_level(years),
            segment_alignment=segment_alignment,
            confidence=round_half_up(sum(factors) / len(factors)),
        )
