from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from advisor_match.config.settings import Settings
from advisor_match.core.models import Horizon, Segment
from advisor_match.profiles import NeedProfile, SkillCoverageIndex
from advisor_match.taxonomy import Taxonomy


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


@dataclass(frozen=True)
class SubtopicContribution:
    subtopic_id: str
    subtopic_name: str
    importance: float
    urgency: float
    horizon: Horizon
    skill_level: float
    weight: float
    coverage: float

    @property
    def weighted(self) -> float:
        return self.weight * self.coverage


@dataclass(frozen=True)
class ScoreBreakdown:
    score: int
    raw_score: float
    segment_multiplier: float
    total_weight: float
    contributions: Tuple[SubtopicContribution, ...]


class ScoringEngine:
    """
    Weighted coverage score for one (client, advisor) pair.

    weight(subtopic)  = importance * urgency_factor(urgency, horizon) * default_weight
    coverage(subtopic)= min(skill_level / skill_scale_max, 1.0)
    raw               = 100 * sum(weight * coverage) / sum(weight)
    score             = round(min(raw * segment_multiplier, 100))
    """

    def __init__(self, taxonomy: Taxonomy, settings: Settings):
        self.taxonomy = taxonomy
        self.settings = settings

    def urgency_factor(self, urgency: float, horizon: Horizon) -> float:
        # horizon_weight * (1 + urgency / scale): strictly increasing in urgency
        # and in horizon nearness (weights are validated strictly decreasing).
        horizon_weight = self.settings.horizon_weights[horizon.value]
        return horizon_weight * (1.0 + float(urgency) / self.settings.urgency_scale_max)

    def coverage_ratio(self, skill_level: float) -> float:
        ratio = max(float(skill_level), 0.0) / self.settings.skill_scale_max
        return min(ratio, 1.0)

    def segment_multiplier(self, advisor_segment: Segment, client_segment: Segment) -> float:
        if advisor_segment == client_segment:
            return self.settings.segment_match_multiplier
        return 1.0

    def contributions(
        self, profile: NeedProfile, coverage: SkillCoverageIndex
    ) -> Tuple[SubtopicContribution, ...]:
        items = []
        for sid, need in profile:
            _, default_weight = self.taxonomy.lookup(sid)
            level = coverage.level(sid)
            items.append(
                SubtopicContribution(
                    subtopic_id=sid,
                    subtopic_name=self.taxonomy.name_of(sid),
                    importance=need.importance,
                    urgency=need.urgency,
                    horizon=need.horizon,
                    skill_level=level,
                    weight=need.importance
                    * self.urgency_factor(need.urgency, need.horizon)
                    * default_weight,
                    coverage=self.coverage_ratio(level),
                )
            )
        return tuple(items)

    def score(
        self,
        profile: NeedProfile,
        coverage: SkillCoverageIndex,
        advisor_segment: Segment,
        client_segment: Segment,
    ) -> ScoreBreakdown:
        contributions = self.contributions(profile, coverage)
        total_weight = sum(c.weight for c in contributions)

        if total_weight > 0:
            raw = 100.0 * sum(c.weighted for c in contributions) / total_weight
        else:
            raw = float(self.settings.neutral_baseline)

        multiplier = self.segment_multiplier(advisor_segment, client_segment)
        final = round_half_up(min(raw * multiplier, 100.0))

        return ScoreBreakdown(
            score=final,
            raw_score=raw,
            segment_multiplier=multiplier,
            total_weight=total_weight,
            contributions=contributions,
        )
