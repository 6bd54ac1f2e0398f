from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

from advisor_match.config.settings import Settings
from advisor_match.ranking.scoring import SubtopicContribution


@dataclass(frozen=True)
class Included:
    """Explanation for a candidate that made it into the ranked list."""

    top_drivers: Tuple[str, ...] = ()
    gaps: Tuple[str, ...] = ()

    kind = "included"

    @property
    def why_not(self) -> None:
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "top_drivers": list(self.top_drivers), "gaps": list(self.gaps)}


@dataclass(frozen=True)
class Excluded:
    """Explanation for a candidate removed by the capacity gate or the score floor."""

    reasons: Tuple[str, ...]

    kind = "excluded"

    @property
    def why_not(self) -> Tuple[str, ...]:
        return self.reasons

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "why_not": list(self.reasons)}


Explanation = Union[Included, Excluded]


def explanation_from_dict(data: Dict[str, Any]) -> Explanation:
    kind = data.get("kind")
    if kind is None:
        kind = "excluded" if data.get("why_not") else "included"
    if kind == "excluded":
        return Excluded(reasons=tuple(data.get("why_not") or ()))
    if kind == "included":
        return Included(
            top_drivers=tuple(data.get("top_drivers") or ()),
            gaps=tuple(data.get("gaps") or ()),
        )
    raise ValueError(f"Unknown explanation kind: {kind!r}")


class ExplanationGenerator:
    """Derives drivers, gaps and exclusion reasons from a score breakdown."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def top_drivers(self, contributions: Iterable[SubtopicContribution]) -> List[str]:
        strong = [
            c
            for c in contributions
            if c.coverage >= self.settings.strong_coverage_threshold and c.weight > 0
        ]
        strong.sort(key=lambda c: (-c.weighted, c.subtopic_id))
        return [c.subtopic_name for c in strong[: self.settings.max_top_drivers]]

    def gaps(self, contributions: Sequence[SubtopicContribution]) -> List[str]:
        total_weight = sum(c.weight for c in contributions)
        if total_weight <= 0:
            return []
        weak = [
            c
            for c in contributions
            if c.coverage <= self.settings.weak_coverage_threshold
            and c.weight / total_weight >= self.settings.min_gap_weight_share
            and c.weight > 0
        ]
        weak.sort(key=lambda c: (c.coverage, c.subtopic_id))
        return [c.subtopic_name for c in weak[: self.settings.max_gaps]]

    def floor_reason(self, score: int) -> str | None:
        floor = self.settings.min_score_floor
        if floor > 0 and score < floor:
            return f"score below floor {floor}"
        return None

    def explain(
        self,
        contributions: Sequence[SubtopicContribution],
        exclusion_reasons: Sequence[str] = (),
    ) -> Explanation:
        if exclusion_reasons:
            return Excluded(reasons=tuple(exclusion_reasons))
        return Included(
            top_drivers=tuple(self.top_drivers(contributions)),
            gaps=tuple(self.gaps(contributions)),
        )
