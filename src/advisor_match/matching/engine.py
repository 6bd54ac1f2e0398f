from __future__ import annotations

import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from advisor_match.config.settings import Settings
from advisor_match.core.errors import EmptyCandidatePoolError
from advisor_match.core.models import Advisor, AssignmentRole, Client, parse_role
from advisor_match.matching.results import MatchResult, MatchRun
from advisor_match.profiles import (
    NeedProfile,
    SkillCoverageIndex,
    build_coverage_index,
    build_need_profile,
)
from advisor_match.ranking import (
    CapacityGate,
    Explanation,
    ExplanationGenerator,
    MatchMetrics,
    MetricsCalculator,
    ScoreBreakdown,
    ScoringEngine,
)
from advisor_match.taxonomy import Taxonomy

logger = logging.getLogger("advisor_match.matching.engine")


@dataclass(frozen=True)
class PairScore:
    client_id: str
    advisor_id: str
    role: AssignmentRole
    score: int
    eligible: bool
    explanation: Explanation
    breakdown: ScoreBreakdown
    metrics: MatchMetrics
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class _Scored:
    advisor: Advisor
    breakdown: ScoreBreakdown
    metrics: MatchMetrics


class MatchEngine:
    """
    Scores clients against an advisor pool and packages ranked match runs.
    Every (client, advisor) pair is scored independently; ranking per
    client is the only point where pair results meet.
    """

    def __init__(self, taxonomy: Taxonomy, settings: Settings | None = None):
        self.taxonomy = taxonomy
        self.settings = settings or Settings()
        self.scoring = ScoringEngine(taxonomy, self.settings)
        self.explainer = ExplanationGenerator(self.settings)
        self.metrics = MetricsCalculator(self.settings)
        self.gate = CapacityGate()

    def _score(
        self,
        client: Client,
        profile: NeedProfile,
        advisor: Advisor,
        coverage: SkillCoverageIndex,
        as_of: Optional[datetime],
    ) -> _Scored:
        breakdown = self.scoring.score(profile, coverage, advisor.target_segment, client.segment)
        metrics = self.metrics.compute(
            advisor,
            coverage,
            breakdown.contributions,
            segment_alignment=breakdown.segment_multiplier > 1.0,
            as_of=as_of,
        )
        return _Scored(advisor=advisor, breakdown=breakdown, metrics=metrics)

    def _exclusion_reasons(self, advisor: Advisor, role: AssignmentRole, score: int) -> List[str]:
        reasons = []
        capacity_reason = self.gate.exclusion_reason(advisor, role)
        if capacity_reason:
            reasons.append(capacity_reason)
        floor_reason = self.explainer.floor_reason(score)
        if floor_reason:
            reasons.append(floor_reason)
        return reasons

    def score_pair(
        self,
        client: Client,
        advisor: Advisor,
        role: AssignmentRole | str = AssignmentRole.lead,
        as_of: Optional[datetime] = None,
    ) -> PairScore:
        """Score and explain a single (client, advisor, role) triple."""
        role = parse_role(role)
        profile = build_need_profile(client, self.taxonomy)
        coverage = build_coverage_index(advisor, self.taxonomy)
        scored = self._score(client, profile, advisor, coverage, as_of)
        reasons = self._exclusion_reasons(advisor, role, scored.breakdown.score)
        return PairScore(
            client_id=client.id,
            advisor_id=advisor.id,
            role=role,
            score=scored.breakdown.score,
            eligible=not reasons,
            explanation=self.explainer.explain(scored.breakdown.contributions, reasons),
            breakdown=scored.breakdown,
            metrics=scored.metrics,
            warnings=coverage.warnings + profile.warnings,
        )

    @staticmethod
    def _dedupe(items: Iterable, label: str, warnings: List[str]) -> list:
        seen = set()
        unique = []
        for item in items:
            if item.id in seen:
                message = f"skipped duplicate {label} '{item.id}'"
                logger.warning(message)
                warnings.append(message)
                continue
            seen.add(item.id)
            unique.append(item)
        return unique

    def _score_all(
        self,
        clients: Sequence[Client],
        profiles: Dict[str, NeedProfile],
        advisors: Sequence[Advisor],
        coverages: Dict[str, SkillCoverageIndex],
        as_of: datetime,
    ) -> Dict[Tuple[str, str], _Scored]:
        pairs = [(c, a) for c in clients for a in advisors]
        workers = min(self.settings.match_workers, len(pairs)) if pairs else 1

        def _task(pair: Tuple[Client, Advisor]) -> _Scored:
            client, advisor = pair
            return self._score(client, profiles[client.id], advisor, coverages[advisor.id], as_of)

        if workers <= 1:
            scored = [_task(p) for p in pairs]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                scored = list(pool.map(_task, pairs))

        return {(c.id, a.id): s for (c, a), s in zip(pairs, scored)}

    def run_match(
        self,
        clients: Sequence[Client],
        advisors: Sequence[Advisor],
        roles: Sequence[AssignmentRole | str] = (AssignmentRole.lead,),
        top_k: Optional[int] = None,
        run_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> MatchRun:
        """
        Rank the advisor pool for each client and role.

        Raises EmptyCandidatePoolError when no advisors are supplied. A pool
        where every advisor is ineligible yields an empty ranking instead.
        """
        if not advisors:
            raise EmptyCandidatePoolError()

        top_k = top_k if top_k is not None else self.settings.default_top_k
        if top_k < 1:
            raise ValueError("top_k must be at least 1")
        role_list = list(dict.fromkeys(parse_role(r) for r in roles))
        run_id = run_id or uuid.uuid4().hex
        created_at = created_at or datetime.now(timezone.utc)

        warnings: List[str] = []
        advisor_list = self._dedupe(advisors, "advisor", warnings)
        client_list = self._dedupe(clients, "client", warnings)

        coverages = {a.id: build_coverage_index(a, self.taxonomy) for a in advisor_list}
        profiles = {c.id: build_need_profile(c, self.taxonomy) for c in client_list}
        for a in advisor_list:
            warnings.extend(coverages[a.id].warnings)
        for c in client_list:
            warnings.extend(profiles[c.id].warnings)

        start = time.perf_counter()
        scored = self._score_all(client_list, profiles, advisor_list, coverages, created_at)

        results: List[MatchResult] = []
        excluded: List[MatchResult] = []
        for client in client_list:
            candidates = sorted(
                (scored[(client.id, a.id)] for a in advisor_list),
                key=lambda s: (-s.breakdown.score, s.advisor.id),
            )
            for role in role_list:
                eligible: List[_Scored] = []
                rejected: List[Tuple[_Scored, List[str]]] = []
                for item in candidates:
                    reasons = self._exclusion_reasons(item.advisor, role, item.breakdown.score)
                    if reasons:
                        rejected.append((item, reasons))
                    else:
                        eligible.append(item)
                for item, reasons in sorted(rejected, key=lambda pair: pair[0].advisor.id):
                    excluded.append(
                        self._result(run_id, created_at, client, item, role, reasons, None)
                    )
                for rank, item in enumerate(eligible[:top_k], start=1):
                    results.append(self._result(run_id, created_at, client, item, role, [], rank))

        logger.info(
            "match run %s: %d client(s) x %d advisor(s), roles=%s, %d ranked, %d excluded (%.0fms)",
            run_id,
            len(client_list),
            len(advisor_list),
            ",".join(r.value for r in role_list),
            len(results),
            len(excluded),
            (time.perf_counter() - start) * 1000,
        )

        return MatchRun(
            id=run_id,
            created_at=created_at,
            client_ids=tuple(c.id for c in client_list),
            roles=tuple(role_list),
            top_k=top_k,
            results=tuple(results),
            excluded=tuple(excluded),
            warnings=tuple(warnings),
        )

    def _result(
        self,
        run_id: str,
        created_at: datetime,
        client: Client,
        item: _Scored,
        role: AssignmentRole,
        reasons: List[str],
        rank: Optional[int],
    ) -> MatchResult:
        return MatchResult(
            match_run_id=run_id,
            client_id=client.id,
            advisor_id=item.advisor.id,
            role=role,
            score=item.breakdown.score,
            explanation=self.explainer.explain(item.breakdown.contributions, reasons),
            created_at=created_at,
            rank=rank,
            metrics=item.metrics,
        )
