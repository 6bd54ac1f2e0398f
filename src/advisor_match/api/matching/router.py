"""Match API endpoints: batch runs and single-pair inspection."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from advisor_match.api.deps import SettingsDep
from advisor_match.api.exceptions import UnknownEntityError
from advisor_match.api.matching.schemas import (
    ContributionOut,
    ExplanationOut,
    MatchResultOut,
    MatchRunRequest,
    MatchRunResponse,
    ScorePairRequest,
    ScorePairResponse,
    SnapshotIn,
)
from advisor_match.data import Snapshot, snapshot_from_dict
from advisor_match.matching import MatchEngine, MatchResult
from advisor_match.ranking import Explanation, score_label

logger = logging.getLogger("advisor_match.api.matching")

router = APIRouter()


def _load(snapshot: SnapshotIn) -> Snapshot:
    return snapshot_from_dict(snapshot.model_dump(mode="json"))


def _explanation_out(explanation: Explanation) -> ExplanationOut:
    return ExplanationOut(**explanation.to_dict())


def _result_out(result: MatchResult) -> MatchResultOut:
    return MatchResultOut(
        match_run_id=result.match_run_id,
        client_id=result.client_id,
        advisor_id=result.advisor_id,
        role=result.role,
        rank=result.rank,
        score=result.score,
        explanation=_explanation_out(result.explanation),
        metrics=result.metrics.to_dict() if result.metrics else None,
        created_at=result.created_at,
    )


@router.post("/runs", response_model=MatchRunResponse)
def create_match_run(request: MatchRunRequest, settings: SettingsDep) -> MatchRunResponse:
    """
    Rank the advisor pool for the requested clients and roles.

    Advisors that fail the capacity gate or the score floor are returned
    under `excluded` with their why-not reasons.
    """
    snap = _load(request.snapshot)

    clients = list(snap.clients)
    if request.client_ids is not None:
        known = {c.id for c in clients}
        for client_id in request.client_ids:
            if client_id not in known:
                raise UnknownEntityError("client", client_id)
        wanted = set(request.client_ids)
        clients = [c for c in clients if c.id in wanted]
    if not request.include_prospects:
        clients = [c for c in clients if not c.is_prospect]

    advisors = list(snap.advisors)
    if request.advisor_ids is not None:
        known_advisors = {a.id for a in advisors}
        for advisor_id in request.advisor_ids:
            if advisor_id not in known_advisors:
                raise UnknownEntityError("advisor", advisor_id)
        wanted_advisors = set(request.advisor_ids)
        advisors = [a for a in advisors if a.id in wanted_advisors]

    run = MatchEngine(snap.taxonomy, settings).run_match(
        clients, advisors, roles=request.roles, top_k=request.top_k
    )

    return MatchRunResponse(
        id=run.id,
        created_at=run.created_at,
        client_ids=list(run.client_ids),
        roles=list(run.roles),
        top_k=run.top_k,
        results=[_result_out(r) for r in run.results],
        excluded=[_result_out(r) for r in run.excluded],
        warnings=list(snap.warnings) + list(run.warnings),
    )


@router.post("/score-pair", response_model=ScorePairResponse)
def score_pair(request: ScorePairRequest, settings: SettingsDep) -> ScorePairResponse:
    """Score and explain a single (client, advisor, role) triple."""
    snap = _load(request.snapshot)
    client = snap.client(request.client_id)
    if client is None:
        raise UnknownEntityError("client", request.client_id)
    advisor = snap.advisor(request.advisor_id)
    if advisor is None:
        raise UnknownEntityError("advisor", request.advisor_id)

    pair = MatchEngine(snap.taxonomy, settings).score_pair(client, advisor, request.role)

    return ScorePairResponse(
        client_id=pair.client_id,
        advisor_id=pair.advisor_id,
        role=pair.role,
        score=pair.score,
        label=score_label(pair.score),
        eligible=pair.eligible,
        explanation=_explanation_out(pair.explanation),
        metrics=pair.metrics.to_dict(),
        contributions=[
            ContributionOut(
                subtopic_id=c.subtopic_id,
                subtopic=c.subtopic_name,
                skill_level=c.skill_level,
                weight=c.weight,
                coverage=c.coverage,
            )
            for c in pair.breakdown.contributions
        ],
        warnings=list(snap.warnings) + list(pair.warnings),
    )
