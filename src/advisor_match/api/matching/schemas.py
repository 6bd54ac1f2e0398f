"""Pydantic schemas for match API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from advisor_match.core.models import (
    AssignmentRole,
    ComplexityTier,
    Horizon,
    Segment,
    parse_horizon,
    parse_segment,
)


# -----------------------------------------------------------------------------
# Snapshot records
# -----------------------------------------------------------------------------


class DomainIn(BaseModel):
    id: str
    name: str
    display_order: int = 0
    is_active: bool = True


class SubtopicIn(BaseModel):
    id: str
    domain_id: str
    name: Optional[str] = None
    default_weight: float = Field(default=1.0, gt=0, allow_inf_nan=False)
    display_order: int = 0
    is_active: bool = True


class SkillIn(BaseModel):
    subtopic_id: str
    skill_level: float = Field(..., ge=0, allow_inf_nan=False)
    case_count: int = Field(default=0, ge=0)
    last_assessed_at: Optional[datetime] = None


class AdvisorIn(BaseModel):
    id: str
    name: Optional[str] = None
    max_families: int = Field(..., ge=0)
    current_families: int = Field(default=0, ge=0)
    target_segment: Segment
    years_experience: float = Field(default=0, ge=0, allow_inf_nan=False)
    certifications: List[str] = Field(default_factory=list)
    skills: List[SkillIn] = Field(default_factory=list)

    @field_validator("target_segment", mode="before")
    @classmethod
    def _segment(cls, value: Any) -> Segment:
        return parse_segment(value)


class NeedIn(BaseModel):
    subtopic_id: str
    importance: float = Field(..., ge=0, allow_inf_nan=False)
    urgency: float = Field(..., ge=0, allow_inf_nan=False)
    horizon: Horizon = Horizon.three_year

    @field_validator("horizon", mode="before")
    @classmethod
    def _horizon(cls, value: Any) -> Horizon:
        return parse_horizon(value)


class ClientIn(BaseModel):
    id: str
    name: Optional[str] = None
    segment: Segment
    complexity_tier: ComplexityTier = ComplexityTier.standard
    is_prospect: bool = False
    needs: List[NeedIn] = Field(default_factory=list)

    @field_validator("segment", mode="before")
    @classmethod
    def _segment(cls, value: Any) -> Segment:
        return parse_segment(value)


class SnapshotIn(BaseModel):
    """Already-materialized taxonomy, advisors and clients."""

    domains: List[DomainIn]
    subtopics: List[SubtopicIn]
    advisors: List[AdvisorIn] = Field(default_factory=list)
    clients: List[ClientIn] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Request Models
# -----------------------------------------------------------------------------


class MatchRunRequest(BaseModel):
    """Request body for a batch match run."""

    snapshot: SnapshotIn
    client_ids: Optional[List[str]] = Field(
        default=None, description="Clients to match; all clients when omitted"
    )
    advisor_ids: Optional[List[str]] = Field(
        default=None, description="Restrict the advisor pool; whole pool when omitted"
    )
    roles: List[AssignmentRole] = Field(default_factory=lambda: [AssignmentRole.lead])
    top_k: Optional[int] = Field(default=None, ge=1, le=100)
    include_prospects: bool = True


class ScorePairRequest(BaseModel):
    """Request body for single-pair inspection."""

    snapshot: SnapshotIn
    client_id: str
    advisor_id: str
    role: AssignmentRole = AssignmentRole.lead


# -----------------------------------------------------------------------------
# Response Models
# -----------------------------------------------------------------------------


class ExplanationOut(BaseModel):
    kind: str = Field(..., description="included or excluded")
    top_drivers: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    why_not: Optional[List[str]] = None


class MatchResultOut(BaseModel):
    match_run_id: str
    client_id: str
    advisor_id: str
    role: AssignmentRole
    rank: Optional[int] = None
    score: int
    explanation: ExplanationOut
    metrics: Optional[Dict[str, Any]] = None
    created_at: datetime


class MatchRunResponse(BaseModel):
    id: str
    created_at: datetime
    client_ids: List[str]
    roles: List[AssignmentRole]
    top_k: int
    results: List[MatchResultOut] = Field(default_factory=list)
    excluded: List[MatchResultOut] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ContributionOut(BaseModel):
    subtopic_id: str
    subtopic: str
    skill_level: float
    weight: float
    coverage: float


class ScorePairResponse(BaseModel):
    client_id: str
    advisor_id: str
    role: AssignmentRole
    score: int
    label: str
    eligible: bool
    explanation: ExplanationOut
    metrics: Dict[str, Any]
    contributions: List[ContributionOut] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
