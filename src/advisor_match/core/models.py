from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Segment(str, Enum):
    essentials = "essentials"
    traditional = "traditional"
    private_client = "private_client"
    ultra_hnw = "ultra_hnw"


class ComplexityTier(str, Enum):
    standard = "standard"
    complex = "complex"
    highly_complex = "highly_complex"


class Horizon(str, Enum):
    immediate = "immediate"
    one_year = "one_year"
    three_year = "three_year"
    five_year = "five_year"


class AssignmentRole(str, Enum):
    lead = "lead"
    backup = "backup"
    support = "support"


_HORIZON_ALIASES = {
    "now": "immediate",
    "1yr": "one_year",
    "1y": "one_year",
    "one-year": "one_year",
    "3yr": "three_year",
    "3y": "three_year",
    "three-year": "three_year",
    "5yr": "five_year",
    "5y": "five_year",
    "five-year": "five_year",
}

_SEGMENT_ALIASES = {
    "private client": "private_client",
    "private-client": "private_client",
    "ultra hnw": "ultra_hnw",
    "ultra-hnw": "ultra_hnw",
    "uhnw": "ultra_hnw",
}


def parse_horizon(value: str | Horizon) -> Horizon:
    if isinstance(value, Horizon):
        return value
    raw = str(value).strip().lower()
    return Horizon(_HORIZON_ALIASES.get(raw, raw))


def parse_segment(value: str | Segment) -> Segment:
    if isinstance(value, Segment):
        return value
    raw = str(value).strip().lower()
    return Segment(_SEGMENT_ALIASES.get(raw, raw))


def parse_complexity(value: str | ComplexityTier) -> ComplexityTier:
    if isinstance(value, ComplexityTier):
        return value
    return ComplexityTier(str(value).strip().lower().replace("-", "_").replace(" ", "_"))


def parse_role(value: str | AssignmentRole) -> AssignmentRole:
    if isinstance(value, AssignmentRole):
        return value
    return AssignmentRole(str(value).strip().lower())


@dataclass(frozen=True)
class Domain:
    id: str
    name: str
    display_order: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class Subtopic:
    id: str
    domain_id: str
    name: str
    default_weight: float = 1.0
    display_order: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class AdvisorSkillRecord:
    advisor_id: str
    subtopic_id: str
    skill_level: float
    case_count: int = 0
    last_assessed_at: Optional[datetime] = None


@dataclass(frozen=True)
class ClientNeedRecord:
    client_id: str
    subtopic_id: str
    importance: float
    urgency: float
    horizon: Horizon = Horizon.three_year


@dataclass(frozen=True)
class Advisor:
    id: str
    max_families: int
    current_families: int
    target_segment: Segment
    years_experience: float = 0
    name: Optional[str] = None
    certifications: Tuple[str, ...] = ()
    skills: Tuple[AdvisorSkillRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Client:
    id: str
    segment: Segment
    complexity_tier: ComplexityTier = ComplexityTier.standard
    is_prospect: bool = False
    name: Optional[str] = None
    needs: Tuple[ClientNeedRecord, ...] = field(default_factory=tuple)
