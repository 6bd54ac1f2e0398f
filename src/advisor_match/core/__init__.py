from .errors import (
    EmptyCandidatePoolError,
    InvalidTaxonomyError,
    MatchEngineError,
    SnapshotFormatError,
)
from .models import (
    Advisor,
    AdvisorSkillRecord,
    AssignmentRole,
    Client,
    ClientNeedRecord,
    ComplexityTier,
    Domain,
    Horizon,
    Segment,
    Subtopic,
    parse_complexity,
    parse_horizon,
    parse_role,
    parse_segment,
)

__all__ = [
    "Advisor",
    "AdvisorSkillRecord",
    "AssignmentRole",
    "Client",
    "ClientNeedRecord",
    "ComplexityTier",
    "Domain",
    "EmptyCandidatePoolError",
    "Horizon",
    "InvalidTaxonomyError",
    "MatchEngineError",
    "Segment",
    "SnapshotFormatError",
    "Subtopic",
    "parse_complexity",
    "parse_horizon",
    "parse_role",
    "parse_segment",
]
