from __future__ import annotations

from datetime import datetime, timezone

import pytest

from advisor_match.config.settings import Settings
from advisor_match.core.models import (
    Advisor,
    AdvisorSkillRecord,
    Client,
    ClientNeedRecord,
    ComplexityTier,
    Domain,
    Segment,
    Subtopic,
)
from advisor_match.taxonomy import Taxonomy


DOMAINS = [
    Domain(id="estate", name="Estate Planning", display_order=1),
    Domain(id="tax", name="Tax", display_order=2),
    Domain(id="retire", name="Retirement", display_order=3),
]

SUBTOPICS = [
    Subtopic(id="charitable", domain_id="estate", name="Charitable Giving", display_order=2),
    Subtopic(id="estate-trusts", domain_id="estate", name="Trusts & Estates", display_order=1),
    Subtopic(id="retirement-income", domain_id="retire", name="Retirement Income", default_weight=2.0),
    Subtopic(id="tax-loss", domain_id="tax", name="Tax-Loss Harvesting", display_order=2),
    Subtopic(id="tax-planning", domain_id="tax", name="Tax Planning", display_order=1),
    Subtopic(
        id="legacy-annuities",
        domain_id="retire",
        name="Legacy Annuities",
        display_order=9,
        is_active=False,
    ),
]


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, match_workers=1)


@pytest.fixture()
def taxonomy() -> Taxonomy:
    return Taxonomy.build(DOMAINS, SUBTOPICS)


@pytest.fixture()
def make_advisor():
    def _make(
        advisor_id: str,
        skills: dict | None = None,
        *,
        max_families: int = 10,
        current_families: int = 5,
        segment: Segment = Segment.essentials,
        years_experience: float = 8,
        assessed_at: datetime | None = None,
    ) -> Advisor:
        records = tuple(
            AdvisorSkillRecord(
                advisor_id=advisor_id,
                subtopic_id=sid,
                skill_level=level,
                case_count=3,
                last_assessed_at=assessed_at,
            )
            for sid, level in (skills or {}).items()
        )
        return Advisor(
            id=advisor_id,
            name=advisor_id.upper(),
            max_families=max_families,
            current_families=current_families,
            target_segment=segment,
            years_experience=years_experience,
            skills=records,
        )

    return _make


@pytest.fixture()
def make_client():
    def _make(
        client_id: str,
        needs: dict | None = None,
        *,
        segment: Segment = Segment.traditional,
        is_prospect: bool = False,
    ) -> Client:
        """needs maps subtopic id -> (importance, urgency, horizon)."""
        records = tuple(
            ClientNeedRecord(
                client_id=client_id,
                subtopic_id=sid,
                importance=importance,
                urgency=urgency,
                horizon=horizon,
            )
            for sid, (importance, urgency, horizon) in (needs or {}).items()
        )
        return Client(
            id=client_id,
            segment=segment,
            complexity_tier=ComplexityTier.complex,
            is_prospect=is_prospect,
            needs=records,
        )

    return _make


@pytest.fixture()
def snapshot_doc() -> dict:
    """A JSON-shaped snapshot used by the loader, CLI and API tests."""
    return {
        "domains": [
            {"id": "estate", "name": "Estate Planning", "display_order": 1},
            {"id": "tax", "name": "Tax", "display_order": 2},
        ],
        "subtopics": [
            {"id": "estate-trusts", "domain_id": "estate", "name": "Trusts & Estates", "default_weight": 1.0},
            {"id": "tax-planning", "domain_id": "tax", "name": "Tax Planning", "default_weight": 1.0},
        ],
        "advisors": [
            {
                "id": "adv-a",
                "name": "Avery",
                "max_families": 10,
                "current_families": 5,
                "target_segment": "essentials",
                "years_experience": 12,
                "skills": [
                    {"subtopic_id": "estate-trusts", "skill_level": 9, "last_assessed_at": "2026-01-10T00:00:00Z"}
                ],
            },
            {
                "id": "adv-b",
                "name": "Blake",
                "max_families": 10,
                "current_families": 10,
                "target_segment": "essentials",
                "years_experience": 4,
                "skills": [{"subtopic_id": "estate-trusts", "skill_level": 3}],
            },
        ],
        "clients": [
            {
                "id": "cli-c",
                "name": "Carter Family",
                "segment": "traditional",
                "complexity_tier": "complex",
                "is_prospect": True,
                "needs": [
                    {"subtopic_id": "estate-trusts", "importance": 10, "urgency": 10, "horizon": "now"}
                ],
            }
        ],
    }


@pytest.fixture()
def run_at() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
