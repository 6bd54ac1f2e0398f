from __future__ import annotations

from datetime import datetime, timezone

import pytest

from advisor_match.core.models import Horizon
from advisor_match.profiles import build_coverage_index, build_need_profile
from advisor_match.ranking import (
    MatchMetrics,
    MetricsCalculator,
    ScoringEngine,
    confidence_label,
    score_label,
)
from advisor_match.ranking.metrics import experience_level


def _metrics(taxonomy, settings, client, advisor, as_of=None):
    coverage = build_coverage_index(advisor, taxonomy)
    contributions = ScoringEngine(taxonomy, settings).contributions(
        build_need_profile(client, taxonomy), coverage
    )
    return MetricsCalculator(settings).compute(
        advisor, coverage, contributions, segment_alignment=False, as_of=as_of
    )


def test_fresh_assessment_raises_confidence(taxonomy, settings, make_client, make_advisor, run_at):
    client = make_client("cli-1", {"estate-trusts": (8, 5, Horizon.one_year)})
    advisor = make_advisor(
        "adv-1",
        {"estate-trusts": 10},
        years_experience=12,
        assessed_at=datetime(2026, 1, 10, tzinfo=timezone.utc),
    )

    fresh = _metrics(taxonomy, settings, client, advisor, as_of=run_at)
    undated = _metrics(taxonomy, settings, client, advisor)

    assert fresh.skill_coverage == 100.0
    assert fresh.average_skill_gap == 0.0
    assert fresh.capacity_utilization == 50
    assert fresh.experience_level == "senior"
    # (100 + 80 + 80 + 100) / 4
    assert fresh.confidence == 90
    # (100 + 50 + 80 + 100) / 4 = 82.5
    assert undated.confidence == 83


def test_stale_assessment_uses_low_recency(taxonomy, settings, make_client, make_advisor, run_at):
    client = make_client("cli-1", {"estate-trusts": (8, 5, Horizon.one_year)})
    advisor = make_advisor(
        "adv-1",
        {"estate-trusts": 10},
        years_experience=12,
        assessed_at=datetime(2025, 1, 10, tzinfo=timezone.utc),
    )

    assert _metrics(taxonomy, settings, client, advisor, as_of=run_at).confidence == 83


def test_skill_gap_and_coverage_share(taxonomy, settings, make_client, make_advisor):
    client = make_client(
        "cli-1",
        {
            "estate-trusts": (8, 5, Horizon.one_year),
            "tax-planning": (4, 5, Horizon.one_year),
        },
    )
    advisor = make_advisor("adv-1", {"estate-trusts": 3, "tax-planning": 10})

    metrics = _metrics(taxonomy, settings, client, advisor)

    assert metrics.skill_coverage == 50.0
    assert metrics.average_skill_gap == 2.5


def test_near_full_caseload_lowers_confidence(taxonomy, settings, make_client, make_advisor):
    client = make_client("cli-1")
    roomy = make_advisor("adv-1", current_families=5, years_experience=15)
    crowded = make_advisor("adv-2", current_families=10, years_experience=15)

    # no needs: coverage 0, recency 50, experience 100, capacity 100 vs 50
    assert _metrics(taxonomy, settings, client, roomy).confidence == 63
    assert _metrics(taxonomy, settings, client, crowded).confidence == 50


@pytest.mark.parametrize(
    ("years", "level"),
    [(0, "junior"), (4.9, "junior"), (5, "mid"), (10, "senior"), (15, "expert"), (30, "expert")],
)
def test_experience_level(years, level):
    assert experience_level(years) == level


@pytest.mark.parametrize(
    ("score", "label"),
    [(100, "Excellent Match"), (85, "Excellent Match"), (70, "Good Match"), (55, "Moderate Match"), (54, "Poor Match")],
)
def test_score_label(score, label):
    assert score_label(score) == label


@pytest.mark.parametrize(
    ("confidence", "label"),
    [(80, "High Confidence"), (79, "Moderate Confidence"), (60, "Moderate Confidence"), (10, "Low Confidence")],
)
def test_confidence_label(confidence, label):
    assert confidence_label(confidence) == label


def test_metrics_dict_round_trip():
    metrics = MatchMetrics(
        skill_coverage=66.7,
        average_skill_gap=1.5,
        capacity_utilization=40,
        experience_level="mid",
        segment_alignment=True,
        confidence=71,
    )

    assert MatchMetrics.from_dict(metrics.to_dict()) == metrics


def test_non_finite_experience_reads_as_junior(taxonomy, settings, make_client, make_advisor):
    advisor = make_advisor("adv-1", years_experience=float("nan"))

    metrics = _metrics(taxonomy, settings, make_client("cli-1"), advisor)

    assert metrics.experience_level == "junior"
    # coverage 0, recency 50, experience 0, capacity 100
    assert metrics.confidence == 38
