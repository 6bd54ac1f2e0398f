from __future__ import annotations

import pytest

from advisor_match.core.models import (
    AssignmentRole,
    ComplexityTier,
    Horizon,
    Segment,
    parse_complexity,
    parse_horizon,
    parse_role,
    parse_segment,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("immediate", Horizon.immediate),
        ("Now", Horizon.immediate),
        ("1yr", Horizon.one_year),
        ("three-year", Horizon.three_year),
        (" 5y ", Horizon.five_year),
        (Horizon.one_year, Horizon.one_year),
    ],
)
def test_parse_horizon(raw, expected):
    assert parse_horizon(raw) is expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("essentials", Segment.essentials),
        ("Private Client", Segment.private_client),
        ("UHNW", Segment.ultra_hnw),
    ],
)
def test_parse_segment(raw, expected):
    assert parse_segment(raw) is expected


def test_parse_complexity_and_role():
    assert parse_complexity("Highly Complex") is ComplexityTier.highly_complex
    assert parse_role("BACKUP") is AssignmentRole.backup


@pytest.mark.parametrize("parser", [parse_horizon, parse_segment, parse_role])
def test_unknown_values_raise(parser):
    with pytest.raises(ValueError):
        parser("someday")
