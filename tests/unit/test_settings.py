from __future__ import annotations

import pytest
from pydantic import ValidationError

from advisor_match.config.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.neutral_baseline == 50.0
    assert settings.segment_match_multiplier == 1.1
    assert settings.min_score_floor == 0
    assert settings.default_top_k == 3
    assert list(settings.horizon_weights) == ["immediate", "one_year", "three_year", "five_year"]
    assert settings.api_key_str is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MIN_SCORE_FLOOR", "45")
    monkeypatch.setenv("MATCH_WORKERS", "2")
    monkeypatch.setenv(
        "HORIZON_WEIGHTS",
        '{"immediate": 2.0, "one_year": 1.5, "three_year": 1.0, "five_year": 0.5}',
    )
    monkeypatch.setenv("API_KEY", "secret-key")

    settings = Settings(_env_file=None)

    assert settings.min_score_floor == 45
    assert settings.match_workers == 2
    assert settings.horizon_weights["immediate"] == 2.0
    assert settings.api_key_str == "secret-key"


@pytest.mark.parametrize(
    "weights",
    [
        {"immediate": 1.0, "one_year": 1.25, "three_year": 1.0, "five_year": 0.85},
        {"immediate": 1.5, "one_year": 1.25, "three_year": 1.0},
        {"immediate": 1.5, "one_year": 1.25, "three_year": 1.0, "five_year": 0},
    ],
)
def test_horizon_weights_must_strictly_decrease(weights):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, horizon_weights=weights)


def test_weak_threshold_must_be_below_strong():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, strong_coverage_threshold=0.5, weak_coverage_threshold=0.5)


@pytest.mark.parametrize(
    "overrides",
    [{"min_score_floor": 101}, {"default_top_k": 0}, {"segment_match_multiplier": 0.9}],
)
def test_out_of_range_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
