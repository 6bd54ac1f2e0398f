from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


REPO_ROOT = Path(__file__).resolve().parents[3]

HORIZON_ORDER = ("immediate", "one_year", "three_year", "five_year")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=REPO_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Scales of the operator-maintained records.
    skill_scale_max: float = Field(default=10.0, gt=0)
    urgency_scale_max: float = Field(default=10.0, gt=0)

    # Scoring
    neutral_baseline: float = Field(
        default=50.0,
        ge=0,
        le=100,
        description="Raw score assigned to clients without any recorded needs.",
    )
    segment_match_multiplier: float = Field(default=1.1, ge=1.0, le=2.0)
    horizon_weights: Dict[str, float] = Field(
        default_factory=lambda: {
            "immediate": 1.5,
            "one_year": 1.25,
            "three_year": 1.0,
            "five_year": 0.85,
        }
    )

    # Explanation
    strong_coverage_threshold: float = Field(default=0.7, ge=0, le=1)
    weak_coverage_threshold: float = Field(default=0.4, ge=0, le=1)
    min_gap_weight_share: float = Field(default=0.05, ge=0, le=1)
    max_top_drivers: int = Field(default=3, ge=0)
    max_gaps: int = Field(default=3, ge=0)

    # Match runs
    min_score_floor: int = Field(default=0, ge=0, le=100)
    default_top_k: int = Field(default=3, ge=1)
    match_workers: int = Field(default=4, ge=1)
    assessment_recency_days: int = Field(default=180, ge=1)

    runs_dir: Path = Field(default_factory=lambda: REPO_ROOT / "runs")
    log_level: str = Field(default="INFO")

    api_key: Optional[SecretStr] = None
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @field_validator("horizon_weights")
    @classmethod
    def _check_horizon_weights(cls, value: Dict[str, float]) -> Dict[str, float]:
        missing = [h for h in HORIZON_ORDER if h not in value]
        if missing:
            raise ValueError(f"horizon_weights is missing: {', '.join(missing)}")
        weights = [float(value[h]) for h in HORIZON_ORDER]
        if any(w <= 0 for w in weights):
            raise ValueError("horizon_weights must be positive")
        if any(near <= far for near, far in zip(weights, weights[1:])):
            raise ValueError(
                "horizon_weights must strictly decrease from immediate to five_year"
            )
        return {h: float(value[h]) for h in HORIZON_ORDER}

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Settings":
        if self.weak_coverage_threshold >= self.strong_coverage_threshold:
            raise ValueError("weak_coverage_threshold must be below strong_coverage_threshold")
        return self

    @property
    def api_key_str(self) -> str | None:
        return self.api_key.get_secret_value() if self.api_key else None

    @property
    def active_runs_dir(self) -> Path:
        return self.runs_dir
