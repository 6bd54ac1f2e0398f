from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from advisor_match.config.settings import Settings


def load_default_env() -> None:
    """
    Load a project-level .env if present.
    Resolves to the repository root (three levels up from this file).
    """
    project_root = Path(__file__).resolve().parents[3]
    env_path = project_root / ".env"
    load_dotenv(dotenv_path=env_path, override=False)


@dataclass
class CLIContext:
    settings: Settings


def build_context(
    min_score_floor: Optional[int] = None,
    workers: Optional[int] = None,
) -> CLIContext:
    load_default_env()

    overrides = {}
    if min_score_floor is not None:
        overrides["min_score_floor"] = min_score_floor
    if workers is not None:
        overrides["match_workers"] = workers

    return CLIContext(settings=Settings(**overrides))
