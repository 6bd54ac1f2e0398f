from .artifacts import MatchRunArtifactWriter, default_run_dir
from .engine import MatchEngine, PairScore
from .results import MatchResult, MatchRun

__all__ = [
    "MatchEngine",
    "MatchResult",
    "MatchRun",
    "MatchRunArtifactWriter",
    "PairScore",
    "default_run_dir",
]
