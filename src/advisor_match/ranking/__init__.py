from .capacity import CapacityGate, capacity_percentage, utilization
from .explanation import (
    Excluded,
    Explanation,
    ExplanationGenerator,
    Included,
    explanation_from_dict,
)
from .metrics import MatchMetrics, MetricsCalculator, confidence_label, score_label
from .scoring import ScoreBreakdown, ScoringEngine, SubtopicContribution

__all__ = [
    "CapacityGate",
    "Excluded",
    "Explanation",
    "ExplanationGenerator",
    "Included",
    "MatchMetrics",
    "MetricsCalculator",
    "ScoreBreakdown",
    "ScoringEngine",
    "SubtopicContribution",
    "capacity_percentage",
    "confidence_label",
    "explanation_from_dict",
    "score_label",
    "utilization",
]
