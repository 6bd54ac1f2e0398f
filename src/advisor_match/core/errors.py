"""Engine-level exceptions. Per-record data issues are warnings, not errors."""

from __future__ import annotations


class MatchEngineError(Exception):
    """Base class for structural failures that abort a build or a match run."""


class InvalidTaxonomyError(MatchEngineError):
    """Raised when the domain/subtopic snapshot is malformed."""


class EmptyCandidatePoolError(MatchEngineError):
    """Raised when a match run is requested without any advisors at all."""

    def __init__(self, message: str = "No eligible advisors: the candidate pool is empty"):
        super().__init__(message)


class SnapshotFormatError(MatchEngineError):
    """Raised when a snapshot document does not have the expected top-level shape."""
