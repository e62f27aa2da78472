"""
Error hierarchy for the median string motif search.

Every failure the pipeline reports derives from MotifSearchError, so the
command-line entry point can map any of them to a non-zero exit status.
"""


class MotifSearchError(Exception):
    """Base class for all motif search failures."""


class ConfigurationError(MotifSearchError):
    """Raised before any stage runs when the job configuration is invalid."""


class StageExecutionError(MotifSearchError):
    """Raised when a map or reduce task of a stage fails.

    The failing stage is fatal for the whole pipeline; the underlying
    Spark or task exception is chained as ``__cause__``.
    """

    def __init__(self, stage: str, message: str | None = None) -> None:
        self.stage = stage
        super().__init__(message or f"Stage {stage} failed")


class RecordFormatError(MotifSearchError, ValueError):
    """Raised when a stored line cannot be decoded into a MotifMatch."""
