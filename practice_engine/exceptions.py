"""
Error taxonomy for the practice engine.

Data absence and history-store failures never surface as exceptions; they
resolve to neutral scores inside the scorers. Only configuration mistakes
and an unreachable candidate pool are raised to callers.
"""


class PracticeEngineError(Exception):
    """Base class for all engine errors."""
    pass


class ConfigurationError(PracticeEngineError):
    """Raised when weights, thresholds or progression tables are invalid."""
    pass


class CandidatePoolUnavailableError(PracticeEngineError):
    """Raised by a candidate repository when the pool cannot be fetched."""

    def __init__(self, platform: str, reason: str, source: str | None = None):
        self.platform = platform
        self.reason = reason
        self.source = source
        where = f"from '{source}'" if source else f"for '{platform}'"
        super().__init__(f"Candidate pool {where} is unavailable: {reason}")
