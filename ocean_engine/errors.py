"""
OCEAN Engine — Exception hierarchy

Per-item problems are recovered locally by the normalizer; the classes below
are raised for per-call structural failures and for malformed configuration.
"""


class EngineError(Exception):
    """Base exception for the scoring engine."""

    pass


class ScoreValidationError(EngineError, ValueError):
    """A single input record is malformed (missing dimension, out of range)."""

    pass


class InsufficientDataError(EngineError):
    """Fewer contributing records than the analysis requires."""

    def __init__(self, message: str, required: int = 1, actual: int = 0):
        self.required = required
        self.actual = actual
        super().__init__(message)


class InsufficientRatersError(InsufficientDataError):
    """Multi-rater aggregation invoked with no submitted rater scores."""

    def __init__(self, actual: int = 0):
        super().__init__(
            "No rater submitted scores; at least one contributing rater is required",
            required=1,
            actual=actual,
        )


class ConfigurationError(EngineError):
    """A rule table (dark-side, culture type, emergent property) is malformed."""

    pass
