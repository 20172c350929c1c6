class ScoringError(Exception):
    """Base for all scoring engine errors."""


class ConfigurationError(ScoringError):
    """The game format or its setup is broken. Aborts the whole computation."""


class PostingError(ScoringError):
    """The round cannot be submitted to the handicap service."""


class ExpressionError(ValueError):
    """Malformed or unknown availability expression."""
