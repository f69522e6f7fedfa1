# snowstats/errors

"""
snowstats.errors

Central exception hierarchy for SnowStats.

Rationale:
  - Loaders should raise specific, meaningful errors.
  - Callers can catch SnowStatsError (broad) or specific subclasses (narrow).
  - The statistics engine and formatter never raise; only reading and
    decoding a track file can fail.
"""


class SnowStatsError(RuntimeError):
    """Base class for all SnowStats runtime errors."""


# ---- Track loading errors ----------------------

class TrackIOError(SnowStatsError):
    """A track file could not be read from disk."""

class ParseError(SnowStatsError):
    """
    Track content could not be decoded (malformed JSON/GPX, missing fields).

    `cause` keeps the underlying decoder message as a plain string.
    """

    def __init__(self, message: str, cause: str | None = None):
        self.cause = cause
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


# ---- Configuration errors ----------------------

class ConfigError(SnowStatsError):
    """Configuration file or value is invalid."""


# ---- Selection errors --------------------------

class SelectionError(SnowStatsError):
    """Errors in interactive track selection."""

class FzfNotFoundError(SelectionError):
    """fzf is required but not available on PATH."""
