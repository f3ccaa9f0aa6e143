"""
Exceptions raised at the edges of the coaching package.

The coaching core never raises for unqualified input; these are used by
the configuration and command-line layers only.
"""


class CoachError(Exception):
    """Base class for interview-coach errors."""


class TranscriptLoadError(CoachError):
    """A transcript file is missing, unreadable or malformed."""


class ConfigError(CoachError):
    """coach.yaml or an environment value is malformed or out of range."""
