"""Seatbelt exception hierarchy.

All public exceptions inherit from SeatbeltError, giving callers a single
base class to catch when they want to handle any Seatbelt-specific failure
without swallowing unrelated errors.

Probes never raise for an absent tool, file or credential: those are
represented as sentinel fact values. The exceptions here cover operator
mistakes (bad configuration) and the opt-in network key checks.
"""


class SeatbeltError(Exception):
    """Base exception for all Seatbelt errors."""


class ConfigError(SeatbeltError):
    """Raised when a configuration file cannot be loaded or is invalid.

    Covers unreadable or malformed YAML, unknown sections or keys,
    category weights that do not sum to 1.0, and grade bands that are
    not strictly descending.
    """


class KeyCheckError(SeatbeltError):
    """Raised when the API key health check cannot run at all.

    Covers a missing optional HTTP dependency. Individual key failures
    are reported as outcomes, never raised.
    """
