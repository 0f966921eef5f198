"""
Error types and message hygiene for the analytics backend.

Upstream error bodies can echo request credentials back at us, so every
message that leaves the service goes through ``redact`` first.
"""

import re

REDACTED = "[REDACTED]"

_SECRET_RUN = re.compile(r"[A-Za-z0-9]{20,}")

MIN_CREDENTIAL_LENGTH = 20
_PLACEHOLDER_MARKERS = ("your_", "_here")


def redact(message) -> str:
    """Replace every 20+ character alphanumeric run with a placeholder."""
    return _SECRET_RUN.sub(REDACTED, str(message))


def credential_problem(value: str | None) -> str | None:
    """Describe why *value* does not look like a real credential, or None."""
    if not value:
        return "is not set"
    if any(marker in value for marker in _PLACEHOLDER_MARKERS):
        return "appears to be a placeholder value"
    if len(value) < MIN_CREDENTIAL_LENGTH:
        return "appears to be too short"
    return None


class ConfigurationError(Exception):
    """Raised when required settings are missing or look invalid."""

    pass


class BackendError(Exception):
    """A single transport failed to complete a backend call."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(redact(message))
        self.status_code = status_code


class BackendUnavailableError(BackendError):
    """Every configured transport failed; carries each attempt's error."""

    def __init__(self, attempts: list[tuple[str, Exception]]):
        self.attempts = list(attempts)
        if self.attempts:
            detail = "; ".join(f"{name}: {exc}" for name, exc in self.attempts)
        else:
            detail = "no transports configured"
        super().__init__(f"All analytics transports failed ({detail})")
