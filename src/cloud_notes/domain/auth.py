"""Domain models for authentication state."""

from enum import StrEnum


class AuthEvent(StrEnum):
    """Authentication events pushed by the cloud provider."""

    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    SESSION_EXPIRED = "session_expired"
