"""
client/errors.py

Typed failures surfaced by the gateway and the session manager.

Every variant carries a human-readable ``message`` so flow controllers can
show it inline without probing the exception for attributes.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for every failure of a remote exchange."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(GatewayError):
    """The remote service rejected the username/password pair."""

    default_message = "Login failed"


class SignupRejected(GatewayError):
    """The remote service refused to create the account (e.g. duplicate username)."""

    default_message = "Signup failed"


class RemoteRejected(GatewayError):
    """Non-success HTTP status from the remote service."""

    default_message = "unknown error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(GatewayError):
    """DNS failure, connection reset, timeout or any other transport fault."""

    default_message = "Could not reach the AfyaJamii service"


class Unauthenticated(GatewayError):
    """An authenticated call was attempted without a session token."""

    default_message = "You are not signed in"


class LocalValidationError(ValueError):
    """Input rejected on the client before any network call was made."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
