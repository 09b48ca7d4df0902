"""Errors raised by the ledger and insight services."""

from typing import Any


class LedgerError(Exception):
    """Base exception for Loyalty Pro errors."""

    default_message = "Ledger operation failed."

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details


class AlreadyExistsError(LedgerError):
    """Username is already registered."""

    default_message = "Username already exists."


class InvalidCredentialsError(LedgerError):
    """Unknown username or wrong password. The two are not distinguished."""

    default_message = "Invalid username or password."


class AdminNotFoundError(LedgerError):
    """No admin with the given username."""

    default_message = "Admin not found."


class ServiceUnavailableError(LedgerError):
    """The insight collaborator is not configured."""

    default_message = (
        "AI service is not configured. The API key is not available in this environment."
    )


class UpstreamError(LedgerError):
    """The insight collaborator failed or returned nothing."""

    default_message = "An unknown error occurred while fetching insights."
