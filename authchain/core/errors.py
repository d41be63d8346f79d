"""Exception types shared by the credential chain and its storage layer."""

from __future__ import annotations


class AuthError(Exception):
    """Base class for credential pipeline failures."""


class StoreError(AuthError):
    """Raised when the secure-storage backend reports a failure."""


class VerificationFailedError(AuthError):
    """Raised when a written credential record could not be read back."""

    def __init__(self, account_id: str, attempts: int | None = None) -> None:
        self.account_id = account_id
        self.attempts = attempts
        message = f"Credential verification failed for account {account_id}"
        if attempts is not None:
            message = f"{message} after {attempts} attempt(s)"
        super().__init__(message)


class SerializationError(AuthError):
    """Raised when a credential record cannot be encoded or decoded."""


class LoginRequiredError(AuthError):
    """Raised when no stored token can resume the chain and a fresh login is needed."""


class TokenRejectedError(Exception):
    """Raised by exchange collaborators when the presented token was refused."""


__all__ = [
    "AuthError",
    "LoginRequiredError",
    "SerializationError",
    "StoreError",
    "TokenRejectedError",
    "VerificationFailedError",
]
