"""Public schema exports."""

from .accounts import (
    AccountListResponse,
    AccountSummary,
    AccountValidationResponse,
    CredentialHealthResponse,
)

__all__ = [
    "AccountListResponse",
    "AccountSummary",
    "AccountValidationResponse",
    "CredentialHealthResponse",
]
