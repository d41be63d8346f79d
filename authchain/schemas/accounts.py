"""
Pydantic models returned by the account and credential health endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class AccountSummary(BaseModel):
    """A registered account as shown to the user interface."""

    account_id: str = Field(..., description="Identifier keying the stored credentials.")
    username: str
    offline: bool = False


class AccountListResponse(BaseModel):
    """Accounts in display order plus the current selection."""

    accounts: List[AccountSummary] = Field(default_factory=list)
    selected_account: Optional[str] = None


class CredentialHealthResponse(BaseModel):
    """Which re-authentication steps an account currently needs."""

    account_id: str
    valid: bool
    invalid_tokens: List[str] = Field(
        default_factory=list,
        description="Token kinds that are missing or expired, sorted by name.",
    )
    resumable_stage: str = Field(
        ..., description="Furthest pipeline stage that can still be resumed."
    )


class AccountValidationResponse(BaseModel):
    """Accounts dropped because their stored credentials were unusable."""

    removed: List[str] = Field(default_factory=list)
