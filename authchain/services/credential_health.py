"""Summaries of stored credential chains for user-facing reporting."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from authchain.models.credentials import AccountCredentials
from authchain.schemas import CredentialHealthResponse
from authchain.services.chain_validator import ChainInvalid, validate
from authchain.services.stage_resolver import plan_resolution


def build_health_report(
    account_id: str,
    credentials: AccountCredentials,
    now: Optional[datetime] = None,
) -> CredentialHealthResponse:
    """Describe ``credentials`` without clearing any of its slots."""
    result = validate(credentials, now)
    plan = plan_resolution(credentials, now)
    invalid = (
        sorted(kind.value for kind in result.tokens)
        if isinstance(result, ChainInvalid)
        else []
    )
    return CredentialHealthResponse(
        account_id=account_id,
        valid=result.is_valid,
        invalid_tokens=invalid,
        resumable_stage=plan.stage.stage.name.lower(),
    )


__all__ = ["build_health_report"]
