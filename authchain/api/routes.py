"""
FastAPI routes reporting account and credential health.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from authchain.core.errors import AuthError
from authchain.dependencies import (
    get_account_registry_file,
    get_app_settings,
    get_credential_storage,
)
from authchain.schemas import (
    AccountListResponse,
    AccountSummary,
    AccountValidationResponse,
    CredentialHealthResponse,
)
from authchain.services import build_health_report

router = APIRouter()
logger = logging.getLogger(__name__)


def _storage_unavailable(exc: AuthError) -> HTTPException:
    logger.error("Credential storage failure: %s", exc)
    return HTTPException(
        status_code=HTTPStatus.SERVICE_UNAVAILABLE,
        detail="Could not access stored credentials, try again.",
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(settings: Annotated[Any, Depends(get_app_settings)]) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.get("/accounts", response_model=AccountListResponse)
async def list_accounts(
    registry_file: Annotated[Any, Depends(get_account_registry_file)],
) -> AccountListResponse:
    """List known accounts in natural username order."""
    registry = registry_file.load()
    return AccountListResponse(
        accounts=[
            AccountSummary(
                account_id=account_id,
                username=account.username,
                offline=account.offline,
            )
            for account_id, account in registry.sorted_accounts()
        ],
        selected_account=registry.selected_account,
    )


@router.get(
    "/accounts/{account_id}/credentials",
    response_model=CredentialHealthResponse,
)
async def get_credential_health(
    account_id: str,
    storage: Annotated[Any, Depends(get_credential_storage)],
) -> CredentialHealthResponse:
    """Report which tokens of an account's chain need re-authentication."""
    try:
        credentials = await storage.read(account_id)
    except AuthError as exc:
        raise _storage_unavailable(exc) from exc
    if credentials is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"No stored credentials for account {account_id}.",
        )
    return build_health_report(account_id, credentials)


@router.post("/accounts/validate", response_model=AccountValidationResponse)
async def validate_accounts(
    storage: Annotated[Any, Depends(get_credential_storage)],
    registry_file: Annotated[Any, Depends(get_account_registry_file)],
) -> AccountValidationResponse:
    """Drop accounts whose credentials are missing or unreadable."""
    registry = registry_file.load()
    removed = await registry.validate_accounts(storage)
    if removed:
        registry_file.save(registry)
    return AccountValidationResponse(removed=removed)


@router.delete("/accounts/{account_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_account(
    account_id: str,
    storage: Annotated[Any, Depends(get_credential_storage)],
    registry_file: Annotated[Any, Depends(get_account_registry_file)],
) -> None:
    """Forget an account together with its stored credentials."""
    registry = registry_file.load()
    if account_id not in registry.accounts:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Unknown account {account_id}.",
        )
    try:
        await storage.delete(account_id)
    except AuthError as exc:
        raise _storage_unavailable(exc) from exc
    registry.remove_account(account_id)
    registry_file.save(registry)
