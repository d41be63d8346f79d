"""
Drive a credential chain forward until a usable service access token exists.

The network exchanges themselves belong to a ``TokenExchanger``; this module
only decides which exchange comes next, merges results into the chain and
persists every change through ``CredentialStorageService``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Tuple

from authchain.core.errors import AuthError, LoginRequiredError, TokenRejectedError
from authchain.models.credentials import (
    AccountCredentials,
    IdentityExchangeStage,
    Initial,
    PlatformAccessStage,
    RefreshTokenStage,
    SecureExchangeToken,
    SecureIdentityExchangeStage,
    ServiceAccessStage,
    TokenKind,
    TokenWithExpiry,
)
from authchain.services.credential_storage import CredentialStorageService
from authchain.services.stage_resolver import apply_resolution, plan_resolution

logger = logging.getLogger(__name__)


class TokenExchanger(Protocol):
    """Network collaborators, one per stage transition."""

    async def refresh_platform_access(
        self, refresh_token: str
    ) -> Tuple[TokenWithExpiry, Optional[str]]:
        """Return a platform access token and, optionally, a rotated refresh token."""
        ...

    async def exchange_identity(self, platform_access_token: str) -> TokenWithExpiry: ...

    async def exchange_secure_identity(self, identity_token: str) -> SecureExchangeToken: ...

    async def exchange_service_access(
        self, secure_token: str, user_hash: str
    ) -> TokenWithExpiry: ...


class AuthPipeline:
    """Resume a stored credential chain with the fewest exchanges possible."""

    # Each step either advances one stage or clears one slot.
    _MAX_STEPS = 16

    def __init__(
        self,
        storage: CredentialStorageService,
        exchanger: TokenExchanger,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._exchanger = exchanger
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def obtain_service_access(
        self, account_id: str, credentials: AccountCredentials
    ) -> str:
        """Return a live service access token for ``account_id``.

        ``credentials`` is updated in place. Raises ``LoginRequiredError`` when
        the chain has nothing left to resume from.
        """
        dirty = False
        for _ in range(self._MAX_STEPS):
            plan = plan_resolution(credentials, self._clock())
            if plan.expired:
                apply_resolution(credentials, plan)
                dirty = True

            stage = plan.stage
            logger.debug("Account %s resumes at stage %s", account_id, stage.stage.name)

            if isinstance(stage, ServiceAccessStage):
                if dirty:
                    await self._storage.write_and_verify(account_id, credentials)
                return stage.access_token

            if isinstance(stage, Initial):
                if dirty:
                    await self._storage.write_and_verify(account_id, credentials)
                raise LoginRequiredError(
                    f"Account {account_id} has no resumable credentials."
                )

            try:
                await self._advance(stage, credentials)
            except TokenRejectedError as exc:
                rejected = self._slot_for(stage)
                logger.info(
                    "Account %s: %s token rejected (%s); falling back a stage",
                    account_id,
                    rejected.value,
                    exc,
                )
                credentials.clear(rejected)
                dirty = True
                continue

            await self._storage.write_and_verify(account_id, credentials)
            dirty = False

        raise AuthError(
            f"Credential chain for account {account_id} did not converge "
            f"after {self._MAX_STEPS} steps."
        )

    async def _advance(self, stage, credentials: AccountCredentials) -> None:
        if isinstance(stage, RefreshTokenStage):
            platform_access, rotated = await self._exchanger.refresh_platform_access(
                stage.refresh_token
            )
            credentials.platform_access = platform_access
            if rotated:
                credentials.refresh_token = rotated
        elif isinstance(stage, PlatformAccessStage):
            credentials.identity_exchange = await self._exchanger.exchange_identity(
                stage.access_token
            )
        elif isinstance(stage, IdentityExchangeStage):
            credentials.secure_identity_exchange = (
                await self._exchanger.exchange_secure_identity(stage.token)
            )
        elif isinstance(stage, SecureIdentityExchangeStage):
            credentials.service_access = await self._exchanger.exchange_service_access(
                stage.token, stage.user_hash
            )
        else:
            raise TypeError(f"Stage {stage!r} has no forward exchange.")

    @staticmethod
    def _slot_for(stage) -> TokenKind:
        """Slot holding the token a stage presents to its exchange."""
        return {
            RefreshTokenStage: TokenKind.REFRESH,
            PlatformAccessStage: TokenKind.PLATFORM_ACCESS,
            IdentityExchangeStage: TokenKind.IDENTITY_EXCHANGE,
            SecureIdentityExchangeStage: TokenKind.SECURE_IDENTITY_EXCHANGE,
        }[type(stage)]


__all__ = ["AuthPipeline", "TokenExchanger"]
