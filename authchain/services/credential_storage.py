"""
Durable credential persistence on top of a secure-storage backend.

Some OS credential stores acknowledge a write before it is committed, or
truncate it silently. Every write is therefore read back, and the full
write+verify cycle is retried with exponential backoff before giving up.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from authchain.clients.secret_store import SecretStore
from authchain.core.errors import (
    SerializationError,
    StoreError,
    VerificationFailedError,
)
from authchain.models.credentials import AccountCredentials
from authchain.utils.retry import RetryConfig, retry_async

logger = logging.getLogger(__name__)


class CredentialStorageService:
    """Write-then-verify access to stored credential chains."""

    MAX_ATTEMPTS = 3
    BASE_DELAY_SECONDS = 0.1

    def __init__(
        self,
        store: SecretStore,
        retry_config: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._retry = retry_config or RetryConfig(
            attempts=self.MAX_ATTEMPTS,
            base_delay_seconds=self.BASE_DELAY_SECONDS,
        )
        self._sleep = sleep

    async def write_and_verify(
        self, account_id: str, credentials: AccountCredentials
    ) -> None:
        """Persist ``credentials`` and confirm the backend returns them.

        Raises ``VerificationFailedError`` when the read-back never finds the
        record, or the backend's ``StoreError`` when the last attempt failed
        with one.
        """
        try:
            await retry_async(
                self._write_and_verify_once,
                account_id,
                credentials,
                retry_config=self._retry,
                retry_on=(StoreError, VerificationFailedError),
                sleep=self._sleep,
            )
        except VerificationFailedError as exc:
            logger.error(
                "Credentials for account %s not confirmed after %s attempts",
                account_id,
                self._retry.attempts,
            )
            raise VerificationFailedError(
                account_id, attempts=self._retry.attempts
            ) from exc
        except StoreError:
            logger.error(
                "Storage backend failed writing credentials for account %s",
                account_id,
            )
            raise
        logger.debug("Credentials for account %s written and verified", account_id)

    async def _write_and_verify_once(
        self, account_id: str, credentials: AccountCredentials
    ) -> None:
        await self._store.write_credentials(account_id, credentials)
        try:
            stored = await self._store.read_credentials(account_id)
        except SerializationError as exc:
            # A record that cannot be decoded was truncated or corrupted on write.
            raise VerificationFailedError(account_id) from exc
        if stored is None:
            raise VerificationFailedError(account_id)

    async def read(self, account_id: str) -> Optional[AccountCredentials]:
        """Return the stored chain for ``account_id`` or ``None``."""
        return await self._store.read_credentials(account_id)

    async def delete(self, account_id: str) -> None:
        """Remove any stored chain for ``account_id``."""
        await self._store.delete_credentials(account_id)


__all__ = ["CredentialStorageService"]
