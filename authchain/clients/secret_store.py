"""Interface expected from a secure credential storage backend."""

from __future__ import annotations

from typing import Optional, Protocol

from authchain.models.credentials import AccountCredentials


class SecretStore(Protocol):
    """Keyed storage for credential chains.

    Implementations raise ``StoreError`` for backend failures and
    ``SerializationError`` when a record cannot be encoded or decoded.
    """

    async def write_credentials(
        self, account_id: str, credentials: AccountCredentials
    ) -> None: ...

    async def read_credentials(self, account_id: str) -> Optional[AccountCredentials]: ...

    async def delete_credentials(self, account_id: str) -> None: ...


__all__ = ["SecretStore"]
