"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from authchain.clients import SQLiteCredentialVault
from authchain.core.config import get_settings
from authchain.services import (
    AccountRegistryFile,
    CredentialStorageService,
    TokenCipherService,
)
from authchain.utils.retry import RetryConfig


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_token_cipher_service() -> TokenCipherService:
    """Provide symmetric encryption helper for credential storage."""
    settings = _settings()
    secret = settings.storage.encryption_secret
    if not secret:
        raise RuntimeError(
            "AUTHCHAIN_STORAGE_ENCRYPTION_SECRET must be set to store credentials."
        )
    return TokenCipherService(secret=secret)


@lru_cache()
def get_credential_vault() -> SQLiteCredentialVault:
    """Provide the shared encrypted SQLite credential store."""
    settings = _settings()
    return SQLiteCredentialVault(
        settings.storage.db_path,
        cipher=get_token_cipher_service(),
    )


@lru_cache()
def get_credential_storage() -> CredentialStorageService:
    """Provide write-then-verify access to stored credentials."""
    settings = _settings()
    return CredentialStorageService(
        get_credential_vault(),
        retry_config=RetryConfig(
            attempts=settings.retry.max_attempts,
            base_delay_seconds=settings.retry.base_delay_seconds,
        ),
    )


@lru_cache()
def get_account_registry_file() -> AccountRegistryFile:
    """Provide the on-disk account registry."""
    settings = _settings()
    return AccountRegistryFile(settings.storage.accounts_file)


__all__ = [
    "get_account_registry_file",
    "get_credential_storage",
    "get_credential_vault",
    "get_token_cipher_service",
]
