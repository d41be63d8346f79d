"""Expose secure-storage backends."""

from .secret_store import SecretStore
from .sqlite_vault import SQLiteCredentialVault

__all__ = [
    "SQLiteCredentialVault",
    "SecretStore",
]
