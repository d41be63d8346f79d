"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_account_registry_file,
    get_credential_storage,
    get_credential_vault,
    get_token_cipher_service,
)
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_account_registry_file",
    "get_app_settings",
    "get_credential_storage",
    "get_credential_vault",
    "get_token_cipher_service",
]
