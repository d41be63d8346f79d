"""Builders for credential chains used across the suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from authchain.models.credentials import (
    AccountCredentials,
    SecureExchangeToken,
    TokenWithExpiry,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
LIVE = NOW + timedelta(hours=1)
EXPIRED = NOW - timedelta(minutes=1)


def token(value: str, expiry: datetime = LIVE) -> TokenWithExpiry:
    return TokenWithExpiry(token=value, expiry=expiry)


def secure(value: str = "xsts", user_hash: str = "uhs", expiry: datetime = LIVE):
    return SecureExchangeToken(token=value, user_hash=user_hash, expiry=expiry)


def full_chain(expiry: datetime = LIVE) -> AccountCredentials:
    return AccountCredentials(
        refresh_token="refresh",
        platform_access=token("platform", expiry),
        identity_exchange=token("identity", expiry),
        secure_identity_exchange=secure(expiry=expiry),
        service_access=token("service", expiry),
    )
