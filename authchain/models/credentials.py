"""
Domain models for the credential chain.

``AccountCredentials`` is the persisted unit per account. Its five slots follow
pipeline order: refresh token, platform access, identity exchange, secure
identity exchange and service access. Each slot is only meaningful when it was
derived from a valid predecessor; the model tracks that temporally via expiry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, Field, field_validator


def as_utc(value: datetime) -> datetime:
    """Interpret naive timestamps as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TokenWithExpiry(BaseModel):
    """Opaque token value with an absolute UTC expiry."""

    token: str = Field(..., description="Opaque token value.")
    expiry: datetime = Field(..., description="Absolute expiry timestamp (UTC).")

    @field_validator("expiry")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        """Interpret naive timestamps as UTC."""
        return as_utc(value)

    def is_live(self, now: datetime) -> bool:
        """Return True while ``now`` is strictly before the expiry."""
        return now < self.expiry


class SecureExchangeToken(TokenWithExpiry):
    """Secure identity-exchange token; the final exchange needs both fields."""

    user_hash: str = Field(..., description="User hash issued alongside the token.")


class AccountCredentials(BaseModel):
    """Credential chain persisted per account identifier."""

    refresh_token: Optional[str] = None
    platform_access: Optional[TokenWithExpiry] = None
    identity_exchange: Optional[TokenWithExpiry] = None
    secure_identity_exchange: Optional[SecureExchangeToken] = None
    service_access: Optional[TokenWithExpiry] = None

    def clear(self, kind: "TokenKind") -> None:
        """Drop the token held in ``kind``'s slot."""
        setattr(self, kind.value, None)


class TokenKind(str, Enum):
    """Slots of the credential chain; values match the field names."""

    REFRESH = "refresh_token"
    PLATFORM_ACCESS = "platform_access"
    IDENTITY_EXCHANGE = "identity_exchange"
    SECURE_IDENTITY_EXCHANGE = "secure_identity_exchange"
    SERVICE_ACCESS = "service_access"


class AuthStage(IntEnum):
    """Ordered position in the authentication pipeline."""

    INITIAL = 0
    REFRESH_TOKEN = 1
    PLATFORM_ACCESS = 2
    IDENTITY_EXCHANGE = 3
    SECURE_IDENTITY_EXCHANGE = 4
    SERVICE_ACCESS = 5


@dataclass(frozen=True, slots=True)
class Initial:
    """No usable token; a full login is required."""

    stage: ClassVar[AuthStage] = AuthStage.INITIAL


@dataclass(frozen=True, slots=True)
class RefreshTokenStage:
    refresh_token: str

    stage: ClassVar[AuthStage] = AuthStage.REFRESH_TOKEN


@dataclass(frozen=True, slots=True)
class PlatformAccessStage:
    access_token: str

    stage: ClassVar[AuthStage] = AuthStage.PLATFORM_ACCESS


@dataclass(frozen=True, slots=True)
class IdentityExchangeStage:
    token: str

    stage: ClassVar[AuthStage] = AuthStage.IDENTITY_EXCHANGE


@dataclass(frozen=True, slots=True)
class SecureIdentityExchangeStage:
    token: str
    user_hash: str

    stage: ClassVar[AuthStage] = AuthStage.SECURE_IDENTITY_EXCHANGE


@dataclass(frozen=True, slots=True)
class ServiceAccessStage:
    """A currently usable service access token."""

    access_token: str

    stage: ClassVar[AuthStage] = AuthStage.SERVICE_ACCESS


AuthStageWithData = Union[
    Initial,
    RefreshTokenStage,
    PlatformAccessStage,
    IdentityExchangeStage,
    SecureIdentityExchangeStage,
    ServiceAccessStage,
]


__all__ = [
    "AccountCredentials",
    "AuthStage",
    "AuthStageWithData",
    "IdentityExchangeStage",
    "Initial",
    "PlatformAccessStage",
    "RefreshTokenStage",
    "SecureExchangeToken",
    "SecureIdentityExchangeStage",
    "ServiceAccessStage",
    "TokenKind",
    "TokenWithExpiry",
    "as_utc",
]
