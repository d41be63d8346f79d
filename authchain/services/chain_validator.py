"""Report every missing or expired slot of a credential chain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import FrozenSet, Optional, Union

from authchain.models.credentials import (
    AccountCredentials,
    TokenKind,
    TokenWithExpiry,
    as_utc,
)


@dataclass(frozen=True, slots=True)
class ChainValid:
    is_valid = True


@dataclass(frozen=True, slots=True)
class ChainInvalid:
    """The chain needs re-authentication for each listed token kind."""

    tokens: FrozenSet[TokenKind]

    is_valid = False


TokenValidationResult = Union[ChainValid, ChainInvalid]


def _is_invalid(token: Optional[TokenWithExpiry], now: datetime) -> bool:
    return token is None or now >= token.expiry


def validate(
    chain: AccountCredentials, now: Optional[datetime] = None
) -> TokenValidationResult:
    """Check all five slots and collect the ones that are absent or expired."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    invalid: set[TokenKind] = set()

    if _is_invalid(chain.service_access, now):
        invalid.add(TokenKind.SERVICE_ACCESS)
    if _is_invalid(chain.secure_identity_exchange, now):
        invalid.add(TokenKind.SECURE_IDENTITY_EXCHANGE)
    if _is_invalid(chain.identity_exchange, now):
        invalid.add(TokenKind.IDENTITY_EXCHANGE)
    if _is_invalid(chain.platform_access, now):
        invalid.add(TokenKind.PLATFORM_ACCESS)
    if chain.refresh_token is None:
        invalid.add(TokenKind.REFRESH)

    if not invalid:
        return ChainValid()
    return ChainInvalid(frozenset(invalid))


__all__ = ["ChainInvalid", "ChainValid", "TokenValidationResult", "validate"]
