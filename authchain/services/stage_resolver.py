"""
Find the furthest stage of a credential chain that can still be resumed.

Slots are checked from the most advanced one backward. Expired slots met on
the way are reported in the plan and cleared when the plan is applied, so a
chain persisted after resolution never stores known-stale tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import FrozenSet, Optional

from authchain.models.credentials import (
    AccountCredentials,
    AuthStageWithData,
    IdentityExchangeStage,
    Initial,
    PlatformAccessStage,
    RefreshTokenStage,
    SecureIdentityExchangeStage,
    ServiceAccessStage,
    TokenKind,
    as_utc,
)


@dataclass(frozen=True, slots=True)
class ResolutionPlan:
    """Resumable stage plus the expired slots that must be cleared."""

    stage: AuthStageWithData
    expired: FrozenSet[TokenKind] = frozenset()


def plan_resolution(
    chain: AccountCredentials, now: Optional[datetime] = None
) -> ResolutionPlan:
    """Decide where ``chain`` resumes without mutating it."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    expired: set[TokenKind] = set()

    service_access = chain.service_access
    if service_access is not None:
        if service_access.is_live(now):
            return ResolutionPlan(ServiceAccessStage(service_access.token))
        expired.add(TokenKind.SERVICE_ACCESS)

    secure = chain.secure_identity_exchange
    if secure is not None:
        if secure.is_live(now):
            return ResolutionPlan(
                SecureIdentityExchangeStage(secure.token, secure.user_hash),
                frozenset(expired),
            )
        expired.add(TokenKind.SECURE_IDENTITY_EXCHANGE)

    identity = chain.identity_exchange
    if identity is not None:
        if identity.is_live(now):
            return ResolutionPlan(IdentityExchangeStage(identity.token), frozenset(expired))
        expired.add(TokenKind.IDENTITY_EXCHANGE)

    platform_access = chain.platform_access
    if platform_access is not None:
        if platform_access.is_live(now):
            return ResolutionPlan(
                PlatformAccessStage(platform_access.token), frozenset(expired)
            )
        expired.add(TokenKind.PLATFORM_ACCESS)

    # Refresh tokens carry no local expiry; the issuer decides when they die.
    if chain.refresh_token is not None:
        return ResolutionPlan(RefreshTokenStage(chain.refresh_token), frozenset(expired))

    return ResolutionPlan(Initial(), frozenset(expired))


def apply_resolution(chain: AccountCredentials, plan: ResolutionPlan) -> None:
    """Clear every slot the plan found expired."""
    for kind in plan.expired:
        chain.clear(kind)


def resolve(
    chain: AccountCredentials, now: Optional[datetime] = None
) -> AuthStageWithData:
    """Return the resumable stage of ``chain``, clearing expired slots in place."""
    plan = plan_resolution(chain, now)
    apply_resolution(chain, plan)
    return plan.stage


__all__ = ["ResolutionPlan", "apply_resolution", "plan_resolution", "resolve"]
