"""Account registry kept alongside the stored credential chains.

Accounts and credential records share a lifecycle but live apart; the account
identifier is the only link between them.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from authchain.core.errors import AuthError
from authchain.services.credential_storage import CredentialStorageService

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def _natural_key(value: str) -> Tuple:
    parts = _DIGITS.split(value.casefold())
    return tuple(int(part) if part.isdigit() else part for part in parts)


class Account(BaseModel):
    """A known login, keyed by account identifier in the registry."""

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    username: str
    offline: bool = False
    head: Optional[bytes] = Field(None, description="Rendered skin head image.")


class AccountRegistry(BaseModel):
    """All known accounts plus the currently selected one."""

    accounts: Dict[str, Account] = Field(default_factory=dict)
    selected_account: Optional[str] = None

    def add_account(self, account_id: str, account: Account) -> None:
        self.accounts[account_id] = account

    def remove_account(self, account_id: str) -> Optional[Account]:
        removed = self.accounts.pop(account_id, None)
        if self.selected_account == account_id:
            self.selected_account = None
        return removed

    def select_account(self, account_id: str) -> None:
        if account_id not in self.accounts:
            raise KeyError(account_id)
        self.selected_account = account_id

    def sorted_accounts(self) -> List[Tuple[str, Account]]:
        """Accounts ordered naturally by username ("user2" before "user10")."""
        return sorted(
            self.accounts.items(),
            key=lambda item: (_natural_key(item[1].username), item[0]),
        )

    async def validate_accounts(self, storage: CredentialStorageService) -> List[str]:
        """Drop accounts whose stored credentials are missing or unreadable."""
        to_remove: List[str] = []
        for account_id in self.accounts:
            try:
                credentials = await storage.read(account_id)
            except AuthError as exc:
                logger.warning(
                    "Dropping account %s; stored credentials unreadable: %s",
                    account_id,
                    exc,
                )
                to_remove.append(account_id)
                continue
            if credentials is None:
                logger.info("Dropping account %s; no stored credentials", account_id)
                to_remove.append(account_id)

        for account_id in to_remove:
            self.remove_account(account_id)
        return to_remove


class AccountRegistryFile:
    """Load and save an ``AccountRegistry`` as JSON on disk."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)

    def load(self) -> AccountRegistry:
        if not self._path.exists():
            return AccountRegistry()
        try:
            return AccountRegistry.model_validate_json(
                self._path.read_text(encoding="utf-8")
            )
        except ValidationError:
            logger.exception("Account registry at %s is corrupt; starting empty", self._path)
            return AccountRegistry()

    def save(self, registry: AccountRegistry) -> None:
        if self._path.parent and not self._path.parent.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(registry.model_dump_json(indent=2), encoding="utf-8")


__all__ = ["Account", "AccountRegistry", "AccountRegistryFile"]
