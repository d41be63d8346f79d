"""SQLite-backed secure storage for encrypted credential records."""

from __future__ import annotations

import asyncio
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from authchain.core.errors import StoreError
from authchain.models.credentials import AccountCredentials
from authchain.services.credential_codec import decode_credentials, encode_credentials
from authchain.services.token_cipher import TokenCipherService


class SQLiteCredentialVault:
    """Credential store keeping one Fernet-encrypted record per account."""

    def __init__(self, db_path: str, cipher: TokenCipherService) -> None:
        self._db_path = Path(db_path)
        self._cipher = cipher
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS account_credentials (
                    account_id TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def _write(self, account_id: str, ciphertext: str) -> None:
        updated_at = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO account_credentials (account_id, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(account_id) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (account_id, ciphertext, updated_at),
            )

    def _read(self, account_id: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM account_credentials WHERE account_id = ?",
                (account_id,),
            ).fetchone()
        if not row:
            return None
        return row["payload"]

    def _delete(self, account_id: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM account_credentials WHERE account_id = ?",
                (account_id,),
            )

    async def write_credentials(
        self, account_id: str, credentials: AccountCredentials
    ) -> None:
        ciphertext = self._cipher.encrypt(encode_credentials(credentials))
        try:
            await asyncio.to_thread(self._write, str(account_id), ciphertext)
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to write credentials for {account_id}: {exc}") from exc

    async def read_credentials(self, account_id: str) -> Optional[AccountCredentials]:
        try:
            ciphertext = await asyncio.to_thread(self._read, str(account_id))
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read credentials for {account_id}: {exc}") from exc
        if ciphertext is None:
            return None
        return decode_credentials(self._cipher.decrypt(ciphertext))

    async def delete_credentials(self, account_id: str) -> None:
        try:
            await asyncio.to_thread(self._delete, str(account_id))
        except sqlite3.Error as exc:
            raise StoreError(
                f"Failed to delete credentials for {account_id}: {exc}"
            ) from exc


__all__ = ["SQLiteCredentialVault"]
