try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import sqlite3
from pathlib import Path

import pytest

from factories import full_chain

from authchain.clients.sqlite_vault import SQLiteCredentialVault
from authchain.core.errors import SerializationError, StoreError
from authchain.models.credentials import AccountCredentials
from authchain.services.credential_storage import CredentialStorageService
from authchain.services.token_cipher import TokenCipherService


def _vault(tmp_path: Path, secret: str = "vault-secret") -> SQLiteCredentialVault:
    return SQLiteCredentialVault(
        str(tmp_path / "nested" / "credentials.db"),
        cipher=TokenCipherService(secret=secret),
    )


@pytest.mark.asyncio
async def test_vault_round_trips_credentials(tmp_path: Path) -> None:
    vault = _vault(tmp_path)

    await vault.write_credentials("acct-1", full_chain())

    assert await vault.read_credentials("acct-1") == full_chain()
    assert await vault.read_credentials("acct-2") is None


@pytest.mark.asyncio
async def test_vault_overwrites_and_deletes(tmp_path: Path) -> None:
    vault = _vault(tmp_path)
    await vault.write_credentials("acct-1", full_chain())

    await vault.write_credentials("acct-1", AccountCredentials(refresh_token="new"))
    assert await vault.read_credentials("acct-1") == AccountCredentials(
        refresh_token="new"
    )

    await vault.delete_credentials("acct-1")
    assert await vault.read_credentials("acct-1") is None


@pytest.mark.asyncio
async def test_vault_encrypts_records_at_rest(tmp_path: Path) -> None:
    vault = _vault(tmp_path)
    await vault.write_credentials("acct-1", full_chain())

    conn = sqlite3.connect(tmp_path / "nested" / "credentials.db")
    try:
        (payload,) = conn.execute(
            "SELECT payload FROM account_credentials WHERE account_id = ?",
            ("acct-1",),
        ).fetchone()
    finally:
        conn.close()

    assert "refresh" not in payload
    assert "service" not in payload


@pytest.mark.asyncio
async def test_vault_with_wrong_secret_raises_serialization_error(
    tmp_path: Path,
) -> None:
    await _vault(tmp_path).write_credentials("acct-1", full_chain())

    with pytest.raises(SerializationError):
        await _vault(tmp_path, secret="other-secret").read_credentials("acct-1")


@pytest.mark.asyncio
async def test_vault_wraps_sqlite_failures(tmp_path: Path) -> None:
    vault = _vault(tmp_path)
    conn = sqlite3.connect(tmp_path / "nested" / "credentials.db")
    try:
        conn.execute("DROP TABLE account_credentials")
        conn.commit()
    finally:
        conn.close()

    with pytest.raises(StoreError):
        await vault.read_credentials("acct-1")


@pytest.mark.asyncio
async def test_storage_service_verifies_against_vault(tmp_path: Path) -> None:
    service = CredentialStorageService(_vault(tmp_path))

    await service.write_and_verify("acct-1", full_chain())

    assert await service.read("acct-1") == full_chain()
    await service.delete("acct-1")
    assert await service.read("acct-1") is None
