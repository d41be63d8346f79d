try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from factories import full_chain, token

from authchain.core.errors import StoreError
from authchain.main import app
from authchain.models.credentials import AccountCredentials
from authchain.services import (
    Account,
    AccountRegistry,
    AccountRegistryFile,
    CredentialStorageService,
)


class DummyStore:
    def __init__(self) -> None:
        self.records: dict[str, AccountCredentials] = {}
        self.broken: set[str] = set()
        self.deleted: list[str] = []

    async def write_credentials(self, account_id, credentials) -> None:
        self.records[account_id] = credentials

    async def read_credentials(self, account_id):
        if account_id in self.broken:
            raise StoreError("keychain locked")
        return self.records.get(account_id)

    async def delete_credentials(self, account_id) -> None:
        if account_id in self.broken:
            raise StoreError("keychain locked")
        self.deleted.append(account_id)
        self.records.pop(account_id, None)


@pytest.fixture()
def api_overrides(tmp_path):
    from authchain import dependencies

    store = DummyStore()
    registry_file = AccountRegistryFile(str(tmp_path / "accounts.json"))
    registry = AccountRegistry()
    registry.add_account("acct-10", Account(username="player10"))
    registry.add_account("acct-2", Account(username="player2"))
    registry.select_account("acct-2")
    registry_file.save(registry)

    overrides = {
        dependencies.get_credential_storage: lambda: CredentialStorageService(store),
        dependencies.get_account_registry_file: lambda: registry_file,
    }
    app.dependency_overrides.update(overrides)

    yield store, registry_file

    app.dependency_overrides.clear()


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    )


@pytest.mark.anyio
async def test_healthcheck() -> None:
    async with _client() as client:
        response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.anyio
async def test_list_accounts_in_natural_order(api_overrides):
    async with _client() as client:
        response = await client.get("/api/accounts")

    assert response.status_code == 200
    data = response.json()
    assert [item["account_id"] for item in data["accounts"]] == ["acct-2", "acct-10"]
    assert data["selected_account"] == "acct-2"


@pytest.mark.anyio
async def test_credential_health_reports_invalid_tokens(api_overrides):
    store, _ = api_overrides
    now = datetime.now(timezone.utc)
    chain = full_chain(expiry=now + timedelta(hours=1))
    chain.service_access = token("service", now - timedelta(minutes=5))
    store.records["acct-2"] = chain

    async with _client() as client:
        response = await client.get("/api/accounts/acct-2/credentials")

    assert response.status_code == 200
    data = response.json()
    assert data == {
        "account_id": "acct-2",
        "valid": False,
        "invalid_tokens": ["service_access"],
        "resumable_stage": "secure_identity_exchange",
    }
    # Reporting never clears slots from the stored record.
    assert store.records["acct-2"].service_access is not None


@pytest.mark.anyio
async def test_credential_health_for_valid_chain(api_overrides):
    store, _ = api_overrides
    store.records["acct-2"] = full_chain(
        expiry=datetime.now(timezone.utc) + timedelta(hours=1)
    )

    async with _client() as client:
        response = await client.get("/api/accounts/acct-2/credentials")

    assert response.json()["valid"] is True
    assert response.json()["resumable_stage"] == "service_access"


@pytest.mark.anyio
async def test_credential_health_missing_record_is_404(api_overrides):
    async with _client() as client:
        response = await client.get("/api/accounts/acct-2/credentials")

    assert response.status_code == 404


@pytest.mark.anyio
async def test_credential_health_storage_error_is_503(api_overrides):
    store, _ = api_overrides
    store.broken.add("acct-2")

    async with _client() as client:
        response = await client.get("/api/accounts/acct-2/credentials")

    assert response.status_code == 503


@pytest.mark.anyio
async def test_validate_accounts_removes_unusable_accounts(api_overrides):
    store, registry_file = api_overrides
    store.records["acct-10"] = AccountCredentials(refresh_token="refresh")

    async with _client() as client:
        response = await client.post("/api/accounts/validate")

    assert response.status_code == 200
    assert response.json() == {"removed": ["acct-2"]}
    registry = registry_file.load()
    assert list(registry.accounts) == ["acct-10"]
    assert registry.selected_account is None


@pytest.mark.anyio
async def test_delete_account_removes_credentials_and_registry_entry(api_overrides):
    store, registry_file = api_overrides
    store.records["acct-10"] = AccountCredentials(refresh_token="refresh")

    async with _client() as client:
        response = await client.delete("/api/accounts/acct-10")

    assert response.status_code == 204
    assert store.deleted == ["acct-10"]
    assert "acct-10" not in registry_file.load().accounts


@pytest.mark.anyio
async def test_delete_unknown_account_is_404(api_overrides):
    store, registry_file = api_overrides

    async with _client() as client:
        response = await client.delete("/api/accounts/unknown")

    assert response.status_code == 404
    assert store.deleted == []
    assert set(registry_file.load().accounts) == {"acct-2", "acct-10"}


@pytest.mark.anyio
async def test_delete_account_storage_error_is_503(api_overrides):
    store, registry_file = api_overrides
    store.broken.add("acct-10")

    async with _client() as client:
        response = await client.delete("/api/accounts/acct-10")

    assert response.status_code == 503
    # The account stays registered so the user can retry the removal.
    assert "acct-10" in registry_file.load().accounts
