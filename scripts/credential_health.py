"""Report the health of an account's stored credential chain.

Reads the encrypted record from the configured SQLite vault, then prints which
tokens are missing or expired and the stage a login would resume from.

Example usages::

    python -m scripts.credential_health --account-id 1b4e28ba-2fa1-11d2-883f

    # Inspect a vault other than the configured one.
    python -m scripts.credential_health --account-id 1b4e28ba --db-path /tmp/vault.db
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from authchain.clients import SQLiteCredentialVault
from authchain.core.config import get_settings
from authchain.core.errors import AuthError
from authchain.services import (
    CredentialStorageService,
    TokenCipherService,
    build_health_report,
)

EXIT_OK = 0
EXIT_INVALID_CHAIN = 2
EXIT_MISSING_RECORD = 3
EXIT_RUNTIME_ERROR = 5


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report missing or expired tokens for a stored account."
    )
    parser.add_argument(
        "--account-id",
        required=True,
        help="Identifier keying the account's stored credentials.",
    )
    parser.add_argument(
        "--db-path",
        default=None,
        help="SQLite vault to read (default: AUTHCHAIN_STORAGE_DB_PATH).",
    )
    parser.add_argument(
        "--secret",
        default=None,
        help="Encryption secret (default: AUTHCHAIN_STORAGE_ENCRYPTION_SECRET).",
    )
    return parser


async def _report(storage: CredentialStorageService, account_id: str) -> int:
    credentials = await storage.read(account_id)
    if credentials is None:
        print(f"No stored credentials for account {account_id}.", file=sys.stderr)
        return EXIT_MISSING_RECORD

    report = build_health_report(account_id, credentials)
    print(report.model_dump_json(indent=2))
    return EXIT_OK if report.valid else EXIT_INVALID_CHAIN


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    secret = args.secret or settings.storage.encryption_secret
    if not secret:
        print(
            "An encryption secret is required; pass --secret or set "
            "AUTHCHAIN_STORAGE_ENCRYPTION_SECRET.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        vault = SQLiteCredentialVault(
            args.db_path or settings.storage.db_path,
            cipher=TokenCipherService(secret=secret),
        )
        return asyncio.run(_report(CredentialStorageService(vault), args.account_id))
    except AuthError as exc:
        print(f"Could not read stored credentials: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
