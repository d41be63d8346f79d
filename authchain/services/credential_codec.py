"""JSON encoding for persisted credential records."""

from __future__ import annotations

from pydantic import ValidationError

from authchain.core.errors import SerializationError
from authchain.models.credentials import AccountCredentials


def encode_credentials(credentials: AccountCredentials) -> str:
    """Serialize a credential chain, keeping absent slots as nulls."""
    try:
        return credentials.model_dump_json()
    except (TypeError, ValueError) as exc:
        raise SerializationError("Credential serialization failed.") from exc


def decode_credentials(payload: str | bytes) -> AccountCredentials:
    """Parse a credential chain previously produced by ``encode_credentials``."""
    try:
        return AccountCredentials.model_validate_json(payload)
    except ValidationError as exc:
        raise SerializationError("Stored credential record is malformed.") from exc


__all__ = ["decode_credentials", "encode_credentials"]
