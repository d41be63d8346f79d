"""Service layer exports."""

from .accounts import Account, AccountRegistry, AccountRegistryFile
from .auth_pipeline import AuthPipeline, TokenExchanger
from .chain_validator import ChainInvalid, ChainValid, TokenValidationResult, validate
from .credential_codec import decode_credentials, encode_credentials
from .credential_health import build_health_report
from .credential_storage import CredentialStorageService
from .stage_resolver import ResolutionPlan, apply_resolution, plan_resolution, resolve
from .token_cipher import TokenCipherService

__all__ = [
    "Account",
    "AccountRegistry",
    "AccountRegistryFile",
    "AuthPipeline",
    "ChainInvalid",
    "ChainValid",
    "CredentialStorageService",
    "ResolutionPlan",
    "TokenCipherService",
    "TokenExchanger",
    "TokenValidationResult",
    "apply_resolution",
    "build_health_report",
    "decode_credentials",
    "encode_credentials",
    "plan_resolution",
    "resolve",
    "validate",
]
