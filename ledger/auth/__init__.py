"""Credential, token and authorization package."""

from ledger.auth.credentials import CredentialService
from ledger.auth.gate import AuthorizationGate
from ledger.auth.passwords import PasswordHasher
from ledger.auth.tokens import TokenError, TokenService

__all__ = [
    "AuthorizationGate",
    "CredentialService",
    "PasswordHasher",
    "TokenError",
    "TokenService",
]
