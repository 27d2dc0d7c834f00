"""Password hashing backed by passlib."""

from typing import Optional

from passlib.context import CryptContext

from ledger.config import AuthSettings, get_settings


class PasswordHasher:
    """
    Salted one-way password hashing.

    The first configured scheme hashes new passwords; any listed scheme
    can verify. Plaintext passwords are never stored or logged.
    """

    def __init__(self, settings: Optional[AuthSettings] = None):
        settings = settings or get_settings().auth
        self._context = CryptContext(
            schemes=settings.password_schemes_list,
            deprecated="auto",
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password. Unknown or corrupt hashes count as a mismatch."""
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> None:
        """Spend comparable time when there is no hash to check against."""
        self._context.dummy_verify()
