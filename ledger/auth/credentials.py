"""
Credential Service

Registers principals and authenticates them by email and password.
Both operations hand back the public view of the principal plus a
freshly minted identity token.

CRITICAL: authenticate() raises the same Unauthorized for an unknown
email and for a wrong password, so the response cannot be used to
find out which emails are registered.
"""

from datetime import datetime
from typing import Optional

from ledger.auth.passwords import PasswordHasher
from ledger.auth.tokens import TokenService
from ledger.errors import Conflict, Internal, Unauthorized
from ledger.events import EventLogger
from ledger.models.principal import (
    AuthResult,
    LoginRequest,
    OwnerContext,
    Principal,
    PrincipalView,
    RegisterRequest,
)
from ledger.services.storage import (
    DuplicateError,
    PrincipalStorageInterface,
    StorageError,
)


INVALID_CREDENTIALS = "Invalid email or password"


class CredentialService:
    """Registration, login, and principal lookup."""

    def __init__(
        self,
        storage: PrincipalStorageInterface,
        tokens: TokenService,
        hasher: Optional[PasswordHasher] = None,
        event_logger: Optional[EventLogger] = None,
    ):
        self._storage = storage
        self._tokens = tokens
        self._hasher = hasher or PasswordHasher()
        self._events = event_logger or EventLogger()

    async def register(
        self,
        request: RegisterRequest,
        now: Optional[datetime] = None,
    ) -> AuthResult:
        """
        Create a principal and log them in.

        Raises:
            Conflict: If the email is already registered
            Internal: If storage fails
        """
        principal = Principal(
            name=request.name,
            email=request.email,
            password_hash=self._hasher.hash(request.password),
        )

        try:
            await self._storage.create_principal(principal)
        except DuplicateError:
            await self._events.log_registration_conflict()
            raise Conflict()
        except StorageError as e:
            await self._events.log_storage_error("create_principal", str(e))
            raise Internal()

        await self._events.log_principal_registered(principal.id)
        return AuthResult(
            user=principal.to_view(),
            token=self._tokens.mint(principal.id, now),
        )

    async def authenticate(
        self,
        request: LoginRequest,
        now: Optional[datetime] = None,
    ) -> AuthResult:
        """
        Check an email/password pair.

        Raises:
            Unauthorized: Generic message for any credential failure
            Internal: If storage fails
        """
        try:
            principal = await self._storage.get_principal_by_email(request.email)
        except StorageError as e:
            await self._events.log_storage_error("get_principal_by_email", str(e))
            raise Internal()

        if principal is None:
            self._hasher.dummy_verify()
            await self._events.log_login_failed("unknown_email")
            raise Unauthorized(INVALID_CREDENTIALS)

        if not self._hasher.verify(request.password, principal.password_hash):
            await self._events.log_login_failed("bad_password")
            raise Unauthorized(INVALID_CREDENTIALS)

        await self._events.log_login_succeeded(principal.id)
        return AuthResult(
            user=principal.to_view(),
            token=self._tokens.mint(principal.id, now),
        )

    async def get_principal(self, owner: OwnerContext) -> PrincipalView:
        """
        Look up the caller's own principal.

        Raises:
            Unauthorized: If the principal no longer exists
        """
        try:
            principal = await self._storage.get_principal_by_id(owner.owner_id)
        except StorageError as e:
            await self._events.log_storage_error("get_principal_by_id", str(e), owner.owner_id)
            raise Internal()

        if principal is None:
            raise Unauthorized()
        return principal.to_view()
