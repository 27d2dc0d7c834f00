"""
Authorization Gate

Runs before every ledger operation. Turns the Authorization header into
an OwnerContext, or refuses.

DESIGN DECISION: The gate is the only producer of OwnerContext, and
every ledger method requires one. An owner id from a payload or query
string has no way into a store call.

The gate is pure verification: it reads no storage, writes nothing,
and does not touch the token.
"""

from datetime import datetime
from typing import Optional

from ledger.auth.tokens import TokenError, TokenService
from ledger.errors import Unauthorized
from ledger.events import EventLogger
from ledger.models.principal import OwnerContext


BEARER_SCHEME = "bearer"


class AuthorizationGate:
    """Resolves a bearer token to the owner of the request."""

    def __init__(
        self,
        tokens: TokenService,
        event_logger: Optional[EventLogger] = None,
    ):
        self._tokens = tokens
        self._events = event_logger or EventLogger()

    def _extract_token(self, authorization: Optional[str]) -> str:
        if authorization is None or not authorization.strip():
            raise TokenError("missing")

        parts = authorization.strip().split()
        if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
            raise TokenError("malformed header")
        return parts[1]

    async def authorize(
        self,
        authorization: Optional[str],
        now: Optional[datetime] = None,
    ) -> OwnerContext:
        """
        Verify the Authorization header and bind the owner.

        Raises:
            Unauthorized: Header absent or malformed, bad signature, or expired
        """
        try:
            raw_token = self._extract_token(authorization)
            claims = self._tokens.verify(raw_token, now)
        except TokenError as e:
            await self._events.log_token_rejected(e.reason)
            raise Unauthorized()

        return OwnerContext(
            owner_id=claims.owner_id,
            token_expires_at=claims.expires_at,
        )
