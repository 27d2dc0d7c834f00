"""
Identity Tokens

Signed, time-bound JWTs carrying {sub: owner_id, iat, exp}.

DESIGN DECISION: Tokens are stateless. Nothing is stored when a token is
minted, and validity is decided only by signature and expiry at the
moment of verification. There is no revocation list.

Minting is deterministic: the same owner and the same `now` (to the
second) with the same secret produce the same token.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from ledger.config import AuthSettings, get_settings
from ledger.errors import Unauthorized
from ledger.models.clock import Clock, ensure_utc, utc_now
from ledger.models.principal import IdentityToken, TokenClaims


class TokenError(Unauthorized):
    """A token failed verification. `reason` is for logs only."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__()


class TokenService:
    """Mints and verifies identity tokens."""

    def __init__(
        self,
        settings: Optional[AuthSettings] = None,
        clock: Clock = utc_now,
    ):
        self._settings = settings or get_settings().auth
        self._clock = clock
        self._lifetime = timedelta(minutes=self._settings.token_expire_minutes)

    def _now(self, now: Optional[datetime]) -> datetime:
        moment = ensure_utc(now) if now is not None else self._clock()
        return moment.replace(microsecond=0)

    def mint(self, owner_id: UUID, now: Optional[datetime] = None) -> IdentityToken:
        """Mint a token for an owner, valid from `now` for the configured lifetime."""
        issued_at = self._now(now)
        expires_at = issued_at + self._lifetime
        claims = {
            "sub": str(owner_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(
            claims,
            self._settings.secret_key,
            algorithm=self._settings.algorithm,
        )
        return IdentityToken(
            token=token,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def verify(self, raw_token: str, now: Optional[datetime] = None) -> TokenClaims:
        """
        Verify a token and return its claims.

        Raises:
            TokenError: On a malformed token, bad signature, missing or
                invalid claims, or when now is past the expiry
        """
        if not raw_token:
            raise TokenError("empty")

        try:
            # Expiry is checked below against our own clock; any jose
            # require_<claim> option would re-enable its wall-clock check.
            payload = jwt.decode(
                raw_token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as e:
            raise TokenError(f"invalid: {e}")

        try:
            claims = TokenClaims(
                owner_id=UUID(str(payload["sub"])),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            raise TokenError("malformed claims")

        moment = ensure_utc(now) if now is not None else self._clock()
        if moment > claims.expires_at:
            raise TokenError("expired")

        return claims
