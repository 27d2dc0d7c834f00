"""
Principal Models

A principal is the individual who owns a set of ledger entries.

CRITICAL: The password hash never leaves the service layer.
Everything returned to a caller is a PrincipalView.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ledger.models.clock import utc_now


class Principal(BaseModel):
    """A registered principal as stored."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique principal ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    email: EmailStr = Field(
        ...,
        description="Login email, stored lower-cased"
    )
    password_hash: str = Field(
        ...,
        min_length=1,
        description="Salted one-way hash of the password"
    )
    created_at: datetime = Field(
        default_factory=utc_now
    )

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    def to_view(self) -> "PrincipalView":
        return PrincipalView(id=self.id, name=self.name, email=self.email)


class PrincipalView(BaseModel):
    """Public projection of a principal."""

    id: UUID
    name: str
    email: str


class RegisterRequest(BaseModel):
    """
    Registration payload.

    Name and email are trimmed; the password is hashed exactly as sent.
    """
    model_config = ConfigDict(extra="forbid")

    name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Display name"
    )
    email: EmailStr
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
    )

    @field_validator('name', 'email', mode='before')
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator('email', mode='before')
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v


class IdentityToken(BaseModel):
    """A minted bearer token plus the window it is valid for."""

    token: str
    token_type: str = "bearer"
    issued_at: datetime
    expires_at: datetime


class TokenClaims(BaseModel):
    """Claims recovered from a verified token."""
    model_config = ConfigDict(frozen=True)

    owner_id: UUID
    issued_at: datetime
    expires_at: datetime


class AuthResult(BaseModel):
    """What register and login hand back."""

    user: PrincipalView
    token: IdentityToken


class OwnerContext(BaseModel):
    """
    The verified owner of the current request.

    Produced only by the authorization gate. Every ledger operation
    requires one; there is no other way to name an owner.
    """
    model_config = ConfigDict(frozen=True)

    owner_id: UUID
    token_expires_at: Optional[datetime] = None
