"""
HTTP Routes

Thin handlers: parse the request, call a service with the caller's
OwnerContext, return the result. No ledger route accepts an owner id
from the payload or the query string.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ledger.api.dependencies import get_components, get_owner
from ledger.api.errors import validation_error_from_pydantic
from ledger.models.entry import EntryCreate, EntryFilter, EntryUpdate, LedgerEntry
from ledger.models.principal import (
    LoginRequest,
    OwnerContext,
    PrincipalView,
    RegisterRequest,
)
from ledger.models.summary import SummaryResult
from ledger.orchestrator import AppComponents


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class AuthResponse(BaseModel):
    user: PrincipalView
    token: str
    token_type: str = "bearer"
    expires_at: datetime


class MeResponse(BaseModel):
    user: PrincipalView


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str


# =============================================================================
# HEALTH
# =============================================================================

health_router = APIRouter(tags=["health"])


@health_router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="OK", message="Personal Ledger API is running")


# =============================================================================
# AUTH
# =============================================================================

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    components: AppComponents = Depends(get_components),
) -> AuthResponse:
    result = await components.credentials.register(payload)
    return AuthResponse(
        user=result.user,
        token=result.token.token,
        expires_at=result.token.expires_at,
    )


@auth_router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    components: AppComponents = Depends(get_components),
) -> AuthResponse:
    result = await components.credentials.authenticate(payload)
    return AuthResponse(
        user=result.user,
        token=result.token.token,
        expires_at=result.token.expires_at,
    )


@auth_router.get("/me", response_model=MeResponse)
async def me(
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> MeResponse:
    return MeResponse(user=await components.credentials.get_principal(owner))


# =============================================================================
# TRANSACTIONS
# =============================================================================

transactions_router = APIRouter(prefix="/transactions", tags=["transactions"])


# Summary routes come first so "summary" is never taken as an entry id
@transactions_router.get("/summary/monthly", response_model=SummaryResult)
async def monthly_summary(
    year: Optional[str] = Query(default=None),
    month: Optional[str] = Query(default=None),
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> SummaryResult:
    return await components.summaries.monthly(owner, year, month)


@transactions_router.get("/summary/yearly", response_model=SummaryResult)
async def yearly_summary(
    year: Optional[str] = Query(default=None),
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> SummaryResult:
    return await components.summaries.yearly(owner, year)


@transactions_router.post("", response_model=LedgerEntry, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    payload: EntryCreate,
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> LedgerEntry:
    return await components.ledger.create_entry(owner, payload)


@transactions_router.get("", response_model=list[LedgerEntry])
async def list_transactions(
    kind: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    start: Optional[str] = Query(default=None),
    end: Optional[str] = Query(default=None),
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> list[LedgerEntry]:
    try:
        filters = EntryFilter(kind=kind, category=category, start=start, end=end)
    except PydanticValidationError as e:
        raise validation_error_from_pydantic(e)
    return await components.ledger.list_entries(owner, filters)


@transactions_router.get("/{entry_id}", response_model=LedgerEntry)
async def get_transaction(
    entry_id: str,
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> LedgerEntry:
    return await components.ledger.get_entry(owner, entry_id)


@transactions_router.put("/{entry_id}", response_model=LedgerEntry)
async def update_transaction(
    entry_id: str,
    payload: EntryUpdate,
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> LedgerEntry:
    return await components.ledger.update_entry(owner, entry_id, payload)


@transactions_router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_transaction(
    entry_id: str,
    owner: OwnerContext = Depends(get_owner),
    components: AppComponents = Depends(get_components),
) -> MessageResponse:
    await components.ledger.delete_entry(owner, entry_id)
    return MessageResponse(message="Transaction deleted")
