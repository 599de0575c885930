"""Authentication routes - asker registration, login, profile, password change."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session
from src.api.errors import to_http_error
from src.api.schemas.auth import (
    AccountResponse,
    ChangePasswordRequest,
    LoginRequest,
    MeResponse,
    MessageResponse,
    RegisterRequest,
    SessionResponse,
    TokenResponse,
)
from src.domain import Account, IssuedTokens, User
from src.domain.errors import LifecycleError
from src.domain.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["authentication"])


def _session_response(message: str, account: Account, tokens: IssuedTokens) -> SessionResponse:
    return SessionResponse(
        message=message,
        user=AccountResponse.model_validate(account),
        tokens=TokenResponse.model_validate(tokens),
    )


@router.post(
    "/register",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new asker",
    description="Create an asker account. Responders are provisioned by admins.",
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    service = AccountService(session)
    try:
        account, tokens = await service.register(
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
        )
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return _session_response("Registration successful", account, tokens)


@router.post("/login", response_model=SessionResponse, summary="User login")
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    """Exchange email and password for access and refresh tokens."""
    service = AccountService(session)
    try:
        account, tokens = await service.login(email=payload.email, password=payload.password)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return _session_response("Login successful", account, tokens)


@router.get("/me", response_model=MeResponse, summary="Get current user")
async def get_me(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    service = AccountService(session)
    try:
        account = await service.get_account(user.user_id)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return MeResponse(user=AccountResponse.model_validate(account))


@router.post("/change-password", response_model=MessageResponse, summary="Change password")
async def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    service = AccountService(session)
    try:
        await service.change_password(
            user_id=user.user_id,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return MessageResponse(message="Password changed successfully")
