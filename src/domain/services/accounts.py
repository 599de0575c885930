"""
Accounts: password hashing, asker sign-up, sign-in and password changes.

Admin and responder accounts are never self-registered; responders come from
ResponderService and admins from scripts/create_admin.py.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import create_access_token
from src.core.config import get_settings
from src.domain.errors import (
    AccountInactiveError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from src.domain.models import Account, IssuedTokens
from src.infrastructure.db.models import UserModel, UserRole, UserStatus
from src.infrastructure.repositories.questions import store_errors

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def to_account(user: UserModel) -> Account:
    return Account(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role.value,
        status=user.status.value,
        expertise=list(user.expertise or []),
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )


def issue_tokens(user: UserModel) -> IssuedTokens:
    """Access and refresh tokens carrying the user's role, email and display name."""
    settings = get_settings()
    claims = {"roles": [user.role.value], "email": user.email, "name": user.full_name}
    return IssuedTokens(
        access_token=create_access_token(
            user.id, expires_delta=timedelta(seconds=settings.access_token_ttl_seconds), **claims
        ),
        refresh_token=create_access_token(
            user.id, expires_delta=timedelta(days=settings.refresh_token_ttl_days), **claims
        ),
        expires_in=settings.access_token_ttl_seconds,
    )


class AccountService:
    """Identity operations backing the bearer-token claims."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register(
        self,
        *,
        email: str,
        password: str,
        full_name: str | None = None,
        role: UserRole = UserRole.ASKER,
    ) -> tuple[Account, IssuedTokens]:
        await logger.ainfo("register_attempt", email=email, role=role.value)

        user = UserModel(
            email=email.lower(),
            hashed_password=hash_password(password),
            full_name=full_name,
            role=role,
            status=UserStatus.ACTIVE,
            expertise=[],
        )
        try:
            self.session.add(user)
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("register_duplicate_email", email=email)
            raise DuplicateEmailError(f"User with email {email} already exists") from exc

        await logger.ainfo("register_success", user_id=user.id, role=role.value)
        return to_account(user), issue_tokens(user)

    async def login(self, *, email: str, password: str) -> tuple[Account, IssuedTokens]:
        await logger.ainfo("login_attempt", email=email)

        with store_errors("login"):
            user = await self.session.scalar(
                select(UserModel).where(UserModel.email == email.lower())
            )
        # Same message for unknown email and wrong password
        if user is None or not verify_password(password, user.hashed_password):
            await logger.awarning("login_failed", email=email)
            raise InvalidCredentialsError("Invalid email or password")

        if user.status != UserStatus.ACTIVE:
            await logger.awarning("login_inactive_user", email=email, status=user.status.value)
            raise AccountInactiveError(f"Account is {user.status.value}")

        user.last_login_at = datetime.now(UTC)
        await self.session.commit()

        await logger.ainfo("login_success", user_id=user.id, role=user.role.value)
        return to_account(user), issue_tokens(user)

    async def get_account(self, user_id: str) -> Account:
        return to_account(await self._get_or_raise(user_id))

    async def change_password(
        self, *, user_id: str, current_password: str, new_password: str
    ) -> None:
        user = await self._get_or_raise(user_id)
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect", field="current_password")

        user.hashed_password = hash_password(new_password)
        await self.session.commit()
        await logger.ainfo("password_changed", user_id=user_id)

    async def _get_or_raise(self, user_id: str) -> UserModel:
        with store_errors("get_account"):
            user = await self.session.get(UserModel, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user
