"""Unit tests for account sign-up, sign-in and password changes."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import decode_access_token
from src.domain.errors import (
    AccountInactiveError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from src.domain.services.accounts import AccountService, hash_password, verify_password
from src.infrastructure.db.models import UserModel, UserRole, UserStatus


class TestPasswordHashing:
    def test_hash_password_returns_bcrypt_hash(self) -> None:
        hashed = hash_password("test_password_123")

        # bcrypt hashes start with $2b$
        assert hashed.startswith("$2b$")
        assert "test_password_123" not in hashed

    def test_hash_password_is_salted(self) -> None:
        assert hash_password("test_password_123") != hash_password("test_password_123")

    def test_verify_password_is_case_sensitive(self) -> None:
        hashed = hash_password("TestPassword123")

        assert verify_password("TestPassword123", hashed) is True
        assert verify_password("testpassword123", hashed) is False


class TestRegister:
    async def test_defaults_to_asker(self, db: AsyncSession) -> None:
        account, tokens = await AccountService(db).register(
            email="Ruth@Example.com", password="password123", full_name="Ruth"
        )

        assert account.email == "ruth@example.com"
        assert account.role == "asker"
        assert account.expertise == []
        claims = decode_access_token(tokens.access_token)
        assert claims["sub"] == account.id
        assert claims["roles"] == ["asker"]
        assert claims["name"] == "Ruth"
        assert decode_access_token(tokens.refresh_token)["exp"] > claims["exp"]

    async def test_admin_role_for_scripts(self, db: AsyncSession) -> None:
        account, tokens = await AccountService(db).register(
            email="root@askline.org", password="password123", role=UserRole.ADMIN
        )

        assert account.role == "admin"
        assert decode_access_token(tokens.access_token)["roles"] == ["admin"]

    async def test_duplicate_email(self, db: AsyncSession) -> None:
        service = AccountService(db)
        await service.register(email="ruth@example.com", password="password123")

        with pytest.raises(DuplicateEmailError):
            await service.register(email="RUTH@example.com", password="password123")


class TestLogin:
    async def test_login_stamps_last_login(self, db: AsyncSession) -> None:
        service = AccountService(db)
        await service.register(email="ruth@example.com", password="password123")

        account, _ = await service.login(email="ruth@example.com", password="password123")

        assert account.last_login_at is not None

    async def test_wrong_password_and_unknown_email_look_the_same(
        self, db: AsyncSession
    ) -> None:
        service = AccountService(db)
        await service.register(email="ruth@example.com", password="password123")

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.login(email="ruth@example.com", password="wrong-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await service.login(email="nobody@example.com", password="password123")

        assert str(wrong_password.value) == str(unknown_email.value)

    async def test_suspended_account(self, db: AsyncSession) -> None:
        service = AccountService(db)
        account, _ = await service.register(email="ruth@example.com", password="password123")
        user = await db.get(UserModel, account.id)
        user.status = UserStatus.SUSPENDED
        await db.commit()

        with pytest.raises(AccountInactiveError, match="suspended"):
            await service.login(email="ruth@example.com", password="password123")


class TestChangePassword:
    async def test_change_password(self, db: AsyncSession) -> None:
        service = AccountService(db)
        account, _ = await service.register(email="ruth@example.com", password="password123")

        await service.change_password(
            user_id=account.id, current_password="password123", new_password="newpassword123"
        )

        await service.login(email="ruth@example.com", password="newpassword123")

    async def test_wrong_current_password(self, db: AsyncSession) -> None:
        service = AccountService(db)
        account, _ = await service.register(email="ruth@example.com", password="password123")

        with pytest.raises(ValidationError) as exc_info:
            await service.change_password(
                user_id=account.id, current_password="nope", new_password="newpassword123"
            )

        assert exc_info.value.field == "current_password"

    async def test_unknown_user(self, db: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await AccountService(db).get_account("missing-id")


def test_register_request_ignores_role() -> None:
    from src.api.schemas.auth import RegisterRequest

    request = RegisterRequest.model_validate(
        {"email": "test@example.com", "password": "password123", "role": "admin"}
    )

    assert "role" not in request.model_dump()
