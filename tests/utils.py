from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.api.deps import issue_smoke_token
from src.core.auth import Role
from src.domain import User
from src.infrastructure.db.models import UserModel, UserRole, UserStatus

# Fixture users never log in; a real bcrypt hash is only needed by auth tests
UNUSABLE_PASSWORD_HASH = "!"


def auth_headers(
    user_id: str = "asker-1",
    role: Role = Role.ASKER,
    *,
    email: str | None = None,
    name: str | None = None,
) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=email, name=name)
    return {"Authorization": f"Bearer {token}"}


def headers_for(user: User) -> dict[str, str]:
    return auth_headers(user.user_id, Role(user.roles[0]), email=user.email, name=user.name)


async def create_user(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    email: str,
    full_name: str | None = None,
    role: UserRole = UserRole.ASKER,
    status: UserStatus = UserStatus.ACTIVE,
    expertise: list[str] | None = None,
) -> User:
    """Insert a user row and return the matching authenticated principal."""
    async with session_factory() as session:
        row = UserModel(
            email=email,
            hashed_password=UNUSABLE_PASSWORD_HASH,
            full_name=full_name,
            role=role,
            status=status,
            expertise=expertise or [],
        )
        session.add(row)
        await session.commit()
        return User(user_id=row.id, email=email, name=full_name, roles=[role.value])
