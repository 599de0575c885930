"""Responder provisioning (admin) and the responder directory (askers)."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import DuplicateEmailError, NotFoundError, ValidationError
from src.domain.models import ResponderProfile
from src.domain.policy import QueryFilter, rank_by_expertise
from src.domain.reference_data import normalize_expertise
from src.domain.services.accounts import hash_password
from src.infrastructure.db.models import UserModel, UserRole, UserStatus
from src.infrastructure.repositories.questions import store_errors

logger = structlog.get_logger()


def _to_profile(user: UserModel) -> ResponderProfile:
    return ResponderProfile(
        id=user.id,
        name=user.full_name,
        email=user.email,
        expertise=list(user.expertise or []),
        status=user.status.value,
        created_at=user.created_at,
    )


def _clean_expertise(values: list[str]) -> list[str]:
    try:
        tags = normalize_expertise(values)
    except ValueError as exc:
        raise ValidationError(str(exc), field="expertise") from exc
    if not tags:
        raise ValidationError("Expertise is required", field="expertise")
    return tags


class ResponderService:
    """Create, list, inspect and update responder accounts. Responders are never deleted."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_responder(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        expertise: list[str],
    ) -> ResponderProfile:
        name = full_name.strip()
        if not name:
            raise ValidationError("Name is required", field="full_name")
        tags = _clean_expertise(expertise)

        responder = UserModel(
            email=email.lower(),
            hashed_password=hash_password(password),
            full_name=name,
            role=UserRole.RESPONDER,
            status=UserStatus.ACTIVE,
            expertise=tags,
        )
        try:
            self.session.add(responder)
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("responder_duplicate_email", email=email)
            raise DuplicateEmailError(f"Email {email} already registered") from exc
        await self.session.refresh(responder)

        await logger.ainfo("responder_created", responder_id=responder.id, expertise=tags)
        return _to_profile(responder)

    async def list_responders(self, query: QueryFilter) -> list[ResponderProfile]:
        stmt = select(UserModel).where(*query.criteria()).order_by(UserModel.created_at.desc())
        with store_errors("list_responders"):
            rows = (await self.session.execute(stmt)).scalars().all()
        profiles = [_to_profile(row) for row in rows if query.matches_expertise(row.expertise or [])]
        await logger.ainfo(
            "list_responders",
            status=query.status.value if query.status else None,
            search=query.search,
            expertise=query.expertise,
            count=len(profiles),
        )
        return profiles

    async def directory(self, *, expertise: str | None = None) -> list[ResponderProfile]:
        """Active responders for askers, those tagged with ``expertise`` first."""
        query = QueryFilter.from_params(status=UserStatus.ACTIVE.value, expertise=None)
        if expertise:
            # Validates the tag; the directory only ranks, it never hides responders
            QueryFilter.from_params(expertise=expertise)
        profiles = await self.list_responders(query)
        return rank_by_expertise(profiles, expertise)

    async def get_responder(self, responder_id: str) -> ResponderProfile:
        return _to_profile(await self._get_or_raise(responder_id))

    async def update_responder(
        self,
        responder_id: str,
        *,
        full_name: str | None = None,
        email: str | None = None,
        expertise: list[str] | None = None,
        password: str | None = None,
        status: str | None = None,
    ) -> ResponderProfile:
        responder = await self._get_or_raise(responder_id)

        if full_name is not None:
            name = full_name.strip()
            if not name:
                raise ValidationError("Name cannot be empty", field="full_name")
            responder.full_name = name
        if email is not None and email.lower() != responder.email:
            responder.email = email.lower()
        if expertise is not None:
            responder.expertise = _clean_expertise(expertise)
        if password is not None:
            responder.hashed_password = hash_password(password)
        if status is not None:
            try:
                responder.status = UserStatus(status)
            except ValueError as exc:
                raise ValidationError(f"Unknown status '{status}'", field="status") from exc

        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateEmailError(f"Email {email} already in use") from exc
        await self.session.refresh(responder)

        await logger.ainfo("responder_updated", responder_id=responder_id)
        return _to_profile(responder)

    async def _get_or_raise(self, responder_id: str) -> UserModel:
        stmt = select(UserModel).where(
            UserModel.id == responder_id, UserModel.role == UserRole.RESPONDER
        )
        with store_errors("get_responder"):
            responder = await self.session.scalar(stmt)
        if responder is None:
            raise NotFoundError(f"Responder {responder_id} not found")
        return responder
