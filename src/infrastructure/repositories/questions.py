"""Question store backed by async SQLAlchemy.

Every status write goes through :meth:`QuestionRepository.conditional_update`,
an ``UPDATE ... WHERE id = :id AND status IN (:expected)`` whose matched row
count tells the caller whether it won.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import StoreError
from src.infrastructure.db.models import (
    ActivityModel,
    QuestionModel,
    QuestionStatus,
    UserModel,
)

logger = structlog.get_logger()


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise driver/ORM failures as StoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("store_error", operation=operation, error=str(exc)[:200])
        raise StoreError(f"Storage failure during {operation}") from exc


class QuestionRepository:
    """CRUD, filtered find and conditional update over the questions table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, question_id: str) -> QuestionModel | None:
        stmt = (
            select(QuestionModel)
            .where(QuestionModel.id == question_id)
            .execution_options(populate_existing=True)
        )
        with store_errors("get_question"):
            return await self.session.scalar(stmt)

    async def find(
        self,
        *criteria: ColumnElement[bool],
        limit: int | None = None,
    ) -> list[QuestionModel]:
        """Newest first."""
        stmt = (
            select(QuestionModel)
            .where(*criteria)
            .order_by(QuestionModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with store_errors("find_questions"):
            result = await self.session.execute(stmt)
            return list(result.scalars().unique().all())

    async def count(self, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count(QuestionModel.id)).where(*criteria)
        with store_errors("count_questions"):
            return int(await self.session.scalar(stmt) or 0)

    async def resolution_samples(self, since: datetime) -> list[tuple[datetime, datetime]]:
        """(created_at, answered_at) pairs for questions answered at or after ``since``."""
        stmt = select(QuestionModel.created_at, QuestionModel.answered_at).where(
            QuestionModel.status.in_(QuestionStatus.resolved_statuses()),
            QuestionModel.answered_at.is_not(None),
            QuestionModel.answered_at >= since,
        )
        with store_errors("resolution_samples"):
            rows = (await self.session.execute(stmt)).all()
        return [(row.created_at, row.answered_at) for row in rows]

    async def insert(self, question: QuestionModel, activity: ActivityModel | None = None) -> None:
        with store_errors("insert_question"):
            self.session.add(question)
            await self.session.flush()
            if activity is not None:
                activity.question_id = question.id
                self.session.add(activity)
            await self.session.commit()

    async def conditional_update(
        self,
        question_id: str,
        *,
        expected: Sequence[QuestionStatus],
        values: dict[str, Any],
        unassigned: bool = False,
        responder_id: str | None = None,
    ) -> bool:
        """Apply ``values`` only if the row is still in one of ``expected``.

        ``unassigned`` additionally requires ``responder_id IS NULL``;
        ``responder_id`` requires the row to belong to that responder.
        Returns False (after rolling back) when no row matched. A winning
        update stays uncommitted until :meth:`record_activity`.
        """
        stmt = (
            update(QuestionModel)
            .where(
                QuestionModel.id == question_id,
                QuestionModel.status.in_(expected),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if unassigned:
            stmt = stmt.where(QuestionModel.responder_id.is_(None))
        if responder_id is not None:
            stmt = stmt.where(QuestionModel.responder_id == responder_id)

        with store_errors("conditional_update"):
            result = await self.session.execute(stmt)
            if result.rowcount != 1:
                await self.session.rollback()
                return False
        return True

    async def record_activity(self, activity: ActivityModel) -> None:
        """Append the activity row and commit the pending transition with it."""
        with store_errors("record_activity"):
            self.session.add(activity)
            await self.session.commit()

    async def recent_activities(self, limit: int) -> list[ActivityModel]:
        stmt = select(ActivityModel).order_by(ActivityModel.timestamp.desc()).limit(limit)
        with store_errors("recent_activities"):
            return list((await self.session.execute(stmt)).scalars().all())

    async def get_user(self, user_id: str) -> UserModel | None:
        with store_errors("get_user"):
            return await self.session.get(UserModel, user_id)
