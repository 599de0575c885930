"""
Admin dashboard aggregation.

Read-only statistics and the recent activity feed. Nothing here transitions a
question; store failures surface as StoreError and are not retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.errors import ValidationError
from src.domain.models import ActivityEntry
from src.infrastructure.db.models import (
    ActivityModel,
    QuestionModel,
    QuestionStatus,
    UserModel,
    UserRole,
    UserStatus,
)
from src.infrastructure.repositories.questions import QuestionRepository, store_errors

logger = structlog.get_logger()


@dataclass(slots=True)
class DashboardStats:
    total_responders: int
    active_responders: int
    total_questions: int
    answered_questions: int
    pending_questions: int
    response_rate: int
    avg_resolution_hours: float
    window_days: int


def response_rate(answered: int, total: int) -> int:
    """Answered share of all questions as a whole percentage; 0 when empty."""
    if total <= 0:
        return 0
    return round(answered / total * 100)


def mean_resolution_hours(samples: list[tuple[datetime, datetime]]) -> float:
    if not samples:
        return 0.0
    total_seconds = sum((answered - created).total_seconds() for created, answered in samples)
    return round(total_seconds / len(samples) / 3600, 1)


class DashboardService:
    """Statistics and activity feed for the admin panel."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.questions = QuestionRepository(session)

    async def get_stats(self, *, now: datetime | None = None) -> DashboardStats:
        settings = get_settings()
        now = now or datetime.now(UTC)
        window_days = settings.resolution_window_days

        total_responders, active_responders = await self._responder_counts()
        total_questions = await self.questions.count()
        answered_questions = await self.questions.count(
            QuestionModel.status.in_(QuestionStatus.resolved_statuses())
        )
        pending_questions = await self.questions.count(
            QuestionModel.status == QuestionStatus.PENDING
        )
        samples = await self.questions.resolution_samples(now - timedelta(days=window_days))

        stats = DashboardStats(
            total_responders=total_responders,
            active_responders=active_responders,
            total_questions=total_questions,
            answered_questions=answered_questions,
            pending_questions=pending_questions,
            response_rate=response_rate(answered_questions, total_questions),
            avg_resolution_hours=mean_resolution_hours(samples),
            window_days=window_days,
        )
        await logger.ainfo(
            "dashboard_stats",
            total_questions=total_questions,
            answered_questions=answered_questions,
            response_rate=stats.response_rate,
        )
        return stats

    async def recent_activities(self, *, limit: int | None = None) -> list[ActivityEntry]:
        """Most recent first, bounded by ``limit`` (default from settings)."""
        settings = get_settings()
        if limit is None:
            limit = settings.activity_feed_limit
        if limit < 1 or limit > settings.activity_feed_max_limit:
            raise ValidationError(
                f"limit must be between 1 and {settings.activity_feed_max_limit}", field="limit"
            )

        rows = await self.questions.recent_activities(limit)
        return [self._to_entry(row) for row in rows]

    async def _responder_counts(self) -> tuple[int, int]:
        stmt = (
            select(UserModel.status, func.count(UserModel.id))
            .where(UserModel.role == UserRole.RESPONDER)
            .group_by(UserModel.status)
        )
        with store_errors("responder_counts"):
            rows = (await self.session.execute(stmt)).all()
        counts = {UserStatus(status): count for status, count in rows}
        return sum(counts.values()), counts.get(UserStatus.ACTIVE, 0)

    def _to_entry(self, row: ActivityModel) -> ActivityEntry:
        return ActivityEntry(
            id=row.id,
            type=row.type,
            question_id=row.question_id,
            title=row.title,
            asker=row.asker,
            responder_id=row.responder_id,
            responder=row.responder,
            status=row.status,
            timestamp=row.timestamp,
        )
