"""
Lifecycle engine: the only writer of question status, responder and answer.

Each transition is one conditional UPDATE guarded on the expected prior
status. Losing that update (zero rows matched) rolls back, re-reads the
question and raises a typed error describing the current state.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import Role
from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.domain.lifecycle import Transition, rule_for
from src.domain.models import Answer, Party, QuestionRecord, User
from src.domain.policy import (
    QueueFilter,
    authorize_transition,
    requires_ownership,
    responder_queue_criteria,
    validate_assignment_target,
)
from src.domain.reference_data import ANONYMOUS_ASKER
from src.infrastructure.db.models import (
    ActivityModel,
    ActivityType,
    QuestionModel,
    QuestionStatus,
    UserModel,
)
from src.infrastructure.repositories.questions import QuestionRepository

logger = structlog.get_logger()

ALREADY_CLAIMED = "Question already claimed"

TRANSITION_EVENTS: dict[Transition, str] = {
    Transition.CLAIM: "question_claimed",
    Transition.ASSIGN: "question_assigned",
    Transition.BEGIN_WORK: "question_work_started",
    Transition.ANSWER: "question_answered",
    Transition.CLOSE: "question_closed",
}


def _now() -> datetime:
    return datetime.now(UTC)


def _require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field.capitalize()} is required", field=field)
    return text


def _display_name(user: UserModel | None) -> str | None:
    if user is None:
        return None
    return user.full_name or user.email


def to_record(question: QuestionModel, viewer: User | None = None) -> QuestionRecord:
    """Build the read model, hiding the asker of anonymous questions from everyone but them."""
    show_asker = not question.is_anonymous or (
        viewer is not None and viewer.user_id == question.asker_id
    )
    answer = None
    if question.answer_content is not None and question.answer_created_at is not None:
        answer = Answer(content=question.answer_content, created_at=question.answer_created_at)

    return QuestionRecord(
        id=question.id,
        title=question.title,
        content=question.content,
        status=QuestionStatus(question.status).value,
        is_public=question.is_public,
        is_anonymous=question.is_anonymous,
        asker=(
            Party(id=question.asker_id, name=_display_name(question.asker)) if show_asker else None
        ),
        responder=(
            Party(id=question.responder_id, name=_display_name(question.responder))
            if question.responder_id
            else None
        ),
        answer=answer,
        created_at=question.created_at,
        assigned_at=question.assigned_at,
        answered_at=question.answered_at,
        closed_at=question.closed_at,
        updated_at=question.updated_at,
    )


class LifecycleEngine:
    """Question state machine: create, list, assign, claim, begin work, answer, close."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.questions = QuestionRepository(session)

    # --- creation & reads ---

    async def create_question(
        self,
        *,
        asker: User,
        title: str,
        content: str,
        is_public: bool = True,
        is_anonymous: bool = False,
    ) -> QuestionRecord:
        if not asker.has_role(Role.ASKER.value):
            raise AuthorizationError("Only askers can submit questions")
        clean_title = _require_text(title, "title")
        clean_content = _require_text(content, "content")

        now = _now()
        question = QuestionModel(
            title=clean_title,
            content=clean_content,
            asker_id=asker.user_id,
            status=QuestionStatus.PENDING,
            is_public=is_public,
            is_anonymous=is_anonymous,
            created_at=now,
            updated_at=now,
        )
        asker_row = await self.questions.get_user(asker.user_id)
        activity = ActivityModel(
            type=ActivityType.QUESTION.value,
            title=clean_title,
            asker=(
                ANONYMOUS_ASKER
                if is_anonymous
                else _display_name(asker_row) or asker.name or asker.user_id
            ),
            status=QuestionStatus.PENDING.value,
            timestamp=now,
        )
        await self.questions.insert(question, activity)

        stored = await self._get_or_raise(question.id)
        await logger.ainfo(
            "question_created",
            question_id=stored.id,
            asker_id=asker.user_id,
            is_public=is_public,
            is_anonymous=is_anonymous,
        )
        return to_record(stored, viewer=asker)

    async def list_public_questions(self) -> list[QuestionRecord]:
        rows = await self.questions.find(QuestionModel.is_public.is_(True))
        await logger.ainfo("list_public_questions", count=len(rows))
        # Public listing never reveals anonymous askers, not even to themselves
        return [to_record(row) for row in rows]

    async def list_asker_questions(
        self,
        *,
        asker: User,
        status: str | None = None,
        search: str | None = None,
    ) -> list[QuestionRecord]:
        queue_filter = QueueFilter.parse_for_asker(status)
        criteria = [QuestionModel.asker_id == asker.user_id]
        if queue_filter.statuses is not None:
            criteria.append(QuestionModel.status.in_(queue_filter.statuses))
        if search and search.strip():
            term = search.strip()
            criteria.append(
                or_(
                    QuestionModel.title.icontains(term, autoescape=True),
                    QuestionModel.content.icontains(term, autoescape=True),
                )
            )
        rows = await self.questions.find(*criteria)
        return [to_record(row, viewer=asker) for row in rows]

    async def list_queue(
        self, *, responder: User, status: str | None = None
    ) -> list[QuestionRecord]:
        """Unclaimed pool plus the responder's own questions, optionally narrowed."""
        if not responder.has_role(Role.RESPONDER.value):
            raise AuthorizationError("Only responders have a question queue")
        queue_filter = QueueFilter.parse(status)
        rows = await self.questions.find(
            responder_queue_criteria(responder.user_id, queue_filter)
        )
        await logger.ainfo(
            "list_responder_queue",
            responder_id=responder.user_id,
            status=status,
            count=len(rows),
        )
        return [to_record(row, viewer=responder) for row in rows]

    async def get_question(self, question_id: str, *, caller: User) -> QuestionRecord:
        question = await self._get_or_raise(question_id)
        if not question.is_public and not (
            caller.user_id == question.asker_id
            or caller.has_role(Role.ADMIN.value, Role.RESPONDER.value)
        ):
            raise AuthorizationError("Not allowed to view this question")
        return to_record(question, viewer=caller)

    # --- transitions ---

    async def claim_question(self, question_id: str, *, caller: User) -> QuestionRecord:
        authorize_transition(Transition.CLAIM, caller)
        now = _now()
        return await self._apply(
            Transition.CLAIM,
            question_id,
            caller,
            values={"responder_id": caller.user_id, "assigned_at": now},
            unassigned=True,
            now=now,
        )

    async def assign_question(
        self, question_id: str, *, responder_id: str, caller: User
    ) -> QuestionRecord:
        authorize_transition(Transition.ASSIGN, caller)
        # Unknown question wins over a bad target
        await self._get_or_raise(question_id)
        target = await self.questions.get_user(responder_id)
        validate_assignment_target(target, responder_id)
        now = _now()
        return await self._apply(
            Transition.ASSIGN,
            question_id,
            caller,
            values={"responder_id": responder_id, "assigned_at": now},
            unassigned=True,
            now=now,
        )

    async def begin_work(self, question_id: str, *, caller: User) -> QuestionRecord:
        authorize_transition(Transition.BEGIN_WORK, caller)
        return await self._apply(Transition.BEGIN_WORK, question_id, caller, values={}, now=_now())

    async def submit_answer(
        self, question_id: str, *, content: str, caller: User
    ) -> QuestionRecord:
        authorize_transition(Transition.ANSWER, caller)
        text = _require_text(content, "answer")
        now = _now()
        return await self._apply(
            Transition.ANSWER,
            question_id,
            caller,
            values={"answer_content": text, "answer_created_at": now, "answered_at": now},
            now=now,
        )

    async def close_question(self, question_id: str, *, caller: User) -> QuestionRecord:
        authorize_transition(Transition.CLOSE, caller)
        now = _now()
        return await self._apply(
            Transition.CLOSE, question_id, caller, values={"closed_at": now}, now=now
        )

    # --- internals ---

    async def _apply(
        self,
        transition: Transition,
        question_id: str,
        caller: User,
        *,
        values: dict,
        now: datetime,
        unassigned: bool = False,
    ) -> QuestionRecord:
        rule = rule_for(transition)
        owner_only = requires_ownership(transition, caller)

        won = await self.questions.conditional_update(
            question_id,
            expected=tuple(rule.sources),
            values={**values, "status": rule.target, "updated_at": now},
            unassigned=unassigned,
            responder_id=caller.user_id if owner_only else None,
        )
        if not won:
            await self._raise_for_lost_update(transition, question_id, caller, owner_only)

        stored = await self._get_or_raise(question_id)
        await self.questions.record_activity(self._activity_for(transition, stored, now))
        await logger.ainfo(
            TRANSITION_EVENTS[transition],
            question_id=question_id,
            caller_id=caller.user_id,
            responder_id=stored.responder_id,
            status=rule.target.value,
        )
        return to_record(stored, viewer=caller)

    async def _raise_for_lost_update(
        self,
        transition: Transition,
        question_id: str,
        caller: User,
        owner_only: bool,
    ) -> None:
        current = await self.questions.get(question_id)
        if current is None:
            raise NotFoundError(f"Question {question_id} not found")

        if owner_only and current.responder_id != caller.user_id:
            await logger.awarning(
                "question_transition_forbidden",
                transition=transition.value,
                question_id=question_id,
                caller_id=caller.user_id,
            )
            raise AuthorizationError(
                f"Not authorized to {transition.value.replace('_', ' ')} this question"
            )

        status = QuestionStatus(current.status)
        if transition in (Transition.CLAIM, Transition.ASSIGN):
            message = ALREADY_CLAIMED
        elif transition == Transition.ANSWER and status in QuestionStatus.resolved_statuses():
            message = "Question is already answered"
        else:
            expected = ", ".join(sorted(s.value for s in rule_for(transition).sources))
            message = f"Question is {status.value}; expected {expected}"

        await logger.awarning(
            f"question_{transition.value}_conflict",
            question_id=question_id,
            caller_id=caller.user_id,
            current_status=status.value,
        )
        raise ConflictError(message, current=to_record(current, viewer=caller))

    async def _get_or_raise(self, question_id: str) -> QuestionModel:
        question = await self.questions.get(question_id)
        if question is None:
            raise NotFoundError(f"Question {question_id} not found")
        return question

    def _activity_for(
        self, transition: Transition, question: QuestionModel, now: datetime
    ) -> ActivityModel:
        activity_type = (
            ActivityType.ANSWER if transition == Transition.ANSWER else ActivityType.STATUS_CHANGE
        )
        return ActivityModel(
            type=activity_type.value,
            question_id=question.id,
            title=question.title,
            asker=(
                ANONYMOUS_ASKER
                if question.is_anonymous
                else _display_name(question.asker) or question.asker_id
            ),
            responder_id=question.responder_id,
            responder=_display_name(question.responder),
            status=QuestionStatus(question.status).value,
            timestamp=now,
        )
