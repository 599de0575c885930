"""Responder worklist: list the queue, claim, start work and answer."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, require_roles
from src.api.errors import to_http_error
from src.api.schemas.questions import AnswerSubmit, QuestionResponse
from src.domain import User
from src.domain.errors import LifecycleError
from src.domain.services.lifecycle import LifecycleEngine

router = APIRouter(prefix="/responder", tags=["responder"])


@router.get("/questions", response_model=list[QuestionResponse])
async def list_queue(
    status: str | None = None,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(["responder"])),
) -> list[QuestionResponse]:
    """
    Unclaimed questions plus the caller's own.

    ``status``: all, unclaimed, pending (claimed, not yet answered), assigned,
    in_progress, answered, closed.
    """
    engine = LifecycleEngine(session)
    try:
        records = await engine.list_queue(responder=user, status=status)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return [QuestionResponse.model_validate(record) for record in records]


@router.patch("/questions/{question_id}/start", response_model=QuestionResponse)
async def claim_question(
    question_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(["responder"])),
) -> QuestionResponse:
    """Claim a pending question. Losing a race returns 409 "Question already claimed"."""
    engine = LifecycleEngine(session)
    try:
        record = await engine.claim_question(question_id, caller=user)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return QuestionResponse.model_validate(record)


@router.patch("/questions/{question_id}/progress", response_model=QuestionResponse)
async def begin_work(
    question_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(["responder"])),
) -> QuestionResponse:
    engine = LifecycleEngine(session)
    try:
        record = await engine.begin_work(question_id, caller=user)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return QuestionResponse.model_validate(record)


@router.post("/questions/{question_id}/answer", response_model=QuestionResponse)
async def submit_answer(
    question_id: str,
    payload: AnswerSubmit,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(["responder"])),
) -> QuestionResponse:
    engine = LifecycleEngine(session)
    try:
        record = await engine.submit_answer(question_id, content=payload.answer, caller=user)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return QuestionResponse.model_validate(record)
