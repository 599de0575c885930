"""
Question endpoints for askers, plus read and close access shared by all roles.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session, require_roles
from src.api.errors import to_http_error
from src.api.schemas.questions import QuestionCreate, QuestionResponse
from src.domain import User
from src.domain.errors import LifecycleError
from src.domain.services.lifecycle import LifecycleEngine

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
    payload: QuestionCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(["asker"])),
) -> QuestionResponse:
    """Submit a new question; it starts out pending with no responder."""
    engine = LifecycleEngine(session)
    try:
        record = await engine.create_question(
            asker=user,
            title=payload.title,
            content=payload.content,
            is_public=payload.is_public,
            is_anonymous=payload.is_anonymous,
        )
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return QuestionResponse.model_validate(record)


@router.get("/public", response_model=list[QuestionResponse])
async def list_public_questions(
    session: AsyncSession = Depends(get_db_session),
) -> list[QuestionResponse]:
    """Public feed, newest first. Anonymous askers are never exposed."""
    engine = LifecycleEngine(session)
    try:
        records = await engine.list_public_questions()
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return [QuestionResponse.model_validate(record) for record in records]


@router.get("/my", response_model=list[QuestionResponse])
async def list_my_questions(
    status: str | None = None,
    search: str | None = None,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(["asker"])),
) -> list[QuestionResponse]:
    """The caller's own questions; ``status`` is one of all, pending, assigned, answered."""
    engine = LifecycleEngine(session)
    try:
        records = await engine.list_asker_questions(asker=user, status=status, search=search)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return [QuestionResponse.model_validate(record) for record in records]


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> QuestionResponse:
    engine = LifecycleEngine(session)
    try:
        record = await engine.get_question(question_id, caller=user)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return QuestionResponse.model_validate(record)


@router.post("/{question_id}/close", response_model=QuestionResponse)
async def close_question(
    question_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(["responder", "admin"])),
) -> QuestionResponse:
    """Close an answered question (admin, or the responder who answered it)."""
    engine = LifecycleEngine(session)
    try:
        record = await engine.close_question(question_id, caller=user)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return QuestionResponse.model_validate(record)
