"""
Admin routes - question assignment, responder management, dashboard.

Every route here requires the admin role.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, require_roles
from src.api.errors import to_http_error
from src.api.schemas.dashboard import (
    ActivityResponse,
    DashboardStatsResponse,
    PerformanceStats,
    QuestionCounts,
    ResponderCounts,
)
from src.api.schemas.questions import AssignRequest, QuestionResponse
from src.api.schemas.responders import (
    ResponderCreate,
    ResponderListResponse,
    ResponderMutationResponse,
    ResponderResponse,
    ResponderUpdate,
)
from src.domain import User
from src.domain.errors import LifecycleError
from src.domain.policy import QueryFilter
from src.domain.services.dashboard import DashboardService
from src.domain.services.lifecycle import LifecycleEngine
from src.domain.services.responders import ResponderService

logger = structlog.get_logger()
router = APIRouter(prefix="/admin", tags=["admin"])
admin_only = require_roles(["admin"])


@router.post("/questions/{question_id}/assign", response_model=QuestionResponse)
async def assign_question(
    question_id: str,
    payload: AssignRequest,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(admin_only),
) -> QuestionResponse:
    """Hand a pending, unclaimed question to an active responder."""
    engine = LifecycleEngine(session)
    try:
        record = await engine.assign_question(
            question_id, responder_id=payload.responder_id, caller=user
        )
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return QuestionResponse.model_validate(record)


# --- Responder management ---


@router.post(
    "/responders",
    response_model=ResponderMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_responder(
    payload: ResponderCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(admin_only),
) -> ResponderMutationResponse:
    service = ResponderService(session)
    try:
        profile = await service.create_responder(
            full_name=payload.full_name,
            email=payload.email,
            password=payload.password,
            expertise=payload.expertise,
        )
    except LifecycleError as exc:
        raise to_http_error(exc) from exc

    await logger.ainfo("admin_created_responder", admin_id=user.user_id, responder_id=profile.id)
    return ResponderMutationResponse(
        message="Responder created successfully",
        responder=ResponderResponse.model_validate(profile),
    )


@router.get("/responders", response_model=ResponderListResponse)
async def list_responders(
    status: str | None = None,
    search: str | None = None,
    expertise: str | None = None,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(admin_only),
) -> ResponderListResponse:
    """List responders, filtered by account status, name/email search and expertise tag."""
    service = ResponderService(session)
    try:
        query = QueryFilter.from_params(status=status, search=search, expertise=expertise)
        profiles = await service.list_responders(query)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return ResponderListResponse(
        count=len(profiles),
        responders=[ResponderResponse.model_validate(profile) for profile in profiles],
    )


@router.get("/responders/{responder_id}", response_model=ResponderResponse)
async def get_responder(
    responder_id: str,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(admin_only),
) -> ResponderResponse:
    service = ResponderService(session)
    try:
        profile = await service.get_responder(responder_id)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return ResponderResponse.model_validate(profile)


@router.put("/responders/{responder_id}", response_model=ResponderMutationResponse)
async def update_responder(
    responder_id: str,
    payload: ResponderUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(admin_only),
) -> ResponderMutationResponse:
    service = ResponderService(session)
    try:
        profile = await service.update_responder(
            responder_id,
            full_name=payload.full_name,
            email=payload.email,
            expertise=payload.expertise,
            password=payload.password,
            status=payload.status,
        )
    except LifecycleError as exc:
        raise to_http_error(exc) from exc

    await logger.ainfo("admin_updated_responder", admin_id=user.user_id, responder_id=responder_id)
    return ResponderMutationResponse(
        message="Responder updated successfully",
        responder=ResponderResponse.model_validate(profile),
    )


# --- Dashboard ---


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(admin_only),
) -> DashboardStatsResponse:
    service = DashboardService(session)
    try:
        stats = await service.get_stats()
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return DashboardStatsResponse(
        responders=ResponderCounts(
            total=stats.total_responders,
            active=stats.active_responders,
        ),
        questions=QuestionCounts(
            total=stats.total_questions,
            answered=stats.answered_questions,
            pending=stats.pending_questions,
            response_rate=stats.response_rate,
        ),
        performance=PerformanceStats(
            avg_response_time_hours=stats.avg_resolution_hours,
            window_days=stats.window_days,
        ),
    )


@router.get("/dashboard/activities", response_model=list[ActivityResponse])
async def dashboard_activities(
    limit: int | None = None,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(admin_only),
) -> list[ActivityResponse]:
    """Recent question, status-change and answer events, newest first."""
    service = DashboardService(session)
    try:
        entries = await service.recent_activities(limit=limit)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return [ActivityResponse.model_validate(entry) for entry in entries]
