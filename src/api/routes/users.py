from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session
from src.api.errors import to_http_error
from src.api.schemas.responders import DirectoryEntry
from src.domain import User
from src.domain.errors import LifecycleError
from src.domain.services.responders import ResponderService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/responders", response_model=list[DirectoryEntry])
async def responder_directory(
    expertise: str | None = None,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
) -> list[DirectoryEntry]:
    """Active responders; those tagged with ``expertise`` are listed first."""
    service = ResponderService(session)
    try:
        profiles = await service.directory(expertise=expertise)
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
    return [DirectoryEntry.model_validate(profile) for profile in profiles]
