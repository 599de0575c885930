"""Assignment policy: who may see, claim and be assigned questions.

Caller-facing filter strings are mapped onto canonical statuses here, at the
boundary; nothing past this module sees the legacy vocabulary.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy import ColumnElement, and_, or_
from src.domain.errors import AuthorizationError, ValidationError
from src.domain.lifecycle import Transition, rule_for
from src.domain.models import ResponderProfile, User
from src.domain.reference_data import EXPERTISE_AREAS
from src.infrastructure.db.models import (
    QuestionModel,
    QuestionStatus,
    UserModel,
    UserRole,
    UserStatus,
)

QUEUE_STATUS_FILTERS: dict[str, tuple[QuestionStatus, ...] | None] = {
    "all": None,
    "unclaimed": (QuestionStatus.PENDING,),
    # Responder app "pending" tab: claimed by me, still waiting for my answer
    "pending": QuestionStatus.open_statuses(),
    "assigned": (QuestionStatus.ASSIGNED,),
    "in_progress": (QuestionStatus.IN_PROGRESS,),
    "inProgress": (QuestionStatus.IN_PROGRESS,),
    "answered": (QuestionStatus.ANSWERED,),
    "closed": (QuestionStatus.CLOSED,),
}

ASKER_STATUS_FILTERS: dict[str, tuple[QuestionStatus, ...] | None] = {
    "all": None,
    "pending": (QuestionStatus.PENDING,),
    "assigned": QuestionStatus.open_statuses(),
    "answered": QuestionStatus.resolved_statuses(),
}


def _parse_status_filter(
    raw: str | None, table: dict[str, tuple[QuestionStatus, ...] | None]
) -> tuple[QuestionStatus, ...] | None:
    if raw is None or not raw.strip():
        return None
    key = raw.strip()
    if key not in table:
        allowed = ", ".join(table)
        raise ValidationError(f"Unknown status filter '{raw}'. Allowed: {allowed}", field="status")
    return table[key]


@dataclass(frozen=True, slots=True)
class QueueFilter:
    """Status narrowing for a responder's worklist; ``None`` means no narrowing."""

    statuses: tuple[QuestionStatus, ...] | None = None

    @classmethod
    def parse(cls, raw: str | None) -> QueueFilter:
        return cls(statuses=_parse_status_filter(raw, QUEUE_STATUS_FILTERS))

    @classmethod
    def parse_for_asker(cls, raw: str | None) -> QueueFilter:
        return cls(statuses=_parse_status_filter(raw, ASKER_STATUS_FILTERS))


def responder_queue_criteria(responder_id: str, queue_filter: QueueFilter) -> ColumnElement[bool]:
    """Unclaimed pool plus everything already claimed by ``responder_id``."""
    unclaimed = and_(
        QuestionModel.status == QuestionStatus.PENDING,
        QuestionModel.responder_id.is_(None),
    )
    mine = QuestionModel.responder_id == responder_id
    criteria = or_(unclaimed, mine)
    if queue_filter.statuses is not None:
        criteria = and_(criteria, QuestionModel.status.in_(queue_filter.statuses))
    return criteria


@dataclass(frozen=True, slots=True)
class QueryFilter:
    """Recognized options for listing responders.

    ``status`` is an exact account status (``None`` for "all"), ``search`` a
    case-insensitive substring over name and email, ``expertise`` an exact tag.
    """

    status: UserStatus | None = None
    search: str | None = None
    expertise: str | None = None

    @classmethod
    def from_params(
        cls,
        *,
        status: str | None = None,
        search: str | None = None,
        expertise: str | None = None,
    ) -> QueryFilter:
        parsed_status: UserStatus | None = None
        if status and status.strip() and status.strip() != "all":
            try:
                parsed_status = UserStatus(status.strip())
            except ValueError as exc:
                raise ValidationError(f"Unknown status '{status}'", field="status") from exc

        parsed_expertise = expertise.strip() if expertise and expertise.strip() else None
        if parsed_expertise is not None and parsed_expertise not in EXPERTISE_AREAS:
            raise ValidationError(f"Unknown expertise '{expertise}'", field="expertise")

        parsed_search = search.strip() if search and search.strip() else None
        return cls(status=parsed_status, search=parsed_search, expertise=parsed_expertise)

    def criteria(self) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = [UserModel.role == UserRole.RESPONDER]
        if self.status is not None:
            clauses.append(UserModel.status == self.status)
        if self.search is not None:
            clauses.append(
                or_(
                    UserModel.full_name.icontains(self.search, autoescape=True),
                    UserModel.email.icontains(self.search, autoescape=True),
                )
            )
        return clauses

    def matches_expertise(self, tags: Iterable[str]) -> bool:
        # Applied in Python: JSON array containment differs across dialects
        return self.expertise is None or self.expertise in tags


def authorize_transition(transition: Transition, caller: User) -> None:
    """Role gate that does not need the stored question."""
    rule = rule_for(transition)
    if not caller.has_role(*rule.roles):
        raise AuthorizationError(f"Role not permitted to {transition.value.replace('_', ' ')}")


def requires_ownership(transition: Transition, caller: User) -> bool:
    """True when the caller may only act on questions they are the responder of."""
    rule = rule_for(transition)
    exempt_roles = rule.roles - rule.owner_roles
    return not caller.has_role(*exempt_roles) and caller.has_role(*rule.owner_roles)


def validate_assignment_target(target: UserModel | None, responder_id: str) -> None:
    if target is None or target.role != UserRole.RESPONDER:
        raise ValidationError(f"User {responder_id} is not a responder", field="responder_id")
    if target.status != UserStatus.ACTIVE:
        raise ValidationError(f"Responder {responder_id} is not active", field="responder_id")


def rank_by_expertise(
    responders: Sequence[ResponderProfile], expertise: str | None
) -> list[ResponderProfile]:
    """Advisory ordering for askers picking a responder: matching tag first."""
    if not expertise:
        return list(responders)
    return sorted(responders, key=lambda profile: expertise not in profile.expertise)
