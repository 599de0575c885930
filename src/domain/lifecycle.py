"""Question lifecycle state machine.

States: pending → assigned → in_progress → answered → closed
``assigned`` may skip straight to ``answered``. Status never moves backward;
``answered`` is soft-terminal and ``closed`` is hard-terminal.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from src.core.auth import Role
from src.domain.models import QuestionRecord
from src.infrastructure.db.models import QuestionStatus


class Transition(str, enum.Enum):
    CLAIM = "claim"
    ASSIGN = "assign"
    BEGIN_WORK = "begin_work"
    ANSWER = "answer"
    CLOSE = "close"


@dataclass(frozen=True, slots=True)
class TransitionRule:
    """Guard description for one transition.

    ``owner_roles`` lists the roles that may only act on questions whose
    recorded responder is the caller.
    """

    sources: frozenset[QuestionStatus]
    target: QuestionStatus
    roles: frozenset[str]
    owner_roles: frozenset[str] = frozenset()


TRANSITION_RULES: dict[Transition, TransitionRule] = {
    Transition.CLAIM: TransitionRule(
        sources=frozenset({QuestionStatus.PENDING}),
        target=QuestionStatus.ASSIGNED,
        roles=frozenset({Role.RESPONDER.value}),
    ),
    Transition.ASSIGN: TransitionRule(
        sources=frozenset({QuestionStatus.PENDING}),
        target=QuestionStatus.ASSIGNED,
        roles=frozenset({Role.ADMIN.value}),
    ),
    Transition.BEGIN_WORK: TransitionRule(
        sources=frozenset({QuestionStatus.ASSIGNED}),
        target=QuestionStatus.IN_PROGRESS,
        roles=frozenset({Role.RESPONDER.value}),
        owner_roles=frozenset({Role.RESPONDER.value}),
    ),
    Transition.ANSWER: TransitionRule(
        sources=frozenset({QuestionStatus.ASSIGNED, QuestionStatus.IN_PROGRESS}),
        target=QuestionStatus.ANSWERED,
        roles=frozenset({Role.RESPONDER.value}),
        owner_roles=frozenset({Role.RESPONDER.value}),
    ),
    Transition.CLOSE: TransitionRule(
        sources=frozenset({QuestionStatus.ANSWERED}),
        target=QuestionStatus.CLOSED,
        roles=frozenset({Role.RESPONDER.value, Role.ADMIN.value}),
        owner_roles=frozenset({Role.RESPONDER.value}),
    ),
}


def _build_valid_transitions() -> dict[QuestionStatus, tuple[QuestionStatus, ...]]:
    table: dict[QuestionStatus, set[QuestionStatus]] = {status: set() for status in QuestionStatus}
    for rule in TRANSITION_RULES.values():
        for source in rule.sources:
            table[source].add(rule.target)
    return {status: tuple(sorted(targets, key=QuestionStatus.rank)) for status, targets in table.items()}


VALID_TRANSITIONS: dict[QuestionStatus, tuple[QuestionStatus, ...]] = _build_valid_transitions()

TERMINAL_STATUSES = frozenset({QuestionStatus.CLOSED})
RESPONDER_STATUSES = frozenset(
    {
        QuestionStatus.ASSIGNED,
        QuestionStatus.IN_PROGRESS,
        QuestionStatus.ANSWERED,
        QuestionStatus.CLOSED,
    }
)


def can_transition(current: QuestionStatus | str, target: QuestionStatus | str) -> bool:
    """Check if a question status transition is valid."""
    return QuestionStatus(target) in VALID_TRANSITIONS.get(QuestionStatus(current), ())


def rule_for(transition: Transition) -> TransitionRule:
    return TRANSITION_RULES[transition]


def check_invariants(question: QuestionRecord) -> list[str]:
    """Return human-readable invariant violations for a stored question."""
    violations: list[str] = []
    status = QuestionStatus(question.status)

    if question.responder is not None and status not in RESPONDER_STATUSES:
        violations.append(f"responder set while status is '{status.value}'")

    if status == QuestionStatus.PENDING:
        if question.responder is not None:
            violations.append("pending question has a responder")
        if question.answer is not None:
            violations.append("pending question has an answer")

    if status in (QuestionStatus.ANSWERED, QuestionStatus.CLOSED):
        if question.answer is None or not question.answer.content.strip():
            violations.append(f"{status.value} question has no answer")
        if question.answered_at is None or question.assigned_at is None:
            violations.append(f"{status.value} question is missing assigned_at/answered_at")
        elif not (question.answered_at >= question.assigned_at >= question.created_at):
            violations.append("timestamps out of order (answered_at >= assigned_at >= created_at)")

    if status in (QuestionStatus.ASSIGNED, QuestionStatus.IN_PROGRESS):
        if question.responder is None:
            violations.append(f"{status.value} question has no responder")
        if question.answer is not None:
            violations.append(f"{status.value} question already carries an answer")

    return violations
