"""Domain layer: question lifecycle, assignment policy and services."""

from src.domain.models import (
    Account,
    ActivityEntry,
    Answer,
    IssuedTokens,
    Party,
    QuestionRecord,
    ResponderProfile,
    User,
)

__all__ = [
    "Account",
    "ActivityEntry",
    "Answer",
    "IssuedTokens",
    "Party",
    "QuestionRecord",
    "ResponderProfile",
    "User",
]
