from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ResponderCounts(BaseModel):
    total: int
    active: int


class QuestionCounts(BaseModel):
    total: int
    answered: int
    pending: int
    response_rate: int = Field(..., description="Answered share of all questions, in percent")


class PerformanceStats(BaseModel):
    avg_response_time_hours: float
    window_days: int


class DashboardStatsResponse(BaseModel):
    responders: ResponderCounts
    questions: QuestionCounts
    performance: PerformanceStats


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    question_id: str | None = None
    title: str
    asker: str
    responder_id: str | None = None
    responder: str | None = None
    status: str | None = None
    timestamp: datetime
