"""Domain services."""

from src.domain.services.accounts import AccountService
from src.domain.services.dashboard import DashboardService, DashboardStats
from src.domain.services.lifecycle import LifecycleEngine
from src.domain.services.responders import ResponderService

__all__ = [
    "AccountService",
    "DashboardService",
    "DashboardStats",
    "LifecycleEngine",
    "ResponderService",
]
