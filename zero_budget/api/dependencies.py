"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from fastapi import Request
from zero_budget.infrastructure.database.session import SessionLocal, init_db
from zero_budget.infrastructure.database.snapshot import SnapshotStore
from zero_budget.service import BudgetService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache(maxsize=1)
def get_budget_service() -> BudgetService:
    """Process-wide budget service, loaded from the snapshot store on first use"""
    init_db()
    return BudgetService.load(SnapshotStore(SessionLocal))
