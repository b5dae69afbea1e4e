"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from itertools import count
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from zero_budget.api.main import create_app
from zero_budget.api.dependencies import get_budget_service
from zero_budget.domain.models import Category, RecurringTemplate
from zero_budget.domain.state import BudgetState
from zero_budget.infrastructure.database.models import Base
from zero_budget.infrastructure.database.snapshot import SnapshotStore
from zero_budget.service import BudgetService

FIXED_NOW = datetime(2025, 10, 5, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def session_factory(tmp_path) -> Generator[sessionmaker, None, None]:
    """Session factory bound to a throwaway SQLite database"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def store(session_factory: sessionmaker) -> SnapshotStore:
    return SnapshotStore(session_factory, storage_key="test-budget")


@pytest.fixture
def id_factory():
    """Deterministic ids: id-1, id-2, ..."""
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def service(store: SnapshotStore, id_factory) -> Generator[BudgetService, None, None]:
    """Service backed by the test database with a fixed clock"""
    service = BudgetService.load(
        store,
        clock=lambda: FIXED_NOW,
        id_factory=id_factory,
        recurring_suffix="(Recurring)",
    )
    try:
        yield service
    finally:
        service.close()


@pytest.fixture
def client(service: BudgetService) -> TestClient:
    """Create FastAPI test client with the test service"""
    app = create_app()
    app.dependency_overrides[get_budget_service] = lambda: service
    return TestClient(app)


@pytest.fixture
def housing() -> Category:
    return Category(id="housing", name="Housing", limit=Decimal("1500"))


@pytest.fixture
def groceries() -> Category:
    return Category(id="groceries", name="Groceries", limit=Decimal("600"))


@pytest.fixture
def rent(housing: Category) -> RecurringTemplate:
    return RecurringTemplate(id="rent", name="Rent", amount=Decimal("1200"), category_id=housing.id)


@pytest.fixture
def state(housing: Category, groceries: Category) -> BudgetState:
    """State with two categories and no months opened"""
    return BudgetState(categories=[housing, groceries])
