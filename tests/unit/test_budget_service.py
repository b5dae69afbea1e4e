"""Unit tests for the budget service facade"""

import threading
import pytest
from decimal import Decimal
from sqlalchemy.exc import OperationalError
from zero_budget.domain.exceptions import (
    InvalidDate,
    InvalidInput,
    MonthAlreadyOpen,
    MonthNotOpen,
    UnknownCategory,
)
from zero_budget.domain.models import LedgerStatus
from zero_budget.domain.months import MonthKey
from zero_budget.infrastructure.database.snapshot import SnapshotStore
from zero_budget.service import BudgetService


class FailingStore(SnapshotStore):
    """Store whose writes always fail"""

    def __init__(self):
        super().__init__(session_factory=None, storage_key="failing")
        self.attempts = 0

    def save_document(self, document) -> None:
        self.attempts += 1
        raise OperationalError("INSERT INTO budget_snapshot", {}, Exception("disk I/O error"))


class BlockingStore(SnapshotStore):
    """Store whose writes wait until the test releases them"""

    def __init__(self, session_factory):
        super().__init__(session_factory, storage_key="blocking")
        self.started = threading.Event()
        self.release = threading.Event()
        self.completed = 0

    def save_document(self, document) -> None:
        self.started.set()
        self.release.wait(timeout=5)
        super().save_document(document)
        self.completed += 1


def test_create_category(service: BudgetService):
    category = service.create_category("  Housing ", 1500)

    assert category.name == "Housing"
    assert category.limit == Decimal("1500")
    assert service.list_categories() == [category]


@pytest.mark.parametrize("name, limit", [("", 100), ("   ", 100), ("Food", -1), ("Food", "abc"), ("Food", None)])
def test_create_category_rejects_invalid_input(service: BudgetService, name, limit):
    with pytest.raises(InvalidInput):
        service.create_category(name, limit)
    assert service.list_categories() == []


def test_create_category_accepts_zero_limit(service: BudgetService):
    assert service.create_category("Savings", 0).limit == Decimal("0")


def test_create_recurring_template_requires_known_category(service: BudgetService):
    with pytest.raises(UnknownCategory):
        service.create_recurring_template("Rent", 1200, "missing")
    assert service.list_recurring_templates() == []


def test_create_recurring_template(service: BudgetService):
    housing = service.create_category("Housing", 1500)

    template = service.create_recurring_template("Rent", "1200.00", housing.id)

    assert template.amount == Decimal("1200.00")
    assert template.category_id == housing.id
    assert service.list_recurring_templates() == [template]


def test_scenario_first_month_with_rent(service: BudgetService):
    """Test no history, rent template, open October with 3000 income"""
    housing = service.create_category("Housing", 1500)
    service.create_recurring_template("Rent", 1200, housing.id)

    assert service.get_ledger("2025-10") is None
    assert service.preview_rollover("2025-10") == Decimal("0")

    service.open_month("2025-10", income=3000, rollover=0)

    automated = [t for t in service.list_transactions("2025-10") if t.is_automated]
    assert len(automated) == 1
    assert automated[0].amount == Decimal("1200")
    assert automated[0].description == "Rent (Recurring)"

    summary = service.get_summary("2025-10")
    assert summary.total_spent == Decimal("1200")
    assert summary.remaining_balance == Decimal("1800")


def test_scenario_rollover_chain(service: BudgetService):
    """Test October leftover of 500 funds November"""
    food = service.create_category("Food", 3000)
    service.open_month("2025-10", income=3000, rollover=0)
    service.record_transaction("2025-10", food.id, 2000)
    service.record_transaction("2025-10", food.id, 500)

    rollover = service.preview_rollover("2025-11")
    assert rollover == Decimal("500")

    ledger = service.open_month("2025-11", income=3000, rollover=rollover)

    assert ledger.rollover == Decimal("500")
    assert service.get_summary("2025-11").total_available == Decimal("3500")


def test_open_month_defaults_rollover_to_preview(service: BudgetService):
    service.open_month("2025-10", income=1000)

    ledger = service.open_month("2025-11", income=1000)

    assert ledger.rollover == Decimal("1000")


def test_open_month_twice_fails_without_new_transactions(service: BudgetService):
    housing = service.create_category("Housing", 1500)
    service.create_recurring_template("Rent", 1200, housing.id)
    first = service.open_month("2025-10", income=3000, rollover=0)
    count_before = len(service.list_transactions("2025-10"))

    with pytest.raises(MonthAlreadyOpen):
        service.open_month("2025-10", income=3000, rollover=0)

    assert len(service.list_transactions("2025-10")) == count_before
    assert service.get_ledger("2025-10") == first


@pytest.mark.parametrize("income, rollover", [(-1, 0), (100, -5), ("x", 0)])
def test_open_month_rejects_invalid_amounts(service: BudgetService, income, rollover):
    with pytest.raises(InvalidInput):
        service.open_month("2025-10", income=income, rollover=rollover)
    assert not service.has_ledger("2025-10")


def test_open_month_rejects_malformed_month(service: BudgetService):
    with pytest.raises(InvalidDate):
        service.open_month("2025-13", income=100)


def test_overspend_is_reported_not_clamped(service: BudgetService):
    """Test utilization caps at 100 while remaining balance goes negative"""
    fun = service.create_category("Fun", 200)
    service.open_month("2025-10", income=100, rollover=0)
    service.record_transaction("2025-10", fun.id, 250)

    summary = service.get_summary("2025-10")

    assert summary.per_category[fun.id].utilization == Decimal("100")
    assert summary.per_category[fun.id].is_over is True
    assert summary.remaining_balance == Decimal("-150")
    assert service.preview_rollover("2025-11") == Decimal("0")


def test_record_transaction_validation(service: BudgetService):
    food = service.create_category("Food", 400)

    with pytest.raises(InvalidInput):
        service.record_transaction("2025-10", food.id, 0)
    with pytest.raises(InvalidInput):
        service.record_transaction("2025-10", food.id, -3)
    with pytest.raises(UnknownCategory):
        service.record_transaction("2025-10", "missing", 10)
    with pytest.raises(MonthNotOpen):
        service.record_transaction("2025-10", food.id, 10)

    assert service.list_transactions("2025-10") == []


def test_record_transaction(service: BudgetService):
    food = service.create_category("Food", 400)
    service.open_month(MonthKey.of(2025, 10), income=1000, rollover=0)

    tx = service.record_transaction(MonthKey.of(2025, 10), food.id, "42.10", description=" Market ")

    assert tx.is_automated is False
    assert tx.description == "Market"
    assert tx.amount == Decimal("42.10")
    assert service.get_summary("2025-10").per_category[food.id].spent == Decimal("42.10")


def test_summary_reads_are_idempotent(service: BudgetService):
    food = service.create_category("Food", 400)
    service.open_month("2025-10", income=1000, rollover=0)
    service.record_transaction("2025-10", food.id, 120)

    assert service.get_summary("2025-10") == service.get_summary("2025-10")


def test_summary_of_unopened_month(service: BudgetService):
    service.create_category("Food", 400)

    summary = service.get_summary("2030-01")

    assert summary.is_open is False
    assert summary.total_available == Decimal("0")
    assert summary.remaining_balance == Decimal("0")


def test_reset_all(service: BudgetService, store: SnapshotStore):
    food = service.create_category("Food", 400)
    service.create_recurring_template("Snacks", 20, food.id)
    service.open_month("2025-10", income=1000, rollover=0)

    service.reset_all()
    service.wait_for_writes()

    assert service.list_categories() == []
    assert service.list_recurring_templates() == []
    assert service.get_ledger("2025-10") is None
    assert service.list_transactions("2025-10") == []
    assert store.load().transactions == []


def test_every_mutation_is_flushed(service: BudgetService, store: SnapshotStore):
    """Test a fresh service loaded from the store sees the same state"""
    housing = service.create_category("Housing", 1500)
    service.create_recurring_template("Rent", 1200, housing.id)
    service.open_month("2025-10", income=3000, rollover=0)
    service.record_transaction("2025-10", housing.id, 50)
    assert service.wait_for_writes() is True

    reloaded = BudgetService.load(store)

    assert reloaded.state.snapshot() == service.state.snapshot()
    assert reloaded.get_ledger("2025-10").status is LedgerStatus.OPEN
    assert reloaded.get_summary("2025-10").total_spent == Decimal("1250")


def test_persistence_failure_keeps_in_memory_state():
    """Test a failed flush is reported without undoing the mutation"""
    failing = FailingStore()
    service = BudgetService(store=failing)
    try:
        category = service.create_category("Food", 400)
        service.open_month("2025-10", income=1000, rollover=0)
        service.record_transaction("2025-10", category.id, 10)

        assert service.wait_for_writes() is False
        assert failing.attempts == 3
        assert service.flush() is False
        assert failing.attempts == 4
        assert service.list_categories() == [category]
        assert service.get_summary("2025-10").remaining_balance == Decimal("990")
    finally:
        service.close()


def test_flush_without_store_succeeds():
    assert BudgetService().flush() is True


def test_mutations_and_reads_do_not_wait_for_a_slow_store(session_factory):
    """Test a write stuck in the database does not hold up the caller"""
    blocking = BlockingStore(session_factory)
    service = BudgetService(store=blocking)
    try:
        food = service.create_category("Food", 400)
        assert blocking.started.wait(timeout=5)

        service.open_month("2025-10", income=1000, rollover=0)
        service.record_transaction("2025-10", food.id, 10)
        summary = service.get_summary("2025-10")

        assert summary.remaining_balance == Decimal("990")
        assert blocking.completed == 0

        blocking.release.set()
        assert service.wait_for_writes() is True
        assert blocking.completed == 3
        assert blocking.load().snapshot() == service.state.snapshot()
    finally:
        blocking.release.set()
        service.close()


def test_reads_from_another_thread_do_not_wait_for_a_slow_store(session_factory):
    blocking = BlockingStore(session_factory)
    service = BudgetService(store=blocking)
    try:
        food = service.create_category("Food", 400)
        service.open_month("2025-10", income=1000, rollover=0)
        assert blocking.started.wait(timeout=5)

        summaries = []
        reader = threading.Thread(target=lambda: summaries.append(service.get_summary("2025-10")))
        reader.start()
        reader.join(timeout=2)

        assert not reader.is_alive()
        assert summaries[0].per_category[food.id].limit == Decimal("400")
        assert blocking.completed == 0
    finally:
        blocking.release.set()
        service.close()


@pytest.mark.parametrize("limit", ["1E-999999", "9E+999999", "1E-16", "1E+16"])
def test_create_category_rejects_out_of_range_limit(service: BudgetService, limit):
    with pytest.raises(InvalidInput):
        service.create_category("Tiny", limit)
    assert service.list_categories() == []


@pytest.mark.parametrize("income, rollover", [("9E+999999", 0), (100, "9E+999999"), ("1E-999999", 0)])
def test_open_month_rejects_out_of_range_amounts(service: BudgetService, income, rollover):
    with pytest.raises(InvalidInput):
        service.open_month("2025-10", income=income, rollover=rollover)
    assert not service.has_ledger("2025-10")


def test_summary_with_smallest_and_largest_amounts(service: BudgetService):
    """Test extreme but accepted amounts summarize without decimal overflow"""
    tiny = service.create_category("Tiny", "1E-15")
    huge = service.create_category("Huge", "9E+15")
    service.open_month("2025-10", income="9E+15", rollover="9E+15")
    service.record_transaction("2025-10", tiny.id, "1E+15")
    service.record_transaction("2025-10", huge.id, "1E-15")

    summary = service.get_summary("2025-10")

    assert summary.per_category[tiny.id].utilization == Decimal("100")
    assert summary.per_category[tiny.id].is_over is True
    assert summary.per_category[huge.id].utilization < Decimal("1")
    assert summary.total_available == Decimal("1.8E+16")


def test_month_status(service: BudgetService):
    housing = service.create_category("Housing", 1500)
    service.create_recurring_template("Rent", 1200, housing.id)

    before = service.month_status("2025-10")
    assert before.is_open is False
    assert before.ledger is None
    assert before.projected_rollover == Decimal("0")
    assert before.recurring_count == 1

    ledger = service.open_month("2025-10", income=3000, rollover=0)

    after = service.month_status("2025-11")
    assert after.month == MonthKey.of(2025, 11)
    assert after.projected_rollover == Decimal("1800")
    assert service.month_status("2025-10").ledger == ledger
    assert service.month_status("2025-10").is_open is True
