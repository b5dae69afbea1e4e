"""Budget facade: the operations a presentation layer calls into"""

import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from zero_budget.config import settings
from zero_budget.domain.aggregation import summarize_month
from zero_budget.domain.exceptions import InvalidInput, MonthAlreadyOpen, MonthNotOpen, UnknownCategory
from zero_budget.domain.initializer import open_month as initialize_month
from zero_budget.domain.models import (
    Category,
    Ledger,
    MonthStatus,
    MonthSummary,
    RecurringTemplate,
    Transaction,
    amount_in_range,
)
from zero_budget.domain.months import MonthLike, to_month_key
from zero_budget.domain.rollover import calculate_rollover
from zero_budget.domain.state import BudgetState
from zero_budget.infrastructure.database.serialization import state_to_document
from zero_budget.infrastructure.database.snapshot import SnapshotStore
from zero_budget.infrastructure.observability.logging import (
    log_month_opened,
    log_persistence_failure,
    log_transaction_recorded,
)
from zero_budget.infrastructure.observability.metrics import (
    record_manual_transaction,
    record_month_opened,
    snapshot_flush_failures_counter,
)
from zero_budget.utils.date_utils import utc_now

ZERO = Decimal("0")


def new_id() -> str:
    return uuid.uuid4().hex


def to_amount(value: Any, field: str) -> Decimal:
    """
    Coerce int, str, float or Decimal input into a finite Decimal.

    Raises:
        InvalidInput: Value is missing, boolean, unparsable, not finite or out of range
    """
    if value is None or isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidInput(f"{field} must be a number, got {value!r}") from e
    if not amount.is_finite():
        raise InvalidInput(f"{field} must be finite, got {value!r}")
    if not amount_in_range(amount):
        raise InvalidInput(f"{field} is out of range, got {value!r}")
    return amount


def _require_name(name: Any, field: str = "name") -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput(f"{field} must not be empty")
    return name.strip()


class BudgetService:
    """
    Entry point for categories, recurring templates, months and transactions.

    All reads and mutations run under one lock so a month's ledger and its
    recurring transactions appear together to every reader. After each
    successful mutation the state is encoded and handed to a single writer
    thread; callers never wait on the database. A failed write is logged and
    counted but never undoes the in-memory change.
    """

    def __init__(
        self,
        state: BudgetState | None = None,
        store: SnapshotStore | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
        recurring_suffix: str | None = None,
    ):
        self.state = state if state is not None else BudgetState()
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self.recurring_suffix = (
            recurring_suffix if recurring_suffix is not None else settings.recurring_description_suffix
        )
        self._lock = threading.RLock()
        # One worker keeps snapshot writes in mutation order
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="snapshot-writer")
        self._pending: Optional[Future] = None

    @classmethod
    def load(cls, store: SnapshotStore, **kwargs) -> "BudgetService":
        """Build a service from whatever the store holds (empty on first run)"""
        return cls(state=store.load(), store=store, **kwargs)

    # Registries

    def create_category(self, name: str, limit: Any) -> Category:
        """
        Register a spending category.

        Raises:
            InvalidInput: Blank name or negative limit
        """
        name = _require_name(name)
        limit = to_amount(limit, "limit")
        if limit < ZERO:
            raise InvalidInput("limit must not be negative")

        with self._lock:
            category = Category(id=self.id_factory(), name=name, limit=limit)
            self.state.add_category(category)
            self._schedule_flush()
        return category

    def list_categories(self) -> List[Category]:
        with self._lock:
            return list(self.state.snapshot().categories)

    def create_recurring_template(self, name: str, amount: Any, category_id: str) -> RecurringTemplate:
        """
        Register a fixed monthly expense replayed into every newly opened month.

        Raises:
            InvalidInput: Blank name or negative amount
            UnknownCategory: `category_id` does not resolve
        """
        name = _require_name(name)
        amount = to_amount(amount, "amount")
        if amount < ZERO:
            raise InvalidInput("amount must not be negative")

        with self._lock:
            if self.state.get_category(category_id) is None:
                raise UnknownCategory(category_id)
            template = RecurringTemplate(id=self.id_factory(), name=name, amount=amount, category_id=category_id)
            self.state.add_recurring_template(template)
            self._schedule_flush()
        return template

    def list_recurring_templates(self) -> List[RecurringTemplate]:
        with self._lock:
            return list(self.state.snapshot().recurring_templates)

    # Months

    def get_ledger(self, month: MonthLike) -> Optional[Ledger]:
        key = to_month_key(month)
        with self._lock:
            return self.state.get_ledger(key)

    def has_ledger(self, month: MonthLike) -> bool:
        """Whether the month has been opened; callers show a setup step when it has not"""
        key = to_month_key(month)
        with self._lock:
            return self.state.has_ledger(key)

    def preview_rollover(self, month: MonthLike) -> Decimal:
        key = to_month_key(month)
        with self._lock:
            return calculate_rollover(self.state, key)

    def month_status(self, month: MonthLike) -> MonthStatus:
        """Ledger, rollover preview and recurring count read together"""
        key = to_month_key(month)
        with self._lock:
            return MonthStatus(
                month=key,
                ledger=self.state.get_ledger(key),
                projected_rollover=calculate_rollover(self.state, key),
                recurring_count=len(self.state.recurring_templates),
            )

    def open_month(self, month: MonthLike, income: Any, rollover: Any = None) -> Ledger:
        """
        Open `month` with the given income and rollover.

        `rollover=None` commits the current preview. Every registered
        recurring template becomes one automated transaction in the month.

        Raises:
            InvalidInput: Negative income or rollover
            MonthAlreadyOpen: A ledger already exists for `month`
        """
        key = to_month_key(month)
        income = to_amount(income, "income")
        if income < ZERO:
            raise InvalidInput("income must not be negative")
        if rollover is not None:
            rollover = to_amount(rollover, "rollover")
            if rollover < ZERO:
                raise InvalidInput("rollover must not be negative")

        with self._lock:
            if self.state.has_ledger(key):
                raise MonthAlreadyOpen(key)
            if rollover is None:
                rollover = calculate_rollover(self.state, key)

            recurring_count = len(self.state.recurring_templates)
            ledger = initialize_month(
                self.state,
                key,
                income,
                rollover,
                now=self.clock(),
                new_id=self.id_factory,
                recurring_suffix=self.recurring_suffix,
            )
            self._schedule_flush()

        record_month_opened(recurring_count)
        log_month_opened(str(key), str(income), str(rollover), recurring_count)
        return ledger

    # Transactions

    def record_transaction(
        self, month: MonthLike, category_id: str, amount: Any, description: str = ""
    ) -> Transaction:
        """
        Append a user-entered expense to an open month.

        Raises:
            InvalidInput: Amount is zero or negative
            UnknownCategory: `category_id` does not resolve
            MonthNotOpen: No ledger exists for `month`
        """
        key = to_month_key(month)
        amount = to_amount(amount, "amount")
        if amount <= ZERO:
            raise InvalidInput("amount must be greater than zero")

        with self._lock:
            if self.state.get_category(category_id) is None:
                raise UnknownCategory(category_id)
            if not self.state.has_ledger(key):
                raise MonthNotOpen(key)

            transaction = Transaction(
                id=self.id_factory(),
                month=key,
                category_id=category_id,
                amount=amount,
                description=(description or "").strip(),
                timestamp=self.clock(),
                is_automated=False,
            )
            self.state.append_transactions([transaction])
            self._schedule_flush()

        record_manual_transaction()
        log_transaction_recorded(str(key), category_id, str(amount))
        return transaction

    def list_transactions(self, month: MonthLike) -> List[Transaction]:
        key = to_month_key(month)
        with self._lock:
            return self.state.transactions_for(key)

    # Summaries

    def get_summary(self, month: MonthLike) -> MonthSummary:
        key = to_month_key(month)
        with self._lock:
            return summarize_month(self.state, key)

    # Maintenance

    def reset_all(self) -> None:
        """Clear every registry, ledger and transaction"""
        with self._lock:
            self.state.clear()
            self._schedule_flush()

    def flush(self) -> bool:
        """
        Persist the current state and wait for the write to finish.

        Returns:
            True when written (or no store is configured), False when the write failed
        """
        with self._lock:
            future = self._schedule_flush()
        return future.result()

    def wait_for_writes(self) -> bool:
        """Block until every scheduled write has run; result of the last one"""
        future = self._pending
        return future.result() if future is not None else True

    def close(self) -> None:
        """Drain pending writes and stop the writer thread"""
        self._writer.shutdown(wait=True)

    def _schedule_flush(self) -> "Future[bool]":
        # Caller holds the lock; the document is encoded before the state can change again
        future: "Future[bool]" = Future()
        if self.store is None:
            future.set_result(True)
            return future
        try:
            document = state_to_document(self.state)
        except (TypeError, ValueError) as e:
            self._report_failure(e)
            future.set_result(False)
        else:
            future = self._writer.submit(self._write, document)
        self._pending = future
        return future

    def _write(self, document: Dict[str, Any]) -> bool:
        try:
            self.store.save_document(document)
            return True
        except (SQLAlchemyError, TypeError, ValueError) as e:
            self._report_failure(e)
            return False

    def _report_failure(self, error: Exception) -> None:
        snapshot_flush_failures_counter.inc()
        log_persistence_failure(self.store.storage_key, error)
