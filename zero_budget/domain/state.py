"""In-memory budget state: registries, ledger store and transaction log"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from zero_budget.domain.exceptions import MonthAlreadyOpen
from zero_budget.domain.models import Category, Ledger, RecurringTemplate, Transaction
from zero_budget.domain.months import MonthKey

T = TypeVar("T")


@dataclass(frozen=True)
class StateSnapshot:
    """Immutable copy of the four collections"""

    categories: Tuple[Category, ...]
    recurring_templates: Tuple[RecurringTemplate, ...]
    ledgers: Tuple[Ledger, ...]
    transactions: Tuple[Transaction, ...]


class BudgetState:
    """
    Owns categories, recurring templates, ledgers and transactions.

    Entities are frozen dataclasses, so a shallow copy of each collection is
    enough to restore the state when a multi-step write fails part-way.
    """

    def __init__(
        self,
        categories: Iterable[Category] = (),
        recurring_templates: Iterable[RecurringTemplate] = (),
        ledgers: Iterable[Ledger] = (),
        transactions: Iterable[Transaction] = (),
    ):
        self.categories: Dict[str, Category] = {c.id: c for c in categories}
        self.recurring_templates: Dict[str, RecurringTemplate] = {r.id: r for r in recurring_templates}
        self.ledgers: Dict[MonthKey, Ledger] = {ledger.month: ledger for ledger in ledgers}
        self.transactions: List[Transaction] = list(transactions)

    # Queries

    def get_category(self, category_id: str) -> Optional[Category]:
        return self.categories.get(category_id)

    def get_ledger(self, month: MonthKey) -> Optional[Ledger]:
        return self.ledgers.get(month)

    def has_ledger(self, month: MonthKey) -> bool:
        return month in self.ledgers

    def transactions_for(self, month: MonthKey) -> List[Transaction]:
        return [t for t in self.transactions if t.month == month]

    # Mutations

    def add_category(self, category: Category) -> None:
        self.categories[category.id] = category

    def add_recurring_template(self, template: RecurringTemplate) -> None:
        self.recurring_templates[template.id] = template

    def add_ledger(self, ledger: Ledger) -> None:
        if ledger.month in self.ledgers:
            raise MonthAlreadyOpen(ledger.month)
        self.ledgers[ledger.month] = ledger

    def append_transactions(self, batch: Iterable[Transaction]) -> None:
        self.transactions.extend(batch)

    def clear(self) -> None:
        self.categories.clear()
        self.recurring_templates.clear()
        self.ledgers.clear()
        self.transactions.clear()

    def with_transaction(self, fn: Callable[["BudgetState"], T]) -> T:
        """
        Run `fn(self)` as one unit.

        If `fn` raises, every collection is restored to its contents on entry
        and the exception propagates.
        """
        saved = self.snapshot()
        try:
            return fn(self)
        except Exception:
            self._restore(saved)
            raise

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            categories=tuple(self.categories.values()),
            recurring_templates=tuple(self.recurring_templates.values()),
            ledgers=tuple(self.ledgers.values()),
            transactions=tuple(self.transactions),
        )

    def _restore(self, saved: StateSnapshot) -> None:
        self.categories = {c.id: c for c in saved.categories}
        self.recurring_templates = {r.id: r for r in saved.recurring_templates}
        self.ledgers = {ledger.month: ledger for ledger in saved.ledgers}
        self.transactions = list(saved.transactions)
