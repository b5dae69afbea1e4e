"""Domain models - pure Python dataclasses representing budgeting entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from zero_budget.domain.months import MonthKey

# Largest decimal exponent, either way, an amount may carry; keeps sums and ratios inside the default context
MAX_AMOUNT_EXPONENT = 15


def amount_in_range(amount: Decimal) -> bool:
    """Finite, and either zero or with an adjusted exponent within +-MAX_AMOUNT_EXPONENT"""
    if not amount.is_finite():
        return False
    return amount.is_zero() or abs(amount.adjusted()) <= MAX_AMOUNT_EXPONENT


class LedgerStatus(str, Enum):
    """Lifecycle of a month's ledger; only OPEN is reachable today"""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class Category:
    """Spending bucket with a monthly limit"""

    id: str
    name: str
    limit: Decimal


@dataclass(frozen=True)
class RecurringTemplate:
    """Fixed monthly obligation replayed into each newly opened month"""

    id: str
    name: str
    amount: Decimal
    category_id: str


@dataclass(frozen=True)
class Transaction:
    """Expense entry tagged with the month it belongs to"""

    id: str
    month: MonthKey
    category_id: str
    amount: Decimal
    description: str
    timestamp: datetime
    is_automated: bool = False


@dataclass(frozen=True)
class Ledger:
    """Committed income and rollover that opens a month for tracking"""

    month: MonthKey
    income: Decimal
    rollover: Decimal
    status: LedgerStatus = LedgerStatus.OPEN

    @property
    def total_available(self) -> Decimal:
        return self.income + self.rollover


@dataclass
class CategorySummary:
    """Spend against one category's limit within a month"""

    category_id: str
    name: str
    spent: Decimal
    limit: Decimal
    utilization: Decimal  # percent, clamped to [0, 100]
    is_over: bool


@dataclass
class MonthSummary:
    """Read-only figures for a month"""

    month: MonthKey
    is_open: bool
    total_available: Decimal
    total_spent: Decimal
    remaining_balance: Decimal  # may be negative
    per_category: Dict[str, CategorySummary] = field(default_factory=dict)


@dataclass
class MonthStatus:
    """Whether a month is open, and what opening it would involve"""

    month: MonthKey
    ledger: Optional[Ledger]
    projected_rollover: Decimal
    recurring_count: int

    @property
    def is_open(self) -> bool:
        return self.ledger is not None
