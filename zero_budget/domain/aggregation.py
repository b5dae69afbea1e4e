"""Read-only spend and balance figures for a month"""

from decimal import Decimal
from typing import Iterable

from zero_budget.domain.models import CategorySummary, MonthSummary, Transaction
from zero_budget.domain.months import MonthKey
from zero_budget.domain.state import BudgetState

ZERO = Decimal("0")
FULL = Decimal("100")


def _sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def spent_by_category(state: BudgetState, month: MonthKey, category_id: str) -> Decimal:
    return _sum_amounts(t for t in state.transactions_for(month) if t.category_id == category_id)


def total_spent(state: BudgetState, month: MonthKey) -> Decimal:
    return _sum_amounts(state.transactions_for(month))


def total_available(state: BudgetState, month: MonthKey) -> Decimal:
    ledger = state.get_ledger(month)
    return ledger.total_available if ledger is not None else ZERO


def remaining_balance(state: BudgetState, month: MonthKey) -> Decimal:
    """Available minus spent; negative on overspend and never clamped"""
    return total_available(state, month) - total_spent(state, month)


def category_utilization(spent: Decimal, limit: Decimal) -> Decimal:
    """
    Percent of a category limit consumed, clamped to 100.

    A zero limit has no meaningful ratio and counts as fully used. Spend at or
    over the limit is 100 without dividing.
    """
    if limit <= ZERO or spent >= limit:
        return FULL
    return min(FULL, FULL * spent / limit)


def summarize_month(state: BudgetState, month: MonthKey) -> MonthSummary:
    """
    Assemble every figure the dashboard needs for `month`.

    Single pass over the month's transactions; one entry per registered
    category, in registration order.
    """
    month_transactions = state.transactions_for(month)

    spent_per_category = {}
    for t in month_transactions:
        spent_per_category[t.category_id] = spent_per_category.get(t.category_id, ZERO) + t.amount

    per_category = {}
    for category in state.categories.values():
        spent = spent_per_category.get(category.id, ZERO)
        per_category[category.id] = CategorySummary(
            category_id=category.id,
            name=category.name,
            spent=spent,
            limit=category.limit,
            utilization=category_utilization(spent, category.limit),
            is_over=spent > category.limit,
        )

    available = total_available(state, month)
    spent_total = _sum_amounts(month_transactions)

    return MonthSummary(
        month=month,
        is_open=state.has_ledger(month),
        total_available=available,
        total_spent=spent_total,
        remaining_balance=available - spent_total,
        per_category=per_category,
    )
