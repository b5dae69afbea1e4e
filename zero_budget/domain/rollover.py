"""Carry-forward of unspent balance from one month into the next"""

from decimal import Decimal

from zero_budget.domain.months import MonthKey
from zero_budget.domain.state import BudgetState

ZERO = Decimal("0")


def calculate_rollover(state: BudgetState, target: MonthKey) -> Decimal:
    """
    Unspent balance the previous month passes to `target`.

    Rules:
    - Only the immediately preceding month is consulted; if it was never
      opened the rollover is 0, even when earlier months had money left
    - balance = (income + rollover) - everything spent in that month
    - Overspend is absorbed: a negative balance rolls over as 0, never as debt

    Side-effect free, so previews may call it as often as they like.
    """
    previous = target.shift(-1)
    previous_ledger = state.get_ledger(previous)
    if previous_ledger is None:
        return ZERO

    previous_expenses = sum((t.amount for t in state.transactions_for(previous)), ZERO)
    balance = previous_ledger.income + previous_ledger.rollover - previous_expenses

    return max(ZERO, balance)
