"""Opening a month: ledger creation plus recurring expense materialization"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, List

from zero_budget.domain.exceptions import MonthAlreadyOpen
from zero_budget.domain.models import Ledger, LedgerStatus, RecurringTemplate, Transaction
from zero_budget.domain.months import MonthKey
from zero_budget.domain.state import BudgetState


def recurring_description(template_name: str, suffix: str) -> str:
    return f"{template_name} {suffix}".strip()


def build_recurring_transactions(
    templates: Iterable[RecurringTemplate],
    month: MonthKey,
    now: datetime,
    new_id: Callable[[], str],
    suffix: str,
) -> List[Transaction]:
    """One automated transaction per template, in template order"""
    return [
        Transaction(
            id=new_id(),
            month=month,
            category_id=template.category_id,
            amount=template.amount,
            description=recurring_description(template.name, suffix),
            timestamp=now,
            is_automated=True,
        )
        for template in templates
    ]


def open_month(
    state: BudgetState,
    target: MonthKey,
    income: Decimal,
    rollover: Decimal,
    *,
    now: datetime,
    new_id: Callable[[], str],
    recurring_suffix: str,
) -> Ledger:
    """
    Create the ledger for `target` and seed its recurring transactions.

    Steps (applied as one unit through `state.with_transaction`):
    1. Store Ledger(target, income, rollover, OPEN)
    2. Synthesize one automated transaction per registered template
    3. Append the batch to the transaction log

    Either all of it lands or none of it does. Templates sharing a category
    or amount still each produce their own transaction.

    Raises:
        MonthAlreadyOpen: A ledger already exists for `target`
    """
    if state.has_ledger(target):
        raise MonthAlreadyOpen(target)

    def _apply(s: BudgetState) -> Ledger:
        ledger = Ledger(month=target, income=income, rollover=rollover, status=LedgerStatus.OPEN)
        s.add_ledger(ledger)

        batch = build_recurring_transactions(
            s.recurring_templates.values(), target, now, new_id, recurring_suffix
        )
        s.append_transactions(batch)
        return ledger

    return state.with_transaction(_apply)
