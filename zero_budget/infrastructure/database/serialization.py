"""Conversion between BudgetState and the persisted four-field document"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from zero_budget.domain.exceptions import InvalidDate
from zero_budget.domain.models import (
    Category,
    Ledger,
    LedgerStatus,
    RecurringTemplate,
    Transaction,
    amount_in_range,
)
from zero_budget.domain.months import MonthKey
from zero_budget.domain.state import BudgetState

T = TypeVar("T")

CATEGORIES = "categories"
RECURRING_EXPENSES = "recurringExpenses"
MONTHLY_LEDGERS = "monthlyLedgers"
TRANSACTIONS = "transactions"


def _amount(value: Any) -> Decimal:
    """Decimal from a stored string or number; rejects bools and anything non-finite or out of range"""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not an amount: {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not an amount: {value!r}") from e
    if not amount_in_range(amount):
        raise ValueError(f"Not an amount: {value!r}")
    return amount


def _timestamp(value: Any) -> datetime:
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _first(record: Dict[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if name in record:
            return record[name]
    return default


# Encoding


def category_to_dict(category: Category) -> Dict[str, Any]:
    return {"id": category.id, "name": category.name, "limit": str(category.limit)}


def template_to_dict(template: RecurringTemplate) -> Dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "amount": str(template.amount),
        "categoryId": template.category_id,
    }


def ledger_to_dict(ledger: Ledger) -> Dict[str, Any]:
    return {
        "income": str(ledger.income),
        "rollover": str(ledger.rollover),
        "status": ledger.status.value,
    }


def transaction_to_dict(transaction: Transaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "monthKey": str(transaction.month),
        "categoryId": transaction.category_id,
        "amount": str(transaction.amount),
        "description": transaction.description,
        "timestamp": transaction.timestamp.isoformat(),
        "isAutomated": transaction.is_automated,
    }


def state_to_document(state: BudgetState) -> Dict[str, Any]:
    """Serialize state into the JSON-compatible snapshot document"""
    snapshot = state.snapshot()
    return {
        CATEGORIES: [category_to_dict(c) for c in snapshot.categories],
        RECURRING_EXPENSES: [template_to_dict(r) for r in snapshot.recurring_templates],
        MONTHLY_LEDGERS: {str(ledger.month): ledger_to_dict(ledger) for ledger in snapshot.ledgers},
        TRANSACTIONS: [transaction_to_dict(t) for t in snapshot.transactions],
    }


# Decoding


def category_from_dict(record: Dict[str, Any]) -> Category:
    return Category(id=str(record["id"]), name=str(record["name"]), limit=_amount(record["limit"]))


def template_from_dict(record: Dict[str, Any]) -> RecurringTemplate:
    return RecurringTemplate(
        id=str(record["id"]),
        name=str(record["name"]),
        amount=_amount(record["amount"]),
        category_id=str(record["categoryId"]),
    )


def ledger_from_dict(month_key: str, record: Dict[str, Any]) -> Ledger:
    return Ledger(
        month=MonthKey.parse(month_key),
        income=_amount(record.get("income", 0)),
        rollover=_amount(record.get("rollover", 0)),
        status=LedgerStatus(record.get("status", LedgerStatus.OPEN.value)),
    )


def transaction_from_dict(record: Dict[str, Any]) -> Transaction:
    # "date" and "isFixed" are the names used by the first version of the document
    return Transaction(
        id=str(record["id"]),
        month=MonthKey.parse(record["monthKey"]),
        category_id=str(record["categoryId"]),
        amount=_amount(record["amount"]),
        description=str(record.get("description") or ""),
        timestamp=_timestamp(_first(record, "timestamp", "date")),
        is_automated=bool(_first(record, "isAutomated", "isFixed", default=False)),
    )


def _decode_records(field: str, records: Iterable[Any], decode: Callable[[Any], T]) -> List[T]:
    decoded = []
    for index, record in enumerate(records):
        try:
            if not isinstance(record, dict):
                raise TypeError(f"expected an object, got {type(record).__name__}")
            decoded.append(decode(record))
        except (KeyError, TypeError, ValueError, AttributeError, InvalidDate) as e:
            logging.warning(
                f"Skipping malformed {field} record: {e}",
                extra={"field": field, "index": index},
            )
    return decoded


def _list_field(document: Dict[str, Any], field: str) -> List[Any]:
    value = document.get(field)
    if not isinstance(value, list):
        if value is not None:
            logging.warning(f"Ignoring {field}: expected a list", extra={"field": field})
        return []
    return value


def state_from_document(document: Optional[Dict[str, Any]]) -> BudgetState:
    """
    Rebuild state from a stored document.

    Loading is lenient: a missing document yields empty state, a missing or
    wrongly typed field defaults to empty, and malformed records are skipped
    with a warning instead of failing the whole load.
    """
    if not isinstance(document, dict):
        return BudgetState()

    ledgers_field = document.get(MONTHLY_LEDGERS)
    if not isinstance(ledgers_field, dict):
        if ledgers_field is not None:
            logging.warning(f"Ignoring {MONTHLY_LEDGERS}: expected an object", extra={"field": MONTHLY_LEDGERS})
        ledgers_field = {}

    ledgers = _decode_records(
        MONTHLY_LEDGERS,
        [{"key": key, "value": value} for key, value in ledgers_field.items()],
        lambda item: ledger_from_dict(item["key"], item["value"]),
    )

    return BudgetState(
        categories=_decode_records(CATEGORIES, _list_field(document, CATEGORIES), category_from_dict),
        recurring_templates=_decode_records(
            RECURRING_EXPENSES, _list_field(document, RECURRING_EXPENSES), template_from_dict
        ),
        ledgers=ledgers,
        transactions=_decode_records(TRANSACTIONS, _list_field(document, TRANSACTIONS), transaction_from_dict),
    )
