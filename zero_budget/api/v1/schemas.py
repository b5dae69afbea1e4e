"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from zero_budget.domain.models import (
    Category,
    CategorySummary,
    Ledger,
    MonthStatus,
    MonthSummary,
    RecurringTemplate,
    Transaction,
)

# Up to 15 integer digits and 6 decimal places
AMOUNT_DIGITS = 21
AMOUNT_PLACES = 6


class CategoryRequest(BaseModel):
    """Request body for POST /v1/categories"""

    name: str = Field(..., min_length=1, description="Category name")
    limit: Decimal = Field(
        ...,
        ge=0,
        max_digits=AMOUNT_DIGITS,
        decimal_places=AMOUNT_PLACES,
        description="Monthly spending limit",
    )


class CategoryResponse(BaseModel):
    id: str
    name: str
    limit: Decimal

    @classmethod
    def from_domain(cls, category: Category) -> "CategoryResponse":
        return cls(id=category.id, name=category.name, limit=category.limit)


class RecurringExpenseRequest(BaseModel):
    """Request body for POST /v1/recurring-expenses"""

    name: str = Field(..., min_length=1, description="Template name, e.g. Rent")
    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=AMOUNT_DIGITS,
        decimal_places=AMOUNT_PLACES,
        description="Fixed monthly amount",
    )
    category_id: str = Field(..., min_length=1, description="Category charged each month")


class RecurringExpenseResponse(BaseModel):
    id: str
    name: str
    amount: Decimal
    category_id: str

    @classmethod
    def from_domain(cls, template: RecurringTemplate) -> "RecurringExpenseResponse":
        return cls(id=template.id, name=template.name, amount=template.amount, category_id=template.category_id)


class LedgerResponse(BaseModel):
    month: str
    income: Decimal
    rollover: Decimal
    status: str
    total_available: Decimal

    @classmethod
    def from_domain(cls, ledger: Ledger) -> "LedgerResponse":
        return cls(
            month=str(ledger.month),
            income=ledger.income,
            rollover=ledger.rollover,
            status=ledger.status.value,
            total_available=ledger.total_available,
        )


class MonthStatusResponse(BaseModel):
    """Response for GET /v1/months/{month}: what a setup screen needs"""

    month: str
    is_open: bool
    ledger: Optional[LedgerResponse] = None
    projected_rollover: Decimal
    recurring_count: int

    @classmethod
    def from_domain(cls, status: MonthStatus) -> "MonthStatusResponse":
        return cls(
            month=str(status.month),
            is_open=status.is_open,
            ledger=LedgerResponse.from_domain(status.ledger) if status.ledger is not None else None,
            projected_rollover=status.projected_rollover,
            recurring_count=status.recurring_count,
        )


class RolloverResponse(BaseModel):
    month: str
    rollover: Decimal


class OpenMonthRequest(BaseModel):
    """Request body for POST /v1/months/{month}/open"""

    income: Decimal = Field(
        ...,
        ge=0,
        max_digits=AMOUNT_DIGITS,
        decimal_places=AMOUNT_PLACES,
        description="Income committed for the month",
    )
    rollover: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=AMOUNT_DIGITS,
        decimal_places=AMOUNT_PLACES,
        description="Carry-forward; omitted means use the preview",
    )


class TransactionRequest(BaseModel):
    """Request body for POST /v1/months/{month}/transactions"""

    category_id: str = Field(..., min_length=1)
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=AMOUNT_DIGITS,
        decimal_places=AMOUNT_PLACES,
        description="Amount spent",
    )
    description: str = ""


class TransactionResponse(BaseModel):
    id: str
    month: str
    category_id: str
    amount: Decimal
    description: str
    timestamp: datetime
    is_automated: bool

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,
            month=str(transaction.month),
            category_id=transaction.category_id,
            amount=transaction.amount,
            description=transaction.description,
            timestamp=transaction.timestamp,
            is_automated=transaction.is_automated,
        )


class TransactionListResponse(BaseModel):
    month: str
    transactions: List[TransactionResponse]


class CategorySummarySchema(BaseModel):
    """Spend against a single category within the month"""

    name: str
    spent: Decimal
    limit: Decimal
    utilization: Decimal
    is_over: bool

    @classmethod
    def from_domain(cls, summary: CategorySummary) -> "CategorySummarySchema":
        return cls(
            name=summary.name,
            spent=summary.spent,
            limit=summary.limit,
            utilization=summary.utilization,
            is_over=summary.is_over,
        )


class SummaryResponse(BaseModel):
    """Response for GET /v1/months/{month}/summary"""

    month: str
    is_open: bool
    total_available: Decimal
    total_spent: Decimal
    remaining_balance: Decimal
    per_category: Dict[str, CategorySummarySchema]

    @classmethod
    def from_domain(cls, summary: MonthSummary) -> "SummaryResponse":
        return cls(
            month=str(summary.month),
            is_open=summary.is_open,
            total_available=summary.total_available,
            total_spent=summary.total_spent,
            remaining_balance=summary.remaining_balance,
            per_category={
                category_id: CategorySummarySchema.from_domain(item)
                for category_id, item in summary.per_category.items()
            },
        )
