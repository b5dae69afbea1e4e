"""/v1/months/{month} - Opening months, recording spend and reading summaries"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from zero_budget.api.v1.schemas import (
    LedgerResponse,
    MonthStatusResponse,
    OpenMonthRequest,
    RolloverResponse,
    SummaryResponse,
    TransactionListResponse,
    TransactionRequest,
    TransactionResponse,
)
from zero_budget.api.dependencies import get_budget_service, get_request_id
from zero_budget.domain.exceptions import InvalidDate, InvalidInput, MonthAlreadyOpen, MonthNotOpen, UnknownCategory
from zero_budget.domain.months import MonthKey
from zero_budget.service import BudgetService

router = APIRouter()


def parse_month(month: str) -> MonthKey:
    """Path parameter in YYYY-MM form"""
    try:
        return MonthKey.parse(month)
    except InvalidDate as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/months/{month}", response_model=MonthStatusResponse)
def get_month_status(month: str, service: BudgetService = Depends(get_budget_service)):
    """
    Whether the month is open, plus what opening it would involve.

    Returns:
        The ledger when open; otherwise the projected rollover and how many
        recurring expenses will be created
    """
    key = parse_month(month)
    return MonthStatusResponse.from_domain(service.month_status(key))


@router.get("/months/{month}/rollover", response_model=RolloverResponse)
def preview_rollover(month: str, service: BudgetService = Depends(get_budget_service)):
    key = parse_month(month)
    return RolloverResponse(month=str(key), rollover=service.preview_rollover(key))


@router.post("/months/{month}/open", response_model=LedgerResponse, status_code=201)
def open_month(
    month: str,
    request_body: OpenMonthRequest,
    request: Request,
    service: BudgetService = Depends(get_budget_service),
):
    """
    Open a month for budgeting.

    Flow:
    1. Commit income and rollover (rollover defaults to the preview)
    2. Create one automated transaction per recurring expense
    """
    key = parse_month(month)
    request_id = get_request_id(request)

    try:
        ledger = service.open_month(key, request_body.income, request_body.rollover)
    except MonthAlreadyOpen as e:
        logging.warning(f"Month already open: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidInput as e:
        logging.warning(f"Invalid month opening: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return LedgerResponse.from_domain(ledger)


@router.post("/months/{month}/transactions", response_model=TransactionResponse, status_code=201)
def record_transaction(
    month: str,
    request_body: TransactionRequest,
    request: Request,
    service: BudgetService = Depends(get_budget_service),
):
    """Record an expense against an open month."""
    key = parse_month(month)
    request_id = get_request_id(request)

    try:
        transaction = service.record_transaction(
            key, request_body.category_id, request_body.amount, request_body.description
        )
    except UnknownCategory as e:
        logging.warning(f"Unknown category: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))
    except MonthNotOpen as e:
        logging.warning(f"Month not open: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidInput as e:
        logging.warning(f"Invalid transaction: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return TransactionResponse.from_domain(transaction)


@router.get("/months/{month}/transactions", response_model=TransactionListResponse)
def list_transactions(month: str, service: BudgetService = Depends(get_budget_service)):
    key = parse_month(month)
    return TransactionListResponse(
        month=str(key),
        transactions=[TransactionResponse.from_domain(t) for t in service.list_transactions(key)],
    )


@router.get("/months/{month}/summary", response_model=SummaryResponse)
def get_summary(month: str, service: BudgetService = Depends(get_budget_service)):
    """
    Totals and per-category spend for the month.

    remaining_balance goes negative on overspend; utilization is capped at 100.
    """
    key = parse_month(month)
    return SummaryResponse.from_domain(service.get_summary(key))
