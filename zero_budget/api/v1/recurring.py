"""/v1/recurring-expenses - Templates replayed into each newly opened month"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from zero_budget.api.v1.schemas import RecurringExpenseRequest, RecurringExpenseResponse
from zero_budget.api.dependencies import get_budget_service, get_request_id
from zero_budget.domain.exceptions import InvalidInput, UnknownCategory
from zero_budget.service import BudgetService

router = APIRouter()


@router.post("/recurring-expenses", response_model=RecurringExpenseResponse, status_code=201)
def create_recurring_expense(
    request_body: RecurringExpenseRequest,
    request: Request,
    service: BudgetService = Depends(get_budget_service),
):
    """
    Register a fixed monthly expense.

    Existing months are untouched; the template applies from the next month opened.
    """
    request_id = get_request_id(request)
    try:
        template = service.create_recurring_template(
            request_body.name, request_body.amount, request_body.category_id
        )
    except UnknownCategory as e:
        logging.warning(f"Unknown category: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInput as e:
        logging.warning(f"Invalid recurring expense: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return RecurringExpenseResponse.from_domain(template)


@router.get("/recurring-expenses", response_model=List[RecurringExpenseResponse])
def list_recurring_expenses(service: BudgetService = Depends(get_budget_service)):
    return [RecurringExpenseResponse.from_domain(t) for t in service.list_recurring_templates()]
