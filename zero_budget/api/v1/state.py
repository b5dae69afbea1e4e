"""DELETE /v1/state - Wipe every category, template, ledger and transaction"""

import logging
from fastapi import APIRouter, Depends, Request

from zero_budget.api.dependencies import get_budget_service, get_request_id
from zero_budget.service import BudgetService

router = APIRouter()


@router.delete("/state", status_code=204)
def reset_state(request: Request, service: BudgetService = Depends(get_budget_service)):
    """Start over from an empty budget."""
    service.reset_all()
    logging.info("Budget state reset", extra={"request_id": get_request_id(request)})
