"""/v1/categories - Spending categories and their monthly limits"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from zero_budget.api.v1.schemas import CategoryRequest, CategoryResponse
from zero_budget.api.dependencies import get_budget_service, get_request_id
from zero_budget.domain.exceptions import InvalidInput
from zero_budget.service import BudgetService

router = APIRouter()


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(
    request_body: CategoryRequest,
    request: Request,
    service: BudgetService = Depends(get_budget_service),
):
    """Register a category with a monthly spending limit."""
    try:
        category = service.create_category(request_body.name, request_body.limit)
    except InvalidInput as e:
        logging.warning(f"Invalid category: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return CategoryResponse.from_domain(category)


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(service: BudgetService = Depends(get_budget_service)):
    """All categories in registration order."""
    return [CategoryResponse.from_domain(c) for c in service.list_categories()]
