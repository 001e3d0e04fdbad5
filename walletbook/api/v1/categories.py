"""
Category API endpoints
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from walletbook.api.deps import get_store
from walletbook.application.categories import CreateCategoryUseCase, list_categories as list_categories_query
from walletbook.infrastructure.store import FinanceStore


router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


class CreateCategoryRequest(BaseModel):
    name: str
    type: str  # income/expense


class CategoryResponse(BaseModel):
    id: int
    name: str
    type: str


@router.get("/", response_model=list[CategoryResponse])
def list_categories(type: str | None = None, store: FinanceStore = Depends(get_store)):
    """Categories, optionally only one type (add-transaction form)"""
    return [
        CategoryResponse(id=c.id, name=c.name, type=c.type)
        for c in list_categories_query(store, type)
    ]


@router.post("/", response_model=CategoryResponse, status_code=201)
def create_category(req: CreateCategoryRequest, store: FinanceStore = Depends(get_store)):
    category = CreateCategoryUseCase(store).execute(req.name, req.type)
    return CategoryResponse(id=category.id, name=category.name, type=category.type)
