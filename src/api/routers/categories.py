"""
Category endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src import repository
from src.api.dependencies import get_session
from src.mappers import category_to_dto, item_to_dto
from src.schemas import CategoryDTO, ItemDTO

router = APIRouter(prefix="/categories")


@router.get("", response_model=list[CategoryDTO])
async def list_categories(
    session: AsyncSession = Depends(get_session),
) -> list[CategoryDTO]:
    """All categories, sorted by name. Not paginated."""
    categories = await repository.list_categories(session)
    return [category_to_dto(c) for c in categories]


@router.get("/{category_id}", response_model=CategoryDTO)
async def get_category(
    category_id: int,
    session: AsyncSession = Depends(get_session),
) -> CategoryDTO:
    category = await repository.get_category(session, category_id)
    return category_to_dto(category)


@router.get("/{category_id}/items", response_model=list[ItemDTO])
async def list_category_items(
    category_id: int,
    session: AsyncSession = Depends(get_session),
) -> list[ItemDTO]:
    """Items of a category by name; 404 if the category does not exist."""
    category = await repository.get_category(session, category_id)
    items = await repository.find_items_by_category(session, category.id)
    return [item_to_dto(item) for item in items]
