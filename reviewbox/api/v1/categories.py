"""
Category reference data
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.core.database import get_db
from reviewbox.models import Categories
from reviewbox.schemas.category import CategoryListResponse, CategoryResponse

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(db: AsyncSession = Depends(get_db)) -> CategoryListResponse:
    """
    List every category in display order. No sign-in required.
    """
    result = await db.execute(
        select(Categories).order_by(Categories.order_index)  # type: ignore[arg-type]
    )
    categories = result.scalars().all()
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(category) for category in categories]
    )
