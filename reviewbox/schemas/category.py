"""
Pydantic schemas for Category endpoints
"""

from pydantic import BaseModel


class CategoryResponse(BaseModel):
    id: str
    name: str
    icon: str | None = None
    order_index: int

    model_config = {"from_attributes": True}


class CategoryListResponse(BaseModel):
    success: bool = True
    categories: list[CategoryResponse]
