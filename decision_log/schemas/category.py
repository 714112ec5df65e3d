"""Category Schemas — request bodies for the category endpoints."""

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class CategoryRename(BaseModel):
    old_name: str = Field(min_length=1, max_length=100)
    new_name: str = Field(min_length=1, max_length=100)


class CategoryMerge(BaseModel):
    sources: list[str] = Field(min_length=1)
    target: str = Field(min_length=1, max_length=100)


class CategoryOverview(BaseModel):
    """Everything the categories screen shows in one payload."""
    categories: list[str]
    custom: list[dict]
    usage: dict[str, int]
