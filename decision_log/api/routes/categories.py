"""Category Routes — list, add, delete, rename and merge categories.

Invariants:
    - Deleting a category still used by decisions -> 409 (CategoryInUseError)
    - Adding/renaming onto an existing name -> 409 (CategoryConflictError)
"""

from fastapi import APIRouter, Depends, Response, status

from decision_log.api.dependencies import get_category_manager
from decision_log.schemas.category import (
    CategoryCreate, CategoryMerge, CategoryOverview, CategoryRename,
)
from decision_log.services.category_manager import CategoryManager

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=CategoryOverview)
async def list_categories(
    manager: CategoryManager = Depends(get_category_manager),
):
    custom = await manager.list_custom()
    return CategoryOverview(
        categories=await manager.known_categories(),
        custom=[c.to_dict() for c in custom],
        usage=await manager.repository.used_categories(),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_category(
    body: CategoryCreate,
    manager: CategoryManager = Depends(get_category_manager),
):
    category = await manager.add(body.name)
    return category.to_dict()


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    manager: CategoryManager = Depends(get_category_manager),
):
    await manager.delete(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/rename")
async def rename_category(
    body: CategoryRename,
    manager: CategoryManager = Depends(get_category_manager),
):
    updated = await manager.rename(body.old_name, body.new_name)
    return {"updated": updated}


@router.post("/merge")
async def merge_categories(
    body: CategoryMerge,
    manager: CategoryManager = Depends(get_category_manager),
):
    updated = await manager.merge(body.sources, body.target)
    return {"updated": updated}
