# app/routers/category.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from app.schemas.common import MessageResponse
from app.services.category import CategoryService

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={404: {"description": "Not found"}},
)


# ==================== Public ====================


@router.get("", response_model=CategoryListResponse)
def list_categories(db: Session = Depends(get_db)):
    """
    Get all categories ordered by name.
    Available to everyone.
    """
    return {"categories": CategoryService(db).get_categories()}


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return CategoryService(db).get_category(category_id)


# ==================== Admin ====================


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Add a category with a unique name.
    Admin only.
    """
    return CategoryService(db).create_category(category_in)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category_in: CategoryUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Rename or recolor a category.
    Admin only; the new name must stay unique.
    """
    return CategoryService(db).update_category(category_id, category_in)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Remove an empty category.
    Refused with 409 while posts still belong to it.
    """
    CategoryService(db).delete_category(category_id)
    return {"message": "Category deleted"}
