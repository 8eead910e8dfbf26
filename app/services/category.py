# app/services/category.py
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.decorator import db_exception
from app.core.exceptions import Conflict, NotFound
from app.models.category import Category
from app.models.post import Post
from app.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.db = db

    def _name_taken(self, name: str, exclude_id: int = None) -> bool:
        query = self.db.query(Category).filter(
            func.lower(Category.name) == name.strip().lower()
        )
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None

    @db_exception
    def create_category(self, category_in: CategoryCreate) -> Category:
        """Create a new category (admin only)"""
        if self._name_taken(category_in.name):
            raise Conflict("Category with this name already exists")

        category = Category(**category_in.model_dump())
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)

        logger.info(f"Category created: {category.id} ({category.name})")
        return category

    def get_categories(self) -> List[Category]:
        """All categories ordered by name"""
        return self.db.query(Category).order_by(Category.name.asc()).all()

    def get_category(self, category_id: int) -> Category:
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise NotFound("Category not found")
        return category

    @db_exception
    def update_category(self, category_id: int, category_in: CategoryUpdate) -> Category:
        """Update a category (admin only)"""
        category = self.get_category(category_id)

        if category_in.name and category_in.name != category.name:
            if self._name_taken(category_in.name, exclude_id=category_id):
                raise Conflict("Category with this name already exists")

        for field, value in category_in.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(category, field, value)

        self.db.commit()
        self.db.refresh(category)

        return category

    @db_exception
    def delete_category(self, category_id: int) -> None:
        """Delete a category (admin only); refused while posts still use it"""
        category = self.get_category(category_id)

        in_use = (
            self.db.query(func.count(Post.id))
            .filter(Post.category_id == category_id)
            .scalar()
        )
        if in_use:
            raise Conflict(
                f"This category still has {in_use} posts and cannot be deleted"
            )

        self.db.delete(category)
        self.db.commit()
        logger.info(f"Category deleted: {category_id}")

    def adjust_post_count(self, category_id: int, delta: int) -> None:
        """Shift the denormalized counter; the caller commits."""
        self.db.query(Category).filter(Category.id == category_id).update(
            {Category.post_count: Category.post_count + delta},
            synchronize_session=False,
        )
