# app/services/post.py
import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.core.decorator import db_exception
from app.core.exceptions import Forbidden, NotFound
from app.models.category import Category
from app.models.post import Post
from app.models.user import User
from app.schemas.post import PostCreate, PostUpdate
from app.services.category import CategoryService
from app.utils.clock import utcnow
from app.utils.content import derive_summary, sync_publication

logger = logging.getLogger(__name__)


def paginate(query, page: int, limit: int) -> Tuple[list, dict]:
    """Apply offset/limit to ``query`` and return items plus pagination info"""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit > 0 else 0,
    }
    return items, pagination


class PostService:
    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryService(db)

    def _base_query(self):
        return self.db.query(Post).options(
            joinedload(Post.author), joinedload(Post.category)
        )

    @staticmethod
    def can_manage(post: Post, user: Optional[User]) -> bool:
        return bool(user and (user.is_admin or post.author_id == user.id))

    def _require_category(self, category_id: int) -> Category:
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise NotFound("Category not found")
        return category

    # ==================== Queries ====================

    def list_published(
        self,
        page: int = 1,
        limit: int = 10,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Post], dict]:
        """Published posts, pinned first then newest"""
        query = self._base_query().filter(Post.is_published.is_(True))

        if category_id:
            query = query.filter(Post.category_id == category_id)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Post.title.ilike(pattern),
                    Post.content.ilike(pattern),
                    Post.summary.ilike(pattern),
                )
            )

        query = query.order_by(
            Post.is_pinned.desc(),
            Post.sort_order.desc(),
            Post.created_at.desc(),
            Post.id.desc(),
        )
        return paginate(query, page, limit)

    def list_for_author(
        self, author: User, page: int = 1, limit: int = 10
    ) -> Tuple[List[Post], dict]:
        """Every post of ``author``, drafts included"""
        query = (
            self._base_query()
            .filter(Post.author_id == author.id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return paginate(query, page, limit)

    def get_post(self, post_id: int) -> Post:
        post = self._base_query().filter(Post.id == post_id).first()
        if not post:
            raise NotFound("Post not found")
        return post

    @db_exception
    def view_post(self, post_id: int, viewer: Optional[User] = None) -> Post:
        """
        Fetch a post for display and count the view.

        Drafts are reported as missing unless ``viewer`` is the author or an
        admin.
        """
        post = self.get_post(post_id)
        if not post.is_published and not self.can_manage(post, viewer):
            raise NotFound("Post not found")

        self.db.query(Post).filter(Post.id == post_id).update(
            {Post.view_count: Post.view_count + 1}, synchronize_session=False
        )
        self.db.commit()
        self.db.refresh(post)
        return post

    # ==================== Commands ====================

    @db_exception
    def create_post(self, post_in: PostCreate, author: User) -> Post:
        self._require_category(post_in.category_id)

        data = post_in.model_dump()
        post = Post(**data, author_id=author.id)
        post.summary = derive_summary(post.content, post.summary)
        sync_publication(post, utcnow())

        self.db.add(post)
        self.db.flush()
        self.categories.adjust_post_count(post.category_id, 1)
        self.db.commit()
        self.db.refresh(post)

        logger.info(f"Post created: {post.id} by account {author.id}")
        return post

    @db_exception
    def update_post(self, post_id: int, post_in: PostUpdate, user: User) -> Post:
        post = self.get_post(post_id)
        if not self.can_manage(post, user):
            raise Forbidden("You do not have permission to edit this post")

        changes = {
            field: value
            for field, value in post_in.model_dump(exclude_unset=True).items()
            if value is not None
        }

        old_category_id = post.category_id
        new_category_id = changes.get("category_id", old_category_id)
        if new_category_id != old_category_id:
            self._require_category(new_category_id)

        for field, value in changes.items():
            setattr(post, field, value)

        post.summary = derive_summary(post.content, post.summary)
        sync_publication(post, utcnow())

        if new_category_id != old_category_id:
            self.categories.adjust_post_count(old_category_id, -1)
            self.categories.adjust_post_count(new_category_id, 1)

        self.db.commit()
        self.db.refresh(post)
        return post

    @db_exception
    def delete_post(self, post_id: int, user: User) -> None:
        post = self.get_post(post_id)
        if not self.can_manage(post, user):
            raise Forbidden("You do not have permission to delete this post")

        category_id = post.category_id
        # comments go with the post through the relationship cascade
        self.db.delete(post)
        self.categories.adjust_post_count(category_id, -1)
        self.db.commit()
        logger.info(f"Post deleted: {post_id} by account {user.id}")
