# app/services/admin.py
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.category import Category
from app.models.comment import Comment
from app.models.post import Post
from app.models.user import User
from app.schemas.admin import (
    DashboardStatsResponse,
    RecentComment,
    RecentPost,
    StatsTotals,
)

RECENT_LIMIT = 5


class AdminService:
    """Read-only figures for the admin dashboard"""

    def __init__(self, db: Session):
        self.db = db

    def _count(self, column, *criteria) -> int:
        return self.db.query(func.count(column)).filter(*criteria).scalar() or 0

    def dashboard_stats(self) -> DashboardStatsResponse:
        totals = {
            "posts": self._count(Post.id),
            "published_posts": self._count(Post.id, Post.is_published.is_(True)),
            "users": self._count(User.id),
            "comments": self._count(Comment.id),
            "pending_comments": self._count(Comment.id, Comment.is_approved.is_(False)),
            "categories": self._count(Category.id),
        }

        recent_posts = (
            self.db.query(Post)
            .options(joinedload(Post.author))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(RECENT_LIMIT)
            .all()
        )
        recent_comments = (
            self.db.query(Comment)
            .options(joinedload(Comment.post))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(RECENT_LIMIT)
            .all()
        )

        return DashboardStatsResponse(
            totals=StatsTotals(**totals),
            recent_posts=[RecentPost.model_validate(p) for p in recent_posts],
            recent_comments=[
                RecentComment.model_validate(c) for c in recent_comments
            ],
        )
