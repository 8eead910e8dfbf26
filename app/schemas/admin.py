# app/schemas/admin.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.comment import PostBrief
from app.schemas.user import AuthorResponse


class StatsTotals(BaseModel):
    posts: int
    published_posts: int
    users: int
    comments: int
    pending_comments: int
    categories: int


class RecentPost(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    is_published: bool
    view_count: int
    comment_count: int
    author: Optional[AuthorResponse] = None
    created_at: datetime


class RecentComment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    author_name: str
    is_approved: bool
    created_at: datetime
    post: Optional[PostBrief] = None


class DashboardStatsResponse(BaseModel):
    totals: StatsTotals
    recent_posts: List[RecentPost]
    recent_comments: List[RecentComment]
