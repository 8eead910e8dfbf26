# app/schemas/post.py
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.category import CategorySummary
from app.schemas.common import Pagination
from app.schemas.user import AuthorResponse
from app.utils.content import normalize_tags


class TagsMixin(BaseModel):
    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def split_tags(cls, value: Union[str, List[str], None]):
        if value is None:
            return value
        return normalize_tags(value)

    @field_validator("tags", mode="after", check_fields=False)
    @classmethod
    def check_tag_length(cls, value: Optional[List[str]]):
        for tag in value or []:
            if len(tag) > 20:
                raise ValueError("Each tag must be at most 20 characters")
        return value


class PostCreate(TagsMixin):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    summary: Optional[str] = Field(None, max_length=500)
    cover_image: Optional[str] = None
    category_id: int
    tags: List[str] = Field(default_factory=list)
    is_published: bool = False
    is_pinned: bool = False
    sort_order: int = 0
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)


class PostUpdate(TagsMixin):
    """Partial update; absent fields keep their stored value"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    summary: Optional[str] = Field(None, max_length=500)
    cover_image: Optional[str] = None
    category_id: Optional[int] = None
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None
    is_pinned: Optional[bool] = None
    sort_order: Optional[int] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    summary: str
    cover_image: Optional[str] = None
    tags: List[str] = []
    is_published: bool
    published_at: Optional[datetime] = None
    is_pinned: bool
    sort_order: int
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    view_count: int
    comment_count: int
    like_count: int
    reading_time: int
    author: Optional[AuthorResponse] = None
    category: Optional[CategorySummary] = None
    created_at: datetime
    updated_at: datetime


class PostListItem(PostResponse):
    # list views omit the body
    content: Optional[str] = Field(None, exclude=True)


class PostListResponse(BaseModel):
    posts: List[PostListItem]
    pagination: Pagination
