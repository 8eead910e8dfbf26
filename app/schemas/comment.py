# app/schemas/comment.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import Pagination


class CommentCreate(BaseModel):
    post_id: int
    content: str = Field(..., min_length=1, max_length=1000)
    author_name: str = Field(..., min_length=1, max_length=50)
    author_email: EmailStr
    author_website: Optional[str] = Field(None, max_length=200)
    parent_comment_id: Optional[int] = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    parent_comment_id: Optional[int] = None
    content: str
    author_name: str
    author_website: Optional[str] = None
    author_avatar: Optional[str] = None
    is_approved: bool
    created_at: datetime


class CommentNode(CommentResponse):
    replies: List["CommentNode"] = []


class CommentTreeResponse(BaseModel):
    comments: List[CommentNode]
    pagination: Pagination


class CommentSubmitResponse(BaseModel):
    message: str
    comment: CommentResponse


class PostBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str


class PendingCommentResponse(CommentResponse):
    author_email: str
    ip: Optional[str] = None
    post: Optional[PostBrief] = None


class PendingCommentListResponse(BaseModel):
    comments: List[PendingCommentResponse]
    pagination: Pagination


class CommentApproveResponse(BaseModel):
    message: str
    comment: CommentResponse
