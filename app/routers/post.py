# app/routers/post.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_current_user, get_optional_user
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate
from app.services.post import PostService

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=PostListResponse)
def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    category: Optional[int] = Query(None, description="Filter by category id"),
    search: Optional[str] = Query(None, description="Search title, content and summary"),
    db: Session = Depends(get_db),
):
    """Published posts, pinned first then newest"""
    posts, pagination = PostService(db).list_published(page, limit, category, search)
    return {"posts": posts, "pagination": pagination}


@router.get("/admin/my-posts", response_model=PostListResponse)
def my_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The caller's own posts, drafts included"""
    posts, pagination = PostService(db).list_for_author(current_user, page, limit)
    return {"posts": posts, "pagination": pagination}


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Get a post by ID.
    Drafts are only visible to their author and to admins.
    """
    return PostService(db).view_post(post_id, current_user)


@router.post("", response_model=PostResponse, status_code=201)
def create_post(
    post_in: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return PostService(db).create_post(post_in, current_user)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    post_in: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update a post.
    Only the author or an admin can edit; omitted fields are kept.
    """
    return PostService(db).update_post(post_id, post_in, current_user)


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    PostService(db).delete_post(post_id, current_user)
    return {"message": "Post deleted"}
