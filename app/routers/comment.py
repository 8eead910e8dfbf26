# app/routers/comment.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.schemas.comment import (
    CommentApproveResponse,
    CommentCreate,
    CommentResponse,
    CommentSubmitResponse,
    CommentTreeResponse,
    PendingCommentListResponse,
)
from app.schemas.common import MessageResponse
from app.services.comment import CommentService

router = APIRouter(
    prefix="/comments",
    tags=["Comments"],
    responses={404: {"description": "Not found"}},
)


@router.get("/post/{post_id}", response_model=CommentTreeResponse)
def list_post_comments(
    post_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Approved comments of a post as a reply tree"""
    tree, pagination = CommentService(db).list_for_post(post_id, page, limit)
    return {"comments": tree, "pagination": pagination}


@router.post("", response_model=CommentSubmitResponse, status_code=201)
def submit_comment(
    comment_in: CommentCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Submit a comment or reply.
    Comments stay hidden until an admin approves them.
    """
    comment = CommentService(db).submit(
        comment_in,
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return {
        "message": "Comment submitted and awaiting moderation",
        "comment": CommentResponse.model_validate(comment),
    }


@router.get("/admin/pending", response_model=PendingCommentListResponse)
def list_pending_comments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    comments, pagination = CommentService(db).list_pending(page, limit)
    return {"comments": comments, "pagination": pagination}


@router.put("/{comment_id}/approve", response_model=CommentApproveResponse)
def approve_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    comment = CommentService(db).approve(comment_id, current_admin)
    return {
        "message": "Comment approved",
        "comment": CommentResponse.model_validate(comment),
    }


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Delete a comment and its direct replies"""
    CommentService(db).delete(comment_id)
    return {"message": "Comment deleted"}
