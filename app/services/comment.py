# app/services/comment.py
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from app.core.decorator import db_exception
from app.core.exceptions import NotFound
from app.models.comment import Comment
from app.models.post import Post
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentResponse
from app.services.post import paginate
from app.utils.clock import utcnow
from app.utils.comment_tree import build_comment_tree
from app.utils.content import gravatar_url

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, db: Session):
        self.db = db

    def _get_post(self, post_id: int) -> Post:
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise NotFound("Post not found")
        return post

    def _get_comment(self, comment_id: int) -> Comment:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFound("Comment not found")
        return comment

    def _bump_comment_count(self, post_id: int, delta: int) -> None:
        self.db.query(Post).filter(Post.id == post_id).update(
            {Post.comment_count: Post.comment_count + delta},
            synchronize_session=False,
        )

    @db_exception
    def submit(
        self,
        comment_in: CommentCreate,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Comment:
        """
        Store a new comment awaiting moderation.

        The post must exist; a reply's parent must exist on the same post.
        The post's comment counter is raised right away, before approval.
        """
        self._get_post(comment_in.post_id)

        if comment_in.parent_comment_id is not None:
            parent = (
                self.db.query(Comment)
                .filter(
                    Comment.id == comment_in.parent_comment_id,
                    Comment.post_id == comment_in.post_id,
                )
                .first()
            )
            if not parent:
                raise NotFound("Parent comment not found")

        comment = Comment(
            post_id=comment_in.post_id,
            parent_comment_id=comment_in.parent_comment_id,
            content=comment_in.content,
            author_name=comment_in.author_name,
            author_email=comment_in.author_email,
            author_website=comment_in.author_website,
            author_avatar=gravatar_url(comment_in.author_email),
            is_approved=False,
            ip=ip,
            user_agent=(user_agent or "")[:500] or None,
        )
        self.db.add(comment)
        self._bump_comment_count(comment.post_id, 1)
        self.db.commit()
        self.db.refresh(comment)

        logger.info(f"Comment {comment.id} submitted on post {comment.post_id}")
        return comment

    def list_for_post(
        self, post_id: int, page: int = 1, limit: int = 20
    ) -> Tuple[List[Dict[str, Any]], dict]:
        """Approved comments of a post, newest first, nested into a reply tree.

        The page is cut from the flat list before nesting, so a reply whose
        parent falls on another page is left out.
        """
        self._get_post(post_id)

        query = (
            self.db.query(Comment)
            .filter(Comment.post_id == post_id, Comment.is_approved.is_(True))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        comments, pagination = paginate(query, page, limit)

        rows = [CommentResponse.model_validate(c).model_dump() for c in comments]
        return build_comment_tree(rows), pagination

    def list_pending(self, page: int = 1, limit: int = 20) -> Tuple[List[Comment], dict]:
        query = (
            self.db.query(Comment)
            .options(joinedload(Comment.post))
            .filter(Comment.is_approved.is_(False))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return paginate(query, page, limit)

    @db_exception
    def approve(self, comment_id: int, moderator: User) -> Comment:
        comment = self._get_comment(comment_id)
        if comment.is_approved:
            return comment

        comment.is_approved = True
        comment.moderated_by = moderator.id
        comment.moderated_at = utcnow()
        self.db.commit()
        self.db.refresh(comment)

        logger.info(f"Comment {comment_id} approved by account {moderator.id}")
        return comment

    @db_exception
    def delete(self, comment_id: int) -> int:
        """
        Delete a comment together with its direct replies.

        Deeper replies are left in place. Returns the number of rows removed.
        """
        comment = self._get_comment(comment_id)
        post_id = comment.post_id

        removed_replies = (
            self.db.query(Comment)
            .filter(Comment.parent_comment_id == comment_id)
            .delete(synchronize_session=False)
        )
        self.db.delete(comment)
        removed = removed_replies + 1
        self._bump_comment_count(post_id, -removed)
        self.db.commit()

        logger.info(
            f"Comment {comment_id} deleted with {removed_replies} direct replies"
        )
        return removed
