# app/models/comment.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)

from app.core.database import Base
from app.utils.clock import utcnow


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    # Plain id edge; replies may outlive their parent
    parent_comment_id = Column(Integer, nullable=True, index=True)

    # Content
    content = Column(String(1000), nullable=False)

    # Author (comments are anonymous)
    author_name = Column(String(50), nullable=False)
    author_email = Column(String(100), nullable=False)
    author_website = Column(String(200), nullable=True)
    author_avatar = Column(Text, nullable=True)

    # Moderation
    is_approved = Column(Boolean, default=False, nullable=False, index=True)
    is_spam = Column(Boolean, default=False, nullable=False)
    spam_score = Column(Float, default=0, nullable=False)
    moderated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    moderated_at = Column(DateTime, nullable=True)

    # Request metadata
    ip = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Comment(id={self.id}, post_id={self.post_id}, parent={self.parent_comment_id})>"
