# app/models/relations.py

from sqlalchemy.orm import relationship

from .category import Category
from .comment import Comment
from .post import Post
from .user import User


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # 1. User to Posts (One-to-Many)
    User.posts = relationship(
        "Post",
        back_populates="author",
        order_by="Post.created_at.desc()",
    )
    Post.author = relationship("User", back_populates="posts")

    # 2. Category to Posts (One-to-Many)
    Category.posts = relationship("Post", back_populates="category")
    Post.category = relationship("Category", back_populates="posts")

    # 3. Post to Comments (One-to-Many); comments go with their post
    Post.comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
    Comment.post = relationship("Post", back_populates="comments")

    # 4. Moderator of a comment
    Comment.moderator = relationship("User", foreign_keys=[Comment.moderated_by])
