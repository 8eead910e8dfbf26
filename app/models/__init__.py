"""
Models package initialization
Import all models and setup relationships
"""

from .category import Category
from .comment import Comment
from .post import Post

# Import and setup relationships
from .relations import setup_relationships
from .user import User

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Category",
    "Comment",
    "Post",
    "User",
]
