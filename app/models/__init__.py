"""
SQLAlchemy Models for the blog API
"""

from ..database import Base
from .user import User
from .post import Post, PostCategory, POST_CATEGORIES
from .comment import Comment

# Export all models
__all__ = [
    "Base",
    "User",
    "Post",
    "PostCategory",
    "POST_CATEGORIES",
    "Comment",
]
