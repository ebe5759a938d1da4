"""Post model for blog articles."""

from enum import Enum
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
from ..database import Base


class PostCategory(str, Enum):
    """Blog post categories."""
    AGRICULTURE = "Agriculture"
    BUSINESS = "Business"
    EDUCATION = "Education"
    ENTERTAINMENT = "Entertainment"
    ART = "Art"
    INVESTMENT = "Investment"
    UNCATEGORIZED = "Uncategorized"
    WEATHER = "Weather"


POST_CATEGORIES = [category.value for category in PostCategory]


class Post(Base):
    """Model for blog articles."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    creator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Post Content
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)  # Rich text (HTML)
    thumbnail = Column(String(500), nullable=False)
    category = Column(
        SQLEnum(
            PostCategory,
            name="post_category",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=PostCategory.UNCATEGORIZED,
        index=True
    )

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now(), index=True)

    # Constraints & Indexes
    __table_args__ = (
        Index('idx_post_creator_updated', 'creator_id', 'updated_at'),
        Index('idx_post_category_updated', 'category', 'updated_at'),
    )

    # Relationships
    creator = relationship("User", back_populates="authored_posts")
    # No delete cascade: removing a post orphans its comments (post_id -> NULL)
    comments = relationship(
        "Comment",
        back_populates="post",
        order_by="Comment.id.asc()"
    )

    @validates("category")
    def validate_category(self, key, value):
        if isinstance(value, PostCategory):
            return value
        try:
            return PostCategory(value)
        except ValueError:
            raise ValueError(
                f"Invalid category '{value}'. Must be one of: {', '.join(POST_CATEGORIES)}"
            )

    @validates("creator_id")
    def validate_creator(self, key, value):
        if self.creator_id is not None and value != self.creator_id:
            raise ValueError("Post creator cannot be changed")
        return value

    @property
    def comment_ids(self):
        return [comment.id for comment in self.comments]
