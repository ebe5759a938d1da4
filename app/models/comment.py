"""Comment model for post comments."""

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Comment(Base):
    """Model for comments left on a post."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    creator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Comment Content
    comment = Column(Text, nullable=False)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Constraints & Indexes
    __table_args__ = (
        Index('idx_comment_post', 'post_id', 'created_at'),
        Index('idx_comment_creator', 'creator_id', 'created_at'),
    )

    # Relationships
    post = relationship("Post", back_populates="comments")
    creator = relationship("User", back_populates="comments")
