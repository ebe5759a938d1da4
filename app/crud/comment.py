"""CRUD operations for Comment."""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.comment import Comment


class CRUDComment(CRUDBase[Comment, dict, dict]):
    """CRUD operations for Comment."""

    def create_comment(
        self,
        db: Session,
        *,
        post_id: int,
        creator_id: int,
        text: str
    ) -> Comment:
        """Create a new comment on a post."""
        comment = Comment(
            post_id=post_id,
            creator_id=creator_id,
            comment=text,
        )
        return self._save(db, comment)

    def get_by_post(self, db: Session, *, post_id: int) -> List[Comment]:
        """Get all comments for a post, oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return list(db.scalars(stmt).all())

    def get_for_post(self, db: Session, *, post_id: int, comment_id: int) -> Optional[Comment]:
        """Get a comment only if it belongs to the given post."""
        stmt = select(Comment).where(
            Comment.id == comment_id,
            Comment.post_id == post_id,
        )
        return db.scalars(stmt).first()


# Singleton instance
crud_comment = CRUDComment(Comment)
