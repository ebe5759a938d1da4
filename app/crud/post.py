"""CRUD operations for Post."""

from typing import Any, Dict, List, Optional
from sqlalchemy import select, desc
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.crud.user import crud_user
from app.models.post import Post, POST_CATEGORIES


class CRUDPost(CRUDBase[Post, dict, dict]):
    """CRUD operations for Post."""

    def create_post(
        self,
        db: Session,
        *,
        creator_id: int,
        title: str,
        description: str,
        category: str,
        thumbnail: str
    ) -> Post:
        """Create a new post and bump the creator's post count in the same transaction.

        Raises:
            ValueError: If category is not one of the allowed categories
        """
        try:
            post = Post(
                creator_id=creator_id,
                title=title,
                description=description,
                category=category,
                thumbnail=thumbnail,
            )
            db.add(post)
            crud_user.adjust_post_count(db, user_id=creator_id, delta=1)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(post)
        return post

    def _recent_first(self, stmt):
        return stmt.order_by(desc(Post.updated_at), desc(Post.id))

    def get_all(self, db: Session) -> List[Post]:
        """Get all posts, most recently updated first."""
        stmt = self._recent_first(select(Post))
        return list(db.scalars(stmt).all())

    def get_by_category(self, db: Session, *, category: str) -> List[Post]:
        """Get posts in a category. Unknown categories match nothing."""
        if category not in POST_CATEGORIES:
            return []
        stmt = self._recent_first(select(Post).where(Post.category == category))
        return list(db.scalars(stmt).all())

    def get_by_creator(self, db: Session, *, creator_id: int) -> List[Post]:
        """Get posts written by one user."""
        stmt = self._recent_first(select(Post).where(Post.creator_id == creator_id))
        return list(db.scalars(stmt).all())

    def update_post(self, db: Session, *, post: Post, fields: Dict[str, Any]) -> Post:
        """Apply editable fields. The creator is never part of an update.

        Raises:
            ValueError: If category is not one of the allowed categories
        """
        fields = {k: v for k, v in fields.items() if k != "creator_id"}
        return self.update(db, db_obj=post, obj_in=fields)

    def delete_post(self, db: Session, *, post: Post) -> Post:
        """Delete a post. Its comments stay in the database with post_id cleared."""
        try:
            for comment in list(post.comments):
                comment.post_id = None
                db.add(comment)
            crud_user.adjust_post_count(db, user_id=post.creator_id, delta=-1)
            db.delete(post)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return post


# Singleton instance
crud_post = CRUDPost(Post)
