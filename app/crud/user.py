"""CRUD operations for `User` model."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.security import get_password_hash, verify_password
from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserRegister, UserUpdate


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class CRUDUser(CRUDBase[User, UserRegister, UserUpdate]):
    def get_by_email(self, db: Session, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        stmt = select(User).where(User.email == _normalize_email(email)).limit(1)
        return db.scalars(stmt).first()

    def get_authors(self, db: Session) -> List[User]:
        stmt = select(User).order_by(User.id.asc())
        return list(db.scalars(stmt).all())

    def create_user(self, db: Session, *, name: str, email: str, password: str) -> User:
        db_obj = User(
            name=name.strip(),
            email=_normalize_email(email),
            password_hash=get_password_hash(password),
            posts=0,
        )
        return self._save(db, db_obj)

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        """Authenticate user by email and password."""
        user = self.get_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def update_password(self, db: Session, *, user: User, new_password: str) -> User:
        user.password_hash = get_password_hash(new_password)
        return self._save(db, user)

    def update_avatar(self, db: Session, *, user: User, avatar_url: Optional[str]) -> User:
        user.avatar = avatar_url
        return self._save(db, user)

    def adjust_post_count(self, db: Session, *, user_id: int, delta: int) -> Optional[User]:
        """Shift the denormalized post counter, never below zero. Does not commit."""
        user = self.get(db, user_id)
        if not user:
            return None
        user.posts = max(0, (user.posts or 0) + delta)
        db.add(user)
        return user


# Singleton instance
crud_user = CRUDUser(User)
