from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
from ..database import Base


class User(Base):
    __tablename__ = "users"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Authentication & Contact
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    avatar = Column(String(500), nullable=True)
    posts = Column(Integer, nullable=False, default=0)  # Denormalized post count

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Relationships
    authored_posts = relationship("Post", back_populates="creator")
    comments = relationship("Comment", back_populates="creator")

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value
