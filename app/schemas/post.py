"""Pydantic schemas for Post and Comment."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class PostResponse(BaseModel):
    """Schema for Post response."""
    id: int
    title: str
    description: str
    thumbnail: str
    category: str
    creator: int = Field(..., description="ID of the user who created the post")
    comments: List[int] = Field(default_factory=list, description="IDs of the post's comments")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentCreate(BaseModel):
    """Schema for creating a comment."""
    text: Optional[str] = Field(None, description="Comment content")


class CommentResponse(BaseModel):
    """Schema for Comment response."""
    id: int
    post_id: Optional[int] = None
    comment: str
    creator: int
    creator_name: Optional[str] = None  # Will be populated from user relationship
    creator_avatar: Optional[str] = None  # Will be populated from user relationship
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
