"""Pydantic schema for the decoded access token claim."""

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """Identity claim carried by every access token."""
    id: int
    name: str
