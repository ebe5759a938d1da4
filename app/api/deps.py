"""FastAPI dependency injection functions for authentication and database access."""

import logging
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import InvalidTokenException, MissingTokenException
from app.core.security import decode_token
from app.database import SessionLocal
from app.schemas.auth import TokenPayload

logger = logging.getLogger(__name__)

# Bearer token scheme. auto_error is off so a missing token gets our own 401 body.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/users/login", auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
) -> TokenPayload:
    """
    Dependency that verifies the bearer token and returns its decoded claim.

    Args:
        token: JWT token from Authorization header

    Returns:
        TokenPayload: The `{id, name}` identity claim

    Raises:
        MissingTokenException: 401 if no bearer token was sent
        InvalidTokenException: 403 if the token is invalid, expired or malformed
    """
    if not token:
        logger.warning("[AUTH] Request without bearer token")
        raise MissingTokenException()

    token_preview = token[:20] + "..." if len(token) > 20 else token

    try:
        payload = decode_token(token)
    except InvalidTokenException:
        logger.warning(f"[AUTH] Token decode failed: {token_preview}")
        raise

    try:
        claim = TokenPayload.model_validate(payload)
    except ValidationError:
        logger.warning(f"[AUTH] Token claim malformed: {token_preview}")
        raise InvalidTokenException()

    logger.debug(f"[AUTH] User authenticated: id={claim.id}")
    return claim


__all__ = [
    "oauth2_scheme",
    "get_db",
    "get_current_user",
]
