"""User endpoints: registration, login, profiles and avatars."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.exceptions import (
    EmailAlreadyExistsException,
    InvalidCredentialsException,
    UnprocessableException,
    UserNotFoundException,
)
from app.core.security import create_user_token, verify_password
from app.crud import crud_user
from app.models.user import User
from app.schemas.auth import TokenPayload
from app.schemas.user import (
    MIN_PASSWORD_LENGTH,
    LoginResponse,
    MessageResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from app.services.storage import replace_image

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
def register(
    user_in: UserRegister,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Register a new user.

    Args:
        user_in: name, email, password and confirmPassword
        db: Database session

    Returns:
        MessageResponse: Confirmation naming the registered email

    Raises:
        HTTPException: 422 on missing fields, taken email, short or mismatched password
    """
    if not all(v and v.strip() for v in (user_in.name, user_in.email, user_in.password, user_in.confirm_password)):
        raise UnprocessableException("Fill in all the fields")

    if crud_user.get_by_email(db, user_in.email):
        raise EmailAlreadyExistsException()

    if len(user_in.password.strip()) < MIN_PASSWORD_LENGTH:
        raise UnprocessableException(f"Password should be at least {MIN_PASSWORD_LENGTH} characters.")

    if user_in.password != user_in.confirm_password:
        raise UnprocessableException("Passwords do not match")

    user = crud_user.create_user(
        db, name=user_in.name, email=user_in.email, password=user_in.password
    )
    logger.info(f"Registered user id={user.id}")
    return MessageResponse(message=f"new user {user.email} registered")


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login user",
)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
) -> LoginResponse:
    """
    Login with email and password.

    Returns the user's id and name with a bearer token carrying the same claim.
    """
    if not credentials.email or not credentials.password:
        raise UnprocessableException("Please fill in all the fields")

    user = crud_user.authenticate(db, email=credentials.email, password=credentials.password)
    if not user:
        raise InvalidCredentialsException()

    return LoginResponse(id=user.id, name=user.name, token=create_user_token(user.id, user.name))


@router.get(
    "/authors",
    response_model=List[UserResponse],
    status_code=status.HTTP_200_OK,
    summary="List all authors",
)
def get_authors(db: Session = Depends(get_db)) -> List[User]:
    """Get every registered user (password hashes are never serialized)."""
    return crud_user.get_authors(db)


@router.post(
    "/change-avatar",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Change avatar",
)
def change_avatar(
    avatar: Optional[UploadFile] = File(None),
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Replace the current user's avatar.

    The old avatar asset is deleted before the new one is stored.

    - **avatar**: PNG/JPG/JPEG image, at most 500KB
    """
    user = crud_user.get(db, current_user.id)
    if not user:
        raise UserNotFoundException()

    avatar_url = replace_image(avatar, "avatar", user.avatar)
    return crud_user.update_avatar(db, user=user, avatar_url=avatar_url)


@router.patch(
    "/edit-user",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit user details",
)
def edit_user(
    user_update: UserUpdate,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Update name, email and/or password of the current user.

    The password only changes when currentPassword, newPassword and
    confirmNewPassword are all given and the two new values match.
    """
    user = crud_user.get(db, current_user.id)
    if not user:
        raise UserNotFoundException()

    update_fields = {}
    new_password = None

    if user_update.email and user_update.email != user.email:
        if crud_user.get_by_email(db, user_update.email):
            raise EmailAlreadyExistsException()
        update_fields["email"] = user_update.email

    if (
        user_update.current_password
        and user_update.new_password
        and user_update.new_password == user_update.confirm_new_password
    ):
        if not verify_password(user_update.current_password, user.password_hash):
            raise UnprocessableException("Invalid current password")
        if len(user_update.new_password.strip()) < MIN_PASSWORD_LENGTH:
            raise UnprocessableException(f"Password should be at least {MIN_PASSWORD_LENGTH} characters.")
        new_password = user_update.new_password

    if user_update.name and user_update.name.strip():
        update_fields["name"] = user_update.name.strip()

    # Everything is validated by now
    if update_fields:
        user = crud_user.update(db, db_obj=user, obj_in=update_fields)
    if new_password:
        user = crud_user.update_password(db, user=user, new_password=new_password)
    return user


@router.api_route(
    "/{user_id}",
    methods=["GET", "POST"],
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get user profile",
)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
) -> User:
    """Get one user's public profile."""
    user = crud_user.get(db, user_id)
    if not user:
        raise UserNotFoundException()
    return user


__all__ = ["router"]
