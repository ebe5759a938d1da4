"""Blog post endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.exceptions import (
    NotOwnerException,
    PostNotFoundException,
    UnprocessableException,
)
from app.crud import crud_post
from app.models.post import Post, PostCategory
from app.schemas.auth import TokenPayload
from app.schemas.post import PostResponse
from app.schemas.user import MessageResponse
from app.services.storage import delete_image, prepare_image, put_image, store_image

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
)


def _post_response(post: Post) -> PostResponse:
    """Shape a post for the API, listing its comments by id."""
    category = post.category.value if isinstance(post.category, PostCategory) else post.category
    return PostResponse(
        id=post.id,
        title=post.title,
        description=post.description,
        thumbnail=post.thumbnail,
        category=category,
        creator=post.creator_id,
        comments=post.comment_ids,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _get_owned_post(db: Session, post_id: int, user_id: int) -> Post:
    post = crud_post.get(db, post_id)
    if not post:
        raise PostNotFoundException()
    if post.creator_id != user_id:
        logger.warning(f"User {user_id} tried to modify post {post_id} owned by {post.creator_id}")
        raise NotOwnerException()
    return post


@router.get(
    "",
    response_model=List[PostResponse],
    status_code=status.HTTP_200_OK,
    summary="List all posts",
)
def list_posts(db: Session = Depends(get_db)) -> List[PostResponse]:
    """Get all posts, most recently updated first."""
    return [_post_response(post) for post in crud_post.get_all(db)]


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new post",
    description="""
    Create a new blog post. Sent as multipart/form-data.

    **Categories:** Agriculture, Business, Education, Entertainment, Art,
    Investment, Uncategorized, Weather

    **Access:** Authenticated users
    """,
)
def create_post(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PostResponse:
    """Create a new post and store its thumbnail."""
    if not title or not description or not category:
        raise UnprocessableException("Please fill all the fields")

    thumbnail_url = store_image(thumbnail, "thumbnail")

    try:
        post = crud_post.create_post(
            db,
            creator_id=current_user.id,
            title=title,
            description=description,
            category=category,
            thumbnail=thumbnail_url,
        )
    except ValueError as e:
        delete_image(thumbnail_url)
        raise UnprocessableException(str(e))
    except Exception:
        delete_image(thumbnail_url)
        raise

    logger.info(f"Post {post.id} created by user {current_user.id}")
    return _post_response(post)


@router.get(
    "/categories/{category}",
    response_model=List[PostResponse],
    status_code=status.HTTP_200_OK,
    summary="List posts by category",
)
def list_category_posts(
    category: str,
    db: Session = Depends(get_db),
) -> List[PostResponse]:
    """Get posts in one category. An unknown category yields an empty list."""
    return [_post_response(post) for post in crud_post.get_by_category(db, category=category)]


@router.get(
    "/users/{user_id}",
    response_model=List[PostResponse],
    status_code=status.HTTP_200_OK,
    summary="List posts by author",
)
def list_user_posts(
    user_id: int,
    db: Session = Depends(get_db),
) -> List[PostResponse]:
    """Get posts written by one user."""
    return [_post_response(post) for post in crud_post.get_by_creator(db, creator_id=user_id)]


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post detail",
)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
) -> PostResponse:
    """Get one post."""
    post = crud_post.get(db, post_id)
    if not post:
        raise PostNotFoundException()
    return _post_response(post)


@router.patch(
    "/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit post",
    description="""
    Edit a post. Only the creator can edit their own post.
    A new thumbnail replaces the old one, which is deleted from storage.

    **Access:** Post creator only
    """,
)
def edit_post(
    post_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PostResponse:
    """Edit a post's text fields and/or thumbnail."""
    post = _get_owned_post(db, post_id, current_user.id)

    image = None
    if thumbnail is not None and thumbnail.filename:
        image = prepare_image(thumbnail, "thumbnail")

    fields = {
        name: value
        for name, value in (("title", title), ("description", description), ("category", category))
        if value
    }
    if not fields and image is None:
        return _post_response(post)

    old_thumbnail = post.thumbnail
    new_thumbnail = None
    if image is not None:
        new_thumbnail = put_image(*image, "thumbnail")
        fields["thumbnail"] = new_thumbnail

    try:
        post = crud_post.update_post(db, post=post, fields=fields)
    except ValueError as e:
        delete_image(new_thumbnail)
        raise UnprocessableException(str(e))
    except Exception:
        delete_image(new_thumbnail)
        raise

    if new_thumbnail:
        delete_image(old_thumbnail)

    return _post_response(post)


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete post",
    description="""
    Delete a post and its thumbnail. Comments on the post are kept but detached.

    **Access:** Post creator only
    """,
)
def delete_post(
    post_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a post."""
    post = _get_owned_post(db, post_id, current_user.id)

    delete_image(post.thumbnail)
    crud_post.delete_post(db, post=post)

    logger.info(f"Post {post_id} deleted by user {current_user.id}")
    return MessageResponse(message="Post deleted")


__all__ = ["router"]
