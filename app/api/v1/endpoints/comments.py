"""Comment endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.exceptions import (
    CommentNotFoundException,
    NotOwnerException,
    PostNotFoundException,
    UnprocessableException,
)
from app.crud import crud_comment, crud_post
from app.models.comment import Comment
from app.schemas.auth import TokenPayload
from app.schemas.post import CommentCreate, CommentResponse
from app.schemas.user import MessageResponse

router = APIRouter(
    prefix="/comments",
    tags=["Comments"],
)


def _comment_response(comment: Comment) -> CommentResponse:
    """Enrich comment with creator info."""
    creator = comment.creator
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        comment=comment.comment,
        creator=comment.creator_id,
        creator_name=creator.name if creator else None,
        creator_avatar=creator.avatar if creator else None,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


@router.get(
    "/{post_id}",
    response_model=List[CommentResponse],
    status_code=status.HTTP_200_OK,
    summary="Get post comments",
)
def get_comments(
    post_id: int,
    db: Session = Depends(get_db),
) -> List[CommentResponse]:
    """Get all comments of a post, oldest first."""
    if not crud_post.get(db, post_id):
        raise PostNotFoundException()

    return [_comment_response(c) for c in crud_comment.get_by_post(db, post_id=post_id)]


@router.post(
    "/{post_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
def create_comment(
    post_id: int,
    comment_in: CommentCreate,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CommentResponse:
    """Create a comment on a post."""
    if not comment_in.text or not comment_in.text.strip():
        raise UnprocessableException("Please enter a comment")

    if not crud_post.get(db, post_id):
        raise PostNotFoundException()

    comment = crud_comment.create_comment(
        db, post_id=post_id, creator_id=current_user.id, text=comment_in.text
    )
    return _comment_response(comment)


@router.delete(
    "/{post_id}/{comment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete comment",
    description="""
    Delete a comment. Only the comment's creator can delete it.

    **Access:** Comment creator only
    """,
)
def delete_comment(
    post_id: int,
    comment_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a comment from a post."""
    if not crud_post.get(db, post_id):
        raise PostNotFoundException()

    comment = crud_comment.get_for_post(db, post_id=post_id, comment_id=comment_id)
    if not comment:
        raise CommentNotFoundException()

    if comment.creator_id != current_user.id:
        raise NotOwnerException("You are not authorized to delete this comment")

    crud_comment.delete(db, id=comment.id)
    return MessageResponse(message="Comment deleted successfully")


__all__ = ["router"]
