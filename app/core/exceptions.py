"""Custom HTTP exceptions for the blog API.

Every class carries its default message and status code, so endpoints can
`raise PostNotFoundException()` and the app-level handler renders the body
as `{"message": ...}`.
"""

from fastapi import HTTPException, status


class MissingTokenException(HTTPException):
    """Exception when a protected route is called without a bearer token."""

    def __init__(self, detail: str = "Unauthorized. No token"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenException(HTTPException):
    """Exception when the bearer token fails verification or has expired."""

    def __init__(self, detail: str = "Unauthorized. Invalid token"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class UnprocessableException(HTTPException):
    """Base exception for rejected input (422)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )


class InvalidCredentialsException(UnprocessableException):
    """Exception when email or password is wrong."""

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(detail=detail)


class EmailAlreadyExistsException(UnprocessableException):
    """Exception when an email is already registered to another user."""

    def __init__(self, detail: str = "Email already exists"):
        super().__init__(detail=detail)


class NotFoundException(HTTPException):
    """Base exception for missing resources (404)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class UserNotFoundException(NotFoundException):
    def __init__(self, detail: str = "User Not Found"):
        super().__init__(detail=detail)


class PostNotFoundException(NotFoundException):
    def __init__(self, detail: str = "Post not found"):
        super().__init__(detail=detail)


class CommentNotFoundException(NotFoundException):
    def __init__(self, detail: str = "Comment not found"):
        super().__init__(detail=detail)


class NotOwnerException(HTTPException):
    """
    Exception when the caller tries to mutate a resource they did not create.

    Status Code: 401 Unauthorized
    """

    def __init__(self, detail: str = "Unauthorized or post not found"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )


__all__ = [
    "MissingTokenException",
    "InvalidTokenException",
    "UnprocessableException",
    "InvalidCredentialsException",
    "EmailAlreadyExistsException",
    "NotFoundException",
    "UserNotFoundException",
    "PostNotFoundException",
    "CommentNotFoundException",
    "NotOwnerException",
]
