from .user import (
	UserRegister,
	UserLogin,
	UserUpdate,
	UserResponse,
	LoginResponse,
	MessageResponse,
)
from .auth import TokenPayload
from .post import (
	PostResponse,
	CommentCreate,
	CommentResponse,
)

__all__ = [
	# User
	"UserRegister",
	"UserLogin",
	"UserUpdate",
	"UserResponse",
	"LoginResponse",
	"MessageResponse",
	# Auth
	"TokenPayload",
	# Post & Comment
	"PostResponse",
	"CommentCreate",
	"CommentResponse",
]
