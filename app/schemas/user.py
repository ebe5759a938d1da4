"""Pydantic schemas for `User` domain objects."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


MIN_PASSWORD_LENGTH = 6


class UserRegister(BaseModel):
	"""Registration payload. Presence and length rules are checked in the endpoint
	so they surface with the API's own messages."""
	name: Optional[str] = None
	email: Optional[str] = None
	password: Optional[str] = None
	confirm_password: Optional[str] = Field(None, alias="confirmPassword")

	@field_validator("email")
	@classmethod
	def normalize_email(cls, v: Optional[str]) -> Optional[str]:
		return v.strip().lower() if v else v

	model_config = ConfigDict(populate_by_name=True, json_schema_extra={
		"example": {
			"name": "Jane Doe",
			"email": "jane@example.com",
			"password": "secret123",
			"confirmPassword": "secret123",
		}
	})


class UserLogin(BaseModel):
	email: Optional[str] = None
	password: Optional[str] = None

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"email": "jane@example.com",
			"password": "secret123",
		}
	})


class UserUpdate(BaseModel):
	name: Optional[str] = None
	email: Optional[str] = None
	current_password: Optional[str] = Field(None, alias="currentPassword")
	new_password: Optional[str] = Field(None, alias="newPassword")
	confirm_new_password: Optional[str] = Field(None, alias="confirmNewPassword")

	@field_validator("email")
	@classmethod
	def normalize_email(cls, v: Optional[str]) -> Optional[str]:
		return v.strip().lower() if v else v

	model_config = ConfigDict(populate_by_name=True, json_schema_extra={
		"example": {
			"name": "Jane D.",
			"email": "jane.d@example.com",
			"currentPassword": "secret123",
			"newPassword": "secret456",
			"confirmNewPassword": "secret456",
		}
	})


class UserResponse(BaseModel):
	id: int
	name: str
	email: str
	avatar: Optional[str] = None
	posts: int = 0
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True, json_schema_extra={
		"example": {
			"id": 1,
			"name": "Jane Doe",
			"email": "jane@example.com",
			"avatar": "https://res.cloudinary.com/demo/image/upload/BloggingApp_DEV/abc123.png",
			"posts": 3,
			"created_at": "2025-01-01T10:00:00Z",
			"updated_at": "2025-01-02T10:00:00Z",
		}
	})


class LoginResponse(BaseModel):
	id: int
	name: str
	token: str


class MessageResponse(BaseModel):
	message: str
