"""Pydantic models for user API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from identity.domain.aggregates import User


class RegisterUserRequest(BaseModel):
    """Request model for registering a user."""

    email: str = Field(
        ...,
        description="Email address",
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+$",
    )


class UserResponse(BaseModel):
    """Response model for a user."""

    id: str = Field(..., description="User ID (ULID format)")
    email: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response."""
        return cls(id=user.id.value, email=user.email, created_at=user.created_at)
