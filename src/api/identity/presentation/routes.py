"""HTTP routes for user registration."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from identity.application.user_service import UserService
from identity.dependencies import get_user_service
from identity.ports.exceptions import DuplicateEmailError, UserCreationConflictError
from identity.presentation.models import RegisterUserRequest, UserResponse

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    request: RegisterUserRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Register a user.

    Raises:
        HTTPException: 409 if the email address is already registered or
            the store rejected the user for another constraint
    """
    try:
        user = await service.register(request.email)
        return UserResponse.from_domain(user)

    except DuplicateEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from e

    except UserCreationConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User could not be created",
        ) from e
