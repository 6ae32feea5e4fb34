"""
User Use Case DTOs (Data Transfer Objects)

Commands carry validated intent into a use case; responses never expose
password material.
"""

from datetime import datetime

from pydantic import BaseModel

from greenlight.domain.entities import User


class RegisterUserCommand(BaseModel):
    """Registration intent. `password` is plaintext and lives only as long as the request."""

    name: str
    email: str
    password: str


class UserResponse(BaseModel):
    """Public view of a user"""

    id: int
    created_at: datetime
    name: str
    email: str
    activated: bool

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            created_at=user.created_at,
            name=user.name,
            email=user.email,
            activated=user.activated,
        )


class PasswordResetResponse(BaseModel):
    """Response for the reset password use case"""

    message: str
