"""
User Entity

Represents an account holder that authenticates with email and password.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import LargeBinary
from sqlmodel import Column, DateTime, Field, SQLModel

from greenlight.domain.base import utcnow


class User(SQLModel, table=True):
    """
    User entity.

    Business Rules:
    - Email must be unique across all users
    - Password stored only as a bcrypt hash (binary, 60 bytes)
    - A user without a password hash is invalid and never persisted
    - Accounts start deactivated until an activation token is redeemed
    - `version` guards concurrent updates (optimistic locking)
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=500)
    email: str = Field(unique=True, index=True, max_length=500)
    password_hash: Optional[bytes] = Field(
        default=None, sa_column=Column(LargeBinary, nullable=False)
    )
    activated: bool = Field(default=False)
    version: int = Field(default=1)

    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )
