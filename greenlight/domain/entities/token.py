"""
Token Entity

Scoped, time-bounded opaque tokens stored by digest only.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import TokenScope


class Token(SQLModel, table=True):
    """
    Token entity - one row per issued activation / password reset token.

    Business Rules:
    - `hash` is the SHA-256 hex digest of the plaintext; the plaintext is
      never stored and cannot be re-derived from the row
    - A token is usable only while `expiry` is in the future and only for
      the scope it was issued with
    - Several tokens of the same scope may coexist for one user
    """

    __tablename__ = "tokens"

    hash: str = Field(primary_key=True, max_length=64)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE")
    scope: TokenScope
    expiry: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_tokens_user_scope", "user_id", "scope"),
        Index("idx_tokens_expiry", "expiry"),
    )
