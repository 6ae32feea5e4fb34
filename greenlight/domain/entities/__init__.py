"""
Greenlight Domain Entities

Each entity in its own file.
"""

from .enums import TokenScope
from .user import User
from .token import Token

__all__ = [
    # Enums
    "TokenScope",
    # Entities
    "User",
    "Token",
]
