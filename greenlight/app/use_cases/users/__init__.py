"""
User Use Cases

Registration, activation and password reset.
"""

from .register_user_use_case import RegisterUserUseCase
from .activate_user_use_case import ActivateUserUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .get_current_user_use_case import GetCurrentUserUseCase
from .dtos import RegisterUserCommand, UserResponse, PasswordResetResponse

__all__ = [
    # Use Cases
    "RegisterUserUseCase",
    "ActivateUserUseCase",
    "ResetPasswordUseCase",
    "GetCurrentUserUseCase",
    # DTOs - Commands
    "RegisterUserCommand",
    # DTOs - Responses
    "UserResponse",
    "PasswordResetResponse",
]
