"""
Use Cases

Organized by domain folder:
- tokens/: Session login and e-mailed tokens
- users/: Registration, activation, password reset
"""

from .tokens import (
    AuthenticateUseCase,
    CreateActivationTokenUseCase,
    CreatePasswordResetTokenUseCase,
)
from .users import (
    RegisterUserUseCase,
    ActivateUserUseCase,
    ResetPasswordUseCase,
    GetCurrentUserUseCase,
)

__all__ = [
    # Tokens
    "AuthenticateUseCase",
    "CreateActivationTokenUseCase",
    "CreatePasswordResetTokenUseCase",
    # Users
    "RegisterUserUseCase",
    "ActivateUserUseCase",
    "ResetPasswordUseCase",
    "GetCurrentUserUseCase",
]
