"""
Token Use Cases

Session token login and e-mailed activation / password reset tokens.
"""

from .authenticate_use_case import AuthenticateUseCase
from .create_activation_token_use_case import CreateActivationTokenUseCase
from .create_password_reset_token_use_case import CreatePasswordResetTokenUseCase
from .dtos import AuthenticationResponse, TokenRequestResponse

__all__ = [
    # Use Cases
    "AuthenticateUseCase",
    "CreateActivationTokenUseCase",
    "CreatePasswordResetTokenUseCase",
    # DTOs - Responses
    "AuthenticationResponse",
    "TokenRequestResponse",
]
