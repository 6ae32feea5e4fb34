"""
Token Use Case DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel


class AuthenticationResponse(BaseModel):
    """Response for the authenticate use case"""

    authentication_token: str


class TokenRequestResponse(BaseModel):
    """Response for activation / password reset token requests.

    Never carries the token itself: it only travels by e-mail.
    """

    message: str
