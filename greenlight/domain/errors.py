"""
Greenlight Domain Errors

Closed set of error codes produced by the credential and token subsystem.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ErrorCode(str, Enum):
    """Error taxonomy shared by services, use cases and the API layer"""

    # User-correctable, surfaced to the client
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    NOT_FOUND = "NOT_FOUND"
    EDIT_CONFLICT = "EDIT_CONFLICT"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"

    # Server faults, logged and surfaced as an opaque 500
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    HASHING_ERROR = "HASHING_ERROR"
    INTEGRITY_ERROR = "INTEGRITY_ERROR"


CLIENT_ERROR_CODES = frozenset(
    {
        ErrorCode.VALIDATION_ERROR,
        ErrorCode.INVALID_CREDENTIALS,
        ErrorCode.INVALID_TOKEN,
        ErrorCode.NOT_FOUND,
        ErrorCode.EDIT_CONFLICT,
        ErrorCode.DUPLICATE_EMAIL,
    }
)


@dataclass(frozen=True)
class Error:
    """
    A failed outcome.

    `fields` is only set for VALIDATION_ERROR and maps each offending
    field to its first error message.
    """

    code: ErrorCode
    message: str
    fields: Optional[Dict[str, str]] = None

    @property
    def is_client_error(self) -> bool:
        return self.code in CLIENT_ERROR_CODES


def validation_error(fields: Dict[str, str]) -> Error:
    return Error(
        ErrorCode.VALIDATION_ERROR,
        "The request contains invalid fields",
        fields=dict(fields),
    )


class DuplicateEmailError(Exception):
    """Raised by storage when a write collides with the unique email index"""
