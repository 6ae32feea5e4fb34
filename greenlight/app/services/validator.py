"""
Field-level validation.

A Validator is created fresh for every validation pass and collects the
first error message recorded for each field.
"""

import re
from typing import Dict, Hashable, Iterable, Optional, Sequence

EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 32
EMAIL_MAX_LENGTH = 500
NAME_MAX_LENGTH = 500
# base32 (no padding) of 16 random bytes
TOKEN_PLAINTEXT_LENGTH = 26


class Validator:
    def __init__(self):
        self._errors: Dict[str, str] = {}

    def valid(self) -> bool:
        return not self._errors

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self._errors)

    def add_error(self, field: str, message: str) -> None:
        """Record `message` unless `field` already has an error."""
        self._errors.setdefault(field, message)

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)


def matches(value: str, pattern: re.Pattern) -> bool:
    return pattern.fullmatch(value) is not None


def not_blank(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def length_between(value: str, minimum: int, maximum: int) -> bool:
    return minimum <= len(value) <= maximum


def permitted_value(value, permitted: Iterable) -> bool:
    return value in set(permitted)


def unique(values: Sequence[Hashable]) -> bool:
    """True when no element of `values` appears twice."""
    seen = set()
    for value in values:
        if value in seen:
            return False
        seen.add(value)
    return True


def validate_email(v: Validator, email: Optional[str]) -> None:
    email = email or ""
    v.check(email != "", "email", "must be provided")
    v.check(byte_length(email) <= EMAIL_MAX_LENGTH, "email", "must not be more than 500 bytes long")
    v.check(matches(email, EMAIL_RX), "email", "must be a valid email address")


def validate_password_plaintext(v: Validator, password: Optional[str]) -> None:
    password = password or ""
    v.check(password != "", "password", "must be provided")
    v.check(
        byte_length(password) >= PASSWORD_MIN_LENGTH,
        "password",
        "must be at least 8 bytes long",
    )
    v.check(
        byte_length(password) <= PASSWORD_MAX_LENGTH,
        "password",
        "must not be more than 32 bytes long",
    )


def validate_name(v: Validator, name: Optional[str]) -> None:
    name = name or ""
    v.check(not_blank(name), "name", "must be provided")
    v.check(byte_length(name) <= NAME_MAX_LENGTH, "name", "must not be more than 500 bytes long")


def validate_token_plaintext(v: Validator, token: Optional[str]) -> None:
    token = token or ""
    v.check(token != "", "token", "must be provided")
    v.check(
        byte_length(token) == TOKEN_PLAINTEXT_LENGTH,
        "token",
        "must be 26 bytes long",
    )


def validate_user(v: Validator, name: Optional[str], email: Optional[str], password: Optional[str] = None) -> None:
    """Registration rules. The password is checked only while its plaintext is still at hand."""
    validate_name(v, name)
    validate_email(v, email)
    if password is not None:
        validate_password_plaintext(v, password)
