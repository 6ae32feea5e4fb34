"""
Credential Hasher

One-way password hashing with bcrypt and constant-time verification.
"""

import base64
import hashlib
import logging
from typing import Optional

import bcrypt

from greenlight.config import ApplicationConfig
from greenlight.domain.errors import Error, ErrorCode
from greenlight.domain.result import Result, Return

logger = logging.getLogger(__name__)

MIN_ROUNDS = 10
# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_INPUT = 72

_DUMMY_HASH: Optional[bytes] = None


def _prepare(plaintext: str) -> bytes:
    """
    Encode a password for bcrypt.

    Inputs longer than bcrypt's limit are replaced by their base64 SHA-256
    digest so that every byte of the password contributes to the hash.
    """
    encoded = plaintext.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_INPUT:
        encoded = base64.b64encode(hashlib.sha256(encoded).digest())
    return encoded


def hash_password(plaintext: str, rounds: Optional[int] = None) -> Result[bytes]:
    """
    Hash a plaintext password with a fresh per-call salt.

    Args:
        plaintext: Password as typed by the user
        rounds: bcrypt work factor (defaults to BCRYPT_ROUNDS, never below 10)

    Returns:
        Result with the 60-byte bcrypt hash, or HASHING_ERROR
    """
    cost = max(rounds or ApplicationConfig.BCRYPT_ROUNDS, MIN_ROUNDS)
    try:
        return Return.ok(bcrypt.hashpw(_prepare(plaintext), bcrypt.gensalt(cost)))
    except (ValueError, TypeError) as exc:
        logger.error("Password hashing failed: %s", type(exc).__name__)
        return Return.err(Error(ErrorCode.HASHING_ERROR, "Password hashing failed"))


def password_matches(password_hash: Optional[bytes], candidate: str) -> Result[bool]:
    """
    Compare a candidate password against a stored bcrypt hash.

    A wrong password is ok(False). A missing or malformed hash is an
    INTEGRITY_ERROR: the stored credential is corrupt, not merely mismatched.
    """
    if not password_hash:
        return Return.err(
            Error(ErrorCode.INTEGRITY_ERROR, "Missing password hash for user")
        )
    if isinstance(password_hash, str):
        password_hash = password_hash.encode("utf-8")
    try:
        return Return.ok(bcrypt.checkpw(_prepare(candidate), password_hash))
    except ValueError:
        return Return.err(
            Error(ErrorCode.INTEGRITY_ERROR, "Stored password hash is malformed")
        )


def burn_password_check(candidate: str) -> None:
    """Spend one bcrypt verification so unknown accounts cost the same as known ones."""
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(ApplicationConfig.BCRYPT_ROUNDS))
    bcrypt.checkpw(_prepare(candidate), _DUMMY_HASH)
