import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from greenlight.config import ApplicationConfig
from greenlight.domain.errors import DuplicateEmailError, Error, ErrorCode
from greenlight.domain.result import Result, Return

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def query(
    operation: str, awaitable: Awaitable[T], timeout: Optional[float] = None
) -> Result[T]:
    """
    Await a repository call under the per-call database timeout.

    Timeouts and storage faults are logged here and returned as
    PERSISTENCE_ERROR; the detail never reaches the caller's client.
    """
    timeout = timeout if timeout is not None else ApplicationConfig.DB_TIMEOUT_SECONDS
    try:
        value = await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.error("%s timed out after %.1fs", operation, timeout)
        return Return.err(
            Error(ErrorCode.PERSISTENCE_ERROR, f"{operation} timed out")
        )
    except DuplicateEmailError:
        logger.info("%s rejected: email already registered", operation)
        return Return.err(
            Error(ErrorCode.DUPLICATE_EMAIL, "a user with this email address already exists")
        )
    except Exception:
        logger.exception("%s failed", operation)
        return Return.err(Error(ErrorCode.PERSISTENCE_ERROR, f"{operation} failed"))
    return Return.ok(value)
