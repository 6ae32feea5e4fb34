from fastapi import status

from greenlight.domain.errors import Error, ErrorCode

CLIENT_STATUS = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EDIT_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_EMAIL: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error) -> None:
    """Turn a use-case Error into the matching HTTP exception."""
    if error.code in CLIENT_STATUS:
        raise ClientError(error, status_code=CLIENT_STATUS[error.code])
    raise ServerError(error)
