from fastapi import HTTPException

from direct_messaging.errors import (
    ForbiddenError,
    InvalidRequestError,
    MessagingError,
    NotFoundError,
    StorageConflictError,
    UpstreamIOError,
)

STATUS_CODES = {
    InvalidRequestError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    StorageConflictError: 409,
    UpstreamIOError: 502,
}


def to_http_exception(error: MessagingError) -> HTTPException:
    """Map a domain error onto the HTTP status the API documents."""
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.detail)
    return HTTPException(status_code=500, detail="Internal server error")
