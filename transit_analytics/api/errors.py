"""Translate domain errors into HTTP responses."""

from fastapi import HTTPException, status

from ..errors import TransitAnalyticsError

_STATUS_BY_CODE = {
    "invalid_argument": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
}


def to_http_exception(exc: TransitAnalyticsError) -> HTTPException:
    """Map an error's `code` to a status; anything unrecognised is a 500."""
    status_code = _STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=exc.message)
