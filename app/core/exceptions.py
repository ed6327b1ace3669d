"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status

from app.domain.errors import BookingError, ErrorCode


class AppException(HTTPException):
    """Base application exception carrying a stable error code."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "InternalError",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.code = code
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class InvalidBookingStatus(AppException):
    """Invalid booking status for operation."""

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code="InvalidStatusTransition",
        )


class InvalidDate(AppException):
    """Unparseable calendar date."""

    def __init__(self, detail: str = "Date must be YYYY-MM-DD") -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=ErrorCode.INVALID_DATE.value,
        )


# Status category for every engine error code
ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PRINCIPAL_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TIME_SLOT_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.OUTSIDE_BUSINESS_HOURS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PAST_TIME_NOT_ALLOWED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BOOKING_CANCELLED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_CANCELLED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_DATE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.AVAILABILITY_FETCH_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.ROOMS_FETCH_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.CREATE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.UPDATE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def exception_for(error: BookingError) -> AppException:
    """Translate a typed engine error into an HTTP exception."""
    status_code = ERROR_STATUS_CODES[error.code]
    return AppException(status_code=status_code, detail=error.message, code=error.code.value)


def error_payload(code: str, message: str, validation_errors: dict[str, Any] | None = None) -> dict[str, Any]:
    """Body shared by every error response."""
    payload: dict[str, Any] = {"error": code, "message": message}
    if validation_errors:
        payload["validation_errors"] = validation_errors
    return payload
