from fastapi import status
from crypto_ramp_service.app.core.exceptions import AppException


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"

    USER_NOT_FOUND = "USER_NOT_FOUND"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"
    REMOTE_TRANSACTION_NOT_FOUND = "REMOTE_TRANSACTION_NOT_FOUND"

    PROCESSOR_ERROR = "PROCESSOR_ERROR"


class ErrorMessage:
    USER_NOT_FOUND = "User not found"
    TRANSACTION_NOT_FOUND = "Transaction not found"
    REMOTE_TRANSACTION_NOT_FOUND = "Transaction not found at payment processor"

    TRANSACTION_FAILED = "Transaction failed"
    FETCH_FAILED = "Failed to fetch transaction"


def validation_error(message: str, details: dict | None = None):
    return AppException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        details=details
    )


def not_found(code: str, message: str):
    return AppException(
        status_code=status.HTTP_404_NOT_FOUND,
        code=code,
        message=message
    )


def processor_error(message: str, details=None):
    return AppException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.PROCESSOR_ERROR,
        message=message,
        details=details
    )


def is_not_found(exc: Exception) -> bool:
    return isinstance(exc, AppException) and exc.status_code == status.HTTP_404_NOT_FOUND
