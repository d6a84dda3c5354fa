from fastapi import HTTPException
from app.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


class ValidationError(AppException):
    """Missing or malformed input (empty name, missing category, ...)."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict | None = None,
    ):
        super().__init__(400, message, error_code, details)


class NotFoundError(AppException):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
        details: dict | None = None,
    ):
        super().__init__(404, message, error_code, details)


class ConflictError(AppException):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFLICT,
        details: dict | None = None,
    ):
        super().__init__(409, message, error_code, details)


class ConcurrencyError(AppException):
    """
    A unit of work was aborted by the store's isolation mechanism.
    Retried by run_unit_of_work before it reaches a caller.
    """

    def __init__(
        self,
        message: str = "Concurrent update detected, please retry",
        details: dict | None = None,
    ):
        super().__init__(409, message, ErrorCode.CONCURRENT_UPDATE, details)


class StorageError(AppException):
    def __init__(
        self,
        message: str = "Storage is temporarily unavailable",
        details: dict | None = None,
    ):
        super().__init__(503, message, ErrorCode.STORAGE_UNAVAILABLE, details)
