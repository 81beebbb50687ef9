"""Error handling for the wordbank backend.

- Result[T, E]: `Ok` / `Err` container for expected failures
- AppError: typed error with code, metadata, context and cause
- ErrorCode: code taxonomy that also decides the HTTP status
- Builders: one constructor per kind of failure

Usage:
    from core.errors import Ok, Result, AppError, external_service_error

    async def translate(word: str) -> Result[dict, AppError]:
        payload = await post(...)
        if payload["errorCode"] != "0":
            return external_service_error("translation", payload["errorCode"])
        return Ok(payload)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    external_service_unavailable,
    external_service_timeout,
    external_service_error,
    required_field,
    not_found,
    file_write_error,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_error,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "external_service_unavailable",
    "external_service_timeout",
    "external_service_error",
    "required_field",
    "not_found",
    "file_write_error",
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_error",
]
