"""Error builders.

Each builder returns `Err(AppError)` with the right code and metadata.
"""
from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Network / upstream (E1xxx)
# =============================================================================

def network_error(
    message: str,
    *,
    code: ErrorCode,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata=metadata,
        cause=cause,
    ))


def external_service_unavailable(
    service: str, reason: str = "", origin: str = "", cause: Exception | None = None
) -> Err[AppError]:
    msg = f"upstream {service} service unavailable"
    if reason:
        msg += f": {reason}"
    return network_error(
        msg,
        code=ErrorCode.E1010_EXTERNAL_SERVICE_UNAVAILABLE,
        origin=origin,
        cause=cause,
        service=service,
    )


def external_service_timeout(
    service: str, timeout_seconds: float, origin: str = "", cause: Exception | None = None
) -> Err[AppError]:
    """No answer within the client timeout; still reads as unavailable."""
    return network_error(
        f"upstream {service} service unavailable: timed out after {timeout_seconds}s",
        code=ErrorCode.E1002_TIMEOUT,
        origin=origin,
        cause=cause,
        service=service,
        timeout_seconds=timeout_seconds,
    )


def external_service_error(
    service: str, upstream_code: str, origin: str = ""
) -> Err[AppError]:
    """The upstream answered, but refused the query."""
    return network_error(
        f"upstream {service} service returned error code {upstream_code}",
        code=ErrorCode.E1011_EXTERNAL_SERVICE_ERROR,
        origin=origin,
        service=service,
        upstream_code=upstream_code,
    )


# =============================================================================
# Validation (E2xxx)
# =============================================================================

def required_field(field: str, origin: str = "") -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E2001_REQUIRED_FIELD_MISSING,
        message=f"Required field '{field}' is missing",
        context=ErrorContext(origin=origin),
        metadata={"field": field},
    ))


# =============================================================================
# Datastore (E4xxx)
# =============================================================================

def not_found(entity: str, id: str | None = None, origin: str = "") -> Err[AppError]:
    msg = f"{entity} not found"
    if id:
        msg += f": {id}"
    meta = {"entity": entity, "entity_id": id}
    return Err(AppError(
        code=ErrorCode.E4010_NOT_FOUND,
        message=msg,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


# =============================================================================
# Resource (E6xxx)
# =============================================================================

def file_write_error(path: str, cause: Exception, origin: str = "") -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E6003_FILE_WRITE_ERROR,
        message=f"Could not write {path}: {cause}",
        context=ErrorContext(origin=origin),
        metadata={"path": path},
        cause=cause,
    ))
