"""Error Handlers — map registry failures and malformed requests onto the JSON error envelope.

Invariants:
    - RegistryError → its own to_response() envelope and http_status
    - RequestValidationError → 400 VALIDATION_ERROR, one detail per offending field
    - Submitted values never appear in a response or a log line: ciphertext handles,
      proofs and disclosed plaintext are reported by field path only
    - Anything else → 500 INTERNAL_ERROR with no internal detail

Design Decisions:
    - Sealed fields (encrypted_*, input_proof, plain_*) are flagged in the detail so a
      client knows the value was withheld on purpose (ADR: handles are opaque end to end)
    - Log extras carry owner/operation from ErrorContext, or the participant header and
      path owner for validation failures, so rejected calls are traceable without payloads
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from athlete_registry.core.errors import ErrorCategory, ErrorSeverity, RegistryError

logger = logging.getLogger(__name__)

_SEALED_PREFIXES = ("encrypted_", "plain_")
_SEALED_FIELDS = {"input_proof"}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistryError, registry_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "owner": exc.context.owner,
            "operation": exc.context.operation,
            "batch_size": exc.context.batch_size,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [_field_detail(e) for e in exc.errors()]
    logger.warning(
        f"Malformed request on {request.method} {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={
            "error_code": "VALIDATION_ERROR",
            "path": request.url.path,
            "owner": _request_owner(request),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=True,
        extra={"path": request.url.path, "owner": _request_owner(request)},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def is_sealed_field(loc: tuple) -> bool:
    """True when any segment of the location names a ciphertext, proof or plaintext field."""
    return any(
        isinstance(part, str)
        and (part in _SEALED_FIELDS or part.startswith(_SEALED_PREFIXES))
        for part in loc
    )


def _field_detail(error: dict) -> dict:
    # "input" and "ctx" are not copied: both can carry the submitted value
    loc = tuple(error["loc"])
    return {
        "field": ".".join(str(part) for part in loc),
        "message": error["msg"],
        "type": error["type"],
        "sealed": is_sealed_field(loc),
    }


def _request_owner(request: Request) -> str | None:
    return request.path_params.get("owner") or request.headers.get("x-participant-id")
