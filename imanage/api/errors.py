"""
Maps domain errors to HTTP responses.

Every DomainError carries an ErrorKind; STATUS_BY_KIND is the single place a
kind becomes a status code. Response bodies are {"error": message, "kind": kind}
plus "references" for blocked deletes.
"""
import logging
import sqlite3

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..errors import DomainError, ErrorKind, ReferenceConflictError
from ..utils.loggers import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(kind: ErrorKind) -> int:
    try:
        return STATUS_BY_KIND[kind]
    except KeyError:
        raise ValueError(f"No HTTP status mapped for {kind!r}") from None


def error_response(exc: DomainError) -> JSONResponse:
    body = {"error": exc.message, "kind": exc.kind.value}
    if isinstance(exc, ReferenceConflictError):
        body["references"] = [{"type": r.type, "number": r.number} for r in exc.references]
    return JSONResponse(status_code=status_for(exc.kind), content=body)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def _domain_error(request: Request, exc: DomainError):
        level = logging.ERROR if exc.kind is ErrorKind.UNAVAILABLE else logging.INFO
        logger.log(level, "%s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
        return error_response(exc)

    @app.exception_handler(sqlite3.IntegrityError)
    async def _integrity_error(request: Request, exc: sqlite3.IntegrityError):
        # only reached when a repository pre-check missed the constraint
        logger.warning("Unhandled integrity error on %s %s: %s", request.method, request.url.path, exc)
        text = str(exc)
        kind = ErrorKind.CONFLICT if "FOREIGN KEY" in text.upper() or "UNIQUE" in text.upper() \
            else ErrorKind.VALIDATION
        return JSONResponse(status_code=status_for(kind), content={"error": text, "kind": kind.value})

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc), "kind": ErrorKind.VALIDATION.value},
        )

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
