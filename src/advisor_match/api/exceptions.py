"""API exception definitions and handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from advisor_match.core.errors import (
    EmptyCandidatePoolError,
    InvalidTaxonomyError,
    SnapshotFormatError,
)

logger = logging.getLogger("advisor_match.api.exceptions")


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        detail: str | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class InvalidTaxonomyAPIError(APIException):
    """Raised when the submitted domain/subtopic snapshot is malformed."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message, "INVALID_TAXONOMY", 422, detail)


class EmptyCandidatePoolAPIError(APIException):
    """Raised when a match run is requested without any advisors."""

    def __init__(self, message: str = "No eligible advisors"):
        super().__init__(message, "EMPTY_CANDIDATE_POOL", 422)


class UnknownEntityError(APIException):
    """Raised when a referenced client or advisor is not in the snapshot."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind.capitalize()} '{entity_id}' not found", "UNKNOWN_ENTITY", 404)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on the FastAPI app."""

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
        logger.warning(
            "%s %s -> %s [%d]: %s",
            request.method,
            request.url.path,
            exc.code,
            exc.status_code,
            exc.message,
        )
        content = {
            "error": exc.message,
            "code": exc.code,
        }
        if exc.detail:
            content["detail"] = exc.detail
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(InvalidTaxonomyError)
    async def taxonomy_handler(request: Request, exc: InvalidTaxonomyError) -> JSONResponse:
        return await api_exception_handler(request, InvalidTaxonomyAPIError(str(exc)))

    @app.exception_handler(SnapshotFormatError)
    async def snapshot_handler(request: Request, exc: SnapshotFormatError) -> JSONResponse:
        return await api_exception_handler(request, InvalidTaxonomyAPIError(str(exc)))

    @app.exception_handler(EmptyCandidatePoolError)
    async def empty_pool_handler(request: Request, exc: EmptyCandidatePoolError) -> JSONResponse:
        return await api_exception_handler(request, EmptyCandidatePoolAPIError(str(exc)))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "%s %s -> unhandled exception: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "code": "INTERNAL_ERROR",
                "detail": str(exc) if app.debug else None,
            },
        )
