"""Translate domain and infrastructure errors into HTTP responses.

Protean's own handlers cover ``ValidationError`` (400). The marketplace adds
401/403 for identity problems, 404 for missing records, 409 for a lost
optimistic-concurrency race and 503 for storage failures.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from marketplace.errors import AuthenticationError, AuthorizationError, PersistenceError
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


async def _authentication_error(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": exc.message})


async def _authorization_error(request: Request, exc: AuthorizationError) -> JSONResponse:
    logger.warning("access_denied", path=request.url.path, reason=exc.message)
    return JSONResponse(status_code=403, content={"error": exc.message})


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc) or "Not found"})


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("concurrent_modification", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=409,
        content={"error": "The record was changed by another request; retry the operation"},
    )


async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("persistence_failed", path=request.url.path, reason=exc.message)
    return JSONResponse(status_code=503, content={"error": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(AuthenticationError, _authentication_error)
    app.add_exception_handler(AuthorizationError, _authorization_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(PersistenceError, _persistence_error)
