"""HTTP glue between FastAPI and the domain.

The authenticated actor dependency and the exception handlers. Protean's
handlers cover validation (400), missing records (404), state conflicts
(409) and refused operations (422); identity failures and lost optimistic
concurrency races are added here.
"""

import structlog
from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from shared.actor import Actor, Role
from shared.errors import AuthenticationError, AuthorizationError, IllegalTransitionError, StaleReferenceError

logger = structlog.get_logger(__name__)


def get_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor:
    """Build the actor from gateway-supplied identity headers."""
    if not x_user_id:
        raise AuthenticationError({"actor": ["Authentication required"]})
    try:
        role = Role((x_user_role or Role.READER.value).lower())
    except ValueError as exc:
        raise AuthenticationError({"actor": [f"Unknown role '{x_user_role}'"]}) from exc
    return Actor(user_id=x_user_id, role=role)


def _refusal(request: Request, status_code: int, exc: Exception, details) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        method=request.method,
        status_code=status_code,
        error=type(exc).__name__,
        reason=str(exc),
    )
    return JSONResponse(status_code=status_code, content={"error": str(exc), "details": details})


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return _refusal(request, 401, exc, exc.messages)


async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return _refusal(request, 403, exc, exc.messages)


async def conflict_handler(request: Request, exc: IllegalTransitionError | StaleReferenceError) -> JSONResponse:
    return _refusal(request, 409, exc, exc.messages)


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    return _refusal(request, 409, exc, {"_entity": ["The record was changed by someone else. Please retry"]})


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_handlers(app)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(IllegalTransitionError, conflict_handler)
    app.add_exception_handler(StaleReferenceError, conflict_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
