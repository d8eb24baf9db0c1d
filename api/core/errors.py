"""
API error taxonomy and FastAPI exception handlers.

Every client-visible failure is one of three kinds. The JSON body is tagged
by the kind name, e.g. `{"BadRequest": {"msg": "..."}}`.

- NotFoundError       -> 400, {"NotFoundError": {"id", "entity_name"}}
- BadRequestError     -> 400, {"BadRequest": {"msg"}}
- InternalServerError -> 500, {"InternalServerError": {"msg"}}

Not-found is reported as 400, not 404; clients of this API depend on it.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "Something bad happened while processing the request"


class ApiError(Exception):
    kind: str = "InternalServerError"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def fields(self) -> dict[str, Any]:
        return {}

    def to_response(self) -> dict[str, Any]:
        return {self.kind: self.fields()}


class NotFoundError(ApiError):
    kind = "NotFoundError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, entity_id: Any, entity_name: str) -> None:
        self.entity_id = entity_id
        self.entity_name = entity_name
        super().__init__(f"{entity_name} with ID: {entity_id} not found")

    def fields(self) -> dict[str, Any]:
        return {"id": str(self.entity_id), "entity_name": self.entity_name}


class BadRequestError(ApiError):
    kind = "BadRequest"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, msg: str) -> None:
        self.msg = msg
        super().__init__(f"Bad request: {msg}")

    def fields(self) -> dict[str, Any]:
        return {"msg": self.msg}


class InternalServerError(ApiError):
    kind = "InternalServerError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, msg: str = GENERIC_INTERNAL_MESSAGE) -> None:
        self.msg = msg
        super().__init__(f"Internal server error: {msg}")

    def fields(self) -> dict[str, Any]:
        return {"msg": self.msg}


def is_unique_violation(exc: BaseException) -> bool:
    """
    True when the driver reports a unique constraint violation (SQLSTATE 23505).
    """
    if isinstance(exc, asyncpg.UniqueViolationError):
        return True
    return getattr(exc, "sqlstate", None) == asyncpg.UniqueViolationError.sqlstate


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request data"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = str(first.get("msg") or "invalid value")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("api_error path=%s error=%s", request.url.path, exc)
        else:
            logger.warning("api_error path=%s error=%s", request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = BadRequestError(_validation_message(exc))
        logger.warning("validation_error path=%s error=%s", request.url.path, error)
        return JSONResponse(status_code=error.status_code, content=error.to_response())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Never leak driver messages or tracebacks to the client.
        logger.error("unhandled_error path=%s", request.url.path, exc_info=exc)
        error = InternalServerError()
        return JSONResponse(status_code=error.status_code, content=error.to_response())
