from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from request_error.core.config import get_settings
from request_error.core.errors import RequestError
from request_error.core.logging import get_logger, log_request_error
from request_error.schemas import ErrorOut

log = get_logger("request_error.api.handlers")

# Codes that must not carry a response body.
_BODYLESS = frozenset({204, 304})


def _response_code(status) -> int:
    if isinstance(status, int) and 200 <= status <= 599 and status not in _BODYLESS:
        return status
    return RequestError.statuses["internal_server_error"]


def error_response(error: RequestError) -> JSONResponse:
    code = _response_code(error.status)
    payload = error.to_json()
    if not isinstance(payload["status"], int):
        payload["status"] = code
    body = ErrorOut(**payload)
    if not get_settings().EXPOSE_DETAILS:
        body.details = None
    return JSONResponse(status_code=code, content=body.model_dump())


def _first_validation_message(exc: RequestValidationError) -> str | None:
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        msg = err.get("msg", "Invalid value")
        return f"{loc}: {msg}" if loc else msg
    return None


async def request_error_handler(request: Request, exc: RequestError) -> JSONResponse:
    log_request_error(
        log,
        exc,
        where=f"{request.method} {request.url.path}",
        status_code=_response_code(exc.status),
        client_errors=get_settings().LOG_CLIENT_ERRORS,
    )
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = RequestError.create("Invalid request", 422, _first_validation_message(exc))
    return await request_error_handler(request, error)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    return await request_error_handler(request, RequestError.create(detail, exc.status_code))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled error: %s", exc)
    return error_response(RequestError.internal_server_error("Internal server error", exc))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestError, request_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
