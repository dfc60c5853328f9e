from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from request_error.api import install_error_handlers
from request_error.core.config import get_settings
from request_error.core.logging import get_logger, set_log_context, setup_logging
from request_error.schemas import HealthOut

log = get_logger("request_error.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app.state.settings = settings

    log.info(
        "startup ok | expose_details=%s log_client_errors=%s",
        settings.EXPOSE_DETAILS,
        settings.LOG_CLIENT_ERRORS,
    )
    yield
    log.info("shutdown ok")


app = FastAPI(title="Request Error", version="1.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)


@app.middleware("http")
async def request_context(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid
    set_log_context(request_id=rid)

    t0 = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        dt_ms = int((time.perf_counter() - t0) * 1000)
        log.debug("request %s %s done in %sms", request.method, request.url.path, dt_ms)

    response.headers["X-Request-ID"] = rid
    return response


@app.get("/health", response_model=HealthOut)
async def health() -> HealthOut:
    return HealthOut(status="ok", service="request-error")
