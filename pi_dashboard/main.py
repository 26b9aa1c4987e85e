import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api import health, history, live
from .config import get_settings
from .errors import TelemetryError
from .logging_setup import configure_logging
from .services.history_store import HistoryStore
from .services.sampler import Sampler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.log_format == "json")

    store = HistoryStore(settings.history_db_path)
    app.state.store = store
    app.state.history_available = store.ensure_schema()

    sampler = Sampler(store, settings.sample_interval_seconds)
    app.state.sampler = sampler
    if settings.sampler_enabled:
        sampler.start()
    else:
        logger.info("background sampler disabled", extra={"event": "sampler_disabled"})

    try:
        yield
    finally:
        await sampler.stop()
        app.state.store = None
        app.state.sampler = None
        app.state.history_available = False


app = FastAPI(title="Pi Dashboard", lifespan=lifespan)


@app.exception_handler(TelemetryError)
async def telemetry_error_handler(request: Request, exc: TelemetryError) -> JSONResponse:
    logger.warning(
        "%s %s failed: %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc,
        extra={"event": "request_failed"},
    )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"invalid request: {problems}"})


@app.middleware("http")
async def access_log(request: Request, call_next):
    response = await call_next(request)
    client_ip = request.client.host if request.client else "-"
    logger.info(
        "%s %s from %s -> %d",
        request.method,
        request.url.path,
        client_ip,
        response.status_code,
        extra={"event": "http_request"},
    )
    return response


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(live.router, tags=["live"])
app.include_router(history.router, prefix="/history", tags=["history"])


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
