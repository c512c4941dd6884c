import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fmw2.config import settings
from fmw2.exceptions import (
    GenerationFailed,
    LogSinkError,
    TemplateValidationError,
    UnknownTemplate,
    UnsupportedTemplate,
)
from fmw2.api.middleware import cap_pasted_text, log_requests, tag_request

# Routers
from fmw2.api.routers import system, templates, guard_duty, routine_order, logs

# Configure logging
logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))
logger = logging.getLogger("fmw2.api")


def _payload(request: Request, payload: dict) -> dict:
    rid = getattr(request.state, "request_id", None)
    if rid:
        payload["request_id"] = rid
    return payload


def create_app(db_path: Optional[Path] = None) -> FastAPI:
    """
    Factory to build the FastAPI application.
    db_path overrides the SQLite log store location (used in tests).
    """
    if db_path:
        settings.paths.db_path = db_path
        import fmw2.api.deps as deps
        deps.reset_log_store()

    app = FastAPI(title=settings.app.name, version=settings.app.version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last registered runs outermost
    app.middleware("http")(cap_pasted_text)
    if settings.logging.log_requests:
        app.middleware("http")(log_requests)
    app.middleware("http")(tag_request)

    app.include_router(system.router)
    app.include_router(templates.router)
    app.include_router(guard_duty.router)
    app.include_router(routine_order.router)
    app.include_router(logs.router)

    @app.exception_handler(TemplateValidationError)
    async def validation_exception_handler(request: Request, exc: TemplateValidationError):
        return JSONResponse(status_code=422, content=_payload(request, exc.to_dict()))

    @app.exception_handler(UnknownTemplate)
    async def unknown_template_handler(request: Request, exc: UnknownTemplate):
        payload = {"error": "unknown_template", "detail": str(exc)}
        return JSONResponse(status_code=404, content=_payload(request, payload))

    @app.exception_handler(UnsupportedTemplate)
    async def unsupported_template_handler(request: Request, exc: UnsupportedTemplate):
        payload = {"error": "unsupported_template", "detail": str(exc)}
        return JSONResponse(status_code=400, content=_payload(request, payload))

    @app.exception_handler(GenerationFailed)
    async def generation_failed_handler(request: Request, exc: GenerationFailed):
        payload = {"error": "generation_failed", "detail": exc.message}
        return JSONResponse(status_code=500, content=_payload(request, payload))

    @app.exception_handler(LogSinkError)
    async def log_sink_handler(request: Request, exc: LogSinkError):
        logger.error("generation log write failed", extra={"error": str(exc)})
        return JSONResponse(status_code=500, content=_payload(request, {"success": False, "error": str(exc)}))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None)
        logger.exception("Unhandled error", extra={"path": str(request.url), "request_id": rid})
        payload = {"error": "internal_error", "detail": "Unexpected server error"}
        return JSONResponse(status_code=500, content=_payload(request, payload))

    return app

# Module-level app for uvicorn entrypoint
app = create_app()
