"""
HTTP middleware for the generator API.

Order on the app (outermost first): tag_request, log_requests, cap_pasted_text.
tag_request stamps the request id and the template a path targets, so the
request log and the size-cap rejection can both name them.
"""
import logging
import re
import time
from typing import Optional
from uuid import uuid4

from fastapi import Request
from fastapi.responses import JSONResponse

from fmw2.config import settings

logger = logging.getLogger("fmw2.api.requests")

REQUEST_ID_HEADER = "x-request-id"
_WRITE_METHODS = {"POST", "PUT", "PATCH"}
_GENERATE_PATH = re.compile(r"^/templates/(?P<template>[^/]+)(?:/generate)?$")
_BUILDER_PREFIXES = {
    "/guard-duty/": "guardDuty",
    "/routine-order/": "routineOrder",
}


def template_for_path(path: str) -> Optional[str]:
    for prefix, template in _BUILDER_PREFIXES.items():
        if path.startswith(prefix):
            return template
    match = _GENERATE_PATH.match(path)
    return match.group("template") if match else None


def _declared_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    if raw is None or not raw.strip().isdigit():
        return None
    return int(raw)


async def tag_request(request: Request, call_next):
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
    request.state.request_id = rid
    request.state.template = template_for_path(request.url.path)
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = rid
    return response


async def cap_pasted_text(request: Request, call_next):
    """
    Pasted rosters (night strength, guard duty lists) are the only large inputs.
    Anything over security.max_body_kb is refused before it reaches the regex passes.
    """
    limit_kb = settings.security.max_body_kb
    length = _declared_length(request)
    if request.method in _WRITE_METHODS and length is not None and length > limit_kb * 1024:
        rid = getattr(request.state, "request_id", None)
        logger.warning(
            "request body refused",
            extra={"path": request.url.path, "bytes": length, "request_id": rid},
        )
        return JSONResponse(
            status_code=413,
            content={
                "error": "request_too_large",
                "detail": f"Pasted text is limited to {limit_kb}KB",
                "request_id": rid,
            },
        )
    return await call_next(request)


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        logger.log(
            logging.WARNING if status >= 500 else logging.INFO,
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "template": getattr(request.state, "template", None),
                "status": status,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                "request_id": getattr(request.state, "request_id", None),
            },
        )
