from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from fastapi import Header, HTTPException

from fmw2.config import settings
from fmw2.logs import GenerationLogService, LogStore
from fmw2.templates import GenerationResult, TemplateService

logger = logging.getLogger("fmw2.api")

# Global/Cached instances
_log_store_instance: Optional[Any] = None
_log_store_backend: Optional[str] = None
_template_service_instance: Optional[TemplateService] = None


def get_log_store():
    global _log_store_instance, _log_store_backend
    backend = (settings.storage.backend or "sqlite").strip().lower()
    if _log_store_instance is None or _log_store_backend != backend:
        if backend == "firestore":
            from fmw2.logs.store_firestore import FirestoreLogStore

            _log_store_instance = FirestoreLogStore(
                project_id=settings.storage.firestore_project_id,
                database=settings.storage.firestore_database,
                collection=settings.storage.firestore_collection,
            )
        else:
            _log_store_instance = LogStore(db_path=settings.paths.db_path)
        _log_store_backend = backend
    return _log_store_instance


def reset_log_store() -> None:
    global _log_store_instance, _log_store_backend
    _log_store_instance = None
    _log_store_backend = None


def get_log_service() -> GenerationLogService:
    return GenerationLogService(store=get_log_store())


def record_generation(result: GenerationResult, user_agent: Optional[str]) -> None:
    """Background task: best-effort log row for a successful generation."""
    if not settings.logging.record_generations:
        return
    try:
        service = get_log_service()
    except Exception as exc:
        logger.warning("generation log store unavailable", extra={"error": str(exc)})
        return
    service.record(
        template=result.template,
        fields=result.fields,
        template_type=result.template_type,
        user_agent=user_agent,
    )


def get_template_service() -> TemplateService:
    global _template_service_instance
    if _template_service_instance is None:
        _template_service_instance = TemplateService()
    return _template_service_instance


def require_auth(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
):
    token = settings.security.api_token
    basic_user = settings.security.basic_user
    basic_pass = settings.security.basic_pass
    if not token and not (basic_user and basic_pass):
        return

    if token and (
        authorization == f"Bearer {token}"
        or authorization == f"Token {token}"
        or x_api_key == token
    ):
        return

    if authorization and authorization.startswith("Basic "):
        try:
            decoded = base64.b64decode(authorization.split(" ", 1)[1]).decode("utf-8")
            username, password = decoded.split(":", 1)
            if username == basic_user and password == basic_pass:
                return
        except ValueError:
            pass

    raise HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})
