from __future__ import annotations

import logging
from typing import Any, Optional

from fmw2.exceptions import LogSinkError
from fmw2.logs.models import GenerationLog
from fmw2.logs.store import GenerationLogSink

logger = logging.getLogger(__name__)


class GenerationLogService:
    def __init__(self, store: GenerationLogSink):
        self.store = store

    def submit(self, record: GenerationLog) -> str:
        try:
            return self.store.insert(record)
        except Exception as exc:
            raise LogSinkError(f"Failed to store generation log: {exc}") from exc

    def record(
        self,
        template: str,
        fields: dict[str, Any],
        template_type: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[str]:
        """Best-effort write made after a successful generation. Never raises."""
        try:
            return self.submit(
                GenerationLog(
                    template=template,
                    fields=fields,
                    template_type=template_type,
                    user_agent=user_agent,
                )
            )
        except Exception as exc:
            logger.warning("generation log dropped", extra={"template": template, "error": str(exc)})
            return None

    def recent(self, limit: int = 50) -> list[dict[str, Any]]:
        return self.store.list_recent(limit=limit)
