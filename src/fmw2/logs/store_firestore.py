from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Optional

from fmw2.logs.models import GenerationLog


class FirestoreLogStore:
    """
    Firestore-backed generation log.
    Mirrors the LogStore interface used by GenerationLogService.
    """

    def __init__(
        self,
        *,
        project_id: Optional[str] = None,
        database: str = "(default)",
        collection: str = "fmw2_logs",
        client: Any = None,
    ):
        if client is None:
            try:
                from google.cloud import firestore
            except Exception as exc:  # pragma: no cover - depends on optional runtime deps
                raise RuntimeError(
                    "Firestore backend requested but google-cloud-firestore is not installed"
                ) from exc

            client_kwargs: dict[str, Any] = {}
            if project_id:
                client_kwargs["project"] = project_id
            if database and database != "(default)":
                client_kwargs["database"] = database

            try:
                client = firestore.Client(**client_kwargs)
            except TypeError:
                client_kwargs.pop("database", None)
                client = firestore.Client(**client_kwargs)

        self._client = client
        self._collection_name = str(collection).strip() or "fmw2_logs"

    def _collection(self):
        return self._client.collection(self._collection_name)

    def insert(self, record: GenerationLog) -> str:
        doc_ref = self._collection().document()
        doc_ref.set(
            {
                "template": record.template,
                "template_type": record.template_type,
                "fields": record.fields,
                "user_agent": record.user_agent,
                "created_at": record.created_at.isoformat(),
            }
        )
        return doc_ref.id

    def list_recent(self, limit: int = 50) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        for doc in self._collection().stream():
            data = doc.to_dict() or {}
            rows.append(
                {
                    "log_id": doc.id,
                    "template": data.get("template"),
                    "template_type": data.get("template_type"),
                    "fields": data.get("fields") or {},
                    "user_agent": data.get("user_agent"),
                    "created_at": self._as_iso(data.get("created_at")),
                }
            )
        rows.sort(key=lambda r: str(r.get("created_at") or ""), reverse=True)
        return rows[:limit]

    @staticmethod
    def _as_iso(value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, datetime):
            dt = value if value.tzinfo else value.replace(tzinfo=UTC)
            return dt.isoformat()
        return str(value)
