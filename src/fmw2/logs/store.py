from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Protocol
from uuid import uuid4

from fmw2.logs.models import GenerationLog


class GenerationLogSink(Protocol):
    def insert(self, record: GenerationLog) -> str:
        ...

    def list_recent(self, limit: int = 50) -> list[dict[str, Any]]:
        ...


class LogStore:
    """
    SQLite-backed generation log for local/dev.
    FirestoreLogStore implements the same interface for cloud deployments.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self):
        return sqlite3.connect(self.db_path)

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS generation_logs (
                    log_id TEXT PRIMARY KEY,
                    template TEXT NOT NULL,
                    template_type TEXT,
                    fields_json TEXT NOT NULL,
                    user_agent TEXT,
                    created_at TEXT NOT NULL
                );
                """
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_generation_logs_created ON generation_logs (created_at);"
            )
            conn.commit()

    def insert(self, record: GenerationLog) -> str:
        log_id = uuid4().hex
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO generation_logs (log_id, template, template_type, fields_json, user_agent, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    log_id,
                    record.template,
                    record.template_type,
                    json.dumps(record.fields, ensure_ascii=False, default=str),
                    record.user_agent,
                    record.created_at.isoformat(),
                ),
            )
            conn.commit()
        return log_id

    def list_recent(self, limit: int = 50) -> list[dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.execute(
                """
                SELECT log_id, template, template_type, fields_json, user_agent, created_at
                FROM generation_logs
                ORDER BY created_at DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = cur.fetchall()
        return [
            {
                "log_id": log_id,
                "template": template,
                "template_type": template_type,
                "fields": json.loads(fields_json or "{}"),
                "user_agent": user_agent,
                "created_at": created_at,
            }
            for log_id, template, template_type, fields_json, user_agent, created_at in rows
        ]
