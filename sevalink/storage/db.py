"""SQLite store for chat records and synthesized service requests.

This module provides the SevaLinkStore class for persistent storage of:
- Chat records (one per processed message)
- Service requests (one per qualifying message)
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

from sevalink.models import ChatRecord, RequestType, SynthesizedRequest

SCHEMA_SQL = """
-- Chat log: every processed message with its reply
CREATE TABLE IF NOT EXISTS chat_messages (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    message TEXT NOT NULL,
    reply TEXT NOT NULL,
    category TEXT NOT NULL,
    priority TEXT NOT NULL,
    language TEXT NOT NULL,
    input_method TEXT NOT NULL,
    using_fallback INTEGER NOT NULL,
    request_id TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_chat_user ON chat_messages(user_id);

-- Service requests: source_message_id makes retried saves idempotent
CREATE TABLE IF NOT EXISTS service_requests (
    id TEXT PRIMARY KEY,
    type TEXT NOT NULL,
    title TEXT NOT NULL,
    priority TEXT NOT NULL,
    status TEXT NOT NULL,
    user_id TEXT NOT NULL,
    source TEXT NOT NULL,
    source_message_id TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL,
    payload_json TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_requests_type ON service_requests(type);
"""


class PersistenceFailure(Exception):
    """Raised when an entity cannot be written to the store."""


class SevaLinkStore:
    """SQLite-backed persistence for the chat pipeline.

    Safe to call from the event loop and from worker threads; a single
    connection is shared behind a lock.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = sqlite3.connect(
            db_path, check_same_thread=False,
        )
        self._conn.row_factory = sqlite3.Row
        if db_path != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(SCHEMA_SQL)
        self._conn.commit()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise PersistenceFailure("Database connection is closed")
        return self._conn

    def save(self, entity: SynthesizedRequest | ChatRecord) -> str:
        """Persist *entity* and return its id.

        Raises:
            PersistenceFailure: On any database error.
        """
        if isinstance(entity, SynthesizedRequest):
            return self.save_request(entity)
        return self.save_chat(entity)

    def save_request(self, request: SynthesizedRequest) -> str:
        try:
            with self._lock:
                conn = self._connection()
                conn.execute(
                    """INSERT OR IGNORE INTO service_requests
                       (id, type, title, priority, status, user_id, source,
                        source_message_id, created_at, payload_json)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        request.id,
                        request.type.value,
                        request.title,
                        request.priority.value,
                        request.status,
                        request.user_id,
                        request.source,
                        request.source_message_id,
                        request.created_at,
                        request.model_dump_json(),
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Failed to save request {request.id}: {e}") from e
        return request.id

    def save_chat(self, record: ChatRecord) -> str:
        try:
            with self._lock:
                conn = self._connection()
                conn.execute(
                    """INSERT OR REPLACE INTO chat_messages
                       (id, user_id, message, reply, category, priority, language,
                        input_method, using_fallback, request_id, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        record.id,
                        record.user_id,
                        record.message,
                        record.reply,
                        record.category.value,
                        record.priority.value,
                        record.language.value,
                        record.input_method.value,
                        int(record.using_fallback),
                        record.request_id,
                        record.created_at,
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Failed to save chat record {record.id}: {e}") from e
        return record.id

    def get_request(self, request_id: str) -> SynthesizedRequest | None:
        with self._lock:
            row = self._connection().execute(
                "SELECT payload_json FROM service_requests WHERE id = ?", (request_id,)
            ).fetchone()
        if row is None:
            return None
        return SynthesizedRequest.model_validate_json(row["payload_json"])

    def list_requests(
        self, request_type: RequestType | None = None, limit: int = 50,
    ) -> list[SynthesizedRequest]:
        sql = "SELECT payload_json FROM service_requests"
        params: tuple[object, ...] = ()
        if request_type is not None:
            sql += " WHERE type = ?"
            params = (request_type.value,)
        sql += " ORDER BY created_at DESC LIMIT ?"
        params = (*params, limit)
        with self._lock:
            rows = self._connection().execute(sql, params).fetchall()
        return [SynthesizedRequest.model_validate_json(r["payload_json"]) for r in rows]

    def list_chats(self, user_id: str, limit: int = 50) -> list[ChatRecord]:
        with self._lock:
            rows = self._connection().execute(
                """SELECT * FROM chat_messages WHERE user_id = ?
                   ORDER BY created_at DESC LIMIT ?""",
                (user_id, limit),
            ).fetchall()
        return [
            ChatRecord.model_validate({**dict(r), "using_fallback": bool(r["using_fallback"])})
            for r in rows
        ]

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> SevaLinkStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
