# src/taskdeck/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from .dates import parse_timestamp
from .task_models import Priority, Task

logger = logging.getLogger(__name__)


def _to_epoch(raw: Any) -> float | None:
    dt = parse_timestamp(raw)
    return dt.timestamp() if dt is not None else None


class TaskStore:
    """
    SQLite task store (local data collaborator).

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Timestamps are stored as POSIX seconds (REAL).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    category TEXT NOT NULL DEFAULT '',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    due_date REAL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("user_id", "TEXT")
            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("category", "TEXT NOT NULL DEFAULT ''")
            add_col("priority", "TEXT NOT NULL DEFAULT 'medium'")
            add_col("due_date", "REAL")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user_due ON tasks(user_id, due_date)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            category=str(row["category"] or ""),
            priority=str(row["priority"] or ""),
            due_date=float(row["due_date"]) if row["due_date"] is not None else None,
            completed=bool(row["completed"]),
            created_at=float(row["created_at"] or 0.0),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        title: str,
        description: str = "",
        category: str = "work",
        priority: str = Priority.MEDIUM,
        due_date: Any = None,
        user_id: str | None = None,
        completed: bool = False,
    ) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")

        prio = (priority or "").strip().lower()
        if prio not in {p.value for p in Priority}:
            raise ValueError(f"unknown priority: {priority!r}")

        due_ts = _to_epoch(due_date)
        if due_date is not None and due_ts is None:
            raise ValueError(f"unparseable due_date: {due_date!r}")

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(
                    user_id, title, description, category, priority,
                    due_date, completed, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    title.strip(),
                    (description or "").strip(),
                    (category or "").strip(),
                    prio,
                    due_ts,
                    int(bool(completed)),
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            logger.debug("Task added id=%s category=%s priority=%s due=%s", rowid, category, prio, due_ts)
        finally:
            conn.close()

        task = self.get_task(str(rowid))
        if task is None:
            raise RuntimeError(f"task {rowid} vanished after insert")
        return task

    def get_task(self, task_id: str) -> Task | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self, *, user_id: str | None = None, limit: int = 500) -> list[Task]:
        """All tasks (optionally for one user), newest first as the backend returns them."""
        conn = self._get_conn()
        try:
            if user_id is None:
                rows = conn.execute(
                    "SELECT * FROM tasks ORDER BY created_at DESC, id DESC LIMIT ?",
                    (int(limit),),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM tasks WHERE user_id = ? ORDER BY created_at DESC, id DESC LIMIT ?",
                    (user_id, int(limit)),
                ).fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def update_task_fields(
        self,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        category: str | None = None,
        priority: str | None = None,
        due_date: Any = None,
        completed: bool | None = None,
    ) -> bool:
        """Patch the given fields; returns False if the task does not exist."""
        fields: list[str] = []
        params: list[Any] = []

        if title is not None:
            if not title.strip():
                raise ValueError("title cannot be empty")
            fields.append("title = ?")
            params.append(title.strip())

        if description is not None:
            fields.append("description = ?")
            params.append(description.strip())

        if category is not None:
            fields.append("category = ?")
            params.append(category.strip())

        if priority is not None:
            prio = priority.strip().lower()
            if prio not in {p.value for p in Priority}:
                raise ValueError(f"unknown priority: {priority!r}")
            fields.append("priority = ?")
            params.append(prio)

        if due_date is not None:
            due_ts = _to_epoch(due_date)
            if due_ts is None:
                raise ValueError(f"unparseable due_date: {due_date!r}")
            fields.append("due_date = ?")
            params.append(due_ts)

        if completed is not None:
            fields.append("completed = ?")
            params.append(int(bool(completed)))

        if not fields:
            return self.get_task(task_id) is not None

        fields.append("updated_at = ?")
        params.append(time.time())
        params.append(int(task_id))

        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def set_completed(self, task_id: str, completed: bool) -> bool:
        return self.update_task_fields(task_id, completed=completed)

    def toggle_completed(self, task_id: str) -> Task | None:
        task = self.get_task(task_id)
        if task is None:
            return None
        self.set_completed(task_id, not task.completed)
        return self.get_task(task_id)

    def delete_task(self, task_id: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            deleted = cur.rowcount == 1
        finally:
            conn.close()
        if deleted:
            logger.debug("Task deleted id=%s", task_id)
        return deleted
