# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the backend SDK swappable and makes testing easier.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Protocol

from ..tasks.task_models import Task


@dataclass(frozen=True, slots=True)
class Session:
    access_token: str
    refresh_token: str | None = None
    user_id: str | None = None
    expires_at: float | None = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SessionResponse:
    """What the identity backend hands back: a session or an error message."""

    session: Session | None = None
    error: str | None = None


SessionResult = SessionResponse | Awaitable[SessionResponse]


# Identity collaborator. Each capability is optional: a backend may expose any
# subset, and the callback resolver probes them once at construction.


class CodeExchanger(Protocol):
    def exchange_code_for_session(self, url: str) -> SessionResult: ...


class UrlSessionResolver(Protocol):
    def get_session_from_url(self, url: str) -> SessionResult: ...


class SessionSetter(Protocol):
    def set_session(self, access_token: str, refresh_token: str | None) -> SessionResult: ...


class IdentityProvider(Protocol):
    """Marker for the identity backend; see CodeExchanger / UrlSessionResolver / SessionSetter."""


class TaskRepo(Protocol):
    """Data collaborator: CRUD over Task records."""

    def list_tasks(self, *, user_id: str | None = None, limit: int = 500) -> list[Task]: ...
    def get_task(self, task_id: str) -> Task | None: ...

    def add_task(
            self,
            *,
            title: str,
            description: str = "",
            category: str = "work",
            priority: str = "medium",
            due_date: Any = None,
            user_id: str | None = None,
            completed: bool = False,
    ) -> Task: ...

    def update_task_fields(self, task_id: str, **fields: Any) -> bool: ...
    def toggle_completed(self, task_id: str) -> Task | None: ...
    def delete_task(self, task_id: str) -> bool: ...
    def count_tasks(self) -> int: ...
    def close(self) -> None: ...


class Notifier(Protocol):
    """
    Stateless user-facing notification dispatch (toasts / banners).

    Injected into callers; level is one of "success", "error", "info".
    """

    def notify(self, level: str, title: str, message: str = "") -> None: ...
