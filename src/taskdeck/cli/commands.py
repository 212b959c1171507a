# src/taskdeck/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Iterable

from ..core.state import AppState
from ..tasks.catalog import (
    TASK_CATEGORIES,
    TASK_PRIORITIES,
    calculate_progress,
    get_category_by_id,
    get_priority_by_id,
)
from ..tasks.task_models import DateRange, FilterCriteria, SortBy, SortOrder, Task
from ..tasks.task_query import (
    filter_tasks,
    get_task_stats,
    get_upcoming_tasks,
    group_tasks_by_category,
    group_tasks_by_date,
    group_tasks_by_priority,
    is_task_overdue,
    search_tasks,
)

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

_YES = {"1", "true", "yes", "y", "on"}
_CATEGORY_IDS = {c.id for c in TASK_CATEGORIES}
_PRIORITY_IDS = {p.id for p in TASK_PRIORITIES}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate bare words from key=value options."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key:
            opts[key.lower()] = value
        else:
            words.append(a)
    return words, opts


def _csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [p.strip().lower() for p in raw.split(",") if p.strip()]


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    due = task.due_at
    due_s = due.strftime("%Y-%m-%d %H:%M") if due is not None else "no due date"
    flag = " !overdue" if is_task_overdue(task) else ""
    cat = get_category_by_id(task.category).name if task.category in _CATEGORY_IDS else (task.category or "-")
    prio = get_priority_by_id(task.priority).name if task.priority in _PRIORITY_IDS else (task.priority or "-")
    return f"#{task.id} [{mark}] {task.title} ({cat}, {prio}, {due_s}){flag}"


def _format_list(tasks: Iterable[Task], empty: str = "No tasks.") -> str:
    lines = [format_task(t) for t in tasks]
    return "\n".join(lines) if lines else empty


def _format_groups(title: str, groups: dict[str, list[Task]]) -> str:
    lines = [title]
    for key, items in groups.items():
        lines.append(f"{key or '(none)'} ({len(items)}):")
        lines.extend(f"  {format_task(t)}" for t in items)
    return "\n".join(lines)


def _all_tasks(state: AppState) -> list[Task]:
    return state.task_store.list_tasks(user_id=state.user_id)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk category=shopping priority=high due=2026-01-31T18:00 desc="2 litres"
    """
    words, opts = _split_options(args)
    title = " ".join(words).strip()
    if not title:
        return "Usage: /add <title> [category=..] [priority=high|medium|low] [due=ISO-date] [desc=..]"

    try:
        task = state.task_store.add_task(
            title=title,
            description=opts.get("desc", ""),
            category=opts.get("category", "work"),
            priority=opts.get("priority", "medium"),
            due_date=opts.get("due") or None,
            user_id=state.user_id,
        )
    except ValueError as e:
        logger.info("add_task rejected: %s", e)
        return f"Cannot add task: {e}"

    state.notifier.notify("success", "Task added", task.title)
    return f"Added {format_task(task)}"


def build_criteria(state: AppState, opts: dict[str, str]) -> FilterCriteria:
    settings = state.settings
    show_completed = getattr(settings, "show_completed", False)
    if "completed" in opts:
        show_completed = opts["completed"].strip().lower() in _YES

    return FilterCriteria(
        categories=frozenset(_csv(opts.get("category"))),
        priorities=frozenset(_csv(opts.get("priority"))),
        date_range=DateRange.from_raw(opts.get("range")),
        show_completed=show_completed,
        sort_by=SortBy.from_raw(opts.get("sort", getattr(settings, "default_sort", None))),
        sort_order=SortOrder.from_raw(opts.get("order", getattr(settings, "default_sort_order", "asc"))),
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [category=work,home] [priority=high] [range=today|tomorrow|thisWeek|overdue|upcoming]
          [sort=dueDate|priority|category|created|title|completed] [order=asc|desc]
          [completed=yes] [q=text]
    """
    words, opts = _split_options(args)
    query = opts.get("q", " ".join(words))
    criteria = build_criteria(state, opts)
    tasks = filter_tasks(_all_tasks(state), criteria, query)
    return _format_list(tasks)


def cmd_search(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /search <text>"
    found = search_tasks(_all_tasks(state), " ".join(args))
    return _format_list(found, empty="Nothing matches.")


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <task id>"
    try:
        task = state.task_store.toggle_completed(args[0].lstrip("#"))
    except ValueError:
        return f"Invalid task id: {args[0]}"
    if task is None:
        return f"No task #{args[0].lstrip('#')}."
    return f"Updated {format_task(task)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <task id>"
    task_id = args[0].lstrip("#")
    try:
        deleted = state.task_store.delete_task(task_id)
    except ValueError:
        return f"Invalid task id: {args[0]}"
    if not deleted:
        return f"No task #{task_id}."
    state.notifier.notify("info", "Task deleted", f"#{task_id}")
    return f"Deleted #{task_id}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    tasks = _all_tasks(state)
    stats = get_task_stats(tasks)
    progress = calculate_progress(tasks)
    return (
        "Stats:\n"
        f"  Total: {stats.total}\n"
        f"  Completed: {stats.completed} ({stats.completion_rate}%)\n"
        f"  Pending: {stats.pending}\n"
        f"  Overdue: {stats.overdue}\n"
        f"  Due today: {stats.due_today}\n"
        f"  Due tomorrow: {stats.due_tomorrow}\n"
        f"  Progress: {progress.completed}/{progress.total}"
    )


def cmd_group(state: AppState, args: list[str]) -> str:
    """
    /group date      -> overdue / today / tomorrow / thisWeek / later
    /group category  -> one bucket per category
    /group priority  -> high / medium / low
    """
    mode = (args[0].lower() if args else "date")
    tasks = _all_tasks(state)

    if mode == "date":
        return _format_groups("Tasks by date:", group_tasks_by_date(tasks))
    if mode == "category":
        return _format_groups("Tasks by category:", group_tasks_by_category(tasks))
    if mode == "priority":
        return _format_groups("Tasks by priority:", group_tasks_by_priority(tasks))
    return "Usage: /group date | category | priority"


def cmd_upcoming(state: AppState, args: list[str]) -> str:
    limit = getattr(state.settings, "upcoming_limit", 5)
    if args:
        try:
            limit = int(args[0])
        except ValueError:
            return "Usage: /upcoming [limit]"
    return _format_list(get_upcoming_tasks(_all_tasks(state), limit), empty="Nothing upcoming.")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [category=..] [priority=..] [due=..].")
registry.register("list", cmd_list, help_text="List tasks with filters: /list range=today sort=priority.", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search title/description/category.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("stats", cmd_stats, help_text="Show task statistics.")
registry.register("group", cmd_group, help_text="Group tasks: /group date | category | priority.")
registry.register("upcoming", cmd_upcoming, help_text="Next tasks due from now: /upcoming [limit].")
