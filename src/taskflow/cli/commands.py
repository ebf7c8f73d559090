# src/taskflow/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import MAXYEAR, MINYEAR
from pathlib import Path
from typing import Any, cast

from ..core.clock import local_now, parse_day
from ..core.errors import InvalidTaskData, TaskflowError
from ..core.state import AppState
from ..tasks.task_api import TaskBoard
from ..tasks.task_models import ALL
from ..transfer import export_to_file, import_from_file
from ..views import render
from ..views.calendar import month_grid, shift_month, tasks_for_day
from ..views.stats import analytics_summary, dashboard_summary

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# key=value aliases accepted by /add and /update
_FIELD_ALIASES = {
    "title": "title",
    "t": "title",
    "desc": "description",
    "description": "description",
    "d": "description",
    "priority": "priority",
    "p": "priority",
    "status": "status",
    "s": "status",
    "category": "category",
    "cat": "category",
    "c": "category",
    "due": "dueDate",
    "duedate": "dueDate",
}

NOT_LOGGED_IN = "Not logged in. Use /login <email> <password> or /register <email> <password> <name>."


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Arguments are split shell-style, so quoted titles keep their spaces.
        User-facing failures (TaskflowError) become the reply text.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskflowError as e:
            logger.debug("Command /%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _board(state: AppState) -> TaskBoard | None:
    if state.session.user is None:
        return None
    if state.board is None or state.board.user_id != state.session.user.id:
        state.open_board()
    return state.board


def _parse_fields(args: list[str]) -> tuple[list[str], dict[str, Any]]:
    """Split args into positional words and key=value task fields."""
    words: list[str] = []
    fields: dict[str, Any] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in _FIELD_ALIASES:
            fields[_FIELD_ALIASES[key.lower()]] = value
        else:
            words.append(arg)
    if "dueDate" in fields and fields["dueDate"] and parse_day(fields["dueDate"]) is None:
        raise InvalidTaskData(f"due date must look like YYYY-MM-DD (got {fields['dueDate']!r})")
    return words, fields


# ---- general ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    user = state.session.user
    who = f"{user.name} <{user.email}>" if user else "(not logged in)"
    store_path = getattr(state.settings, "store_path", "?")
    lines = ["Status:", f"  User: {who}", f"  Store: {store_path}"]
    board = state.board
    if board is not None:
        f = board.filter
        lines.append(f"  Tasks loaded: {len(board.tasks)}")
        lines.append(f"  Filter: status={f.status} priority={f.priority} category={f.category}")
        if state.search:
            lines.append(f"  Search: {state.search!r}")
    return "\n".join(lines)


# ---- session ----


def cmd_register(state: AppState, args: list[str]) -> str:
    """/register <email> <password> <name...>"""
    if len(args) < 3:
        return "Usage: /register <email> <password> <name>"
    email, password, name = args[0], args[1], " ".join(args[2:])
    user = state.session.register(email, password, name)
    state.open_board()
    return f"Account created. Welcome, {user.name}!"


def cmd_login(state: AppState, args: list[str]) -> str:
    """/login <email> <password>"""
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    try:
        user = state.session.login(args[0], args[1])
    finally:
        # A failed login leaves the session unset; drop any previous board.
        state.open_board()
    return f"Welcome back, {user.name}! {len(state.board.tasks) if state.board else 0} tasks loaded."


def cmd_logout(state: AppState, args: list[str]) -> str:
    if state.session.user is None:
        return "Not logged in."
    state.session.logout()
    state.open_board()
    return "Logged out."


def cmd_whoami(state: AppState, args: list[str]) -> str:
    user = state.session.user
    if user is None:
        return NOT_LOGGED_IN
    return f"{user.name} <{user.email}> (id {user.id}, member since {render.member_since(user.created_at)})"


# ---- tasks ----


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title...> [priority=..] [status=..] [category=..] [due=YYYY-MM-DD] [desc=..]"""
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    words, fields = _parse_fields(args)
    if words and "title" not in fields:
        fields["title"] = " ".join(words)
    if not fields.get("title"):
        return "Usage: /add <title> [priority=low|medium|high] [category=..] [due=YYYY-MM-DD] [desc=..]"
    task = board.create(fields)
    return "Created: " + render.task_line(task)


def cmd_list(state: AppState, args: list[str]) -> str:
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    if args and args[0].lower() in ("refresh", "reload"):
        board.refresh()
        if board.error:
            return f"Error: {board.error}"
    return render.task_list(board.visible_tasks(state.search), board.filter, state.search)


def cmd_show(state: AppState, args: list[str]) -> str:
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    if len(args) != 1:
        return "Usage: /show <task-id>"
    task = board.get(args[0])
    if task is None:
        return f"No task matching {args[0]!r}."
    return render.task_detail(task)


def cmd_update(state: AppState, args: list[str]) -> str:
    """/update <task-id> key=value ..."""
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    if len(args) < 2:
        return "Usage: /update <task-id> [title=..] [priority=..] [status=..] [category=..] [due=..] [desc=..]"
    task = board.get(args[0])
    if task is None:
        return f"No task matching {args[0]!r}."
    words, fields = _parse_fields(args[1:])
    if words:
        return f"Expected key=value pairs, got: {' '.join(words)}"
    updated = board.update(task.id, fields)
    return "Updated: " + render.task_line(updated)


def _set_status(status: str) -> CommandHandler2:
    def handler(state: AppState, args: list[str]) -> str:
        board = _board(state)
        if board is None:
            return NOT_LOGGED_IN
        if len(args) != 1:
            return "Usage: /<start|done|reopen> <task-id>"
        task = board.get(args[0])
        if task is None:
            return f"No task matching {args[0]!r}."
        updated = board.update(task.id, {"status": status})
        return f"Marked {status}: " + render.task_line(updated)

    return handler


def cmd_delete(state: AppState, args: list[str]) -> str:
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    if len(args) != 1:
        return "Usage: /delete <task-id>"
    task = board.get(args[0])
    # Only ids on the user's own board reach the directory.
    if task is None:
        return f"No task {args[0]!r}; nothing deleted."
    board.delete(task.id)
    return f"Deleted {task.id[:render.ID_WIDTH]}."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """/filter [status=..] [priority=..] [category=..] | /filter reset"""
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    if args and args[0].lower() in ("reset", "clear", ALL):
        board.reset_filter()
    else:
        changes: dict[str, str] = {}
        for arg in args:
            key, sep, value = arg.partition("=")
            key = _FIELD_ALIASES.get(key.lower(), key.lower())
            if not sep or key not in ("status", "priority", "category"):
                return "Usage: /filter [status=..] [priority=..] [category=..] | /filter reset"
            changes[key] = value
        board.set_filter(**changes)
    f = board.filter
    cats = ", ".join(board.categories) or "-"
    return (
        f"Filter: status={f.status} priority={f.priority} category={f.category} "
        f"({len(board.filtered_tasks)} of {len(board.tasks)} tasks). Categories: {cats}"
    )


def cmd_search(state: AppState, args: list[str]) -> str:
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    state.search = " ".join(args)
    return render.task_list(board.visible_tasks(state.search), board.filter, state.search)


# ---- screens ----


def cmd_dashboard(state: AppState, args: list[str]) -> str:
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    limit = int(getattr(state.settings, "recent_limit", 5))
    user = state.session.user
    return render.dashboard(dashboard_summary(board.tasks, recent_limit=limit), user.name if user else "")


def cmd_analytics(state: AppState, args: list[str]) -> str:
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN
    return render.analytics(analytics_summary(board.tasks))


def cmd_calendar(state: AppState, args: list[str]) -> str:
    """/calendar [prev|next|today|YYYY-MM] | /calendar day YYYY-MM-DD"""
    board = _board(state)
    if board is None:
        return NOT_LOGGED_IN

    today = local_now().date()
    year, month = state.calendar_month or (today.year, today.month)

    if args:
        arg = args[0].lower()
        if arg == "day":
            day = parse_day(args[1]) if len(args) > 1 else today
            if day is None:
                return "Usage: /calendar day YYYY-MM-DD"
            return render.day_tasks(tasks_for_day(board.tasks, day), day.isoformat())
        if arg in ("prev", "previous"):
            year, month = shift_month(year, month, -1)
        elif arg == "next":
            year, month = shift_month(year, month, 1)
        elif arg == "today":
            year, month = today.year, today.month
        else:
            first = parse_day(f"{args[0]}-01")
            if first is None:
                return "Usage: /calendar [prev|next|today|YYYY-MM] | /calendar day YYYY-MM-DD"
            year, month = first.year, first.month

    # The 6-week grid spills into the neighbouring months.
    if not MINYEAR < year < MAXYEAR:
        return f"Calendar months must fall within years {MINYEAR + 1}..{MAXYEAR - 1}."

    state.calendar_month = (year, month)
    cells = month_grid(board.tasks, year, month, today=today)
    return render.month_calendar(cells, year, month)


# ---- settings ----


def cmd_profile(state: AppState, args: list[str]) -> str:
    """/profile [name=..] [email=..]"""
    user = state.session.user
    if user is None:
        return NOT_LOGGED_IN
    changes: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or key.lower() not in ("name", "email"):
            return "Usage: /profile [name=..] [email=..]"
        changes[key.lower()] = value
    if not changes:
        return f"Profile: {user.name} <{user.email}>, member since {render.member_since(user.created_at)}"
    updated = state.accounts.update_profile(user.id, **changes)
    state.session.refresh(updated)
    return "Profile updated successfully!"


def cmd_password(state: AppState, args: list[str]) -> str:
    """/password <current> <new> <confirm>"""
    user = state.session.user
    if user is None:
        return NOT_LOGGED_IN
    if len(args) != 3:
        return "Usage: /password <current> <new> <confirm>"
    state.accounts.change_password(user.id, args[0], args[1], args[2])
    return "Password changed successfully!"


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    user = state.session.user
    if user is None:
        return NOT_LOGGED_IN
    out_dir = Path(args[0]).expanduser() if args else Path(getattr(state.settings, "export_dir", "."))
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Exporting {len(state.task_repo.all_tasks())} task records to {out_dir}...")
    path = export_to_file(user, state.task_repo, out_dir)
    return f"Exported to {path}"


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.session.user is None:
        return NOT_LOGGED_IN
    if len(args) != 1:
        return "Usage: /import <file.json>"
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Importing {args[0]}: the stored task list will be replaced...")
    n = import_from_file(Path(args[0]).expanduser(), state.task_repo)
    if n is None:
        return "Nothing to import (document has no tasks)."
    board = _board(state)
    if board is not None:
        board.refresh()
    return f"Data imported successfully! {n} records replaced the task list."


def cmd_delete_account(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.session.user is None:
        return NOT_LOGGED_IN
    if not args or args[0].lower() != "yes":
        return (
            "This wipes ALL local data (every account and every task) and cannot be undone.\n"
            "Run /delete-account yes to confirm."
        )
    if emit:
        with contextlib.suppress(Exception):
            emit("Deleting every account and task...")
    state.accounts.delete_account()
    state.session.logout()
    state.open_board()
    return "All local data deleted. You have been logged out."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session, store and filter state.")
registry.register("register", cmd_register, help_text="Create an account: /register <email> <password> <name>.")
registry.register("login", cmd_login, help_text="Log in: /login <email> <password>.")
registry.register("logout", cmd_logout, help_text="Log out.")
registry.register("whoami", cmd_whoami, help_text="Show the current user.")
registry.register(
    "add", cmd_add, help_text="New task: /add <title> [priority=..] [category=..] [due=..] [desc=..].", aliases=["new"]
)
registry.register("list", cmd_list, help_text="List tasks (filter + search applied): /list [refresh].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <task-id>.")
registry.register("update", cmd_update, help_text="Edit a task: /update <task-id> key=value ...", aliases=["edit"])
registry.register("start", _set_status("in-progress"), help_text="Mark a task in progress: /start <task-id>.")
registry.register("done", _set_status("completed"), help_text="Mark a task completed: /done <task-id>.")
registry.register("reopen", _set_status("pending"), help_text="Mark a task pending: /reopen <task-id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <task-id>.", aliases=["rm"])
registry.register("filter", cmd_filter, help_text="Filter: /filter status=.. priority=.. category=.. | reset.")
registry.register("search", cmd_search, help_text="Search titles/descriptions: /search <text> (empty clears).")
registry.register("dashboard", cmd_dashboard, help_text="Counts, completion rate, recent tasks.", aliases=["dash"])
registry.register("analytics", cmd_analytics, help_text="Status/priority/category breakdowns and weekly trend.")
registry.register(
    "calendar", cmd_calendar, help_text="Month view: /calendar [prev|next|today|YYYY-MM] | day YYYY-MM-DD.", aliases=["cal"]
)
registry.register("profile", cmd_profile, help_text="Show or edit profile: /profile [name=..] [email=..].")
registry.register("password", cmd_password, help_text="Change password: /password <current> <new> <confirm>.")
registry.register("export", cmd_export, help_text="Export data to JSON: /export [dir].")
registry.register("import", cmd_import, help_text="Replace tasks from an exported JSON file: /import <file>.")
registry.register("delete-account", cmd_delete_account, help_text="Wipe all local data: /delete-account yes.")