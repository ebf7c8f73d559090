# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _prompt(state: AppState) -> str:
    user = state.session.user
    return f"[{user.name}] > " if user else "[guest] > "


def _print(text: str) -> None:
    print(text, flush=True)


def run_console_loop(
    state: AppState,
    *,
    read: InputFn = input,
    write: OutputFn = _print,
) -> None:
    """
    Read slash commands until /exit or EOF.

    Plain text without a leading slash is treated as a search term for the
    task list. A crashing command is logged and reported; the loop goes on.
    """
    logger.info("Console started (user=%s).", state.session.user.id if state.session.user else None)
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskflow"))
    write(f"[{_ts_local()}] {app_name}: type /help for commands, /exit to quit.")
    if state.session.user is None:
        write("Log in with /login <email> <password> or create an account with /register.")

    def emit(text: str) -> None:
        write(f"[{_ts_local()}] {text}")

    while True:
        try:
            line = read(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            line = "/search " + line

        try:
            reply = command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed line=%r", line.split(" ", 1)[0])
            reply = "Internal error while handling a command."

        if reply is not None:
            write(reply)

    if sys.stdout.isatty():
        write("Bye.")
    logger.info("Console finished.")
