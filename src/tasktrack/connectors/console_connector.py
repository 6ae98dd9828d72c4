# src/tasktrack/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _prompt(state: AppState) -> str:
    if state.composer.nl_mode:
        return ">>> describe task: "
    session = state.sessions.current_session()
    who = session.username if session is not None else "anonymous"
    return f">>> {who}@{state.router.current}: "


async def run_console_loop(state: AppState) -> None:
    """
    Read lines from stdin and dispatch slash commands until /exit or EOF.

    input() blocks the loop while waiting; nothing else is scheduled on it
    between commands, and Ctrl+C arrives as KeyboardInterrupt right here.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.")
    if not state.sessions.is_authenticated():
        _print_ts("Not logged in. Use /login <username> <password>.")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for slow backend calls.
        _print_ts(text)

    while True:
        try:
            user_input = input(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text while natural-language mode is on goes to the AI parser.
        if not user_input.startswith("/") and state.composer.nl_mode:
            user_input = f"/parse {user_input}"

        try:
            response = await command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Not a command. Use /help to list available commands."
        _print_ts(response)

    logger.info("Console connector finished.")
