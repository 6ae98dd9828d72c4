# src/tasktrack/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, restores the saved session (if any),
then runs the console loop until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import OperationFailure
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def load_restored_view(state: AppState) -> None:
    """Fill the task list for a session restored from disk. Failures only log."""
    if not state.sessions.is_authenticated():
        return
    try:
        await state.board.load_tasks()
    except OperationFailure as e:
        logger.warning("Initial task load failed: %s", e.message)


async def _run(state: AppState) -> None:
    try:
        await load_restored_view(state)
        await run_console_loop(state)
    finally:
        try:
            await state.aclose()
        except Exception:
            logger.debug("Transport close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (backend=%s)...", settings.app_name, settings.api_base_url)

    state = create_initial_state(settings=settings)
    state.sessions.initialize()
    if state.sessions.is_authenticated():
        state.router.navigate("tasks")

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        state.router.close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
