# src/airdrop_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads projects, then runs the console REPL.
Queued progress writes are drained before exit.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, load_projects
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.tracker.close()
    except Exception:
        logger.exception("Failed to drain progress writes.")

    try:
        store = state.store
        if store is not None and hasattr(store, "close"):
            store.close()
    except Exception:
        logger.debug("Project store close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/airdrop")
    log_file = setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s... (log file: %s)", getattr(settings, "app_name", "airdrop-tracker"), log_file)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    if state.store is None:
        logger.warning("No backend configured; set AIRDROP_BACKEND_URL to load projects.")
    else:
        state.projects = load_projects(state)

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
