"""Entry point for the kata browser.

Runs a full-screen terminal session: search the catalog, browse results and
download a kata's instructions and sample code. Takes no arguments and
returns 0 when the user quits.

Logging goes to a file (general.log_file) because the UI owns the terminal.
"""
from __future__ import annotations

import curses
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from kata_api.core.config import get_general_config

from .console_ui import ConsoleUI
from .state_machine import InteractionStateMachine

logger = logging.getLogger(__name__)


def configure_logging(log_file: Optional[str] = None, level: Optional[str] = None) -> None:
    """Send log records to a file with the standard format."""
    general = get_general_config()
    log_file = log_file or general["log_file"]
    level_name = str(level or general["log_level"]).upper()

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        filename=log_file,
        encoding="utf-8",
    )

    # Reduce noisy retry logs from urllib3
    logging.getLogger("urllib3").setLevel(logging.ERROR)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)


def run_app(stdscr, machine: InteractionStateMachine) -> None:
    """Event loop: draw, read one event, apply it, until quit."""
    ui = ConsoleUI(stdscr)
    while True:
        ui.render(machine.state)
        event = ui.read_event()
        if event is None:
            continue
        if not machine.handle(event):
            return


def main() -> int:
    try:
        configure_logging()
    except OSError as e:
        print(f"Cannot open log file: {e}", file=sys.stderr)
        return 1

    # Short ESC delay so Esc feels immediate
    os.environ.setdefault("ESCDELAY", "25")

    machine = InteractionStateMachine()
    logger.info("Starting kata browser")
    curses.wrapper(run_app, machine)
    logger.info("Exiting kata browser")
    return 0


if __name__ == "__main__":
    sys.exit(main())
