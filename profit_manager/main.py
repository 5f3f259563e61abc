"""Entry point for the profit manager Textual app."""

from __future__ import annotations

import logging
from pathlib import Path

from profit_manager.config import LOG_FORMAT, LOG_LEVEL, LOG_PATH
from profit_manager.profit_app import ProfitManagerApp


def configure_logging(log_path: str | Path = LOG_PATH, level: str = LOG_LEVEL) -> None:
    """Send application logs to a file so they never draw over the TUI."""
    log_file = Path(log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    logging.getLogger(__name__).info("starting profit manager")
    ProfitManagerApp().run()


if __name__ == "__main__":
    main()
