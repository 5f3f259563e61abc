"""Runtime configuration defaults for storage, export and logging."""

from __future__ import annotations

DB_PATH = "data/profit.db"
EXPORT_DIR = "exports"

# The terminal belongs to the TUI, so logs go to a file.
LOG_PATH = "data/profit-manager.log"
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

CURRENCY_SYMBOL = "$"
