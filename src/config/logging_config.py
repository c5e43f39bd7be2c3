# src/config/logging_config.py

"""Per-run logging for the aggregator and the HTTP server around it.

Every launch writes one file, ``logs/run_YYYYMMDD_HHMMSS.log``. The
``shopping_ai.*`` loggers and uvicorn's own loggers share its handlers,
so request access lines sit next to the provider failures they caused.
Upstream error bodies are only ever written here, never to clients.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import LogLevel, Settings

APP_LOGGER = "shopping_ai"

# uvicorn.error propagates into "uvicorn"; access does not
SERVER_LOGGERS: tuple[str, ...] = ("uvicorn", "uvicorn.access")

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _run_log_path() -> Path:
    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Settings.LOGS_DIR / f"run_{stamp}.log"


def _current_log_file(logger: logging.Logger) -> Path | None:
    """Return the file an already configured logger writes to."""
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(console_level: LogLevel = "WARNING") -> Path:
    """Configure the ``shopping_ai`` logger once per process.

    The file handler records everything at DEBUG; the stderr handler
    only shows *console_level* and above.

    Returns:
        The path of the per-run log file. Repeated calls keep the
        existing handlers and return the same path.
    """
    app_logger = logging.getLogger(APP_LOGGER)
    existing = _current_log_file(app_logger)
    if existing is not None:
        return existing

    log_file = _run_log_path()
    app_logger.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    app_logger.addHandler(file_handler)
    app_logger.addHandler(console_handler)
    app_logger.info("Logging initialised, log file: %s", log_file)
    return log_file


def attach_server_loggers() -> None:
    """Route uvicorn's loggers through the per-run handlers.

    Pair with ``uvicorn.run(..., log_config=None)`` so uvicorn does not
    replace these handlers with its own defaults.
    """
    app_handlers = logging.getLogger(APP_LOGGER).handlers
    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.setLevel(logging.INFO)
        server_logger.propagate = False
        for handler in app_handlers:
            if handler not in server_logger.handlers:
                server_logger.addHandler(handler)
