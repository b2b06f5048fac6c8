# logger.py — application logger and the record() sink used by the sequencer
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# --- App-wide logger ---
# Defaults to console, but can be configured to log to file.
APP_LOGGER = logging.getLogger("spacemichael")
APP_LOGGER.setLevel(logging.INFO)
_formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s", datefmt="%H:%M:%S")
_console_handler = logging.StreamHandler()
_console_handler.setFormatter(_formatter)
APP_LOGGER.addHandler(_console_handler)

LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "error": logging.ERROR,
}


def configure_file_logging(log_path: Path, level=logging.DEBUG):
    """Configures file logging for APP_LOGGER."""
    # Remove existing file handlers first to prevent duplicates
    for handler in list(APP_LOGGER.handlers):
        if isinstance(handler, logging.FileHandler):
            APP_LOGGER.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setFormatter(_formatter)
    file_handler.setLevel(level)
    APP_LOGGER.addHandler(file_handler)
    APP_LOGGER.info(f"File logging enabled at: {log_path}")


def set_verbosity(verbose: int) -> None:
    if verbose >= 2:
        APP_LOGGER.setLevel(TRACE)
    elif verbose == 1:
        APP_LOGGER.setLevel(logging.DEBUG)
    else:
        APP_LOGGER.setLevel(logging.INFO)


class LogSink:
    """Observational sink for sequencer events.

    ``level`` is one of ``trace``, ``debug`` or ``error``. Implementations must
    not raise; nothing in the sequencer depends on what a sink does.
    """

    def record(self, level: str, context: Mapping[str, Any], message: str) -> None:  # pragma: no cover - interface placeholder
        raise NotImplementedError


class AppLogSink(LogSink):
    """Forwards records to APP_LOGGER, rendering the context after the message."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or APP_LOGGER

    def record(self, level: str, context: Mapping[str, Any], message: str) -> None:
        lvl = LEVELS.get(level, logging.DEBUG)
        if not self._logger.isEnabledFor(lvl):
            return
        if context:
            rendered = " ".join(f"{k}={v!r}" for k, v in context.items())
            self._logger.log(lvl, f"{message} {rendered}")
        else:
            self._logger.log(lvl, message)


class ListSink(LogSink):
    """Keeps every record in memory, for inspection in tests and dry runs."""

    def __init__(self):
        self.records: list[tuple[str, dict, str]] = []

    def record(self, level: str, context: Mapping[str, Any], message: str) -> None:
        self.records.append((level, dict(context), message))

    def messages(self, level: Optional[str] = None) -> list[str]:
        return [m for lvl, _, m in self.records if level is None or lvl == level]
