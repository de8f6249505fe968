"""Logging utilities for i18nify commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple

_LOGGER_NAME = "i18nify"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the i18nify hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class FileLogAdapter(logging.LoggerAdapter):
    """Prefixes every record with the source file it is about."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"{self.extra['path']}: {msg}", kwargs


def get_file_logger(name: str, path: Path | str) -> FileLogAdapter:
    """Return a logger for messages about a single source file."""
    return FileLogAdapter(get_logger(name), {"path": display_path(path)})


def display_path(path: Path | str) -> str:
    """Render ``path`` relative to the working directory when it lives below it."""
    candidate = Path(path)
    if candidate.is_absolute():
        try:
            return candidate.relative_to(Path.cwd()).as_posix()
        except ValueError:
            return str(candidate)
    return candidate.as_posix()


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the i18nify logger with console output and optional file sink.

    Verbose mode adds per-span DEBUG lines (key, kind and text of every
    extraction); the default INFO level reports one line per changed file.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[i18nify] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["FileLogAdapter", "configure_logging", "display_path", "get_file_logger", "get_logger"]
