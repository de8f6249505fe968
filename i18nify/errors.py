"""Exception hierarchy for extraction runs."""

from __future__ import annotations

from pathlib import Path


class I18nifyError(RuntimeError):
    """Base class for failures that abort an extraction batch."""


class ConfigError(I18nifyError):
    """Raised when the configuration file cannot be parsed."""


class ParseError(I18nifyError):
    """Raised when a source region does not conform to its grammar."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class SourceNotFoundError(I18nifyError):
    """Raised when the requested source path does not exist."""


class DictionaryError(I18nifyError):
    """Raised when a persisted translation dictionary is unreadable."""


__all__ = [
    "ConfigError",
    "DictionaryError",
    "I18nifyError",
    "ParseError",
    "SourceNotFoundError",
]
