"""Configuration loading for i18nify (.i18nify.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .keys import DEFAULT_HASH_LENGTH

CONFIG_FILENAME = ".i18nify.yml"
DEFAULT_OUTPUT = "translations.json"


@dataclass
class FunctionConfig:
    """Names of the runtime translation functions."""

    template: str = "$t"
    script: str = "t"


@dataclass
class ImportConfig:
    """Module and composable injected into components that gain script calls."""

    source: str = "vue-i18n"
    accessor: str = "useI18n"


@dataclass
class I18nifyConfig:
    """Represents the settings defined in .i18nify.yml."""

    root: Path
    output: Path
    hash_length: int = DEFAULT_HASH_LENGTH
    functions: FunctionConfig = field(default_factory=FunctionConfig)
    logging_calls: List[str] = field(default_factory=lambda: ["console.log"])
    imports: ImportConfig = field(default_factory=ImportConfig)
    exclude_paths: List[str] = field(default_factory=lambda: ["node_modules/"])


def default_config(root: Path | None = None) -> I18nifyConfig:
    root = (root or Path.cwd()).resolve()
    return I18nifyConfig(root=root, output=root / DEFAULT_OUTPUT)


def load_config(config_path: Path | None = None) -> I18nifyConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path or Path.cwd())
    root = config_file.parent.resolve()

    if not config_file.exists():
        return default_config(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = default_config(root)

    output = _as_str(data.get("output"))
    if output:
        config.output = (root / output).resolve()

    keys_data = _as_dict(data.get("keys"))
    if "hash_length" in keys_data:
        hash_length = _as_int(keys_data.get("hash_length"))
        if hash_length is None or not 1 <= hash_length <= 32:
            raise ConfigError("keys.hash_length must be an integer between 1 and 32")
        config.hash_length = hash_length

    functions_data = _as_dict(data.get("functions"))
    if functions_data:
        config.functions = FunctionConfig(
            template=_as_str(functions_data.get("template")) or config.functions.template,
            script=_as_str(functions_data.get("script")) or config.functions.script,
        )

    if "logging_calls" in data:
        calls = _as_str_list(data.get("logging_calls"))
        malformed = [call for call in calls if call.count(".") != 1]
        if malformed:
            raise ConfigError(
                "logging_calls entries must look like 'namespace.method': " + ", ".join(malformed)
            )
        config.logging_calls = calls

    imports_data = _as_dict(data.get("imports"))
    if imports_data:
        config.imports = ImportConfig(
            source=_as_str(imports_data.get("source")) or config.imports.source,
            accessor=_as_str(imports_data.get("accessor")) or config.imports.accessor,
        )

    if "exclude_paths" in data:
        config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_OUTPUT",
    "ConfigError",
    "FunctionConfig",
    "I18nifyConfig",
    "ImportConfig",
    "default_config",
    "load_config",
]
