"""Configuration loading for exportgen (.exportgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".exportgen.yml"
DEFAULT_SOURCE_EXTENSIONS = (".cpp", ".cc")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ExportGenConfig:
    """Represents the settings defined in .exportgen.yml."""

    root: Path
    package: Optional[str] = None
    includes: List[str] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)
    source_extensions: List[str] = field(
        default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS)
    )


def load_config(config_path: Path) -> ExportGenConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ExportGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    extensions = _as_str_list(data.get("source_extensions"))
    normalised_extensions = [
        ext if ext.startswith(".") else f".{ext}" for ext in extensions
    ]

    return ExportGenConfig(
        root=root,
        package=_as_str(data.get("package")),
        includes=_as_str_list(data.get("includes")),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        source_extensions=normalised_extensions or list(DEFAULT_SOURCE_EXTENSIONS),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
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


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "ExportGenConfig", "load_config"]
