"""Configuration loading for repostats (.repostats.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".repostats.yml"
DEFAULT_STORE_PATH = Path(".repostats") / "embeddings.json"


@dataclass
class HistoryConfig:
    """Commit graph traversal settings."""

    max_workers: int = 1


@dataclass
class RegistryConfig:
    """Per-file read and hash settings."""

    max_workers: int = 1


@dataclass
class EmbeddingConfig:
    """Embedding provider and vector store settings."""

    enabled: bool = True
    store_path: Optional[Path] = None


@dataclass
class LoggingConfig:
    """File sink for mining logs; console output is controlled by --verbose."""

    file: Optional[Path] = None
    level: str = "DEBUG"


@dataclass
class RepoStatsConfig:
    """Represents the settings defined in .repostats.yml."""

    root: Path
    name: Optional[str] = None
    exclude_paths: List[str] = field(default_factory=list)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def store_path(self) -> Path:
        return self.embedding.store_path or (self.root / DEFAULT_STORE_PATH)


def load_config(config_path: Path) -> RepoStatsConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RepoStatsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    history = HistoryConfig()
    history_data = _as_dict(data.get("history"))
    if history_data:
        history.max_workers = _as_workers(history_data.get("max_workers"))

    registry = RegistryConfig()
    registry_data = _as_dict(data.get("registry"))
    if registry_data:
        registry.max_workers = _as_workers(registry_data.get("max_workers"))

    embedding = EmbeddingConfig()
    embedding_data = _as_dict(data.get("embedding"))
    if embedding_data:
        enabled = _as_bool(embedding_data.get("enabled"))
        if enabled is not None:
            embedding.enabled = enabled
        store_path = _as_str(embedding_data.get("store_path"))
        if store_path:
            embedding.store_path = root / store_path

    logging_config = LoggingConfig()
    logging_data = _as_dict(data.get("logging"))
    if logging_data:
        log_file = _as_str(logging_data.get("file"))
        if log_file:
            logging_config.file = root / log_file
        level = _as_str(logging_data.get("level"))
        if level:
            logging_config.level = level.upper()

    return RepoStatsConfig(
        root=root,
        name=_as_str(data.get("name")),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        history=history,
        registry=registry,
        embedding=embedding,
        logging=logging_config,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
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


def _as_workers(value: Any) -> int:
    workers = _as_int(value)
    if workers is None or workers < 1:
        return 1
    return workers


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "EmbeddingConfig",
    "HistoryConfig",
    "LoggingConfig",
    "RegistryConfig",
    "RepoStatsConfig",
    "load_config",
]
