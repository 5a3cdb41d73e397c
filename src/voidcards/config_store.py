"""Persistent configuration for voidcards.

Settings are stored as JSON in the user's config directory and cached
after the first load. The data directory can be overridden with the
VOIDCARDS_DATA_DIR environment variable.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
DATA_DIR_ENV = "VOIDCARDS_DATA_DIR"
CONFIG_DIR_ENV = "VOIDCARDS_CONFIG_DIR"


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""


def _default_data_dir() -> Path:
    return Path.home() / ".voidcards"


@dataclass
class Config:
    """User-adjustable settings."""

    data_dir: Path = field(default_factory=_default_data_dir)
    database_name: str = "flashcards.db"
    question_seconds: float = 30.0
    tick_interval: float = 0.1
    log_file: Path | None = None

    @property
    def database_path(self) -> Path:
        """Path of the SQLite flashcard database."""
        return self.data_dir / self.database_name

    def ensure_data_dir(self) -> None:
        """Create the data directory if it does not exist."""
        self.data_dir.mkdir(mode=0o700, parents=True, exist_ok=True)

    def validate(self) -> None:
        """Check that the settings are usable.

        Raises:
            ConfigError: If a value is out of range.
        """
        if not self.database_name:
            raise ConfigError("database name cannot be empty")
        if self.question_seconds <= 0:
            raise ConfigError("question_seconds must be positive")
        if self.tick_interval <= 0:
            raise ConfigError("tick_interval must be positive")
        if self.tick_interval >= self.question_seconds:
            raise ConfigError("tick_interval must be shorter than question_seconds")

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["data_dir"] = str(self.data_dir)
        data["log_file"] = str(self.log_file) if self.log_file else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Config":
        """Build a Config from decoded JSON, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if values.get("data_dir"):
            values["data_dir"] = Path(str(values["data_dir"])).expanduser()
        else:
            values.pop("data_dir", None)
        if values.get("log_file"):
            values["log_file"] = Path(str(values["log_file"])).expanduser()
        else:
            values["log_file"] = None
        try:
            if "question_seconds" in values:
                values["question_seconds"] = float(values["question_seconds"])  # type: ignore[arg-type]
            if "tick_interval" in values:
                values["tick_interval"] = float(values["tick_interval"])  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid timing value: {exc}") from exc
        return cls(**values)  # type: ignore[arg-type]


_config_cache: Config | None = None


def _get_config_dir() -> Path:
    """Return the directory holding config.json."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / "voidcards"


def _apply_env_overrides(config: Config) -> Config:
    data_dir = os.environ.get(DATA_DIR_ENV)
    if data_dir:
        config.data_dir = Path(data_dir).expanduser()
    return config


def load_config() -> Config:
    """Load configuration, falling back to defaults for missing values.

    A missing or unreadable config file yields the defaults; the result is
    cached until clear_config_cache() is called.
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    path = _get_config_dir() / CONFIG_FILENAME
    config = Config()
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", path, exc)
        else:
            if isinstance(data, dict):
                config = Config.from_dict(data)
            else:
                logger.warning("Ignoring config %s: expected a JSON object", path)

    _config_cache = _apply_env_overrides(config)
    return _config_cache


def save_config(config: Config) -> None:
    """Write configuration to disk and refresh the cache."""
    global _config_cache
    config_dir = _get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / CONFIG_FILENAME
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    _config_cache = config


def clear_config_cache() -> None:
    """Forget the cached configuration."""
    global _config_cache
    _config_cache = None
