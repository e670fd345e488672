"""Configuration for fzf-nav.

Resolution order (later wins):
1. Built-in defaults (database at ``~/.fzf.db``)
2. TOML file at ``$FZF_NAV_CONFIG`` or ``~/.config/fzf-nav/config.toml``
3. Environment: ``FZF_NAV_DB_PATH``, ``FZF_NAV_NO_COLOR`` / ``NO_COLOR``
4. CLI flags (``--db-path``, ``--no-color``), applied by the CLI

The resulting ``NavConfig`` is passed explicitly to the store and the
query facade; nothing reads it from module globals.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PICKER_COMMAND: tuple[str, ...] = ("fzf", "--height=40%", "--reverse")


def get_default_db_path() -> Path:
    """Default history database location (``~/.fzf.db``)."""
    home = os.environ.get("HOME")
    return (Path(home) if home else Path.cwd()) / ".fzf.db"


def get_config_path() -> Path:
    """Location of the optional TOML config file."""
    env_path = os.environ.get("FZF_NAV_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "fzf-nav" / "config.toml"


def _env_flag(key: str) -> bool | None:
    value = os.environ.get(key)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    """A nested TOML table, or empty when the key holds something else."""
    value = data.get(key, {})
    if not isinstance(value, dict):
        logger.warning("Ignoring config key %s: expected a table, got %r", key, value)
        return {}
    return value


@dataclass(frozen=True)
class LimitSettings:
    """Default row counts per command when the caller gives none."""

    recent: int = 50
    popular: int = 50
    search: int = 100
    picker: int = 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "recent": self.recent,
            "popular": self.popular,
            "search": self.search,
            "picker": self.picker,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LimitSettings:
        defaults = cls()
        values: dict[str, int] = {}
        for name in ("recent", "popular", "search", "picker"):
            raw = data.get(name, getattr(defaults, name))
            if not _is_int(raw) or raw < 1:
                logger.warning("Ignoring invalid default limit %s=%r", name, raw)
                raw = getattr(defaults, name)
            values[name] = raw
        return cls(**values)


@dataclass(frozen=True)
class StoreSettings:
    """SQLite connection tuning for concurrent shell sessions."""

    busy_timeout_ms: int = 5000
    write_retries: int = 5
    retry_backoff: float = 0.05

    def to_dict(self) -> dict[str, Any]:
        return {
            "busy_timeout_ms": self.busy_timeout_ms,
            "write_retries": self.write_retries,
            "retry_backoff": self.retry_backoff,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoreSettings:
        defaults = cls()
        busy_timeout_ms = data.get("busy_timeout_ms", defaults.busy_timeout_ms)
        if not _is_int(busy_timeout_ms) or busy_timeout_ms < 0:
            logger.warning("Ignoring invalid store setting busy_timeout_ms=%r", busy_timeout_ms)
            busy_timeout_ms = defaults.busy_timeout_ms
        write_retries = data.get("write_retries", defaults.write_retries)
        if not _is_int(write_retries) or write_retries < 0:
            logger.warning("Ignoring invalid store setting write_retries=%r", write_retries)
            write_retries = defaults.write_retries
        retry_backoff = data.get("retry_backoff", defaults.retry_backoff)
        if not (_is_int(retry_backoff) or isinstance(retry_backoff, float)) or retry_backoff < 0:
            logger.warning("Ignoring invalid store setting retry_backoff=%r", retry_backoff)
            retry_backoff = defaults.retry_backoff
        return cls(
            busy_timeout_ms=busy_timeout_ms,
            write_retries=write_retries,
            retry_backoff=float(retry_backoff),
        )


@dataclass(frozen=True)
class NavConfig:
    """Effective configuration for one fzf-nav invocation."""

    db_path: Path = field(default_factory=get_default_db_path)
    color: bool = True
    limits: LimitSettings = field(default_factory=LimitSettings)
    store: StoreSettings = field(default_factory=StoreSettings)
    picker_command: tuple[str, ...] = DEFAULT_PICKER_COMMAND

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NavConfig:
        """Build a config from the ``[fzf_nav]`` table of a TOML file."""
        db_path = data.get("db_path")
        if db_path is not None and not isinstance(db_path, str):
            logger.warning("Ignoring invalid db_path=%r", db_path)
            db_path = None
        color = data.get("color", True)
        if not isinstance(color, bool):
            logger.warning("Ignoring invalid color=%r", color)
            color = True
        picker = data.get("picker_command")
        if isinstance(picker, str):
            picker = picker.split()
        elif picker is not None and not (
            isinstance(picker, list) and all(isinstance(part, str) for part in picker)
        ):
            logger.warning("Ignoring invalid picker_command=%r", picker)
            picker = None
        return cls(
            db_path=Path(db_path).expanduser() if db_path else get_default_db_path(),
            color=color,
            limits=LimitSettings.from_dict(_table(data, "limits")),
            store=StoreSettings.from_dict(_table(data, "store")),
            picker_command=tuple(picker) if picker else DEFAULT_PICKER_COMMAND,
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> NavConfig:
        """Load configuration from the TOML file (if any) and the environment."""
        if config_path is None:
            config_path = get_config_path()

        config = cls()
        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
                config = cls.from_dict(_table(data, "fzf_nav"))
            except (OSError, tomllib.TOMLDecodeError):
                logger.warning("Failed to read config file %s", config_path, exc_info=True)

        env_db = os.environ.get("FZF_NAV_DB_PATH")
        if env_db:
            config = replace(config, db_path=Path(env_db).expanduser())

        no_color = _env_flag("FZF_NAV_NO_COLOR")
        if no_color or "NO_COLOR" in os.environ:
            config = replace(config, color=False)

        return config

    def with_overrides(
        self,
        *,
        db_path: Path | None = None,
        no_color: bool = False,
    ) -> NavConfig:
        """Apply command-line overrides on top of the loaded config."""
        config = self
        if db_path is not None:
            config = replace(config, db_path=db_path.expanduser())
        if no_color:
            config = replace(config, color=False)
        return config

    def to_dict(self) -> dict[str, Any]:
        return {
            "db_path": str(self.db_path),
            "color": self.color,
            "limits": self.limits.to_dict(),
            "store": self.store.to_dict(),
            "picker_command": list(self.picker_command),
        }
