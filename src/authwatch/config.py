"""Global configuration — defaults, optional YAML file, env vars."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

DEFAULT_AUTH_LOG = Path("/var/log/auth.log")
DEFAULT_TIMEZONE = "Europe/Madrid"


def _default_output_dir() -> Path:
    # Activity logs live next to the running program.
    return Path(sys.argv[0]).resolve().parent


def _default_config_file() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "authwatch" / "config.yaml"
    return Path.home() / ".config" / "authwatch" / "config.yaml"


@dataclass
class AuthWatchConfig:
    """Application-wide configuration."""

    auth_log: Path = DEFAULT_AUTH_LOG
    timezone: str = DEFAULT_TIMEZONE
    output_dir: Path = field(default_factory=_default_output_dir)
    poll_interval: float = 0.2
    from_end: bool = True
    verbose: bool = False

    @property
    def tzinfo(self) -> ZoneInfo:
        return resolve_timezone(self.timezone)

    @classmethod
    def load(cls, path: str | Path | None = None) -> AuthWatchConfig:
        """Load config from an optional YAML file, then environment variables.

        An explicit ``path`` must exist; the default XDG location is used only
        when present.
        """
        config = cls()

        config_file = Path(path) if path is not None else _default_config_file()
        if path is not None or config_file.is_file():
            config.update(_read_yaml(config_file))

        env_auth_log = os.environ.get("AUTHWATCH_AUTH_LOG")
        if env_auth_log:
            config.auth_log = Path(env_auth_log)

        env_tz = os.environ.get("AUTHWATCH_TZ")
        if env_tz:
            config.timezone = env_tz

        env_output = os.environ.get("AUTHWATCH_OUTPUT_DIR")
        if env_output:
            config.output_dir = Path(env_output)

        env_interval = os.environ.get("AUTHWATCH_POLL_INTERVAL")
        if env_interval:
            config.poll_interval = float(env_interval)

        resolve_timezone(config.timezone)
        return config

    def update(self, data: dict) -> None:
        """Apply a mapping of overrides, coercing paths and numbers."""
        known = {f.name for f in fields(self)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        for key, value in data.items():
            if value is None:
                continue
            if key in ("auth_log", "output_dir"):
                value = Path(value).expanduser()
            elif key == "poll_interval":
                value = float(value)
            elif key in ("from_end", "verbose"):
                if not isinstance(value, bool):
                    raise ValueError(f"Config key {key!r} must be true or false")
            else:
                value = str(value)
            setattr(self, key, value)


def resolve_timezone(name: str) -> ZoneInfo:
    """Return the ZoneInfo for ``name`` or raise ValueError."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone: {name!r}") from exc


def _read_yaml(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Config YAML must be a mapping")
    return data
