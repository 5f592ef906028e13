"""Configuration loading for the alarm daemon."""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

import tomli_w

PASSWORD = "password"

_U16 = 2**16 - 1
_U32 = 2**32 - 1
_LIMITS = {
    "port": _U16,
    "notify_before_seconds": _U32,
    "calendar_check_interval_minutes": _U16,
    "alarm_check_interval_seconds": _U32,
    "alarm_silence_interval_seconds": _U32,
    "last_activity_check_minutes": _U16,
}


@dataclass
class SmtpConfig:
    """Mail server settings."""

    endpoint: str = "smtp.gmail.com"
    port: int = 587
    username: str = "username"
    password: str = PASSWORD


@dataclass
class CalendarConfig:
    """Where the calendar lives and how it is polled."""

    link: str = "foo.com/basic.ical"
    notify_before_seconds: int = 300
    calendar_check_interval_minutes: int = 30


@dataclass
class Config:
    """Top-level application settings."""

    route: str = "/checkin"
    email: str = "[email]"
    notification_sound_path: str = "~/.config/awaken/notification.mp3"
    alarm_sound_path: str = "~/.config/awaken/alarm.mp3"
    alarm_check_interval_seconds: int = 15
    alarm_silence_interval_seconds: int = 1
    last_activity_check_minutes: int = 15
    smtp_config: SmtpConfig = field(default_factory=SmtpConfig)
    calendar_config: CalendarConfig = field(default_factory=CalendarConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration from a parsed TOML table; every field is required."""
        return _build(cls, data, "config")

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as nested plain dictionaries."""
        return asdict(self)


def _build(cls, data: Any, section: str):
    if not isinstance(data, dict):
        raise ValueError(f"{section}: expected a table")
    defaults = cls()
    values: dict[str, Any] = {}
    for spec in fields(cls):
        if spec.name not in data:
            raise ValueError(f"{section}: missing field `{spec.name}`")
        value = data[spec.name]
        default = getattr(defaults, spec.name)
        if is_dataclass(default):
            value = _build(type(default), value, spec.name)
        elif spec.name in _LIMITS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{section}: `{spec.name}` must be an integer")
            if not 0 <= value <= _LIMITS[spec.name]:
                raise ValueError(f"{section}: `{spec.name}` out of range 0..{_LIMITS[spec.name]}")
        elif not isinstance(value, str):
            raise ValueError(f"{section}: `{spec.name}` must be a string")
        values[spec.name] = value
    return cls(**values)


def default_config_path(app_name: str) -> Path:
    """Return the usual location of an application's configuration file."""
    return Path.home() / ".config" / app_name / "config.toml"


def load_config(path: str | Path | None = None) -> Config:
    """Read the configuration, writing the defaults first if the file is missing."""
    target = Path(path) if path is not None else default_config_path("awaken")
    if not target.exists():
        config = Config()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(tomli_w.dumps(config.to_dict()), encoding="utf-8")
        return config
    with target.open("rb") as handle:
        return Config.from_dict(tomllib.load(handle))