"""Client settings for the SFU WebSocket transport.

Defaults target a forwarding unit running locally on port 7777. Values can be
loaded from a JSON file and overridden from ``SFU_WS_*`` environment variables.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_MAX_MESSAGE_SIZE = 1024 * 1024

ENV_PREFIX = "SFU_WS_"


class ConfigValidationError(ValueError):
    """Invalid client configuration."""


def validate_host(host: str) -> str:
    if not isinstance(host, str) or not host:
        raise ConfigValidationError("host must be a non-empty string")
    if "://" in host or "/" in host:
        raise ConfigValidationError(f"host must be host[:port] without scheme or path, got: {host}")
    return host


def validate_positive(name: str, value: Optional[float], *, allow_none: bool = False) -> Optional[float]:
    if value is None and allow_none:
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigValidationError(f"{name} must be a positive number, got: {value!r}")
    return value


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ConfigValidationError(f"not a boolean: {value!r}")


@dataclass(slots=True)
class ClientSettings:
    """Connection parameters for one client.

    ``host`` is ``host[:port]``; the scheme comes from ``secure``.
    """

    host: str = "localhost:7777"
    secure: bool = False
    route_prefix: str = "ws"
    default_action: str = "connect"
    open_timeout: float = 10.0  # seconds
    close_timeout: float = 10.0  # seconds
    ping_interval: Optional[float] = 20.0  # None disables keepalive pings
    max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE
    log_level: str = "INFO"
    config_file: Optional[Path] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def scheme(self) -> str:
        return "wss" if self.secure else "ws"

    def validate(self) -> None:
        """Raises ``ConfigValidationError`` on the first invalid field."""
        validate_host(self.host)
        validate_positive("open_timeout", self.open_timeout)
        validate_positive("close_timeout", self.close_timeout)
        validate_positive("ping_interval", self.ping_interval, allow_none=True)
        if isinstance(self.max_message_size, bool) or not isinstance(self.max_message_size, int) \
                or self.max_message_size <= 0:
            raise ConfigValidationError(f"max_message_size must be a positive int, got: {self.max_message_size!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigValidationError(f"unknown log level: {self.log_level}")
        if not self.route_prefix.strip("/"):
            raise ConfigValidationError("route_prefix must not be empty")

    @classmethod
    def from_file(cls, path: Optional[Path]) -> "ClientSettings":
        """Load settings from a JSON file; a missing file yields defaults."""

        if path is None or not path.exists():
            return cls(config_file=path)

        with path.open("r", encoding="utf-8") as fp:
            raw_data = json.load(fp)

        known_fields = {f.name for f in fields(cls)}
        init_kwargs: Dict[str, Any] = {
            key: value for key, value in raw_data.items() if key in known_fields
        }
        extra = {key: value for key, value in raw_data.items() if key not in known_fields}
        settings = cls(**init_kwargs, config_file=path)
        settings.extra.update(extra)
        settings.validate()
        return settings

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional["ClientSettings"] = None,
    ) -> "ClientSettings":
        """Apply ``SFU_WS_*`` overrides on top of ``base`` (or defaults)."""

        env = os.environ if environ is None else environ
        settings = base if base is not None else cls()
        overrides: Dict[str, Any] = {}
        if f"{ENV_PREFIX}HOST" in env:
            overrides["host"] = env[f"{ENV_PREFIX}HOST"]
        if f"{ENV_PREFIX}SECURE" in env:
            overrides["secure"] = _parse_bool(env[f"{ENV_PREFIX}SECURE"])
        if f"{ENV_PREFIX}ROUTE_PREFIX" in env:
            overrides["route_prefix"] = env[f"{ENV_PREFIX}ROUTE_PREFIX"]
        if f"{ENV_PREFIX}OPEN_TIMEOUT" in env:
            try:
                overrides["open_timeout"] = float(env[f"{ENV_PREFIX}OPEN_TIMEOUT"])
            except ValueError as exc:
                raise ConfigValidationError(f"invalid {ENV_PREFIX}OPEN_TIMEOUT: {exc}") from exc
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            overrides["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"].upper()

        settings = replace(settings, **overrides)
        settings.validate()
        return settings

    def to_dict(self) -> Dict[str, Any]:
        """Current configuration, for logs and debugging."""

        return {
            "host": self.host,
            "secure": self.secure,
            "scheme": self.scheme,
            "route_prefix": self.route_prefix,
            "default_action": self.default_action,
            "open_timeout": self.open_timeout,
            "close_timeout": self.close_timeout,
            "ping_interval": self.ping_interval,
            "max_message_size": self.max_message_size,
            "log_level": self.log_level,
            "config_file": str(self.config_file) if self.config_file else None,
            "extra": self.extra,
        }
