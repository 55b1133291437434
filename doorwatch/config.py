"""Settings loading from YAML files and environment variables."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

import yaml
from dotenv import load_dotenv

from .models import FLOOR_Y

__all__ = ["ConfigError", "Settings", "load_settings"]

DEFAULT_WS_URL = "ws://localhost:8080"
DEFAULT_SENDER = "illegalsocket"

ENV_OVERRIDES = {
    "DOORWATCH_WS_URL": "ws_url",
    "DOORWATCH_SENDER": "sender",
    "DOORWATCH_SNAPSHOT": "snapshot_path",
}


class ConfigError(ValueError):
    """Raised when the configuration is invalid."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{message} (source: {path})"
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class Settings:
    """Runtime options for the door tracker."""

    enabled: bool = True
    esp_color: tuple[int, int, int] = (255, 0, 0)
    ws_url: str = DEFAULT_WS_URL
    sender: str = DEFAULT_SENDER
    floor_y: int = FLOOR_Y
    tick_interval: float = 0.05
    snapshot_path: Path = field(default_factory=lambda: Path("snapshot.yaml"))

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Settings":
        defaults = cls()
        enabled = data.get("enabled", defaults.enabled)
        if not isinstance(enabled, bool):
            raise ConfigError("enabled must be a boolean")

        raw_color = data.get("esp_color", defaults.esp_color)
        if isinstance(raw_color, (str, bytes)) or not hasattr(raw_color, "__iter__"):
            raise ConfigError("esp_color must be a list of three integers")
        try:
            color = tuple(int(channel) for channel in raw_color)  # type: ignore[union-attr]
        except (TypeError, ValueError):
            raise ConfigError("esp_color must be a list of three integers") from None
        if len(color) != 3 or any(channel < 0 or channel > 255 for channel in color):
            raise ConfigError("esp_color channels must be three values between 0 and 255")

        try:
            floor_y = int(data.get("floor_y", defaults.floor_y))  # type: ignore[arg-type]
            tick_interval = float(data.get("tick_interval", defaults.tick_interval))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ConfigError("floor_y and tick_interval must be numbers") from None
        if tick_interval <= 0:
            raise ConfigError("tick_interval must be positive")

        ws_url = str(data.get("ws_url") or defaults.ws_url)
        if not ws_url.startswith(("ws://", "wss://")):
            raise ConfigError(f"ws_url must be a ws:// or wss:// URL, got '{ws_url}'")

        return cls(
            enabled=enabled,
            esp_color=color,  # type: ignore[arg-type]
            ws_url=ws_url,
            sender=str(data.get("sender") or defaults.sender),
            floor_y=floor_y,
            tick_interval=tick_interval,
            snapshot_path=Path(str(data.get("snapshot_path") or defaults.snapshot_path)),
        )


def _read_config_file(path: Path) -> MutableMapping[str, object]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError("Unable to read config file", path=path) from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError("Failed to parse config file", path=path) from exc
    if raw is None:
        return {}
    if not isinstance(raw, MutableMapping):
        raise ConfigError("Config file must contain a mapping", path=path)
    return dict(raw)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Build :class:`Settings` from ``path`` (or ``DOORWATCH_CONFIG``) and the environment."""

    load_dotenv()
    if path is None:
        env_path = os.getenv("DOORWATCH_CONFIG")
        path = Path(env_path) if env_path else None

    data: MutableMapping[str, object] = {}
    if path is not None:
        data = _read_config_file(path)
    try:
        settings = Settings.from_mapping(data)
    except ConfigError as exc:
        if path is not None and exc.path is None:
            raise ConfigError(str(exc), path=path) from exc
        raise

    overrides = {}
    for variable, attribute in ENV_OVERRIDES.items():
        value = os.getenv(variable)
        if value:
            overrides[attribute] = Path(value) if attribute == "snapshot_path" else value
    if overrides:
        merged = asdict(settings)
        merged.update(overrides)
        settings = Settings.from_mapping(merged)
    return settings
