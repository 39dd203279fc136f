"""Configuration loader for indicator-printers."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from . import constants


@dataclass(slots=True)
class IndicatorSettings:
    profiles: List[str] = field(default_factory=lambda: list(constants.DEFAULT_PROFILES))
    settings_command: str = constants.DEFAULT_SETTINGS_COMMAND


@dataclass(slots=True)
class CupsConfig:
    server: Optional[str] = None
    lease_seconds: int = constants.DEFAULT_LEASE_SECONDS
    renew_margin_seconds: int = constants.DEFAULT_RENEW_MARGIN_SECONDS


@dataclass(slots=True)
class DBusConfig:
    bus_name: str = constants.DEFAULT_BUS_NAME
    object_path: str = constants.DEFAULT_OBJECT_PATH


@dataclass(slots=True)
class AlertsConfig:
    enabled: bool = True


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None


@dataclass(slots=True)
class HealthConfig:
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 0


@dataclass(slots=True)
class IndicatorConfig:
    indicator: IndicatorSettings
    cups: CupsConfig
    dbus: DBusConfig
    alerts: AlertsConfig
    logging: LoggingConfig
    health: HealthConfig
    raw: ConfigParser
    path: Path


def _parse_list(value: str, *, default: Iterable[str]) -> List[str]:
    if not value:
        return list(default)
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or list(default)


def load_config(path: Optional[Path] = None) -> IndicatorConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "indicator": {
                "profiles": ",".join(constants.DEFAULT_PROFILES),
                "settings_command": constants.DEFAULT_SETTINGS_COMMAND,
            },
            "cups": {
                "lease_seconds": str(constants.DEFAULT_LEASE_SECONDS),
                "renew_margin_seconds": str(constants.DEFAULT_RENEW_MARGIN_SECONDS),
            },
            "dbus": {
                "bus_name": constants.DEFAULT_BUS_NAME,
                "object_path": constants.DEFAULT_OBJECT_PATH,
            },
            "alerts": {
                "enabled": "true",
            },
            "logging": {
                "level": "INFO",
                "path": "",
            },
            "health": {
                "enabled": "false",
                "host": "127.0.0.1",
                "port": "0",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    indicator = IndicatorSettings(
        profiles=_parse_list(
            parser.get("indicator", "profiles", fallback=""),
            default=constants.DEFAULT_PROFILES,
        ),
        settings_command=parser.get(
            "indicator", "settings_command", fallback=constants.DEFAULT_SETTINGS_COMMAND
        ).strip()
        or constants.DEFAULT_SETTINGS_COMMAND,
    )

    lease_seconds = max(
        60,
        parser.getint(
            "cups", "lease_seconds", fallback=constants.DEFAULT_LEASE_SECONDS
        ),
    )
    renew_margin = parser.getint(
        "cups",
        "renew_margin_seconds",
        fallback=constants.DEFAULT_RENEW_MARGIN_SECONDS,
    )
    cups = CupsConfig(
        server=parser.get("cups", "server", fallback=None) or None,
        lease_seconds=lease_seconds,
        renew_margin_seconds=max(0, min(renew_margin, lease_seconds - 1)),
    )

    dbus = DBusConfig(
        bus_name=parser.get("dbus", "bus_name"),
        object_path=parser.get("dbus", "object_path").rstrip("/")
        or constants.DEFAULT_OBJECT_PATH,
    )

    alerts = AlertsConfig(
        enabled=parser.getboolean("alerts", "enabled", fallback=True),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
    )

    health = HealthConfig(
        enabled=parser.getboolean("health", "enabled", fallback=False),
        host=parser.get("health", "host", fallback="127.0.0.1"),
        port=parser.getint("health", "port", fallback=0),
    )

    return IndicatorConfig(
        indicator=indicator,
        cups=cups,
        dbus=dbus,
        alerts=alerts,
        logging=logging_config,
        health=health,
        raw=parser,
        path=config_path,
    )


def save_config(config: IndicatorConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
