"""
resplane.toml configuration.

Example::

    [catalog]
    path = "conf/properties.json"

    [logging]
    level = "DEBUG"
    dir = ".resplane/logs"
    console = true

Environment variables override the file:
``RESPLANE_CATALOG``, ``RESPLANE_LOG_LEVEL`` and ``RESPLANE_LOG_DIR``.
"""

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from resplane.core.errors import ConfigError

DEFAULT_CONFIG_NAME = "resplane.toml"

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    dir: Path = Path(".resplane/logs")
    console: bool = True

    @property
    def level_number(self) -> int:
        return int(getattr(logging, self.level))


@dataclass
class ResplaneConfig:
    """Top-level configuration."""

    catalog_path: Path | None = None  # None means the packaged catalog
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _parse_level(value: object, source: str) -> str:
    level = str(value).upper()
    if level not in _LEVELS:
        raise ConfigError(f"Invalid log level '{value}' in {source}")
    return level


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ResplaneConfig:
    """
    Load configuration from a TOML file and the environment.

    Args:
        path: Config file; defaults to ./resplane.toml when it exists
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Populated ResplaneConfig

    Raises:
        ConfigError: If the file is unreadable, not TOML, or holds invalid values
    """
    env = os.environ if environ is None else environ

    if path is None:
        candidate = Path(DEFAULT_CONFIG_NAME)
        path = candidate if candidate.exists() else None

    data: dict[str, object] = {}
    if path is not None:
        try:
            data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    catalog_data = data.get("catalog", {})
    logging_data = data.get("logging", {})
    if not isinstance(catalog_data, dict) or not isinstance(logging_data, dict):
        raise ConfigError(f"[catalog] and [logging] must be tables in {path}")

    source = str(path) if path else "defaults"
    log_config = LoggingConfig(
        level=_parse_level(logging_data.get("level", "INFO"), source),
        dir=Path(logging_data.get("dir", ".resplane/logs")),
        console=bool(logging_data.get("console", True)),
    )

    catalog_path = catalog_data.get("path")
    config = ResplaneConfig(
        catalog_path=Path(catalog_path) if catalog_path else None,
        logging=log_config,
    )

    # Environment overrides
    if env.get("RESPLANE_CATALOG"):
        config.catalog_path = Path(env["RESPLANE_CATALOG"])
    if env.get("RESPLANE_LOG_LEVEL"):
        config.logging.level = _parse_level(env["RESPLANE_LOG_LEVEL"], "RESPLANE_LOG_LEVEL")
    if env.get("RESPLANE_LOG_DIR"):
        config.logging.dir = Path(env["RESPLANE_LOG_DIR"])

    return config
