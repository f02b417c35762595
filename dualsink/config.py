"""Configuration module — frozen dataclass loaded from env vars and an optional YAML file."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "DUALSINK_CONFIG"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    log_path: str = ""
    disable_logging: bool = False
    log_time_as_utc: bool = False
    log_process_id: bool = False


def load_yaml_config(path: str | None) -> dict:
    """Load option overrides from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", path)
        return {}
    logger.debug("Loaded YAML config from %s", path)
    return data


def load_config(yaml_path: str | None = None) -> Config:
    """Build Config from env vars, then YAML, then defaults (first wins).

    The YAML path falls back to the ``DUALSINK_CONFIG`` environment variable.
    """
    data = load_yaml_config(yaml_path or os.environ.get(CONFIG_PATH_ENV))

    def _option(env_name: str, key: str, default):
        raw = os.environ.get(env_name)
        if raw is not None:
            return raw
        return data.get(key, default)

    return Config(
        log_path=str(_option("LOG_PATH", "log_path", Config.log_path) or ""),
        disable_logging=_parse_bool(
            _option("DISABLE_LOGGING", "disable_logging", Config.disable_logging)
        ),
        log_time_as_utc=_parse_bool(
            _option("LOG_TIME_AS_UTC", "log_time_as_utc", Config.log_time_as_utc)
        ),
        log_process_id=_parse_bool(
            _option("LOG_PROCESS_ID", "log_process_id", Config.log_process_id)
        ),
    )
