"""
Application configuration.

Read once at startup from a JSON file (all keys optional):

    {
      "services": ["lfsvc", "SensorService"],
      "policy_path": "HKLM\\SOFTWARE\\Policies\\Microsoft\\Windows\\LocationAndSensors",
      "policy_values": {"DisableLocation": 1},
      "ip_echo_url": "https://api.ipify.org?format=json",
      "geo_lookup_url": "http://ip-api.com/json/{ip}",
      "http_timeout": null,
      "service_wait_seconds": 10,
      "log_level": "INFO",
      "log_file": "Logs/privacy_console.log"
    }

Lookup order: explicit path, $PRIVACY_CONSOLE_CONFIG, Config/privacy_console.json.
"""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from common.errors import ConfigError
from common.lockdown_policy import (
    DEFAULT_POLICY_PATH,
    DEFAULT_POLICY_VALUES,
    DEFAULT_SERVICES,
    LockdownPolicy,
)
from core.utils import get_folder_path
from scripts.ip_lookup import DEFAULT_GEO_LOOKUP_URL, DEFAULT_IP_ECHO_URL

CONFIG_ENV_VAR = "PRIVACY_CONSOLE_CONFIG"
CONFIG_FILE_NAME = "privacy_console.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_KNOWN_KEYS = {
    "services", "policy_path", "policy_values", "ip_echo_url", "geo_lookup_url",
    "http_timeout", "service_wait_seconds", "log_level", "log_file",
}


def _default_log_file() -> Path:
    return get_folder_path("Logs") / "privacy_console.log"


@dataclass(frozen=True)
class AppConfig:
    policy: LockdownPolicy = field(default_factory=LockdownPolicy)
    ip_echo_url: str = DEFAULT_IP_ECHO_URL
    geo_lookup_url: str = DEFAULT_GEO_LOOKUP_URL
    http_timeout: Optional[float] = None
    service_wait_seconds: float = 10.0
    log_level: str = "INFO"
    log_file: Path = field(default_factory=_default_log_file)


def default_config_path() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return get_folder_path("Config") / CONFIG_FILE_NAME


def _number(data: dict, key: str, default, allow_none: bool = False):
    value = data.get(key, default)
    if value is None and allow_none:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"'{key}' must be a non-negative number")
    return float(value)


def _policy(data: dict) -> LockdownPolicy:
    services = data.get("services", list(DEFAULT_SERVICES))
    if not isinstance(services, list) or not all(isinstance(s, str) and s for s in services):
        raise ConfigError("'services' must be a list of service names")

    policy_path = data.get("policy_path", DEFAULT_POLICY_PATH)
    if not isinstance(policy_path, str) or "\\" not in policy_path:
        raise ConfigError("'policy_path' must be a full registry path, e.g. HKLM\\SOFTWARE\\...")

    values = data.get("policy_values", dict(DEFAULT_POLICY_VALUES))
    if not isinstance(values, dict) or not all(
            isinstance(v, int) and not isinstance(v, bool) for v in values.values()):
        raise ConfigError("'policy_values' must map value names to integers")

    return LockdownPolicy(tuple(services), policy_path, values)


def parse_config(data: dict) -> AppConfig:
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a JSON object")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")

    for key in ("ip_echo_url", "geo_lookup_url"):
        if key in data and not isinstance(data[key], str):
            raise ConfigError(f"'{key}' must be a string")
    if "{ip}" not in data.get("geo_lookup_url", DEFAULT_GEO_LOOKUP_URL):
        raise ConfigError("'geo_lookup_url' must contain an '{ip}' placeholder")

    log_level = str(data.get("log_level", "INFO")).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"'log_level' must be one of {', '.join(LOG_LEVELS)}")

    log_file = Path(data["log_file"]) if data.get("log_file") else _default_log_file()

    return AppConfig(
        policy=_policy(data),
        ip_echo_url=data.get("ip_echo_url", DEFAULT_IP_ECHO_URL),
        geo_lookup_url=data.get("geo_lookup_url", DEFAULT_GEO_LOOKUP_URL),
        http_timeout=_number(data, "http_timeout", None, allow_none=True),
        service_wait_seconds=_number(data, "service_wait_seconds", 10.0),
        log_level=log_level,
        log_file=log_file,
    )


def load_config(path: Optional[Path] = None) -> AppConfig:
    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        return AppConfig()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e

    return parse_config(data)
