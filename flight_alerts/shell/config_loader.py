"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, OpenSkyConfig, LaMetricConfig) are defined in
flight_alerts/core/config.py to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from flight_alerts.core.auth import AuthMode, resolve_auth_mode
from flight_alerts.core.config import (
    OPENSKY_API_BASE,
    OPENSKY_TOKEN_URL,
    Config,
    HomeLocation,
    LaMetricConfig,
    OpenSkyConfig,
)


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _resolve_value(value: Any) -> Any:
    """Resolve a ${ENV_VAR} placeholder from the environment.

    Non-string values and plain strings are returned unchanged. An unset
    variable leaves the placeholder in place so validation can flag it.
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_bool(value: Any, default: bool = False) -> bool:
    """Parse a YAML or environment boolean."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _optional_str(value: Any) -> str | None:
    # An unset placeholder counts as absent so it can't pick the auth mode
    resolved = _resolve_value(value)
    if not resolved or str(resolved).startswith("${"):
        return None
    return str(resolved)


def _parse_home(data: dict[str, Any]) -> HomeLocation:
    """Parse the home location from config data."""
    defaults = HomeLocation()
    return HomeLocation(
        latitude=float(data.get("latitude", defaults.latitude)),
        longitude=float(data.get("longitude", defaults.longitude)),
    )


def _parse_opensky(data: dict[str, Any]) -> OpenSkyConfig:
    """Parse OpenSky settings and pick the auth mode once."""
    username = _optional_str(data.get("username"))
    password = _optional_str(data.get("password"))
    client_id = _optional_str(data.get("client_id"))
    client_secret = _optional_str(data.get("client_secret"))

    if "auth_mode" in data:
        auth_mode = AuthMode(str(data["auth_mode"]).lower())
    else:
        auth_mode = resolve_auth_mode(username, password, client_id, client_secret)

    defaults = OpenSkyConfig()
    return OpenSkyConfig(
        base_url=data.get("base_url", OPENSKY_API_BASE),
        auth_mode=auth_mode,
        username=username,
        password=password,
        client_id=client_id,
        client_secret=client_secret,
        token_url=data.get("token_url", OPENSKY_TOKEN_URL),
        timeout_seconds=float(data.get("timeout_seconds", defaults.timeout_seconds)),
        rate_limit_backoff_seconds=float(
            data.get("rate_limit_backoff_seconds", defaults.rate_limit_backoff_seconds)
        ),
    )


def _parse_lametric(data: dict[str, Any]) -> LaMetricConfig:
    """Parse LaMetric device settings."""
    defaults = LaMetricConfig()
    sound = data.get("sound", defaults.sound)
    return LaMetricConfig(
        device_ip=str(_resolve_value(data.get("device_ip", ""))),
        api_key=str(_resolve_value(data.get("api_key", ""))),
        port=int(data.get("port", defaults.port)),
        lifetime_ms=int(data.get("lifetime_ms", defaults.lifetime_ms)),
        cycles=int(data.get("cycles", defaults.cycles)),
        icon=str(data.get("icon", defaults.icon)),
        sound=str(sound) if sound else None,
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()

    return Config(
        home=_parse_home(data.get("home") or {}),
        radius_miles=float(data.get("radius_miles", defaults.radius_miles)),
        poll_interval_seconds=float(
            data.get("poll_interval_seconds", defaults.poll_interval_seconds)
        ),
        cooldown_minutes=float(data.get("cooldown_minutes", defaults.cooldown_minutes)),
        fetch_metadata=_parse_bool(data.get("fetch_metadata"), defaults.fetch_metadata),
        notification_delay_seconds=float(
            data.get("notification_delay_seconds", defaults.notification_delay_seconds)
        ),
        opensky=_parse_opensky(data.get("opensky") or {}),
        lametric=_parse_lametric(data.get("lametric") or {}),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: home %.4f, %.4f, radius %s mi, auth %s",
        config.home.latitude,
        config.home.longitude,
        config.radius_miles,
        config.opensky.auth_mode.value,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Environment variables:
        HOME_LATITUDE, HOME_LONGITUDE: Home location
        RADIUS_MILES: Notification radius
        POLL_INTERVAL_SECONDS: How often to poll OpenSky
        COOLDOWN_MINUTES: Minimum time between notifications per aircraft
        FETCH_AIRCRAFT_METADATA: "true" to look up aircraft types
        OPENSKY_USERNAME, OPENSKY_PASSWORD: Basic auth credentials
        OPENSKY_CLIENT_ID, OPENSKY_CLIENT_SECRET: OAuth2 client credentials
        LAMETRIC_DEVICE_IP, LAMETRIC_API_KEY: Display device

    Returns:
        Config object from environment
    """
    env = os.environ
    data: dict[str, Any] = {
        "home": {},
        "opensky": {
            "username": env.get("OPENSKY_USERNAME"),
            "password": env.get("OPENSKY_PASSWORD"),
            "client_id": env.get("OPENSKY_CLIENT_ID"),
            "client_secret": env.get("OPENSKY_CLIENT_SECRET"),
        },
        "lametric": {
            "device_ip": env.get("LAMETRIC_DEVICE_IP", ""),
            "api_key": env.get("LAMETRIC_API_KEY", ""),
        },
        "fetch_metadata": env.get("FETCH_AIRCRAFT_METADATA"),
    }

    if env.get("HOME_LATITUDE"):
        data["home"]["latitude"] = env["HOME_LATITUDE"]
    if env.get("HOME_LONGITUDE"):
        data["home"]["longitude"] = env["HOME_LONGITUDE"]

    for key, var in (
        ("radius_miles", "RADIUS_MILES"),
        ("poll_interval_seconds", "POLL_INTERVAL_SECONDS"),
        ("cooldown_minutes", "COOLDOWN_MINUTES"),
    ):
        if env.get(var):
            data[key] = env[var]

    return load_config_from_dict(data)
