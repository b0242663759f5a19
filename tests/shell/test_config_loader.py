"""Tests for the Configuration Loader module.

Tests configuration loading from YAML files and environment variables.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from flight_alerts.core.auth import AuthMode
from flight_alerts.core.config import Config
from flight_alerts.shell.config_loader import (
    _parse_bool,
    _resolve_value,
    load_config,
    load_config_from_dict,
    load_config_from_env,
)


class TestResolveValue:
    """Tests for _resolve_value function."""

    def test_returns_non_string_unchanged(self):
        assert _resolve_value(123) == 123
        assert _resolve_value(None) is None
        assert _resolve_value(True) is True

    def test_returns_plain_string_unchanged(self):
        assert _resolve_value("hello") == "hello"

    def test_resolves_env_var_placeholder(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert _resolve_value("${TEST_VAR}") == "test_value"

    def test_returns_placeholder_if_env_var_not_set(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _resolve_value("${UNDEFINED_VAR}") == "${UNDEFINED_VAR}"


class TestParseBool:
    """Tests for _parse_bool function."""

    def test_true_values(self):
        for value in (True, "true", "TRUE", "1", "yes", "on"):
            assert _parse_bool(value) is True

    def test_false_values(self):
        for value in (False, "false", "0", "no", ""):
            assert _parse_bool(value) is False

    def test_default(self):
        assert _parse_bool(None) is False
        assert _parse_bool(None, default=True) is True


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict function."""

    def test_empty_dict_gives_defaults(self):
        config = load_config_from_dict({})

        assert config == Config()

    def test_full_config(self):
        data = {
            "home": {"latitude": 51.47, "longitude": -0.45},
            "radius_miles": 5,
            "poll_interval_seconds": 60,
            "cooldown_minutes": 10,
            "fetch_metadata": True,
            "notification_delay_seconds": 1,
            "opensky": {
                "username": "user",
                "password": "pass",
                "timeout_seconds": 10,
                "rate_limit_backoff_seconds": 120,
            },
            "lametric": {
                "device_ip": "192.168.1.50",
                "api_key": "key",
                "lifetime_ms": 8000,
                "cycles": 2,
                "sound": None,
            },
        }

        config = load_config_from_dict(data)

        assert config.home.latitude == 51.47
        assert config.home.longitude == -0.45
        assert config.radius_miles == 5.0
        assert config.poll_interval_seconds == 60.0
        assert config.cooldown_seconds == 600.0
        assert config.fetch_metadata is True
        assert config.notification_delay_seconds == 1.0
        assert config.opensky.auth_mode == AuthMode.BASIC
        assert config.opensky.timeout_seconds == 10.0
        assert config.opensky.rate_limit_backoff_seconds == 120.0
        assert config.lametric.device_ip == "192.168.1.50"
        assert config.lametric.lifetime_ms == 8000
        assert config.lametric.cycles == 2
        assert config.lametric.sound is None

    def test_resolves_auth_mode_from_client_credentials(self):
        config = load_config_from_dict({
            "opensky": {"client_id": "id", "client_secret": "secret"},
        })
        assert config.opensky.auth_mode == AuthMode.OAUTH2_CLIENT_CREDENTIALS

    def test_explicit_auth_mode(self):
        config = load_config_from_dict({
            "opensky": {
                "auth_mode": "none",
                "username": "user",
                "password": "pass",
            },
        })
        assert config.opensky.auth_mode == AuthMode.NONE

    def test_invalid_auth_mode_raises(self):
        with pytest.raises(ValueError):
            load_config_from_dict({"opensky": {"auth_mode": "kerberos"}})

    def test_resolves_placeholders(self):
        with patch.dict(os.environ, {"LAMETRIC_KEY": "from-env", "OS_SECRET": "s3cret"}):
            config = load_config_from_dict({
                "opensky": {"client_id": "id", "client_secret": "${OS_SECRET}"},
                "lametric": {"api_key": "${LAMETRIC_KEY}"},
            })

        assert config.opensky.client_secret == "s3cret"
        assert config.lametric.api_key == "from-env"

    def test_unset_credential_placeholders_are_absent(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_config_from_dict({
                "opensky": {
                    "client_id": "${OPENSKY_CLIENT_ID}",
                    "client_secret": "${OPENSKY_CLIENT_SECRET}",
                },
            })

        assert config.opensky.client_id is None
        assert config.opensky.auth_mode == AuthMode.NONE


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_yaml_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "home": {"latitude": 53.3139, "longitude": -6.2871},
            "radius_miles": 8,
        }))

        config = load_config(path)

        assert config.home.latitude == 53.3139
        assert config.radius_miles == 8.0

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == Config()

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_uses_config_path_env(self, tmp_path: Path):
        path = tmp_path / "env.yaml"
        path.write_text("radius_miles: 3\n")

        with patch.dict(os.environ, {"CONFIG_PATH": str(path)}):
            config = load_config()

        assert config.radius_miles == 3.0

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("home: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(path)


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    def test_defaults_without_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_config_from_env()

        assert config == Config()

    def test_reads_environment(self):
        env = {
            "HOME_LATITUDE": "51.47",
            "HOME_LONGITUDE": "-0.45",
            "RADIUS_MILES": "7.5",
            "POLL_INTERVAL_SECONDS": "90",
            "COOLDOWN_MINUTES": "15",
            "FETCH_AIRCRAFT_METADATA": "true",
            "OPENSKY_CLIENT_ID": "id",
            "OPENSKY_CLIENT_SECRET": "secret",
            "LAMETRIC_DEVICE_IP": "192.168.1.50",
            "LAMETRIC_API_KEY": "key",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()

        assert config.home.latitude == 51.47
        assert config.home.longitude == -0.45
        assert config.radius_miles == 7.5
        assert config.poll_interval_seconds == 90.0
        assert config.cooldown_minutes == 15.0
        assert config.fetch_metadata is True
        assert config.opensky.auth_mode == AuthMode.OAUTH2_CLIENT_CREDENTIALS
        assert config.lametric.device_ip == "192.168.1.50"
        assert config.lametric.api_key == "key"

    def test_basic_auth_from_env(self):
        env = {"OPENSKY_USERNAME": "user", "OPENSKY_PASSWORD": "pass"}
        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()

        assert config.opensky.auth_mode == AuthMode.BASIC
        assert config.opensky.username == "user"
