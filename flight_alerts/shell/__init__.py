"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- OpenSky API client (HTTP)
- LaMetric local push client (HTTP)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from flight_alerts.shell.opensky_client import OpenSkyClient, FetchResult, FetchStatus
from flight_alerts.shell.lametric_client import LaMetricClient, LaMetricResponse
from flight_alerts.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "OpenSkyClient",
    "FetchResult",
    "FetchStatus",
    "LaMetricClient",
    "LaMetricResponse",
    "load_config",
    "load_config_from_env",
]
