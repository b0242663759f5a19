"""Process Entry Point.

This module is a thin wrapper that loads configuration, starts the
monitor, and stops it on SIGINT/SIGTERM.
"""

import argparse
import logging
import os
import signal
import sys

from dotenv import load_dotenv

from flight_alerts.core.config import Config, validate_config
from flight_alerts.monitor import FlightMonitor
from flight_alerts.shell.config_loader import load_config, load_config_from_env


logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _get_config(config_path: str | None) -> Config:
    """Load configuration from file or environment."""
    config_path = config_path or os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    return load_config_from_env()


def main(argv: list[str] | None = None) -> int:
    """Run the flight monitor until interrupted.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(
        description="Notify a LaMetric clock when aircraft fly overhead",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config (default: CONFIG_PATH or environment variables)",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    _configure_logging()

    try:
        config = _get_config(args.config)
    except Exception:
        logger.exception("Failed to load configuration")
        return 1

    validation = validate_config(config)
    for warning in validation.warnings:
        logger.warning("Config %s: %s", warning.field, warning.message)
    for error in validation.critical_errors:
        logger.error("Config %s: %s", error.field, error.message)
    if not validation.valid:
        return 1

    monitor = FlightMonitor(config)

    if not monitor.dispatcher.check_connection().success:
        logger.warning("LaMetric device not reachable, notifications will fail until it is")

    def _shutdown(signum, frame):
        logger.info("Received signal %d, shutting down", signum)
        monitor.stop()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    monitor.start()
    monitor.wait()
    return 0


if __name__ == "__main__":
    sys.exit(main())
