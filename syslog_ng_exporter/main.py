"""Main application entry point for the syslog-ng exporter."""

import argparse
import logging
import os
import signal
import sys
from typing import Optional, Tuple

from werkzeug.serving import run_simple

from .app import ExporterApp
from .collectors.stats_collector import StatsCollector
from .config.loader import ConfigLoader
from .config.models import LOG_LEVELS, ExporterConfig
from .services.prometheus_exporter import create_registry
from .utils.logger import setup_logger
from .version import __version__


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split a listen address of the form "host:port" or ":port".

    Args:
        address: Listen address

    Returns:
        Tuple[str, int]: Host (0.0.0.0 when omitted) and port

    Raises:
        ValueError: If the port is missing or not a number
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {address}. Expected 'host:port' or ':port'")
    return host or "0.0.0.0", int(port)


class ExporterService:
    """
    Main exporter application.

    Wires configuration, the STATS collector, the metrics registry and the
    WSGI application together, and serves them over HTTP.
    """

    def __init__(self, config: ExporterConfig):
        """
        Initialize exporter service.

        Args:
            config: Validated exporter configuration
        """
        self.config = config
        self.logger = setup_logger("syslog_ng_exporter", config.logging.level)

        signal.signal(signal.SIGTERM, self._signal_handler)

        self.collector = StatsCollector(config.socket, self.logger)
        self.registry = create_registry(self.collector, self.logger)
        self.app = ExporterApp(config, self.registry, self.logger)

        self.logger.info(f"Starting syslog_ng_exporter {__version__}")
        self.logger.info(f"Control socket: {config.socket.path}")

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, shutting down")
        sys.exit(0)

    def serve(self):
        """Serve HTTP requests until interrupted, one thread per request."""
        telemetry = self.config.telemetry
        self.logger.info(f"Starting server: {telemetry.host}:{telemetry.port}{telemetry.endpoint}")

        try:
            run_simple(telemetry.host, telemetry.port, self.app, threaded=True)
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt")


def build_config(args: argparse.Namespace) -> ExporterConfig:
    """
    Load configuration and apply command-line overrides.

    Args:
        args: Parsed command-line arguments

    Returns:
        ExporterConfig: Effective configuration
    """
    config = ConfigLoader.load(args.config)

    if args.socket_path:
        config.socket.path = args.socket_path
    if args.telemetry_address:
        config.telemetry.host, config.telemetry.port = parse_address(args.telemetry_address)
    if args.telemetry_endpoint:
        config.telemetry.endpoint = args.telemetry_endpoint
    if args.log_level:
        config.logging.level = args.log_level

    # Re-validate after overrides
    return ExporterConfig.model_validate(config.model_dump())


def main(argv: Optional[list] = None):
    """
    CLI entry point.

    Parses command-line arguments and starts the exporter.
    """
    parser = argparse.ArgumentParser(
        description='A Syslog-NG exporter for Prometheus',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve on the default port with the default control socket
  syslog-ng-exporter

  # Custom socket and listen address
  syslog-ng-exporter --socket.path /run/syslog-ng.ctl --telemetry.address :9577

  # Use a configuration file
  syslog-ng-exporter --config config/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        default=os.getenv('SYSLOG_NG_EXPORTER_CONFIG'),
        help='Path to configuration file (default: SYSLOG_NG_EXPORTER_CONFIG env var, else built-in defaults)'
    )

    parser.add_argument(
        '--socket.path',
        dest='socket_path',
        help='Path to syslog-ng control socket (default: /var/lib/syslog-ng/syslog-ng.ctl)'
    )

    parser.add_argument(
        '--telemetry.address',
        dest='telemetry_address',
        help='Address on which to expose metrics (default: :9577)'
    )

    parser.add_argument(
        '--telemetry.endpoint',
        dest='telemetry_endpoint',
        help='Path under which to expose metrics (default: /metrics)'
    )

    parser.add_argument(
        '--log-level',
        default=os.getenv('LOG_LEVEL'),
        choices=LOG_LEVELS,
        help='Logging level (default: INFO or LOG_LEVEL env var)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'syslog_ng_exporter {__version__}'
    )

    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except FileNotFoundError as e:
        logging.error(str(e))
        sys.exit(1)
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}", exc_info=True)
        sys.exit(1)

    ExporterService(config).serve()


if __name__ == '__main__':
    main()
