"""
Main entry point for the ARP monitor.

This module provides the command-line interface: configuration loading,
pre-flight checks, starting the scan engine and the query API, and the
graceful shutdown that drains both on SIGINT/SIGTERM.
"""

import argparse
import signal
import sys
import threading
from typing import Optional

from . import __version__
from .app import create_app
from .config.config_loader import ConfigLoader, MonitorConfig
from .core.scan_engine import ScanEngine
from .server import MonitorServer
from .utils.error_handler import (
    ConfigurationError, ErrorContext, ErrorHandler, ErrorSeverity, ErrorType, ToolValidator
)
from .utils.logger import LogLevel, get_logger, parse_log_level, set_log_level


class ArpMonApp:
    """
    Main application class for the ARP monitor.

    Handles CLI interface, pre-flight checks, and application lifecycle.
    """

    def __init__(self):
        """Initialize the application."""
        self.logger = get_logger("arpmon")
        self.error_handler = ErrorHandler(self.logger)
        self.engine: Optional[ScanEngine] = None
        self.server: Optional[MonitorServer] = None
        self.shutdown_requested = threading.Event()

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum: int, frame) -> None:
        """
        Handle shutdown signals gracefully.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_names = {signal.SIGINT: "SIGINT", signal.SIGTERM: "SIGTERM"}
        signal_name = signal_names.get(signum, f"Signal {signum}")

        if not self.shutdown_requested.is_set():
            self.logger.warning(f"Received {signal_name} - initiating graceful shutdown...")
            self.shutdown_requested.set()
        else:
            self.logger.error("Force shutdown requested - terminating immediately")
            sys.exit(1)

    def _load_config(self, config_file: Optional[str]) -> Optional[MonitorConfig]:
        try:
            return ConfigLoader(config_file, logger=self.logger).load()
        except ConfigurationError as e:
            context = ErrorContext(
                error_type=ErrorType.CONFIGURATION_ERROR,
                severity=ErrorSeverity.CRITICAL,
                operation="load",
                component="ConfigLoader",
            )
            self.error_handler.handle_error(e, context)
            return None

    def _perform_preflight_checks(self, config: MonitorConfig) -> bool:
        """
        Perform pre-flight checks for the configured probe method.

        Returns:
            bool: True if all checks pass, False otherwise
        """
        self.logger.section("PRE-FLIGHT CHECKS")

        validator = ToolValidator(self.error_handler)
        passed, problems = validator.validate_probe_method(
            config.method, config.interface, config.ipv4
        )

        if passed:
            self.logger.success("All pre-flight checks passed")
        else:
            self.logger.error(
                f"Pre-flight checks failed: {', '.join(problems)}",
                **self.error_handler.get_error_summary()
            )
        return passed

    def run(self, args: argparse.Namespace) -> int:
        """
        Run the monitor until a termination signal arrives.

        Args:
            args: Parsed command line arguments

        Returns:
            int: Exit code (0 for success, non-zero for failure)
        """
        config = self._load_config(args.config)
        if config is None:
            return 1

        if not args.verbose:
            set_log_level(parse_log_level(config.log_level))

        if not args.skip_checks and not self._perform_preflight_checks(config):
            self.logger.error("Use --skip-checks to bypass.")
            return 1

        self.engine = ScanEngine(config, logger=self.logger)
        self.logger.monitor_info(config.cidr, config.ipv4, config.workers, self.engine.segments)

        self.install_signal_handlers()
        self.engine.start()

        self.server = MonitorServer(
            create_app(self.engine, config.url_base), config.host, config.port, self.logger
        )
        try:
            self.server.start()
        except OSError as e:
            self.logger.error(f"Cannot serve on {config.host}:{config.port}", exception=e)
            self.engine.stop()
            return 1

        # Block waiting for signals
        while not self.shutdown_requested.wait(0.5):
            pass

        return self.shutdown(config.drain_timeout)

    def shutdown(self, drain_timeout: float) -> int:
        """Stop the workers and the HTTP server, then wait for the workers."""
        self.logger.section("SHUTDOWN")

        # Tokens first so workers start draining while the server stops
        self.engine.request_stop()
        self.server.shutdown(drain_timeout)

        self.logger.info("Waiting for workers to complete (please be patient)...")
        self.engine.stop()

        self.logger.success("Graceful shutdown complete.")
        return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="arpmon",
        description="ARP monitor - keeps a live IP to MAC table of a /24 and serves it over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Required environment (or .env / --config):
  CIDR=192.168.1.0/24 IPV4=192.168.1.10 MAC=aa:bb:cc:dd:ee:ff

Examples:
  python -m arpmon                          # Configure from the environment
  python -m arpmon --config arpmon.yml      # Read an 'arpmon:' YAML section
  python -m arpmon --verbose                # Log every probe result
        """
    )

    parser.add_argument(
        "--config",
        type=str,
        help="YAML file with an 'arpmon:' section. Environment variables override it."
    )

    parser.add_argument(
        "--skip-checks",
        action="store_true",
        help="Skip pre-flight checks for privileges and external tools"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"arpmon {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main entry point for the ARP monitor.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(LogLevel.DEBUG)

    app = ArpMonApp()
    return app.run(args)


if __name__ == "__main__":
    sys.exit(main())
