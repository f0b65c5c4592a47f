"""
Logging system with colored output for ARP monitoring operations.

This module provides a Logger class that supports colored console output
using colorama, different log levels with distinct colors, and a few
formatting helpers for startup and shutdown banners. Scan workers log from
several threads at once, so every line is written under a shared lock.
"""

import sys
import threading
from datetime import datetime
from enum import Enum
from typing import Optional
from colorama import Fore, Style, init

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class LogLevel(Enum):
    """Enumeration for different log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


_LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
}

# Serializes output from worker threads
_output_lock = threading.Lock()

# Level shared by every Logger that has no explicit minimum
_global_min_level = LogLevel.INFO


class Logger:
    """
    Logger class with colored console output.

    Provides structured logging with different levels, colors, and
    key=value context details for ARP monitoring operations.
    """

    # Color mapping for different log levels
    LEVEL_COLORS = {
        LogLevel.DEBUG: Fore.CYAN,
        LogLevel.INFO: Fore.GREEN,
        LogLevel.WARNING: Fore.YELLOW,
        LogLevel.ERROR: Fore.RED,
    }

    # Symbol mapping for different log levels
    LEVEL_SYMBOLS = {
        LogLevel.DEBUG: "🔍",
        LogLevel.INFO: "ℹ️",
        LogLevel.WARNING: "⚠️",
        LogLevel.ERROR: "❌",
    }

    def __init__(self, name: str = "ArpMon", min_level: Optional[LogLevel] = None):
        """
        Initialize the Logger.

        Args:
            name: Name of the logger (default: "ArpMon")
            min_level: Minimum log level to display. When omitted the
                global level set through set_log_level() applies.
        """
        self.name = name
        self._min_level = min_level

    @property
    def min_level(self) -> LogLevel:
        return self._min_level or _global_min_level

    @min_level.setter
    def min_level(self, level: LogLevel) -> None:
        self._min_level = level

    def _should_log(self, level: LogLevel) -> bool:
        """
        Check if a message should be logged based on minimum level.

        Args:
            level: Log level to check

        Returns:
            True if message should be logged, False otherwise
        """
        return _LEVEL_ORDER[level] >= _LEVEL_ORDER[self.min_level]

    def _format_line(self, badge: str, message: str, context: dict) -> str:
        """Timestamp, badge, message, then the key=value context if any."""
        line = f"{Style.DIM}[{datetime.now():%H:%M:%S}]{Style.RESET_ALL} {badge} {message}"
        if context:
            pairs = " | ".join(f"{key}={value}" for key, value in context.items())
            line += f" {Style.DIM}({pairs}){Style.RESET_ALL}"
        return line

    def _emit(self, line: str, error: bool = False) -> None:
        with _output_lock:
            print(line, file=sys.stderr if error else sys.stdout, flush=True)

    def _log(self, level: LogLevel, message: str, **kwargs) -> None:
        if not self._should_log(level):
            return
        badge = f"{self.LEVEL_COLORS[level]}{self.LEVEL_SYMBOLS[level]} {level.value:<7}{Style.RESET_ALL}"
        self._emit(self._format_line(badge, message, kwargs), error=level == LogLevel.ERROR)

    def debug(self, message: str, **kwargs) -> None:
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        """
        Log an error to stderr.

        Args:
            message: What failed
            exception: Exception whose type and text are appended as context
            **kwargs: Further key=value context
        """
        if exception is not None:
            kwargs["exception"] = f"{type(exception).__name__}: {exception}"
        self._log(LogLevel.ERROR, message, **kwargs)

    def success(self, message: str, **kwargs) -> None:
        """Log a completed phase at INFO level, highlighted."""
        if not self._should_log(LogLevel.INFO):
            return
        badge = f"{Fore.GREEN}✅ SUCCESS{Style.RESET_ALL}"
        self._emit(self._format_line(badge, f"{Style.BRIGHT}{message}{Style.RESET_ALL}", kwargs))

    def section(self, title: str) -> None:
        """
        Log a section header for organizing output.

        Args:
            title: Section title
        """
        if not self._should_log(LogLevel.INFO):
            return

        separator = "=" * 60
        self._emit(
            f"\n{Fore.BLUE}{Style.BRIGHT}{separator}\n"
            f"  {title.upper()}\n"
            f"{separator}{Style.RESET_ALL}\n"
        )

    def monitor_info(self, cidr: str, host_ip: str, workers: int, segments: list) -> None:
        """
        Display the monitoring configuration in a formatted way.

        Args:
            cidr: Network being monitored
            host_ip: Operator IP address (never probed)
            workers: Number of scan workers
            segments: Segments assigned to the workers
        """
        if not self._should_log(LogLevel.INFO):
            return

        ranges = ", ".join(str(segment) for segment in segments)
        self._emit(
            f"\n{Fore.CYAN}{Style.BRIGHT}🌐 MONITOR CONFIGURATION{Style.RESET_ALL}\n"
            f"  Network:   {Style.BRIGHT}{cidr}{Style.RESET_ALL}\n"
            f"  Host IP:   {Style.BRIGHT}{host_ip}{Style.RESET_ALL}\n"
            f"  Workers:   {Style.BRIGHT}{workers}{Style.RESET_ALL}\n"
            f"  Segments:  {Style.BRIGHT}{ranges}{Style.RESET_ALL}\n"
        )


def set_log_level(level: LogLevel) -> None:
    """
    Set the log level for every logger without an explicit minimum.

    Args:
        level: Minimum log level to display
    """
    global _global_min_level
    _global_min_level = level


def parse_log_level(name: str, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """Map a level name such as "debug" to a LogLevel."""
    try:
        return LogLevel(str(name).strip().upper())
    except ValueError:
        return default


def get_logger(name: str = "ArpMon") -> Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return Logger(name)
