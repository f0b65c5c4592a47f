"""
Error handling and validation system for the ARP monitor.

This module provides the exception hierarchy used across the package,
centralized error logging with troubleshooting suggestions, and the
pre-flight validation of the tools and privileges each probe method needs.

ProbeError and ToolMissingError are raised inside a probe only; BaseProbe
classifies them and never lets them reach its caller (see
arpmon.scanners.base_probe).
"""

import os
import shutil
from typing import Optional, Any, Dict, List, Tuple
from enum import Enum
from dataclasses import dataclass

import psutil

from .logger import Logger, get_logger
from .network_utils import interface_for_address


class ErrorType(Enum):
    """Enumeration for different types of errors."""
    CONFIGURATION_ERROR = "configuration_error"
    PERMISSION_ERROR = "permission_error"
    TOOL_MISSING_ERROR = "tool_missing_error"
    VALIDATION_ERROR = "validation_error"
    PROBE_ERROR = "probe_error"
    SERVER_ERROR = "server_error"


class ErrorSeverity(Enum):
    """Enumeration for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """
    Context information for error handling.

    Attributes:
        error_type: Type of error that occurred
        severity: Severity level of the error
        operation: Operation that was being performed when error occurred
        component: Component/module where error occurred
        additional_info: Additional context information
    """
    error_type: ErrorType
    severity: ErrorSeverity
    operation: str
    component: str
    additional_info: Dict[str, Any] = None

    def __post_init__(self):
        if self.additional_info is None:
            self.additional_info = {}


class ArpMonError(Exception):
    """Base exception class for the ARP monitor."""

    def __init__(self, message: str, error_context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.error_context = error_context


class ConfigurationError(ArpMonError):
    """Missing or malformed startup configuration. Always fatal."""
    pass


class ProbeError(ArpMonError):
    """A probe could not be sent or its reply could not be read."""
    pass


class ToolMissingError(ArpMonError):
    """Exception for missing external tools."""
    pass


class InsufficientPrivilegesError(ArpMonError):
    """Raw socket access or tool execution was refused."""
    pass


class ValidationError(ArpMonError):
    """Exception for validation errors."""
    pass


class ErrorHandler:
    """
    Centralized error logging.

    Logs errors with a level matching their severity, keeps per-type counts,
    and prints troubleshooting suggestions. There is no retry logic: a failed
    probe is simply repeated on the next scan cycle.
    """

    def __init__(self, logger: Optional[Logger] = None):
        """
        Initialize the ErrorHandler.

        Args:
            logger: Logger instance for error reporting
        """
        self.logger = logger or get_logger(__name__)
        self.error_statistics: Dict[ErrorType, int] = {
            error_type: 0 for error_type in ErrorType
        }

    def handle_error(self, error: Exception, context: ErrorContext) -> None:
        """
        Log an error and print suggestions for it.

        Args:
            error: The exception that occurred
            context: Error context information
        """
        self.error_statistics[context.error_type] += 1
        self._log_error(error, context)

        suggestions = self._suggestions_for(context)
        if suggestions:
            self.logger.info("Troubleshooting suggestions:")
            for suggestion in suggestions:
                self.logger.info(f"  • {suggestion}")

    def _log_error(self, error: Exception, context: ErrorContext) -> None:
        message = f"{context.component}.{context.operation}: {error}"
        if context.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            self.logger.error(message, **context.additional_info)
        elif context.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(message, **context.additional_info)
        else:
            self.logger.debug(message, **context.additional_info)

    def _suggestions_for(self, context: ErrorContext) -> List[str]:
        if context.error_type == ErrorType.CONFIGURATION_ERROR:
            return [
                "Set CIDR, IPV4 and MAC in the environment or in a .env file",
                "Or pass a YAML file with an 'arpmon:' section via --config",
                "Example: CIDR=192.168.1.0/24 IPV4=192.168.1.10 MAC=aa:bb:cc:dd:ee:ff",
            ]
        if context.error_type == ErrorType.TOOL_MISSING_ERROR:
            tool_name = context.additional_info.get("tool_name", "")
            return [
                f"Ubuntu/Debian: sudo apt-get install {tool_name}",
                f"CentOS/RHEL: sudo yum install {tool_name}",
                "Or switch PROBE_METHOD to scapy",
            ]
        if context.error_type == ErrorType.PERMISSION_ERROR:
            return [
                "Run with sudo: sudo python -m arpmon",
                "Or grant raw socket access: sudo setcap cap_net_raw+eip $(which python3)",
            ]
        if context.error_type == ErrorType.VALIDATION_ERROR:
            return ["Check the INTERFACE and IPV4 settings against 'ip addr'"]
        return []

    def get_error_summary(self) -> Dict[str, int]:
        """Return counts of errors handled so far, keyed by type name."""
        return {
            error_type.value: count
            for error_type, count in self.error_statistics.items()
            if count
        }


class ToolValidator:
    """
    Pre-flight validation for the configured probe method.

    The arping method needs the arping binary; the scapy method needs raw
    socket privileges. Both benefit from a configured interface that exists
    and an operator address that is assigned locally.
    """

    def __init__(self, error_handler: ErrorHandler):
        """
        Initialize the ToolValidator.

        Args:
            error_handler: ErrorHandler instance for error management
        """
        self.error_handler = error_handler
        self.logger = error_handler.logger

    def validate_probe_method(self, method: str, interface: Optional[str] = None,
                              host_ip: Optional[str] = None) -> Tuple[bool, List[str]]:
        """
        Validate everything the given probe method depends on.

        Args:
            method: "scapy" or "arping"
            interface: Configured interface name, if any
            host_ip: Operator IPv4 address

        Returns:
            Tuple of (all_valid, problems)
        """
        problems = []

        if method == "arping" and not self._check_tool_availability("arping"):
            problems.append("arping not found in PATH")

        if method == "scapy" and not self._check_raw_socket_privileges():
            problems.append("raw socket privileges missing")

        if interface and not self._check_interface(interface):
            problems.append(f"interface {interface} not found")

        if host_ip and not self._check_local_address(host_ip):
            # Not fatal: the operator may be configuring a different host's view
            self.logger.warning(f"{host_ip} is not assigned to any local interface")

        return not problems, problems

    def _check_tool_availability(self, tool_name: str) -> bool:
        tool_path = shutil.which(tool_name)
        if tool_path:
            self.logger.debug(f"Found {tool_name} at: {tool_path}")
            return True

        context = ErrorContext(
            error_type=ErrorType.TOOL_MISSING_ERROR,
            severity=ErrorSeverity.HIGH,
            operation="tool_availability_check",
            component="ToolValidator",
            additional_info={"tool_name": tool_name}
        )
        self.error_handler.handle_error(
            ToolMissingError(f"Tool {tool_name} not found in PATH"), context
        )
        return False

    def _check_raw_socket_privileges(self) -> bool:
        # Windows has no euid; Npcap access is checked when the first probe runs
        if not hasattr(os, "geteuid") or os.geteuid() == 0:
            return True

        context = ErrorContext(
            error_type=ErrorType.PERMISSION_ERROR,
            severity=ErrorSeverity.HIGH,
            operation="raw_socket_check",
            component="ToolValidator",
        )
        self.error_handler.handle_error(
            InsufficientPrivilegesError("Sending raw ARP frames requires root or CAP_NET_RAW"),
            context
        )
        return False

    def _check_interface(self, interface: str) -> bool:
        if interface in psutil.net_if_addrs():
            return True

        context = ErrorContext(
            error_type=ErrorType.VALIDATION_ERROR,
            severity=ErrorSeverity.HIGH,
            operation="interface_check",
            component="ToolValidator",
            additional_info={"interface": interface}
        )
        self.error_handler.handle_error(
            ValidationError(f"Network interface {interface} does not exist"), context
        )
        return False

    def _check_local_address(self, host_ip: str) -> bool:
        return interface_for_address(host_ip) is not None
