"""
Utility functions and helper classes.
"""

from .logger import Logger, LogLevel, set_log_level, get_logger
from .error_handler import (
    ErrorHandler, ToolValidator, ErrorContext, ErrorType, ErrorSeverity,
    ArpMonError, ConfigurationError, ProbeError, ToolMissingError,
    InsufficientPrivilegesError, ValidationError
)
from . import network_utils

__all__ = [
    'Logger',
    'LogLevel',
    'set_log_level',
    'get_logger',
    'ErrorHandler',
    'ToolValidator',
    'ErrorContext',
    'ErrorType',
    'ErrorSeverity',
    'ArpMonError',
    'ConfigurationError',
    'ProbeError',
    'ToolMissingError',
    'InsufficientPrivilegesError',
    'ValidationError',
    'network_utils'
]
