"""
Configuration module for the ARP monitor.
Provides loading and validation of the monitor settings.
"""

from .config_loader import ConfigLoader, MonitorConfig

__all__ = ['ConfigLoader', 'MonitorConfig']
