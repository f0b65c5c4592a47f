"""
Configuration loader for the ARP monitor.

Settings are read from three layers, later layers winning:

    1. MonitorConfig defaults
    2. an optional YAML file with an 'arpmon:' section
    3. environment variables (a .env file is loaded first)

CIDR, IPV4 and MAC are required. A missing or malformed required value
raises ConfigurationError: the monitor must not start half configured.
Invalid optional values are reported and replaced by their defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from ..utils.error_handler import ConfigurationError
from ..utils.logger import Logger, get_logger
from ..utils.network_utils import (
    host_octet, is_valid_ip, is_valid_mac, is_valid_network, network_prefix, normalize_mac
)

PROBE_METHODS = ["scapy", "arping"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

# Environment variable -> MonitorConfig field
ENV_VARS = {
    "CIDR": "cidr",
    "IPV4": "ipv4",
    "MAC": "mac",
    "PORT": "port",
    "HOST": "host",
    "URL_BASE": "url_base",
    "WORKERS": "workers",
    "PROBE_TIMEOUT": "probe_timeout",
    "WAIT_SECONDS": "wait_seconds",
    "POLL_INTERVAL": "poll_interval",
    "PROBE_METHOD": "method",
    "INTERFACE": "interface",
    "DRAIN_TIMEOUT": "drain_timeout",
    "LOG_LEVEL": "log_level",
}

REQUIRED_FIELDS = ("cidr", "ipv4", "mac")


@dataclass
class MonitorConfig:
    """Validated configuration of the monitor."""
    cidr: str
    ipv4: str
    mac: str
    port: int = 1234
    host: str = "0.0.0.0"
    url_base: str = ""
    workers: int = 4
    probe_timeout: float = 6.0
    wait_seconds: float = 12.0
    poll_interval: float = 0.5
    method: str = "scapy"
    interface: Optional[str] = None
    drain_timeout: float = 5.0
    log_level: str = "INFO"

    @property
    def prefix(self) -> str:
        """First three octets of the network, e.g. "192.168.1."."""
        return network_prefix(self.cidr)

    @property
    def self_address(self) -> int:
        """Last octet of the operator's own address."""
        return host_octet(self.ipv4)


class ConfigLoader:
    """
    Builds a MonitorConfig from defaults, a YAML file and the environment.
    """

    def __init__(self, config_file: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 logger: Optional[Logger] = None):
        """
        Initialize ConfigLoader.

        Args:
            config_file: Optional YAML file with an 'arpmon:' section
            environ: Environment to read; defaults to os.environ after
                loading a .env file from the working directory
            logger: Logger for validation warnings
        """
        self.config_file = Path(config_file) if config_file else None
        self._environ = environ
        self.logger = logger or get_logger(__name__)

    def load(self) -> MonitorConfig:
        """
        Load and validate the configuration.

        Returns:
            MonitorConfig ready to build a ScanEngine from

        Raises:
            ConfigurationError: If a required value is missing or malformed
        """
        values: Dict[str, Any] = {}
        values.update(self._load_file())
        values.update(self._load_environment())

        missing = [name for name in REQUIRED_FIELDS if not values.get(name)]
        if missing:
            env_names = [env for env, field_name in ENV_VARS.items() if field_name in missing]
            raise ConfigurationError(f"{', '.join(env_names)} must be set in environment or config file")

        cidr, ipv4, mac = self._validate_required(values)

        return MonitorConfig(
            cidr=cidr,
            ipv4=ipv4,
            mac=mac,
            port=self._validate_port(values.get('port', 1234)),
            host=self._validate_host(values.get('host', "0.0.0.0")),
            url_base=self._normalize_url_base(values.get('url_base', "")),
            workers=self._validate_positive_int(values.get('workers', 4), 'workers', 4),
            probe_timeout=self._validate_positive_float(values.get('probe_timeout', 6.0), 'probe_timeout', 6.0),
            wait_seconds=self._validate_positive_float(values.get('wait_seconds', 12.0), 'wait_seconds', 12.0),
            poll_interval=self._validate_positive_float(values.get('poll_interval', 0.5), 'poll_interval', 0.5),
            method=self._validate_method(values.get('method', "scapy")),
            interface=values.get('interface') or None,
            drain_timeout=self._validate_positive_float(values.get('drain_timeout', 5.0), 'drain_timeout', 5.0),
            log_level=self._validate_log_level(values.get('log_level', "INFO")),
        )

    def _load_file(self) -> Dict[str, Any]:
        if self.config_file is None:
            return {}

        if not self.config_file.exists():
            raise ConfigurationError(f"Config file not found: {self.config_file}")

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing config file {self.config_file}: {e}") from e

        if not config_data or 'arpmon' not in config_data or not isinstance(config_data['arpmon'], dict):
            raise ConfigurationError(f"Config file {self.config_file} has no 'arpmon' section")

        known = set(ENV_VARS.values())
        section = config_data['arpmon']
        for key in section:
            if key not in known:
                self.logger.warning(f"Unknown config key ignored: {key}")
        return {key: value for key, value in section.items() if key in known and value is not None}

    def _load_environment(self) -> Dict[str, Any]:
        if self._environ is None:
            load_dotenv()
            environ = os.environ
        else:
            environ = self._environ

        values = {}
        for env_name, field_name in ENV_VARS.items():
            value = environ.get(env_name)
            if value is not None and value != "":
                values[field_name] = value
        return values

    def _validate_required(self, values: Dict[str, Any]) -> tuple:
        cidr = str(values['cidr']).strip()
        ipv4 = str(values['ipv4']).strip()
        mac = str(values['mac']).strip()

        if not is_valid_network(cidr):
            raise ConfigurationError(f"Invalid CIDR: {cidr}")
        if not is_valid_ip(ipv4):
            raise ConfigurationError(f"Invalid IPV4: {ipv4}")
        if not is_valid_mac(mac):
            raise ConfigurationError(f"Invalid MAC: {mac}")

        prefix = network_prefix(cidr)
        if not ipv4.startswith(prefix):
            raise ConfigurationError(f"IPV4 {ipv4} is not inside {prefix}0/24")

        octet = host_octet(ipv4)
        if not 1 <= octet <= 254:
            raise ConfigurationError(f"IPV4 {ipv4} is not a host address")

        if not cidr.endswith('/24'):
            self.logger.warning(f"Only the /24 {prefix}0/24 of {cidr} is monitored")

        return cidr, ipv4, normalize_mac(mac)

    def _validate_positive_int(self, value: Any, field_name: str, default: int) -> int:
        """
        Validate that a value is a positive integer.

        Args:
            value: Value to validate
            field_name: Name of the field for error messages
            default: Default value to use if validation fails

        Returns:
            Validated integer value or default
        """
        try:
            int_value = int(value)
            if int_value <= 0:
                self.logger.warning(f"Invalid {field_name}: {value}. Must be positive. Using default: {default}")
                return default
            return int_value
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid {field_name}: {value}. Must be an integer. Using default: {default}")
            return default

    def _validate_positive_float(self, value: Any, field_name: str, default: float) -> float:
        try:
            float_value = float(value)
            if float_value <= 0:
                self.logger.warning(f"Invalid {field_name}: {value}. Must be positive. Using default: {default}")
                return default
            return float_value
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid {field_name}: {value}. Must be a number. Using default: {default}")
            return default

    def _validate_port(self, value: Any) -> int:
        port = self._validate_positive_int(value, 'port', 1234)
        if port > 65535:
            self.logger.warning(f"Invalid port: {value}. Must be at most 65535. Using default: 1234")
            return 1234
        return port

    def _validate_host(self, value: Any) -> str:
        host = str(value).strip()
        if host != "localhost" and not is_valid_ip(host):
            self.logger.warning(f"Invalid host: {value}. Using default: 0.0.0.0")
            return "0.0.0.0"
        return host

    def _validate_method(self, method: Any) -> str:
        """
        Validate the probe method.

        Args:
            method: Method to validate

        Returns:
            Validated method or default
        """
        method = str(method).strip().lower()
        if method not in PROBE_METHODS:
            self.logger.warning(f"Invalid probe method: {method}. Must be one of {PROBE_METHODS}. Using default: scapy")
            return "scapy"
        return method

    def _validate_log_level(self, level: Any) -> str:
        level = str(level).strip().upper()
        if level not in LOG_LEVELS:
            self.logger.warning(f"Invalid log level: {level}. Must be one of {LOG_LEVELS}. Using default: INFO")
            return "INFO"
        return level

    @staticmethod
    def _normalize_url_base(value: Any) -> str:
        base = str(value).strip().rstrip('/')
        if base and not base.startswith('/'):
            base = '/' + base
        return base
