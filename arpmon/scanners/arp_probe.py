"""
ARP probe implementations for the ARP monitor.

Two interchangeable probes are provided: one that crafts the request with
scapy and one that shells out to the arping command. Both resolve a single
address per call and leave outcome classification to BaseProbe.
"""

import math
import re
import subprocess
from typing import Optional

from scapy.all import ARP, Ether, srp

from .base_probe import BaseProbe
from ..config.config_loader import PROBE_METHODS
from ..utils.error_handler import ConfigurationError, ProbeError, ToolMissingError
from ..utils.logger import Logger

BROADCAST_MAC = "ff:ff:ff:ff:ff:ff"


class ScapyARPProbe(BaseProbe):
    """
    Probe that sends a broadcast who-has frame with scapy.

    Requires raw socket access (root or CAP_NET_RAW).
    """

    method = "scapy"

    def _resolve(self, target: str) -> Optional[str]:
        request = Ether(dst=BROADCAST_MAC) / ARP(pdst=target)
        answered, _ = srp(request, timeout=self.timeout, iface=self.interface, verbose=False)

        for _sent, received in answered:
            if received[ARP].psrc == target:
                return received[ARP].hwsrc

        if len(answered):
            raise ProbeError(f"Reply did not come from {target}")
        return None


class ArpingProbe(BaseProbe):
    """
    Probe that runs the arping command once per target.

    Exit status 0 with a reply line resolves the target. Exit status 1, or a
    child still running after the deadline plus a grace period, means no
    reply arrived in time. Anything else is a failure.
    """

    method = "arping"

    # Reply formats of iputils arping and of Thomas Habets' arping
    REPLY_PATTERNS = [
        r'reply from\s+(\d+\.\d+\.\d+\.\d+)\s+\[([a-fA-F0-9:]{17})\]',
        r'bytes from\s+([a-fA-F0-9:]{17})\s+\((\d+\.\d+\.\d+\.\d+)\)',
    ]

    def _build_command(self, target: str) -> list:
        cmd = ["arping", "-c", "1", "-w", str(max(1, math.ceil(self.timeout)))]
        if self.interface:
            cmd.extend(["-I", self.interface])
        cmd.append(target)
        return cmd

    def _resolve(self, target: str) -> Optional[str]:
        try:
            result = subprocess.run(
                self._build_command(target),
                capture_output=True,
                text=True,
                timeout=self.timeout + 5  # Add buffer time
            )
        except FileNotFoundError as e:
            raise ToolMissingError("arping command not found") from e
        except subprocess.TimeoutExpired:
            # No reply before the deadline, same as exit status 1
            return None

        if result.returncode == 1:
            return None
        if result.returncode != 0:
            raise ProbeError(f"arping exited with {result.returncode}: {result.stderr.strip()}")

        mac = self._parse_reply(target, result.stdout)
        if mac is None:
            raise ProbeError("Could not parse arping output")
        return mac

    def _parse_reply(self, target: str, output: str) -> Optional[str]:
        """
        Extract the MAC address of the target from arping output.

        Args:
            target: Address that was probed
            output: Raw arping stdout

        Returns:
            MAC address, or None if no reply line for the target was found
        """
        iputils, habets = self.REPLY_PATTERNS

        for match in re.finditer(iputils, output, re.IGNORECASE):
            if match.group(1) == target:
                return match.group(2)

        for match in re.finditer(habets, output, re.IGNORECASE):
            if match.group(2) == target:
                return match.group(1)

        return None


def create_probe(method: str, timeout: float, interface: Optional[str] = None,
                 logger: Optional[Logger] = None) -> BaseProbe:
    """
    Create the probe for a configured method.

    Args:
        method: "scapy" or "arping"
        timeout: Seconds to wait for each reply
        interface: Network interface to probe on
        logger: Logger for probe diagnostics

    Returns:
        Probe instance

    Raises:
        ConfigurationError: If the method is unknown
    """
    if method == "scapy":
        return ScapyARPProbe(timeout=timeout, interface=interface, logger=logger)
    if method == "arping":
        return ArpingProbe(timeout=timeout, interface=interface, logger=logger)
    raise ConfigurationError(f"Unknown probe method: {method}. Must be one of {PROBE_METHODS}")
