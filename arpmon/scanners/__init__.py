"""
Probe modules for the ARP monitor.

This package contains the base probe interface and the scapy and arping
probe implementations.
"""

from .base_probe import BaseProbe
from .arp_probe import ScapyARPProbe, ArpingProbe, create_probe

__all__ = [
    'BaseProbe',
    'ScapyARPProbe',
    'ArpingProbe',
    'create_probe'
]
