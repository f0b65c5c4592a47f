"""
ARP Monitor

Continuously probes every host of a local /24 with ARP requests and keeps a
live IP to MAC table that can be queried over HTTP.
"""

__version__ = "1.0.0"
__author__ = "ARP Monitor Team"
