"""
Network utility functions for address and MAC handling.

This module provides helpers for validating IPv4 addresses, networks and MAC
addresses, and for converting between dotted addresses and the last-octet
identifiers the host table is keyed by.
"""

import ipaddress
import re
from typing import Optional

import psutil

MAC_PATTERN = re.compile(r'^([0-9A-Fa-f]{2}[:-]){5}([0-9A-Fa-f]{2})$')


def is_valid_ip(ip_address: str) -> bool:
    """
    Check if a string represents a valid IPv4 address.

    Args:
        ip_address: String to validate as IPv4 address

    Returns:
        bool: True if valid IPv4 address, False otherwise
    """
    try:
        ipaddress.IPv4Address(ip_address)
        return True
    except (ipaddress.AddressValueError, ValueError):
        return False


def is_valid_network(network: str) -> bool:
    """
    Check if a string represents a valid IPv4 network in CIDR notation.

    Args:
        network: String to validate as IPv4 network (e.g., "192.168.1.0/24")

    Returns:
        bool: True if valid IPv4 network, False otherwise
    """
    try:
        ipaddress.IPv4Network(network, strict=False)
        return True
    except (ipaddress.AddressValueError, ipaddress.NetmaskValueError, ValueError):
        return False


def is_valid_mac(mac: str) -> bool:
    """Check if string is a MAC address in XX:XX:XX:XX:XX:XX or XX-XX-... form."""
    if not mac or not isinstance(mac, str):
        return False
    return bool(MAC_PATTERN.match(mac.strip()))


def normalize_mac(mac: str) -> str:
    """
    Normalize a MAC address to upper case with colon separators.

    Raises:
        ValueError: If the string is not a MAC address
    """
    if not is_valid_mac(mac):
        raise ValueError(f"Invalid MAC address: {mac}")
    return mac.strip().replace('-', ':').upper()


def network_prefix(cidr: str) -> str:
    """
    Return the first three octets of the CIDR's address followed by a dot.

    The address is taken as written, host bits included, so a /16 such as
    "192.168.5.0/16" monitors 192.168.5.x.

    >>> network_prefix("192.168.5.0/16")
    '192.168.5.'
    """
    address = ipaddress.IPv4Interface(cidr).ip
    octets = str(address).split('.')
    return '.'.join(octets[:3]) + '.'


def host_octet(ip_address: str) -> int:
    """Return the last octet of a dotted IPv4 address."""
    return int(str(ipaddress.IPv4Address(ip_address)).split('.')[-1])


def build_ip(prefix: str, octet: int) -> str:
    """Join a prefix produced by network_prefix() with a host octet."""
    return f"{prefix}{octet}"


def interface_for_address(ip_address: str) -> Optional[str]:
    """
    Find the local interface that carries an IPv4 address.

    Args:
        ip_address: Address to look up

    Returns:
        Interface name, or None if no local interface has the address
    """
    for name, addresses in psutil.net_if_addrs().items():
        for address in addresses:
            if address.address == ip_address:
                return name
    return None
