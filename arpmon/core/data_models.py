"""
Core data models and enums for the ARP monitor.

This module defines the data structures shared by the scanning engine:
address range constants, host records, segments, shutdown tokens, and the
classified result of a single ARP probe.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..utils.network_utils import build_ip

# Host identifiers are the last octet of an address in a /24
ADDRESS_FIRST = 1
ADDRESS_LAST = 254
ADDRESS_SPACE = 256

# Table value for "no MAC currently known"
NOT_FOUND = None


class ProbeOutcome(Enum):
    """Classification of a single ARP probe."""
    RESOLVED = "resolved"
    TIMEOUT = "timeout"
    IGNORED = "ignored"


class WorkerState(Enum):
    """States of a scan worker."""
    IDLE = "idle"
    PROBING = "probing"
    WAITING = "waiting"
    STOPPED = "stopped"


@dataclass(frozen=True)
class HostRecord:
    """
    A resolved entry of the host table.

    Attributes:
        address: Last octet of the host address
        mac: MAC address in upper case, colon separated
    """
    address: int
    mac: str

    def ip(self, prefix: str) -> str:
        return build_ip(prefix, self.address)


@dataclass(frozen=True)
class Segment:
    """
    Contiguous range of host identifiers owned by one scan worker.

    Both bounds are inclusive. A segment whose lower bound exceeds its
    upper bound is empty.
    """
    lower: int
    upper: int

    def __iter__(self):
        return iter(range(self.lower, self.upper + 1))

    def __len__(self) -> int:
        return max(0, self.upper - self.lower + 1)

    @property
    def is_empty(self) -> bool:
        return self.lower > self.upper

    def __str__(self) -> str:
        if self.is_empty:
            return "[]"
        return f"[{self.lower}..{self.upper}]"


@dataclass(frozen=True)
class ShutdownToken:
    """One-shot stop notification. Any worker may consume any token."""
    sequence: int


@dataclass
class ProbeResult:
    """
    Classified result of one ARP probe.

    Attributes:
        target: IP address that was probed
        outcome: RESOLVED, TIMEOUT or IGNORED
        mac: Resolved MAC address (RESOLVED only)
        latency: Seconds between sending the request and the probe returning
        error: Description of the failure (IGNORED only)
    """
    target: str
    outcome: ProbeOutcome
    mac: Optional[str] = None
    latency: float = 0.0
    error: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.outcome is ProbeOutcome.RESOLVED
