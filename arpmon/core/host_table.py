"""
Shared host table for the ARP monitor.

The table maps every host identifier in a fixed range to either a MAC
address or NOT_FOUND. It is written by the scan workers and read by the query
layer, and is guarded by a single reader/writer lock. Callers never hold the
lock across a probe: a worker probes first and only takes the write lock to
commit the result.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .data_models import ADDRESS_FIRST, ADDRESS_LAST, NOT_FOUND, HostRecord


class ReadWriteLock:
    """
    Writer-preferring reader/writer lock.

    Any number of readers may hold the lock at once; a writer holds it alone.
    Once a writer is waiting, new readers queue behind it so a steady stream
    of queries cannot starve the scan workers. Not reentrant.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class HostTable:
    """
    Fully populated mapping of host identifier to MAC address.

    Every identifier in [first, last] has an entry from construction on; the
    operator's own entry is seeded with its MAC. Addresses outside the range
    are a caller error and raise KeyError rather than growing the table.
    """

    def __init__(self, self_address: int, self_mac: str,
                 first: int = ADDRESS_FIRST, last: int = ADDRESS_LAST):
        """
        Initialize the table.

        Args:
            self_address: Host identifier of the operator's own address
            self_mac: Operator's MAC address
            first: Lowest host identifier
            last: Highest host identifier
        """
        if not first <= self_address <= last:
            raise KeyError(f"Own address {self_address} outside [{first}, {last}]")

        self.first = first
        self.last = last
        self.self_address = self_address
        self._lock = ReadWriteLock()
        self._hosts: Dict[int, Optional[str]] = {
            address: NOT_FOUND for address in range(first, last + 1)
        }
        self._hosts[self_address] = self_mac

    def _check(self, address: int) -> None:
        if address not in self._hosts:
            raise KeyError(f"Address {address} outside [{self.first}, {self.last}]")

    def get(self, address: int) -> Optional[str]:
        with self._lock.read_locked():
            self._check(address)
            return self._hosts[address]

    def set(self, address: int, mac: Optional[str]) -> None:
        with self._lock.write_locked():
            self._check(address)
            self._hosts[address] = mac

    def clear(self, address: int) -> None:
        self.set(address, NOT_FOUND)

    def get_all(self) -> Dict[int, Optional[str]]:
        """Return a consistent copy of the whole table."""
        with self._lock.read_locked():
            return dict(self._hosts)

    def records(self) -> List[HostRecord]:
        """Return resolved entries in ascending address order."""
        snapshot = self.get_all()
        return [
            HostRecord(address, mac)
            for address, mac in sorted(snapshot.items())
            if mac is not NOT_FOUND
        ]

    def resolved_count(self) -> int:
        with self._lock.read_locked():
            return sum(1 for mac in self._hosts.values() if mac is not NOT_FOUND)

    def __len__(self) -> int:
        return len(self._hosts)

    def __contains__(self, address: int) -> bool:
        return address in self._hosts
