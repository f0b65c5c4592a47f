"""
Core components of the scanning engine.
"""

from .data_models import (
    ADDRESS_FIRST,
    ADDRESS_LAST,
    NOT_FOUND,
    HostRecord,
    ProbeOutcome,
    ProbeResult,
    Segment,
    ShutdownToken,
    WorkerState
)
from .host_table import HostTable, ReadWriteLock
from .partitioner import partition

__all__ = [
    'ADDRESS_FIRST',
    'ADDRESS_LAST',
    'NOT_FOUND',
    'HostRecord',
    'ProbeOutcome',
    'ProbeResult',
    'Segment',
    'ShutdownToken',
    'WorkerState',
    'HostTable',
    'ReadWriteLock',
    'partition'
]
