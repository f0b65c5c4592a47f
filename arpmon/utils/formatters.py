"""
Renderers for the host table.

Each renderer takes the resolved records of the table (absent entries are
never passed in) and produces the body of one query endpoint.
"""

import json
from typing import Iterable

from ..core.data_models import HostRecord


def render_macs(records: Iterable[HostRecord]) -> str:
    """One unique MAC address per line."""
    macs = sorted({record.mac for record in records})
    return "".join(f"{mac}\n" for mac in macs)


def render_csv(records: Iterable[HostRecord], prefix: str) -> str:
    """One "ip,mac" line per resolved host."""
    return "".join(f"{record.ip(prefix)},{record.mac}\n" for record in records)


def render_json(records: Iterable[HostRecord], prefix: str) -> str:
    """
    JSON document listing the resolved hosts.

    Output shape:
        {
          "hosts": [
            {"ip": "x.x.x.x", "mac": "XX:XX:XX:XX:XX:XX"},
            ...
          ]
        }
    """
    document = {
        "hosts": [
            {"ip": record.ip(prefix), "mac": record.mac}
            for record in records
        ]
    }
    return json.dumps(document, indent=2) + "\n"
