"""
Shared fixtures for the arpmon test suite.

FakeProbe replaces the network: each target gets a script of answers that
are replayed in order, the last one repeating forever.
"""

import threading
import time

import pytest

from arpmon.config.config_loader import MonitorConfig
from arpmon.scanners.base_probe import BaseProbe
from arpmon.utils.logger import Logger, LogLevel


class FakeProbe(BaseProbe):
    """
    Scripted probe.

    Script entries: a MAC string resolves, None times out, an exception
    instance is raised (and so classified as ignored). Targets without a
    script time out.
    """

    method = "fake"

    def __init__(self, scripts=None, delay=0.0, **kwargs):
        super().__init__(**kwargs)
        self.scripts = {target: list(answers) for target, answers in (scripts or {}).items()}
        self.delay = delay
        self.calls = []
        self._calls_lock = threading.Lock()

    def _resolve(self, target):
        with self._calls_lock:
            self.calls.append(target)
            answers = self.scripts.get(target)
            if answers is None:
                answer = None
            elif len(answers) > 1:
                answer = answers.pop(0)
            else:
                answer = answers[0]

        if self.delay:
            time.sleep(self.delay)
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def quiet_logger():
    return Logger("test", min_level=LogLevel.ERROR)


@pytest.fixture
def fake_probe(quiet_logger):
    return FakeProbe(timeout=0.1, logger=quiet_logger)


@pytest.fixture
def config():
    return MonitorConfig(
        cidr="192.168.1.0/24",
        ipv4="192.168.1.10",
        mac="AA:BB:CC:DD:EE:01",
        workers=4,
        probe_timeout=0.1,
        wait_seconds=0.01,
        poll_interval=0.005,
    )


def wait_until(predicate, timeout=5.0, interval=0.01):
    """Poll predicate until it returns True or the timeout passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
