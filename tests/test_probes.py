import subprocess

import pytest
from scapy.all import ARP, Ether

from arpmon.core.data_models import ProbeOutcome
from arpmon.scanners import arp_probe
from arpmon.scanners.arp_probe import ArpingProbe, ScapyARPProbe, create_probe
from arpmon.utils.error_handler import ConfigurationError

from conftest import FakeProbe

IPUTILS_REPLY = """ARPING 192.168.1.20 from 192.168.1.10 eth0
Unicast reply from 192.168.1.20 [aa:bb:cc:dd:ee:20]  0.712ms
Sent 1 probes (1 broadcast(s))
Received 1 response(s)
"""

HABETS_REPLY = """ARPING 192.168.1.20
60 bytes from aa:bb:cc:dd:ee:20 (192.168.1.20): index=0 time=1.024 msec

--- 192.168.1.20 statistics ---
1 packets transmitted, 1 packets received,   0% unanswered (0 extra)
"""


class TestBaseProbe:

    def test_resolved_mac_is_normalized(self, quiet_logger):
        probe = FakeProbe({"192.168.1.20": ["aa-bb-cc-dd-ee-20"]}, logger=quiet_logger)

        result = probe.probe("192.168.1.20")

        assert result.outcome is ProbeOutcome.RESOLVED
        assert result.resolved
        assert result.mac == "AA:BB:CC:DD:EE:20"
        assert result.error is None

    def test_no_reply_is_a_timeout(self, fake_probe):
        result = fake_probe.probe("192.168.1.30")

        assert result.outcome is ProbeOutcome.TIMEOUT
        assert result.mac is None

    def test_exceptions_are_ignored_not_raised(self, quiet_logger):
        probe = FakeProbe({"192.168.1.40": [OSError("network unreachable")]}, logger=quiet_logger)

        result = probe.probe("192.168.1.40")

        assert result.outcome is ProbeOutcome.IGNORED
        assert "network unreachable" in result.error

    def test_garbage_mac_is_ignored(self, quiet_logger):
        probe = FakeProbe({"192.168.1.50": ["not-a-mac"]}, logger=quiet_logger)

        assert probe.probe("192.168.1.50").outcome is ProbeOutcome.IGNORED

    def test_statistics_count_outcomes(self, quiet_logger):
        probe = FakeProbe(
            {"192.168.1.1": ["00:11:22:33:44:55"], "192.168.1.2": [RuntimeError("boom")]},
            logger=quiet_logger
        )

        probe.probe("192.168.1.1")
        probe.probe("192.168.1.1")
        probe.probe("192.168.1.2")
        probe.probe("192.168.1.3")

        assert probe.statistics == {"resolved": 2, "timeout": 1, "ignored": 1}


class TestScapyARPProbe:

    @staticmethod
    def _reply(ip, mac):
        return Ether(src=mac) / ARP(op=2, psrc=ip, hwsrc=mac)

    def test_matching_reply_resolves(self, monkeypatch, quiet_logger):
        sent = {}

        def fake_srp(packet, timeout, iface, verbose):
            sent.update(pdst=packet[ARP].pdst, dst=packet[Ether].dst, timeout=timeout, iface=iface)
            return [(packet, self._reply("192.168.1.20", "aa:bb:cc:dd:ee:20"))], []

        monkeypatch.setattr(arp_probe, "srp", fake_srp)
        probe = ScapyARPProbe(timeout=2.0, interface="eth0", logger=quiet_logger)

        result = probe.probe("192.168.1.20")

        assert result.outcome is ProbeOutcome.RESOLVED
        assert result.mac == "AA:BB:CC:DD:EE:20"
        assert sent == {
            "pdst": "192.168.1.20",
            "dst": "ff:ff:ff:ff:ff:ff",
            "timeout": 2.0,
            "iface": "eth0",
        }

    def test_no_answer_is_a_timeout(self, monkeypatch, quiet_logger):
        monkeypatch.setattr(arp_probe, "srp", lambda *args, **kwargs: ([], []))
        probe = ScapyARPProbe(timeout=0.1, logger=quiet_logger)

        assert probe.probe("192.168.1.20").outcome is ProbeOutcome.TIMEOUT

    def test_reply_from_another_host_is_ignored(self, monkeypatch, quiet_logger):
        def fake_srp(packet, **kwargs):
            return [(packet, self._reply("192.168.1.99", "aa:bb:cc:dd:ee:99"))], []

        monkeypatch.setattr(arp_probe, "srp", fake_srp)
        probe = ScapyARPProbe(timeout=0.1, logger=quiet_logger)

        assert probe.probe("192.168.1.20").outcome is ProbeOutcome.IGNORED

    def test_socket_errors_are_ignored(self, monkeypatch, quiet_logger):
        def fake_srp(*args, **kwargs):
            raise PermissionError("Operation not permitted")

        monkeypatch.setattr(arp_probe, "srp", fake_srp)
        probe = ScapyARPProbe(timeout=0.1, logger=quiet_logger)

        result = probe.probe("192.168.1.20")
        assert result.outcome is ProbeOutcome.IGNORED
        assert "PermissionError" in result.error


class TestArpingProbe:

    @staticmethod
    def _completed(returncode, stdout="", stderr=""):
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)

    def test_command_line(self, monkeypatch, quiet_logger):
        seen = {}

        def fake_run(cmd, **kwargs):
            seen["cmd"] = cmd
            seen["timeout"] = kwargs["timeout"]
            return self._completed(0, IPUTILS_REPLY)

        monkeypatch.setattr(subprocess, "run", fake_run)
        probe = ArpingProbe(timeout=1.5, interface="eth0", logger=quiet_logger)
        probe.probe("192.168.1.20")

        assert seen["cmd"] == ["arping", "-c", "1", "-w", "2", "-I", "eth0", "192.168.1.20"]
        assert seen["timeout"] == 6.5

    def test_iputils_reply_resolves(self, monkeypatch, quiet_logger):
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: self._completed(0, IPUTILS_REPLY))
        probe = ArpingProbe(timeout=1.0, logger=quiet_logger)

        result = probe.probe("192.168.1.20")

        assert result.outcome is ProbeOutcome.RESOLVED
        assert result.mac == "AA:BB:CC:DD:EE:20"

    def test_habets_reply_resolves(self, monkeypatch, quiet_logger):
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: self._completed(0, HABETS_REPLY))
        probe = ArpingProbe(timeout=1.0, logger=quiet_logger)

        assert probe.probe("192.168.1.20").mac == "AA:BB:CC:DD:EE:20"

    def test_exit_status_one_is_a_timeout(self, monkeypatch, quiet_logger):
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: self._completed(1, "Received 0 response(s)"))
        probe = ArpingProbe(timeout=1.0, logger=quiet_logger)

        assert probe.probe("192.168.1.20").outcome is ProbeOutcome.TIMEOUT

    def test_other_exit_status_is_ignored(self, monkeypatch, quiet_logger):
        monkeypatch.setattr(
            subprocess, "run",
            lambda cmd, **kw: self._completed(2, stderr="arping: socket: Operation not permitted")
        )
        probe = ArpingProbe(timeout=1.0, logger=quiet_logger)

        result = probe.probe("192.168.1.20")
        assert result.outcome is ProbeOutcome.IGNORED
        assert "Operation not permitted" in result.error

    def test_unparseable_output_is_ignored(self, monkeypatch, quiet_logger):
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: self._completed(0, "something else"))
        probe = ArpingProbe(timeout=1.0, logger=quiet_logger)

        assert probe.probe("192.168.1.20").outcome is ProbeOutcome.IGNORED

    def test_missing_binary_is_ignored(self, monkeypatch, quiet_logger):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError("arping")

        monkeypatch.setattr(subprocess, "run", fake_run)
        probe = ArpingProbe(timeout=1.0, logger=quiet_logger)

        result = probe.probe("192.168.1.20")
        assert result.outcome is ProbeOutcome.IGNORED
        assert "ToolMissingError" in result.error

    def test_hung_process_is_a_timeout(self, monkeypatch, quiet_logger):
        def fake_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", fake_run)
        probe = ArpingProbe(timeout=1.0, logger=quiet_logger)

        assert probe.probe("192.168.1.20").outcome is ProbeOutcome.TIMEOUT


class TestCreateProbe:

    def test_known_methods(self, quiet_logger):
        assert isinstance(create_probe("scapy", 1.0, logger=quiet_logger), ScapyARPProbe)
        arping = create_probe("arping", 2.0, interface="eth1", logger=quiet_logger)
        assert isinstance(arping, ArpingProbe)
        assert arping.timeout == 2.0
        assert arping.interface == "eth1"

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError):
            create_probe("icmp", 1.0)
