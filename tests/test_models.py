# tests/test_models.py
import os
import pytest
from ipaddress import IPv4Address

from host_scanner.errors import InvalidConfig, InvalidRange
from host_scanner.models import (
    DEFAULT_PORTS, ScanConfig, ScanProgress, ScanReport, ScanResult, default_concurrency,
)


def test_scan_config_defaults():
    config = ScanConfig()
    assert config.subnet == "10.0.0"
    assert (config.start, config.end) == (1, 254)
    assert config.hosts is None
    assert config.ports == (22, 23, 53, 80, 135, 139, 443, 445, 993, 995)
    assert config.ports == DEFAULT_PORTS
    assert config.timeout_s == 0.5
    assert config.max_concurrent == default_concurrency() == (os.cpu_count() or 1) * 8


@pytest.mark.parametrize("changes", [
    {"max_concurrent": 0},
    {"ports": ()},
    {"ports": (80, 70000)},
    {"timeout_s": 0},
    {"timeout_s": -1.0},
    {"timeout_s": float("inf")},
    {"timeout_s": float("nan")},
    {"timeout_s": 1e12},
])
def test_scan_config_rejects_bad_values(changes):
    with pytest.raises(InvalidConfig):
        ScanConfig(**changes)


def test_scan_config_rejects_bad_range():
    with pytest.raises(InvalidRange):
        ScanConfig(start=20, end=10)


def test_scan_config_skips_range_check_for_host_lists():
    config = ScanConfig(start=0, end=0, hosts=("10.0.0.1",))
    assert config.describe_targets == "1 listed host(s)"


def test_scan_config_drops_repeated_ports_keeping_order():
    config = ScanConfig(ports=(443, 80, 443, 22, 80))
    assert config.ports == (443, 80, 22)


@pytest.mark.parametrize("kwargs", [
    {"alive": True},
    {"alive": True, "port": 80},
    {"alive": True, "rtt_s": 0.01},
    {"alive": False, "port": 80},
    {"alive": False, "rtt_s": 0.01},
])
def test_scan_result_port_and_rtt_only_when_alive(kwargs):
    with pytest.raises(ValueError):
        ScanResult(address=IPv4Address("10.0.0.1"), **kwargs)


def test_scan_result_constructors():
    ip = IPv4Address("10.0.0.1")
    up = ScanResult.up(ip, 443, 0.012)
    down = ScanResult.down(ip)
    assert (up.alive, up.port, up.rtt_s) == (True, 443, 0.012)
    assert (down.alive, down.port, down.rtt_s) == (False, None, None)


def test_scan_progress_derived_values():
    p = ScanProgress(total=200, completed=50, alive=4, elapsed_s=2.0)
    assert p.percent == 25.0
    assert p.rate == 25.0
    assert not p.done
    assert ScanProgress(total=1, completed=1, alive=0, elapsed_s=0.0).rate == 0.0


def test_scan_report_alive_and_rate():
    results = (
        ScanResult.up(IPv4Address("10.0.0.1"), 22, 0.01),
        ScanResult.down(IPv4Address("10.0.0.2")),
    )
    report = ScanReport(results=results, elapsed_s=0.5)
    assert report.alive == (results[0],)
    assert report.rate == 4.0
    assert report.stats.alive_hosts == 1
