# tests/test_cli.py
import pytest
from ipaddress import IPv4Address
from unittest.mock import MagicMock

from host_scanner import cli
from host_scanner.errors import InvalidRange
from host_scanner.models import DEFAULT_PORTS, ScanReport, ScanResult


@pytest.fixture
def mock_scanner(mocker):
    """Patches HostScanner in the CLI so no sockets are opened."""
    scanner_cls = mocker.patch("host_scanner.cli.HostScanner")
    scanner = MagicMock()
    scanner.scan_with_progress.return_value = ScanReport(
        results=(
            ScanResult.up(IPv4Address("10.0.0.1"), 22, 0.004),
            ScanResult.down(IPv4Address("10.0.0.2")),
        ),
        elapsed_s=0.1,
    )
    scanner_cls.with_config.return_value = scanner
    return scanner_cls, scanner


def test_parse_octet_range():
    assert cli.parse_octet_range("1-254") == (1, 254)
    assert cli.parse_octet_range("7") == (7, 7)
    with pytest.raises(InvalidRange):
        cli.parse_octet_range("a-b")


def test_build_config_from_defaults():
    args = cli.build_parser().parse_args([])
    config = cli.build_config(args)
    assert config.subnet == "10.0.0"
    assert (config.start, config.end) == (1, 254)
    assert config.ports == DEFAULT_PORTS
    assert config.timeout_s == 0.5
    assert config.hosts is None


def test_build_config_with_hosts_and_ports():
    args = cli.build_parser().parse_args(
        ["--hosts", "10.0.0.5, 10.0.0.1", "--ports", "443,80", "--timeout", "0.3", "--max-concurrent", "4"]
    )
    config = cli.build_config(args)
    assert config.hosts == ("10.0.0.5", "10.0.0.1")
    assert config.ports == (443, 80)
    assert config.timeout_s == 0.3
    assert config.max_concurrent == 4


def test_main_runs_scan_and_lists_results(mock_scanner, capsys):
    scanner_cls, scanner = mock_scanner
    rc = cli.main(["--subnet", "10.0.0", "--range", "1-2", "--ports", "22", "--progress-every", "10"])

    assert rc == 0
    config = scanner_cls.with_config.call_args[0][0]
    assert (config.subnet, config.start, config.end, config.ports) == ("10.0.0", 1, 2, (22,))
    scanner.targets.assert_called_once_with()
    scanner.scan_with_progress.assert_called_once_with(progress_every=10)

    out = capsys.readouterr().out
    assert "Found 1 alive hosts" in out
    assert "Host: 10.0.0.1 | alive | Port 22" in out
    assert "Host: 10.0.0.2 | no response" in out


def test_main_alive_only(mock_scanner, capsys):
    cli.main(["--range", "1-2", "--alive-only"])
    out = capsys.readouterr().out
    assert "10.0.0.1" in out
    assert "10.0.0.2" not in out


@pytest.mark.parametrize("argv", [
    ["--range", "9-3"],
    ["--range", "0-10"],
    ["--ports", "99999"],
    ["--timeout", "0"],
    ["--timeout", "inf"],
    ["--max-concurrent", "0"],
    ["--hosts", "10.0.0.1,bogus"],
    ["--subnet", "10.0.x"],
])
def test_main_rejects_bad_input_before_scanning(argv, mocker, capsys, caplog):
    scan = mocker.patch.object(cli.HostScanner, "scan_with_progress")
    rc = cli.main(argv)

    assert rc == 2
    assert capsys.readouterr().err.count("error:") == 1
    assert not [rec for rec in caplog.records if rec.levelname == "ERROR"]
    scan.assert_not_called()
