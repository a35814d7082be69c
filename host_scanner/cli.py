from __future__ import annotations

import argparse
import logging
import sys
from typing import Tuple

from .errors import InvalidRange, ScanError
from .models import DEFAULT_PORTS, DEFAULT_SUBNET, DEFAULT_TIMEOUT_S, ScanConfig, default_concurrency
from .output import print_results
from .ports import parse_ports
from .scanner import HostScanner


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def parse_octet_range(spec: str) -> Tuple[int, int]:
    start_s, sep, end_s = spec.partition("-")
    try:
        start = int(start_s)
        end = int(end_s) if sep else start
    except ValueError as e:
        raise InvalidRange(f"Invalid host range: {spec} (expected START-END)") from e
    return start, end


def build_parser() -> argparse.ArgumentParser:
    default_ports = ",".join(str(p) for p in DEFAULT_PORTS)
    p = argparse.ArgumentParser(description="TCP connect host liveness scanner")
    p.add_argument("--subnet", default=DEFAULT_SUBNET, help=f"First three octets (default: {DEFAULT_SUBNET})")
    p.add_argument("--range", dest="ip_range", default="1-254", help="Host octet range START-END (default: 1-254)")
    p.add_argument("--hosts", help="Comma-separated IPv4 addresses; overrides --subnet/--range")
    p.add_argument("--ports", default=default_ports, help=f"Ports in priority order (default: {default_ports})")
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S,
                   help=f"Budget per host in seconds (default: {DEFAULT_TIMEOUT_S})")
    p.add_argument("--max-concurrent", type=int, default=default_concurrency(),
                   help="Probes in flight at once (default: CPU count x 8)")
    p.add_argument("--alive-only", action="store_true", help="Only list alive hosts")
    p.add_argument("--progress-every", type=int, default=25, help="Progress update interval (default: 25)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def build_config(args: argparse.Namespace) -> ScanConfig:
    start, end = parse_octet_range(args.ip_range)
    hosts = None
    if args.hosts:
        hosts = tuple(h.strip() for h in args.hosts.split(",") if h.strip())
    return ScanConfig(
        subnet=args.subnet,
        start=start,
        end=end,
        hosts=hosts,
        ports=tuple(parse_ports(args.ports)),
        timeout_s=args.timeout,
        max_concurrent=args.max_concurrent,
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = build_config(args)
        scanner = HostScanner.with_config(config)
        # resolve targets up front so bad input fails before any connection
        scanner.targets()
    except ScanError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    report = scanner.scan_with_progress(progress_every=args.progress_every)
    print_results(report.results, alive_only=args.alive_only)
    return 0


if __name__ == "__main__":
    sys.exit(main())
