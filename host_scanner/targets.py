from __future__ import annotations

import ipaddress
from ipaddress import IPv4Address
from typing import TYPE_CHECKING, Iterable, List

from .errors import InvalidAddress, InvalidRange

if TYPE_CHECKING:
    from .models import ScanConfig

MIN_OCTET = 1
MAX_OCTET = 254


def validate_range(start: int, end: int) -> None:
    for octet in (start, end):
        if octet < MIN_OCTET or octet > MAX_OCTET:
            raise InvalidRange(
                f"Host octet {octet} is outside {MIN_OCTET}-{MAX_OCTET}"
            )
    if start > end:
        raise InvalidRange(f"Range start {start} is after range end {end}")


def _parse_ipv4(entry: str) -> IPv4Address:
    text = str(entry).strip()
    try:
        return IPv4Address(text)
    except ipaddress.AddressValueError as e:
        raise InvalidAddress(f"'{text}' is not a valid IPv4 address: {e}") from e


def expand_range(subnet: str, start: int, end: int) -> List[IPv4Address]:
    """
    Supports a three-octet prefix plus an inclusive host octet range:
      - expand_range("10.0.0", 1, 4) -> 10.0.0.1 .. 10.0.0.4
    """
    validate_range(start, end)
    prefix = subnet.strip().rstrip(".")
    return [_parse_ipv4(f"{prefix}.{octet}") for octet in range(start, end + 1)]


def parse_hosts(entries: Iterable[str]) -> List[IPv4Address]:
    """
    Parses an explicit host list, keeping the caller's order.
    Duplicates are dropped (first one wins).
    """
    seen = set()
    hosts: List[IPv4Address] = []
    for entry in entries:
        ip = _parse_ipv4(entry)
        if ip in seen:
            continue
        seen.add(ip)
        hosts.append(ip)
    return hosts


def enumerate_targets(config: "ScanConfig") -> List[IPv4Address]:
    if config.hosts is not None:
        return parse_hosts(config.hosts)
    return expand_range(config.subnet, config.start, config.end)
