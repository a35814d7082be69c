from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from .models import ScanResult


@dataclass(frozen=True)
class ScanStats:
    total_hosts: int
    alive_hosts: int
    success_rate: float
    average_rtt_s: Optional[float] = None


def alive_results(results: Iterable["ScanResult"]) -> List["ScanResult"]:
    return [r for r in results if r.alive]


def alive_ips(results: Iterable["ScanResult"]) -> List[IPv4Address]:
    return [r.address for r in results if r.alive]


def get_stats(results: Iterable["ScanResult"]) -> ScanStats:
    """
    Summarise a finished scan.

    success_rate is a percentage (0-100). With no hosts at all it is 0.0
    rather than NaN. average_rtt_s only looks at alive hosts and is None
    when nothing answered.
    """
    results = list(results)
    total = len(results)
    rtts = [r.rtt_s for r in results if r.alive and r.rtt_s is not None]
    alive = sum(1 for r in results if r.alive)

    return ScanStats(
        total_hosts=total,
        alive_hosts=alive,
        success_rate=(alive / total * 100.0) if total else 0.0,
        average_rtt_s=(sum(rtts) / len(rtts)) if rtts else None,
    )


def throughput(count: int, elapsed_s: float) -> float:
    return count / elapsed_s if elapsed_s > 0 else 0.0
