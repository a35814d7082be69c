from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from ipaddress import IPv4Address
from typing import Optional, Tuple

from .errors import InvalidConfig
from .stats import ScanStats, get_stats, throughput
from .targets import validate_range

DEFAULT_SUBNET = "10.0.0"
DEFAULT_PORTS: Tuple[int, ...] = (22, 23, 53, 80, 135, 139, 443, 445, 993, 995)
DEFAULT_TIMEOUT_S = 0.5
MAX_TIMEOUT_S = 3600.0


def default_concurrency() -> int:
    return (os.cpu_count() or 1) * 8


@dataclass(frozen=True)
class ScanConfig:
    """
    Everything one scan needs.
    hosts, when set, replaces the subnet/start/end range.
    """
    subnet: str = DEFAULT_SUBNET
    start: int = 1
    end: int = 254
    hosts: Optional[Tuple[str, ...]] = None
    ports: Tuple[int, ...] = DEFAULT_PORTS
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_concurrent: int = field(default_factory=default_concurrency)

    def __post_init__(self) -> None:
        if self.max_concurrent < 1:
            raise InvalidConfig(f"max_concurrent must be >= 1 (got {self.max_concurrent})")
        if not self.ports:
            raise InvalidConfig("At least one port is required")
        for p in self.ports:
            if p < 1 or p > 65535:
                raise InvalidConfig(f"Invalid port: {p}")
        # each port is tried at most once per host
        object.__setattr__(self, "ports", tuple(dict.fromkeys(self.ports)))
        if not (math.isfinite(self.timeout_s) and 0 < self.timeout_s <= MAX_TIMEOUT_S):
            raise InvalidConfig(
                f"timeout must be > 0 and <= {MAX_TIMEOUT_S:g} seconds (got {self.timeout_s})"
            )
        if self.hosts is None:
            validate_range(self.start, self.end)

    @property
    def describe_targets(self) -> str:
        if self.hosts is not None:
            return f"{len(self.hosts)} listed host(s)"
        return f"{self.subnet}.{self.start}-{self.end}"


@dataclass(frozen=True)
class ScanResult:
    address: IPv4Address
    alive: bool
    port: Optional[int] = None
    rtt_s: Optional[float] = None

    def __post_init__(self) -> None:
        if self.alive != (self.port is not None) or self.alive != (self.rtt_s is not None):
            raise ValueError("port and rtt_s must be set exactly when alive is True")

    @classmethod
    def up(cls, address: IPv4Address, port: int, rtt_s: float) -> "ScanResult":
        return cls(address=address, alive=True, port=port, rtt_s=rtt_s)

    @classmethod
    def down(cls, address: IPv4Address) -> "ScanResult":
        return cls(address=address, alive=False)


@dataclass(frozen=True)
class ScanProgress:
    total: int
    completed: int
    alive: int
    elapsed_s: float

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return self.completed / self.total * 100.0

    @property
    def rate(self) -> float:
        return throughput(self.completed, self.elapsed_s)

    @property
    def done(self) -> bool:
        return self.completed == self.total


@dataclass(frozen=True)
class ScanReport:
    results: Tuple[ScanResult, ...]
    elapsed_s: float = 0.0

    @property
    def stats(self) -> ScanStats:
        return get_stats(self.results)

    @property
    def alive(self) -> Tuple[ScanResult, ...]:
        return tuple(r for r in self.results if r.alive)

    @property
    def rate(self) -> float:
        return throughput(len(self.results), self.elapsed_s)
