from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from ipaddress import IPv4Address
from typing import Callable, Iterable, List, Optional, Sequence

from . import output
from .errors import DispatchError, InvalidAddress, InvalidConfig
from .limiter import ConcurrencyLimiter
from .models import DEFAULT_SUBNET, ScanConfig, ScanProgress, ScanReport, ScanResult
from .prober import Connector, probe_host, tcp_connect
from .targets import enumerate_targets

logger = logging.getLogger(__name__)

ResultHook = Callable[[ScanResult], None]
ProgressHook = Callable[[ScanProgress], None]


class _Collector:
    """Single place where finished probes are recorded; all updates go through one lock."""

    def __init__(self, total: int):
        self.total = total
        self._lock = threading.Lock()
        self._results: List[ScanResult] = []
        self._completed = 0
        self._alive = 0
        self._started = time.perf_counter()

    def record(self, result: ScanResult) -> ScanProgress:
        with self._lock:
            self._results.append(result)
            self._completed += 1
            if result.alive:
                self._alive += 1
            return self._snapshot()

    def snapshot(self) -> ScanProgress:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> ScanProgress:
        return ScanProgress(
            total=self.total,
            completed=self._completed,
            alive=self._alive,
            elapsed_s=time.perf_counter() - self._started,
        )

    def sorted_results(self) -> List[ScanResult]:
        with self._lock:
            return sorted(self._results, key=lambda r: r.address)


class HostScanner:
    def __init__(
        self,
        subnet: Optional[str] = None,
        config: Optional[ScanConfig] = None,
        connect: Connector = tcp_connect,
    ):
        if config is not None and subnet is not None:
            raise InvalidConfig("Pass either subnet or config, not both")
        if config is None:
            config = ScanConfig(subnet=subnet if subnet is not None else DEFAULT_SUBNET)
        self.config = config
        self._connect = connect

    @classmethod
    def with_config(cls, config: ScanConfig, connect: Connector = tcp_connect) -> "HostScanner":
        return cls(config=config, connect=connect)

    # --- builder-style options; each returns a new scanner ---
    def _replace(self, **changes) -> "HostScanner":
        return HostScanner(config=replace(self.config, **changes), connect=self._connect)

    def subnet(self, subnet: str) -> "HostScanner":
        return self._replace(subnet=subnet, hosts=None)

    def max_concurrent(self, limit: int) -> "HostScanner":
        return self._replace(max_concurrent=limit)

    def timeout(self, seconds: float) -> "HostScanner":
        return self._replace(timeout_s=seconds)

    def ip_range(self, start: int, end: int) -> "HostScanner":
        return self._replace(start=start, end=end, hosts=None)

    def ports(self, ports: Sequence[int]) -> "HostScanner":
        return self._replace(ports=tuple(ports))

    def hosts(self, hosts: Iterable[str]) -> "HostScanner":
        return self._replace(hosts=tuple(str(h) for h in hosts))

    # --- scanning ---
    def targets(self) -> List[IPv4Address]:
        try:
            return enumerate_targets(self.config)
        except InvalidAddress as e:
            raise DispatchError(
                f"Could not build targets for {self.config.describe_targets}: {e}"
            ) from e

    def scan(
        self,
        on_result: Optional[ResultHook] = None,
        on_progress: Optional[ProgressHook] = None,
        progress_every: int = 25,
    ) -> ScanReport:
        """
        Probes every target with at most max_concurrent probes in flight.

        Hooks run on worker threads. on_result sees every result as it lands,
        on_progress gets a snapshot every progress_every completions and on
        the last one. Results come back sorted by address whatever order the
        probes finished in. A dead host is a normal result, never an error.
        """
        cfg = self.config
        targets = self.targets()
        total = len(targets)
        ports = tuple(cfg.ports)

        logger.info(
            "Scanning %s (%d hosts) on ports %s, timeout %.3fs per host, %d max concurrent",
            cfg.describe_targets, total, list(ports), cfg.timeout_s, cfg.max_concurrent,
        )

        limiter = ConcurrencyLimiter(cfg.max_concurrent)
        collector = _Collector(total)

        def run_probe(address: IPv4Address) -> None:
            try:
                result = probe_host(address, ports, cfg.timeout_s, connect=self._connect)
                snapshot = collector.record(result)
            finally:
                limiter.release()

            if on_result is not None:
                on_result(result)
            if on_progress is not None and progress_every > 0:
                if snapshot.completed % progress_every == 0 or snapshot.done:
                    on_progress(snapshot)

        workers = max(1, min(cfg.max_concurrent, total))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = []
            for address in targets:
                limiter.acquire()
                try:
                    futures.append(pool.submit(run_probe, address))
                except BaseException:
                    limiter.release()
                    raise

            for fut in futures:
                fut.result()

        final = collector.snapshot()
        report = ScanReport(results=tuple(collector.sorted_results()), elapsed_s=final.elapsed_s)
        logger.info(
            "Scan complete: %d/%d alive in %.2fs (%.0f hosts/s, peak %d in flight)",
            final.alive, total, report.elapsed_s, report.rate, limiter.peak,
        )
        return report

    def scan_with_progress(self, progress_every: int = 25) -> ScanReport:
        output.print_banner(self.config)
        report = self.scan(
            on_result=output.print_found,
            on_progress=output.print_progress,
            progress_every=progress_every,
        )
        output.print_summary(report)
        return report

    def scan_hosts(self, hosts: Iterable[str]) -> ScanReport:
        return self.hosts(hosts).scan()
