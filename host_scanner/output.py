from __future__ import annotations

from typing import Iterable

from .models import ScanConfig, ScanProgress, ScanReport, ScanResult


def format_row(r: ScanResult) -> str:
    if r.alive:
        return f"Host: {r.address} | alive | Port {r.port} | RTT {r.rtt_s * 1000:.1f}ms"
    return f"Host: {r.address} | no response"


def format_progress(p: ScanProgress) -> str:
    return (
        f"[*] Progress: {p.completed}/{p.total} ({p.percent:.1f}%) | "
        f"alive={p.alive} | {p.rate:.0f} hosts/s"
    )


def print_banner(config: ScanConfig) -> None:
    print(f"[*] Scanning {config.describe_targets} with {config.max_concurrent} max concurrent probes")
    print(f"[*] Ports: {', '.join(str(p) for p in config.ports)}")
    print(f"[*] Timeout per host: {config.timeout_s:.3f}s")


def print_found(r: ScanResult) -> None:
    if r.alive:
        print(f"[+] Found: {r.address} (port {r.port}, RTT {r.rtt_s * 1000:.1f}ms)", flush=True)


def print_progress(p: ScanProgress) -> None:
    print(format_progress(p), flush=True)


def print_results(results: Iterable[ScanResult], alive_only: bool) -> None:
    results = list(results)
    alive_count = sum(1 for r in results if r.alive)
    print(f"Found {alive_count} alive hosts")

    for r in results:
        if alive_only and not r.alive:
            continue
        print(format_row(r))


def print_summary(report: ScanReport) -> None:
    stats = report.stats
    print()
    print("=== Scan complete ===")
    print(f"Total time: {report.elapsed_s:.2f}s")
    print(f"Scanned {stats.total_hosts} hosts | alive={stats.alive_hosts}")
    print(f"Average rate: {report.rate:.0f} hosts/s")
    print(f"Success rate: {stats.success_rate:.1f}%")
    if stats.average_rtt_s is not None:
        print(f"Average RTT: {stats.average_rtt_s * 1000:.1f}ms")
