from __future__ import annotations

import logging
import socket
import time
from ipaddress import IPv4Address
from typing import Callable, Sequence

from .models import ScanResult

logger = logging.getLogger(__name__)

# connect(host, port, timeout_s) returns on success, raises OSError otherwise
Connector = Callable[[str, int, float], None]
Clock = Callable[[], float]


def tcp_connect(host: str, port: int, timeout_s: float) -> None:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout_s)
        sock.connect((host, port))
    finally:
        sock.close()


def probe_host(
    address: IPv4Address,
    ports: Sequence[int],
    timeout_s: float,
    connect: Connector = tcp_connect,
    clock: Clock = time.perf_counter,
) -> ScanResult:
    """
    Tries each port in order until one accepts a TCP connection.

    The whole probe shares one deadline. Each attempt gets an even share of
    whatever time is left across the ports not tried yet, so a slow port
    cannot eat the budget of the ones after it. The first success wins and
    later ports are never touched. Failed ports are not retried.
    """
    start = clock()
    deadline = start + timeout_s
    host = str(address)

    for i, port in enumerate(ports):
        remaining = deadline - clock()
        if remaining <= 0:
            logger.debug("%s: budget exhausted before port %d", host, port)
            break

        per_port = remaining / (len(ports) - i)
        try:
            connect(host, port, per_port)
        except (socket.timeout, ConnectionRefusedError, OSError) as e:
            logger.debug("%s:%d no answer within %.3fs (%s)", host, port, per_port, e)
            continue

        rtt = clock() - start
        logger.debug("%s:%d accepted after %.4fs", host, port, rtt)
        return ScanResult.up(address, port, rtt)

    return ScanResult.down(address)
