from __future__ import annotations

from typing import List

from .errors import InvalidConfig


def _to_int(text: str, part: str) -> int:
    try:
        return int(text)
    except ValueError as e:
        raise InvalidConfig(f"Invalid port spec: {part}") from e


def parse_ports(spec: str) -> List[int]:
    """
    Parses a port priority list into ports, in the order given.
    Supports:
    - Single ports: "80"
    - Ranges: "8000-8003"
    - Comma-separated: "22,80,443"
    - Mixed: "443,80,8000-8003"
    Earlier ports are tried first, so repeats are dropped instead of sorting.
    """
    spec = spec.strip()
    if not spec:
        raise InvalidConfig("Empty port spec")

    ports: List[int] = []
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start_s, end_s = part.split("-", 1)
            start = _to_int(start_s, part)
            end = _to_int(end_s, part)
            if start < 1 or end > 65535 or start > end:
                raise InvalidConfig(f"Invalid port range: {part}")
            ports.extend(range(start, end + 1))
        else:
            p = _to_int(part, part)
            if p < 1 or p > 65535:
                raise InvalidConfig(f"Invalid port: {p}")
            ports.append(p)

    if not ports:
        raise InvalidConfig("Empty port spec")

    # De-dupe, keep priority order
    return list(dict.fromkeys(ports))
