"""Reading the IPv4 routing table from /proc/net/route."""

from __future__ import annotations

import ipaddress
import json
import re
from collections.abc import Iterable

from scrubd.inspect.resources import Route

_HEX = re.compile(r"[0-9A-Fa-f]+")


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def parse_route_ipv4(value: str) -> str:
    """Turn a little-endian hexadecimal address into dotted notation."""
    if not _HEX.fullmatch(value):
        raise ValueError(f"invalid syntax: {_quote(value)}")
    raw = int(value, 16)
    if raw > 0xFFFFFFFF:
        raise ValueError(f"value out of range: {_quote(value)}")
    return str(ipaddress.IPv4Address(raw.to_bytes(4, "little")))


def parse_proc_net_route_line(line: str) -> Route:
    """Parse one data line of the routing table, raising ValueError if malformed."""
    fields = line.split()
    if len(fields) < 8:
        raise ValueError(f"invalid route line {_quote(line)}")

    addresses = {}
    for label, index in (("destination", 1), ("gateway", 2), ("mask", 7)):
        try:
            addresses[label] = parse_route_ipv4(fields[index])
        except ValueError as err:
            raise ValueError(f"{label} {_quote(fields[index])}: {err}") from err

    return Route(
        interface=fields[0],
        destination=addresses["destination"],
        gateway=addresses["gateway"],
        flags=fields[3],
        mask=addresses["mask"],
        source="proc_net_route",
    )


def parse_proc_net_route(stream: Iterable[str]) -> list[Route]:
    """Parse a routing table, skipping its header and blank lines."""
    lines = iter(stream)
    if next(lines, None) is None:
        return []
    return [parse_proc_net_route_line(line.strip()) for line in lines if line.strip()]


def collect_routes(path: str) -> tuple[list[Route], list[str]]:
    """Read the routing table at path, returning routes and warnings."""
    if not path:
        return [], []
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="\n") as handle:
            routes = parse_proc_net_route(handle)
    except FileNotFoundError:
        return [], []
    except (OSError, ValueError) as err:
        return [], [f"routes: {err}"]
    return routes, []