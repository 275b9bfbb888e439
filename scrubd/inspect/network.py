"""Describing the host's network interfaces."""

from __future__ import annotations

import enum
import os
import re
import socket

from scrubd.inspect.resources import NetworkInterface, Paths

_SYSFS_NET = "/sys/class/net"
_INTEGER = re.compile(r"[+-]?[0-9]+")


class InterfaceFlag(enum.IntFlag):
    """Interface flag bits as the kernel reports them."""

    UP = 0x1
    BROADCAST = 0x2
    LOOPBACK = 0x8
    POINT_TO_POINT = 0x10
    RUNNING = 0x40
    MULTICAST = 0x1000


_FLAG_NAMES = (
    (InterfaceFlag.UP, "up"),
    (InterfaceFlag.BROADCAST, "broadcast"),
    (InterfaceFlag.LOOPBACK, "loopback"),
    (InterfaceFlag.POINT_TO_POINT, "point_to_point"),
    (InterfaceFlag.MULTICAST, "multicast"),
    (InterfaceFlag.RUNNING, "running"),
)


def interface_flags(flags: int) -> list[str]:
    """Name the flags that are set, in a fixed order."""
    return [name for flag, name in _FLAG_NAMES if flags & flag]


def _read_text(path: str) -> str | None:
    try:
        with open(path, encoding="utf-8", errors="surrogateescape") as handle:
            return handle.read()
    except OSError:
        return None


def interface_peer_index(net_class_dir: str, name: str, index: int) -> int:
    """Return the index of the interface's link peer, or 0 if it has none."""
    if not net_class_dir:
        return 0
    text = _read_text(os.path.join(net_class_dir, name, "iflink"))
    if text is None:
        return 0
    text = text.strip()
    if not _INTEGER.fullmatch(text):
        return 0
    peer = int(text)
    return 0 if peer == index else peer


def interface_kind(net_class_dir: str, name: str) -> str:
    """Classify an interface as bridge, veth or unknown."""
    if net_class_dir and os.path.exists(os.path.join(net_class_dir, name, "bridge")):
        return "bridge"
    if name.startswith("veth"):
        return "veth"
    if name.startswith(("br-", "cni", "podman")) or name == "docker0":
        return "bridge"
    return "unknown"


def interface_bridge_ports(net_class_dir: str, name: str) -> tuple[list[str], bool]:
    """Return the sorted ports of a bridge and whether they could be read."""
    if not net_class_dir:
        return [], False
    try:
        ports = sorted(os.listdir(os.path.join(net_class_dir, name, "brif")))
    except OSError:
        return [], False
    return ports, True


def _hardware_addr(name: str) -> str:
    text = _read_text(os.path.join(_SYSFS_NET, name, "address"))
    if text is None:
        return ""
    address = text.strip()
    if not address or all(part.strip("0") == "" for part in address.split(":")):
        return ""
    return address


def _link_flags(name: str) -> int:
    text = _read_text(os.path.join(_SYSFS_NET, name, "flags"))
    if text is None:
        return 0
    try:
        return int(text.strip(), 16)
    except ValueError:
        return 0


def collect_network_interfaces(paths: Paths) -> tuple[list[NetworkInterface], list[str]]:
    """List the host's interfaces with their kind, peer and bridge ports."""
    try:
        pairs = socket.if_nameindex()
    except OSError as err:
        return [], [f"network interfaces: {err}"]

    interfaces = []
    for index, name in sorted(pairs):
        ports, ports_known = interface_bridge_ports(paths.net_class_dir, name)
        interfaces.append(
            NetworkInterface(
                name=name,
                index=index,
                peer_index=interface_peer_index(paths.net_class_dir, name, index),
                hardware_addr=_hardware_addr(name),
                flags=interface_flags(_link_flags(name)),
                kind=interface_kind(paths.net_class_dir, name),
                bridge_ports=ports,
                bridge_ports_known=ports_known,
            )
        )
    return interfaces, []