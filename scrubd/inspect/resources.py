"""Records describing container-related resources found on the host."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any


def _scalar(key: str, default: Any, *, omitempty: bool = False) -> Any:
    return field(default=default, metadata={"json": key, "omitempty": omitempty})


def _items(key: str, *, omitempty: bool = False) -> Any:
    return field(default_factory=list, metadata={"json": key, "omitempty": omitempty})


def _to_json_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for item in fields(value):
            current = getattr(value, item.name)
            if item.metadata.get("omitempty") and not current:
                continue
            out[item.metadata.get("json", item.name)] = _to_json_value(current)
        return out
    if isinstance(value, (list, tuple)):
        return [_to_json_value(element) for element in value]
    return value


@dataclass
class NetworkInterface:
    """A network interface with its link details."""

    name: str = _scalar("name", "")
    index: int = _scalar("index", 0)
    peer_index: int = _scalar("peer_index", 0, omitempty=True)
    hardware_addr: str = _scalar("hardware_addr", "", omitempty=True)
    flags: list[str] = _items("flags", omitempty=True)
    kind: str = _scalar("kind", "", omitempty=True)
    bridge_ports: list[str] = _items("bridge_ports", omitempty=True)
    bridge_ports_known: bool = _scalar("bridge_ports_known", False, omitempty=True)


@dataclass
class Route:
    """An IPv4 route from the kernel routing table."""

    interface: str = _scalar("interface", "")
    destination: str = _scalar("destination", "")
    gateway: str = _scalar("gateway", "", omitempty=True)
    flags: str = _scalar("flags", "", omitempty=True)
    mask: str = _scalar("mask", "", omitempty=True)
    source: str = _scalar("source", "")


@dataclass
class NetworkNamespace:
    """A network namespace, either named or held by a process."""

    path: str = _scalar("path", "")
    inode: str = _scalar("inode", "", omitempty=True)
    source: str = _scalar("source", "")
    pid: int = _scalar("pid", 0, omitempty=True)


@dataclass
class Mount:
    """One entry of a mountinfo table."""

    id: str = _scalar("id", "")
    parent_id: str = _scalar("parent_id", "")
    major_minor: str = _scalar("major_minor", "")
    root: str = _scalar("root", "")
    mount_point: str = _scalar("mount_point", "")
    options: list[str] = _items("options", omitempty=True)
    fs_type: str = _scalar("fs_type", "")
    source: str = _scalar("source", "")
    super_opts: list[str] = _items("super_options", omitempty=True)


@dataclass
class Snapshot:
    """A runtime overlay snapshot directory."""

    runtime: str = _scalar("runtime", "")
    id: str = _scalar("id", "")
    path: str = _scalar("path", "")


@dataclass
class Cgroup:
    """A control group and, where known, how many processes it holds."""

    hierarchy_id: str = _scalar("hierarchy_id", "")
    controllers: list[str] = _items("controllers", omitempty=True)
    path: str = _scalar("path", "")
    process_count: int = _scalar("process_count", 0)
    process_count_known: bool = _scalar("process_count_known", False)


@dataclass
class Process:
    """A process with its command name and arguments."""

    pid: int = _scalar("pid", 0)
    command: str = _scalar("command", "", omitempty=True)
    args: list[str] = _items("args", omitempty=True)


@dataclass
class Inventory:
    """Everything collected from the host in one pass."""

    network_interfaces: list[NetworkInterface] = _items("network_interfaces")
    routes: list[Route] = _items("routes")
    network_namespaces: list[NetworkNamespace] = _items("network_namespaces")
    mounts: list[Mount] = _items("mounts")
    snapshots: list[Snapshot] = _items("snapshots")
    cgroups: list[Cgroup] = _items("cgroups")
    processes: list[Process] = _items("processes")
    warnings: list[str] = _items("warnings", omitempty=True)

    def to_dict(self) -> dict[str, Any]:
        """Return the inventory as JSON-ready data."""
        return _to_json_value(self)


@dataclass
class Paths:
    """Filesystem locations the host inspection reads from."""

    net_class_dir: str = ""
    proc_net_route: str = ""
    netns_dir: str = ""
    proc_dir: str = ""
    mount_info: str = ""
    cgroup: str = ""
    cgroup_root: str = ""
    docker_overlay_dir: str = ""
    containerd_snapshot_dir: str = ""


def default_paths() -> Paths:
    """Return the standard Linux locations."""
    return Paths(
        net_class_dir="/sys/class/net",
        proc_net_route="/proc/net/route",
        netns_dir="/var/run/netns",
        proc_dir="/proc",
        mount_info="/proc/self/mountinfo",
        cgroup="/proc/self/cgroup",
        cgroup_root="/sys/fs/cgroup",
        docker_overlay_dir="/var/lib/docker/overlay2",
        containerd_snapshot_dir="/var/lib/containerd/io.containerd.snapshotter.v1.overlayfs/snapshots",
    )