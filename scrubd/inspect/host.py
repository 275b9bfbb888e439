"""Collecting a full inventory of container-related host resources."""

from __future__ import annotations

import sys

from scrubd.inspect.cgroups import collect_cgroups
from scrubd.inspect.mounts import collect_mounts
from scrubd.inspect.namespace import collect_network_namespaces
from scrubd.inspect.network import collect_network_interfaces
from scrubd.inspect.processes import collect_processes
from scrubd.inspect.resources import (
    Cgroup,
    Inventory,
    Mount,
    NetworkInterface,
    NetworkNamespace,
    Paths,
    Process,
    Route,
    Snapshot,
    default_paths,
)
from scrubd.inspect.routes import collect_routes
from scrubd.inspect.snapshots import collect_snapshots


class HostCollector:
    """Reads host resources from the locations in a Paths record."""

    def __init__(self, paths: Paths) -> None:
        self.paths = paths

    def inventory(self, platform: str | None = None) -> Inventory:
        """Collect every resource kind; only Linux hosts are inspected."""
        platform = sys.platform if platform is None else platform
        if platform != "linux":
            return Inventory(
                warnings=[
                    f"host inspection unsupported on {platform}: scrubd must run on Linux "
                    "to inspect container runtime resources"
                ]
            )

        inventory = Inventory()
        inventory.network_interfaces, warnings = self.network_interfaces()
        inventory.warnings.extend(warnings)
        inventory.routes, warnings = self.routes()
        inventory.warnings.extend(warnings)
        inventory.network_namespaces, warnings = self.network_namespaces()
        inventory.warnings.extend(warnings)
        inventory.mounts, warnings = self.mounts()
        inventory.warnings.extend(warnings)
        inventory.snapshots, warnings = self.snapshots()
        inventory.warnings.extend(warnings)
        inventory.cgroups, warnings = self.cgroups()
        inventory.warnings.extend(warnings)
        inventory.processes, warnings = self.processes()
        inventory.warnings.extend(warnings)
        return inventory

    def network_interfaces(self) -> tuple[list[NetworkInterface], list[str]]:
        return collect_network_interfaces(self.paths)

    def routes(self) -> tuple[list[Route], list[str]]:
        return collect_routes(self.paths.proc_net_route)

    def network_namespaces(self) -> tuple[list[NetworkNamespace], list[str]]:
        return collect_network_namespaces(self.paths)

    def mounts(self) -> tuple[list[Mount], list[str]]:
        return collect_mounts(self.paths.mount_info)

    def snapshots(self) -> tuple[list[Snapshot], list[str]]:
        return collect_snapshots(self.paths)

    def cgroups(self) -> tuple[list[Cgroup], list[str]]:
        return collect_cgroups(self.paths)

    def processes(self) -> tuple[list[Process], list[str]]:
        return collect_processes(self.paths.proc_dir)


def default_host_collector() -> HostCollector:
    """Return a collector reading the standard Linux locations."""
    return HostCollector(default_paths())