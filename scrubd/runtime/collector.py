"""Choosing which container runtimes to inventory."""

from __future__ import annotations

from collections.abc import Callable

from scrubd.runtime.containerd import containerd_inventory
from scrubd.runtime.docker import docker_inventory
from scrubd.runtime.models import Inventory, Paths, RuntimeName, default_paths
from scrubd.runtime.podman import podman_inventory


class Collector:
    """Inventories runtimes through the sockets listed in a Paths record."""

    def __init__(self, paths: Paths) -> None:
        self.paths = paths

    def docker(self) -> Inventory:
        """Inventory Docker."""
        return docker_inventory(self.paths.docker_candidates())

    def containerd(self) -> Inventory:
        """Inventory containerd."""
        return containerd_inventory(self.paths.containerd_candidates())

    def podman(self) -> Inventory:
        """Inventory Podman."""
        return podman_inventory(self.paths.podman_candidates())

    def inventories(self, name: RuntimeName | str) -> list[Inventory]:
        """Inventory the named runtime, or all of them in order for "auto"."""
        try:
            runtime = RuntimeName(name)
        except ValueError:
            return [Inventory(runtime=name, warnings=["unknown runtime"])]
        if runtime is RuntimeName.AUTO:
            return [self.docker(), self.containerd(), self.podman()]
        single: dict[RuntimeName, Callable[[], Inventory]] = {
            RuntimeName.DOCKER: self.docker,
            RuntimeName.CONTAINERD: self.containerd,
            RuntimeName.PODMAN: self.podman,
        }
        return [single[runtime]()]


def default_collector() -> Collector:
    """Return a collector using the standard and rootless socket locations."""
    return Collector(default_paths())