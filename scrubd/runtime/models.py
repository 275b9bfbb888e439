"""Container runtime names, inventories and socket locations."""

from __future__ import annotations

import enum
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


class RuntimeName(str, enum.Enum):
    """The container runtimes that can be inventoried."""

    DOCKER = "docker"
    CONTAINERD = "containerd"
    PODMAN = "podman"
    AUTO = "auto"

    def __str__(self) -> str:
        return self.value


@dataclass
class Container:
    """A container as reported by a runtime."""

    id: str = ""
    names: list[str] = field(default_factory=list)
    image: str = ""
    state: str = ""
    status: str = ""
    network_mode: str = ""
    pid: int = 0


def _container_dict(container: Container) -> dict[str, Any]:
    out: dict[str, Any] = {"id": container.id}
    optional = (
        ("names", list(container.names)),
        ("image", container.image),
        ("state", container.state),
        ("status", container.status),
        ("network_mode", container.network_mode),
        ("pid", container.pid),
    )
    for key, value in optional:
        if value:
            out[key] = value
    return out


@dataclass
class Inventory:
    """What one runtime reported, or why it could not be asked."""

    runtime: RuntimeName | str = ""
    available: bool = False
    containers: list[Container] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the inventory as JSON-ready data."""
        runtime = self.runtime.value if isinstance(self.runtime, RuntimeName) else str(self.runtime)
        out: dict[str, Any] = {"runtime": runtime, "available": self.available}
        if self.containers:
            out["containers"] = [_container_dict(container) for container in self.containers]
        if self.warnings:
            out["warnings"] = list(self.warnings)
        return out


def socket_candidates(primary: str, extra: Iterable[str]) -> list[str]:
    """Return the primary and extra socket paths, without blanks or repeats."""
    seen: set[str] = set()
    out: list[str] = []
    for value in (primary, *extra):
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


@dataclass
class Paths:
    """Socket locations of each runtime: a primary one and fallbacks."""

    docker_socket: str = ""
    docker_sockets: list[str] = field(default_factory=list)
    containerd_socket: str = ""
    containerd_sockets: list[str] = field(default_factory=list)
    podman_socket: str = ""
    podman_sockets: list[str] = field(default_factory=list)

    def docker_candidates(self) -> list[str]:
        """Docker sockets to try, in order."""
        return socket_candidates(self.docker_socket, self.docker_sockets)

    def containerd_candidates(self) -> list[str]:
        """containerd sockets to try, in order."""
        return socket_candidates(self.containerd_socket, self.containerd_sockets)

    def podman_candidates(self) -> list[str]:
        """Podman sockets to try, in order."""
        return socket_candidates(self.podman_socket, self.podman_sockets)


def _rootless_sockets(runtime_dir: str, uid: int, *parts: str) -> list[str]:
    sockets = []
    if runtime_dir:
        sockets.append(os.path.join(runtime_dir, *parts))
    sockets.append(os.path.join("/run/user", str(uid), *parts))
    return socket_candidates("", sockets)


def rootless_docker_sockets(runtime_dir: str, uid: int) -> list[str]:
    """Rootless Docker socket locations for a user."""
    return _rootless_sockets(runtime_dir, uid, "docker.sock")


def rootless_containerd_sockets(runtime_dir: str, uid: int) -> list[str]:
    """Rootless containerd socket locations for a user."""
    return _rootless_sockets(runtime_dir, uid, "containerd", "containerd.sock")


def rootless_podman_sockets(runtime_dir: str, uid: int) -> list[str]:
    """Rootless Podman socket locations for a user."""
    return _rootless_sockets(runtime_dir, uid, "podman", "podman.sock")


def _current_uid() -> int:
    getuid = getattr(os, "getuid", None)
    return getuid() if getuid is not None else -1


def default_paths() -> Paths:
    """Return the system sockets, followed by the current user's rootless ones."""
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR", "")
    uid = _current_uid()
    return Paths(
        docker_socket="/var/run/docker.sock",
        docker_sockets=rootless_docker_sockets(runtime_dir, uid),
        containerd_socket="/run/containerd/containerd.sock",
        containerd_sockets=rootless_containerd_sockets(runtime_dir, uid),
        podman_socket="/run/podman/podman.sock",
        podman_sockets=rootless_podman_sockets(runtime_dir, uid),
    )


def valid_name(name: RuntimeName | str) -> bool:
    """Tell whether name is a known runtime name or "auto"."""
    try:
        RuntimeName(name)
    except ValueError:
        return False
    return True