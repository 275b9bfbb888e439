"""Inventory of containers known to containerd through its CRI service."""

from __future__ import annotations

import os
import socket
import time
from collections.abc import Iterable

import grpc

from scrubd.runtime.cri_proto import CRIProtoError, parse_cri_list_containers_response
from scrubd.runtime.models import Container, Inventory, RuntimeName
from scrubd.runtime.warnings import (
    cri_inventory_warning,
    socket_connect_warning,
    socket_stat_warning,
    sockets_missing_warning,
)

DEFAULT_TIMEOUT = 2.0

_LIST_CONTAINERS_METHODS = (
    "/runtime.v1.RuntimeService/ListContainers",
    "/runtime.v1alpha2.RuntimeService/ListContainers",
)


def list_containerd_cri_containers(
    socket_path: str, timeout: float = DEFAULT_TIMEOUT
) -> list[Container]:
    """Ask the CRI runtime service behind socket_path for its containers.

    Tries the v1 service first and then v1alpha2, all within one timeout.
    Raises grpc.RpcError when neither answers and CRIProtoError when the
    response cannot be decoded.
    """
    deadline = time.monotonic() + timeout
    last_error: grpc.RpcError | None = None
    with grpc.insecure_channel(f"unix://{socket_path}") as channel:
        for method in _LIST_CONTAINERS_METHODS:
            call = channel.unary_unary(method)
            remaining = max(deadline - time.monotonic(), 0.0)
            try:
                response = call(b"", timeout=remaining)
            except grpc.RpcError as err:
                last_error = err
                continue
            return parse_cri_list_containers_response(bytes(response))
    assert last_error is not None
    raise last_error


def _probe_socket(socket_path: str, timeout: float) -> None:
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.settimeout(timeout)
        sock.connect(socket_path)


def containerd_inventory(candidates: Iterable[str]) -> Inventory:
    """List containerd containers through the first reachable socket."""
    name = RuntimeName.CONTAINERD.value
    inventory = Inventory(runtime=RuntimeName.CONTAINERD)
    candidates = list(candidates)
    if not candidates:
        inventory.warnings.append(f"{name} socket path not configured")
        return inventory

    missing: list[str] = []
    for socket_path in candidates:
        try:
            os.stat(socket_path)
        except FileNotFoundError:
            missing.append(socket_path)
            continue
        except OSError as err:
            inventory.warnings.append(socket_stat_warning(name, socket_path, err))
            continue

        try:
            _probe_socket(socket_path, DEFAULT_TIMEOUT)
        except OSError as err:
            inventory.warnings.append(socket_connect_warning(name, socket_path, err))
            continue

        try:
            containers = list_containerd_cri_containers(socket_path, DEFAULT_TIMEOUT)
        except (grpc.RpcError, CRIProtoError) as err:
            inventory.warnings.append(cri_inventory_warning(err))
            return inventory
        inventory.available = True
        inventory.containers = containers
        return inventory

    if not inventory.warnings and missing:
        inventory.warnings.append(sockets_missing_warning(name, missing))
    return inventory