"""Inventory of containers known to Podman's compatible API."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from scrubd.runtime.engine_api import _engine_inventory, first_network_name, trim_names
from scrubd.runtime.models import Container, Inventory, RuntimeName
from scrubd.runtime.warnings import podman_api_warning


def podman_container_to_container(data: Mapping[str, Any]) -> Container:
    """Turn one entry of Podman's container list into a Container."""
    settings = data.get("NetworkSettings") or {}
    networks = settings.get("Networks") or data.get("Networks") or {}
    return Container(
        id=data.get("Id") or "",
        names=trim_names(data.get("Names") or []),
        image=data.get("Image") or "",
        state=data.get("State") or "",
        status=data.get("Status") or "",
        network_mode=first_network_name(networks),
    )


def podman_inventory(candidates: Iterable[str]) -> Inventory:
    """List Podman containers through the first reachable socket."""
    return _engine_inventory(
        RuntimeName.PODMAN,
        "podman",
        candidates,
        podman_container_to_container,
        podman_api_warning,
    )