"""Inventory of containers known to the Docker engine."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from scrubd.runtime.engine_api import _engine_inventory, first_network_name, trim_names
from scrubd.runtime.models import Container, Inventory, RuntimeName
from scrubd.runtime.warnings import docker_api_warning


def docker_container_to_container(data: Mapping[str, Any]) -> Container:
    """Turn one entry of Docker's container list into a Container."""
    settings = data.get("NetworkSettings") or {}
    return Container(
        id=data.get("Id") or "",
        names=trim_names(data.get("Names") or []),
        image=data.get("Image") or "",
        state=data.get("State") or "",
        status=data.get("Status") or "",
        network_mode=first_network_name(settings.get("Networks") or {}),
    )


def docker_inventory(candidates: Iterable[str]) -> Inventory:
    """List Docker containers through the first reachable socket."""
    return _engine_inventory(
        RuntimeName.DOCKER,
        "docker",
        candidates,
        docker_container_to_container,
        docker_api_warning,
    )