"""Talking to Docker-compatible engine APIs over a Unix socket."""

from __future__ import annotations

import http.client
import json
import os
import socket
from collections.abc import Callable, Iterable, Mapping
from typing import Any
from urllib.parse import quote

from scrubd.runtime.models import Container, Inventory, RuntimeName
from scrubd.runtime.warnings import sockets_missing_warning, socket_stat_warning

DEFAULT_TIMEOUT = 2.0


class EngineAPIError(Exception):
    """Raised when an engine API answers with an error or undecodable data."""


class UnixHTTPConnection(http.client.HTTPConnection):
    """An HTTP connection carried over a Unix domain socket."""

    def __init__(self, socket_path: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__("localhost", timeout=timeout)
        self.socket_path = socket_path

    def connect(self) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.socket_path)
        except BaseException:
            sock.close()
            raise
        self.sock = sock


def get_json(socket_path: str, host: str, path: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """GET path from the API behind socket_path and return the decoded JSON.

    Raises EngineAPIError for a non-2xx status or a body that is not JSON,
    and OSError or http.client.HTTPException when the request itself fails.
    """
    connection = UnixHTTPConnection(socket_path, timeout)
    try:
        connection.request("GET", path, headers={"Host": host})
        response = connection.getresponse()
        body = response.read()
    finally:
        connection.close()

    if not 200 <= response.status <= 299:
        raise EngineAPIError(f"status {response.status} {response.reason}".rstrip())
    try:
        return json.loads(body)
    except ValueError as err:
        raise EngineAPIError(f"decode: {err}") from err


def trim_names(names: Iterable[str]) -> list[str]:
    """Drop one leading slash from each container name."""
    return [name[1:] if name.startswith("/") else name for name in names]


def first_network_name(networks: Mapping[str, Any]) -> str:
    """Return the alphabetically first network name, or "" if there is none."""
    return min(networks, default="")


def short_id(value: str) -> str:
    """Shorten a container id to at most twelve characters."""
    return value.strip()[:12]


_REQUEST_ERRORS = (OSError, http.client.HTTPException, EngineAPIError)


def _container_list(data: Any) -> list[Mapping[str, Any]]:
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(item, Mapping) for item in data):
        raise EngineAPIError("decode: expected an array of container objects")
    return data


def _inspect_pid(details: Any) -> int:
    if details is None:
        return 0
    if not isinstance(details, Mapping):
        raise EngineAPIError("decode: expected a container object")
    state = details.get("State") or {}
    if not isinstance(state, Mapping):
        raise EngineAPIError("decode: expected a container state object")
    pid = state.get("Pid") or 0
    if isinstance(pid, bool) or not isinstance(pid, int):
        raise EngineAPIError(f"decode: invalid pid {pid!r}")
    return pid


def _engine_inventory(
    runtime: RuntimeName,
    host: str,
    candidates: Iterable[str],
    to_container: Callable[[Mapping[str, Any]], Container],
    api_warning: Callable[[str, BaseException], str],
) -> Inventory:
    """Ask the first reachable socket for its containers and their pids."""
    name = runtime.value
    inventory = Inventory(runtime=runtime)
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
            listed = _container_list(
                get_json(socket_path, host, "/containers/json?all=true", DEFAULT_TIMEOUT)
            )
        except _REQUEST_ERRORS as err:
            inventory.warnings.append(api_warning(socket_path, err))
            continue

        inventory.available = True
        for item in listed:
            container = to_container(item)
            if container.id:
                path = f"/containers/{quote(container.id, safe='')}/json"
                try:
                    container.pid = _inspect_pid(
                        get_json(socket_path, host, path, DEFAULT_TIMEOUT)
                    )
                except _REQUEST_ERRORS as err:
                    inventory.warnings.append(f"{name} inspect {short_id(container.id)}: {err}")
            inventory.containers.append(container)
        return inventory

    if not inventory.warnings and missing:
        inventory.warnings.append(sockets_missing_warning(name, missing))
    return inventory