import json
import os
import shutil
import socketserver
import tempfile
import threading
from http.server import BaseHTTPRequestHandler
from urllib.parse import parse_qs, urlsplit

import pytest

from scrubd.runtime.models import RuntimeName
from scrubd.runtime.podman import podman_container_to_container, podman_inventory


class _UnixServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True


def _handler(routes, seen, unexpected):
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            parts = urlsplit(self.path)
            seen.append((parts.path, parse_qs(parts.query)))
            if parts.path not in routes:
                unexpected.append(parts.path)
            status, body = routes.get(parts.path, (500, "unexpected path"))
            payload = body.encode()
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        def log_message(self, format, *args):
            pass

    return Handler


@pytest.fixture
def socket_dir():
    directory = tempfile.mkdtemp(prefix="scrubd-runtime-", dir="/tmp")
    yield directory
    shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def serve(socket_dir):
    started = []

    def start(name, routes):
        path = os.path.join(socket_dir, name)
        seen, unexpected = [], []
        server = _UnixServer(path, _handler(routes, seen, unexpected))
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        started.append((server, thread))
        return path, seen, unexpected

    yield start
    for server, thread in started:
        server.shutdown()
        server.server_close()
        thread.join()


def test_podman_inventory(serve):
    listing = [
        {
            "Id": "abc123",
            "Names": ["web"],
            "Image": "quay.io/libpod/alpine:latest",
            "State": "running",
            "Status": "Up 5 seconds",
            "Networks": {"podman": {}},
        }
    ]
    path, seen, unexpected = serve(
        "podman.sock",
        {
            "/containers/json": (200, json.dumps(listing)),
            "/containers/abc123/json": (200, '{"State":{"Pid":4321}}'),
        },
    )

    inventory = podman_inventory([path])

    assert inventory.runtime == RuntimeName.PODMAN
    assert inventory.available
    assert unexpected == []
    assert seen[0] == ("/containers/json", {"all": ["true"]})
    assert len(inventory.containers) == 1
    container = inventory.containers[0]
    assert container.id == "abc123"
    assert container.names[0] == "web"
    assert container.network_mode == "podman"
    assert container.pid == 4321


def test_podman_inventory_includes_stopped_containers(serve):
    listing = (
        '[{"Id":"abc123","Names":["web"],"State":"running"},'
        '{"Id":"def456","Names":["job"],"State":"exited","Status":"Exited (0) 10 seconds ago"}]'
    )
    path, _, unexpected = serve(
        "podman.sock",
        {
            "/containers/json": (200, listing),
            "/containers/abc123/json": (200, '{"State":{"Pid":4321}}'),
            "/containers/def456/json": (200, '{"State":{"Pid":0}}'),
        },
    )

    inventory = podman_inventory([path])

    assert unexpected == []
    assert len(inventory.containers) == 2
    assert inventory.containers[1].id == "def456"
    assert inventory.containers[1].state == "exited"


def test_podman_inventory_falls_back_to_rootless_socket(serve, socket_dir):
    path, _, _ = serve(
        "podman.sock",
        {
            "/containers/json": (200, '[{"Id":"abc123","Names":["web"],"State":"running"}]'),
            "/containers/abc123/json": (200, '{"State":{"Pid":4321}}'),
        },
    )

    inventory = podman_inventory([os.path.join(socket_dir, "missing.sock"), path])

    assert inventory.available
    assert inventory.warnings == []
    assert [container.id for container in inventory.containers] == ["abc123"]


def test_podman_inventory_warns_on_malformed_json(serve):
    path, _, unexpected = serve("podman.sock", {"/containers/json": (200, "[")})

    inventory = podman_inventory([path])

    assert not inventory.available
    assert unexpected == []
    assert len(inventory.warnings) == 1
    assert "podman API unavailable: decode" in inventory.warnings[0]


def test_podman_inventory_missing_socket(socket_dir):
    inventory = podman_inventory([os.path.join(socket_dir, "missing.sock")])

    assert not inventory.available
    assert len(inventory.warnings) == 1
    assert "podman socket missing: checked" in inventory.warnings[0]


def test_podman_inventory_without_candidates():
    inventory = podman_inventory([])

    assert inventory.warnings == ["podman socket path not configured"]


def test_podman_inventory_keeps_container_when_inspect_fails(serve):
    path, _, _ = serve(
        "podman.sock",
        {
            "/containers/json": (200, '[{"Id":"abc123","Names":["web"],"State":"running"}]'),
            "/containers/abc123/json": (404, "missing\n"),
        },
    )

    inventory = podman_inventory([path])

    assert inventory.available
    assert len(inventory.warnings) == 1
    assert inventory.warnings[0].startswith("podman inspect abc123: ")
    assert inventory.containers[0].pid == 0


def test_podman_container_prefers_network_settings():
    container = podman_container_to_container(
        {
            "Names": ["/web"],
            "NetworkSettings": {"Networks": {"zeta": {}, "beta": {}}},
            "Networks": {"alpha": {}},
        }
    )
    assert container.network_mode == "beta"
    assert container.names == ["web"]


def test_podman_container_falls_back_to_top_level_networks():
    container = podman_container_to_container(
        {"NetworkSettings": {"Networks": {}}, "Networks": {"podman": {}, "custom": {}}}
    )
    assert container.network_mode == "custom"