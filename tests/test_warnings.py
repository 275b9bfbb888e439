import grpc

from scrubd.runtime.warnings import (
    cri_inventory_warning,
    docker_api_warning,
    is_timeout,
    podman_api_warning,
    socket_connect_warning,
    socket_stat_warning,
    sockets_missing_warning,
)


class _StatusError(grpc.RpcError):
    def __init__(self, status):
        super().__init__("rpc failed")
        self._status = status

    def code(self):
        return self._status


def test_socket_stat_warning():
    assert (
        socket_stat_warning("docker", "/var/run/docker.sock", FileNotFoundError())
        == "docker socket missing: /var/run/docker.sock"
    )
    assert (
        socket_stat_warning("docker", "/var/run/docker.sock", PermissionError())
        == "docker socket permission denied: /var/run/docker.sock"
    )
    assert (
        sockets_missing_warning("docker", ["/var/run/docker.sock", "/run/user/501/docker.sock"])
        == "docker socket missing: checked /var/run/docker.sock, /run/user/501/docker.sock"
    )


def test_socket_stat_warning_other_error():
    assert socket_stat_warning("podman", "/x", OSError("boom")) == "podman socket unavailable: boom"


def test_socket_connect_warning():
    assert (
        socket_connect_warning("containerd", "/run/containerd/containerd.sock", PermissionError())
        == "containerd socket permission denied: /run/containerd/containerd.sock"
    )
    assert (
        socket_connect_warning("containerd", "/run/containerd/containerd.sock", TimeoutError())
        == "containerd socket connect timeout: /run/containerd/containerd.sock"
    )
    assert (
        socket_connect_warning("containerd", "/x", ConnectionRefusedError("refused"))
        == "containerd socket connect failed: refused"
    )


def test_docker_api_warning():
    assert (
        docker_api_warning("/var/run/docker.sock", PermissionError())
        == "docker socket permission denied: /var/run/docker.sock"
    )
    assert (
        docker_api_warning("/var/run/docker.sock", TimeoutError())
        == "docker API timeout: /var/run/docker.sock"
    )
    assert docker_api_warning("/x", ValueError("decode: bad")) == "docker API unavailable: decode: bad"


def test_podman_api_warning():
    assert podman_api_warning("/p.sock", TimeoutError()) == "podman API timeout: /p.sock"
    assert podman_api_warning("/p.sock", RuntimeError("status 500")) == "podman API unavailable: status 500"


def test_cri_inventory_warning():
    assert (
        cri_inventory_warning(_StatusError(grpc.StatusCode.UNIMPLEMENTED))
        == "containerd CRI API unavailable: runtime service not implemented"
    )
    assert cri_inventory_warning(TimeoutError()) == "containerd CRI API timeout"
    assert cri_inventory_warning(RuntimeError("boom")) == "containerd CRI inventory: boom"


def test_cri_inventory_warning_deadline_status():
    assert (
        cri_inventory_warning(_StatusError(grpc.StatusCode.DEADLINE_EXCEEDED))
        == "containerd CRI API timeout"
    )


def test_is_timeout_follows_cause():
    try:
        try:
            raise TimeoutError()
        except TimeoutError as inner:
            raise RuntimeError("wrapped") from inner
    except RuntimeError as outer:
        assert is_timeout(outer) is True
    assert is_timeout(RuntimeError("plain")) is False