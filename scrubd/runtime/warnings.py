"""Human-readable warnings for runtime access failures."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import grpc


def _chain(error: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _matches(error: BaseException, kind: type[BaseException]) -> bool:
    return any(isinstance(item, kind) for item in _chain(error))


def is_timeout(error: BaseException) -> bool:
    """Tell whether the error, or one it was raised from, is a timeout."""
    return _matches(error, TimeoutError)


def socket_stat_warning(runtime_name: str, path: str, error: BaseException) -> str:
    """Describe a failure to stat a runtime socket."""
    if _matches(error, FileNotFoundError):
        return f"{runtime_name} socket missing: {path}"
    if _matches(error, PermissionError):
        return f"{runtime_name} socket permission denied: {path}"
    return f"{runtime_name} socket unavailable: {error}"


def sockets_missing_warning(runtime_name: str, paths: Iterable[str]) -> str:
    """Describe that none of the checked sockets exist."""
    return f"{runtime_name} socket missing: checked {', '.join(paths)}"


def socket_connect_warning(runtime_name: str, path: str, error: BaseException) -> str:
    """Describe a failure to connect to a runtime socket."""
    if _matches(error, PermissionError):
        return f"{runtime_name} socket permission denied: {path}"
    if is_timeout(error):
        return f"{runtime_name} socket connect timeout: {path}"
    return f"{runtime_name} socket connect failed: {error}"


def _api_warning(runtime_name: str, path: str, error: BaseException) -> str:
    if _matches(error, PermissionError):
        return f"{runtime_name} socket permission denied: {path}"
    if is_timeout(error):
        return f"{runtime_name} API timeout: {path}"
    return f"{runtime_name} API unavailable: {error}"


def docker_api_warning(path: str, error: BaseException) -> str:
    """Describe a failed Docker API request."""
    return _api_warning("docker", path, error)


def podman_api_warning(path: str, error: BaseException) -> str:
    """Describe a failed Podman API request."""
    return _api_warning("podman", path, error)


def _rpc_status(error: BaseException) -> grpc.StatusCode | None:
    for item in _chain(error):
        code = getattr(item, "code", None)
        if isinstance(item, grpc.RpcError) and callable(code):
            return code()
    return None


def cri_inventory_warning(error: BaseException) -> str:
    """Describe a failed containerd CRI inventory request."""
    status = _rpc_status(error)
    if status == grpc.StatusCode.UNIMPLEMENTED:
        return "containerd CRI API unavailable: runtime service not implemented"
    if status == grpc.StatusCode.DEADLINE_EXCEEDED or is_timeout(error):
        return "containerd CRI API timeout"
    return f"containerd CRI inventory: {error}"