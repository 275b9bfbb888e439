"""Finding runtime overlay snapshot directories."""

from __future__ import annotations

import os

from scrubd.inspect.resources import Paths, Snapshot


def _subdirectories(root: str) -> list[os.DirEntry]:
    with os.scandir(root) as iterator:
        entries = sorted(iterator, key=lambda entry: entry.name)
    return [entry for entry in entries if entry.is_dir(follow_symlinks=False)]


def _read_snapshots(
    root: str, runtime: str, marker: str, label: str, skip: frozenset[str] = frozenset()
) -> tuple[list[Snapshot], list[str]]:
    if not root:
        return [], []
    try:
        entries = _subdirectories(root)
    except FileNotFoundError:
        return [], []
    except OSError as err:
        return [], [f"{label}: {err}"]

    snapshots = []
    for entry in entries:
        if entry.name in skip:
            continue
        path = os.path.join(root, entry.name)
        if not os.path.exists(os.path.join(path, marker)):
            continue
        snapshots.append(Snapshot(runtime=runtime, id=entry.name, path=path))
    return snapshots, []


def read_docker_overlay_snapshots(root: str) -> tuple[list[Snapshot], list[str]]:
    """List Docker overlay2 layers that hold a diff directory."""
    return _read_snapshots(
        root, "docker", "diff", "docker overlay snapshots", frozenset({"l"})
    )


def read_containerd_snapshots(root: str) -> tuple[list[Snapshot], list[str]]:
    """List containerd overlayfs snapshots that hold an fs directory."""
    return _read_snapshots(root, "containerd", "fs", "containerd overlay snapshots")


def collect_snapshots(paths: Paths) -> tuple[list[Snapshot], list[str]]:
    """Collect Docker and containerd snapshots with their warnings."""
    docker, docker_warnings = read_docker_overlay_snapshots(paths.docker_overlay_dir)
    containerd, containerd_warnings = read_containerd_snapshots(paths.containerd_snapshot_dir)
    return docker + containerd, docker_warnings + containerd_warnings