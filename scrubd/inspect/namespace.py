"""Finding named and process-held network namespaces."""

from __future__ import annotations

import json
import os
import re

from scrubd.inspect.resources import NetworkNamespace, Paths

_PID = re.compile(r"[+-]?[0-9]+")


def _sorted_entries(directory: str) -> list[os.DirEntry]:
    if not directory:
        raise FileNotFoundError(2, "No such file or directory", directory)
    with os.scandir(directory) as iterator:
        return sorted(iterator, key=lambda entry: entry.name)


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def stat_inode(path: str) -> str:
    """Return the inode number of path as a decimal string."""
    return str(os.stat(path).st_ino)


def namespace_inode(path: str) -> str:
    """Return the inode of a namespace, from its link target or its stat data.

    Raises ValueError for a link whose target carries no inode, and OSError
    when the path cannot be read.
    """
    try:
        target = os.readlink(path)
    except OSError:
        return stat_inode(path)
    start = target.find("[")
    end = target.find("]")
    if start == -1 or end == -1 or end <= start + 1:
        raise ValueError(
            f"invalid namespace link target {json.dumps(target, ensure_ascii=False)}"
        )
    return target[start + 1 : end]


def read_named_network_namespaces(directory: str) -> tuple[list[NetworkNamespace], list[str]]:
    """List the namespaces bound in a netns directory.

    Raises OSError when the directory itself cannot be read.
    """
    namespaces: list[NetworkNamespace] = []
    warnings: list[str] = []
    for entry in _sorted_entries(directory):
        if _is_dir(entry):
            continue
        path = os.path.join(directory, entry.name)
        try:
            inode = namespace_inode(path)
        except (OSError, ValueError) as err:
            warnings.append(f"network namespace {path}: {err}")
            continue
        namespaces.append(NetworkNamespace(path=path, inode=inode, source="netns"))
    return namespaces, warnings


def read_process_network_namespaces(proc_dir: str) -> tuple[list[NetworkNamespace], list[str]]:
    """List the network namespace of every process under a proc directory.

    Raises OSError when the directory itself cannot be read.
    """
    namespaces: list[NetworkNamespace] = []
    warnings: list[str] = []
    for entry in _sorted_entries(proc_dir):
        if not _PID.fullmatch(entry.name) or not _is_dir(entry):
            continue
        path = os.path.join(proc_dir, entry.name, "ns", "net")
        try:
            inode = namespace_inode(path)
        except FileNotFoundError:
            continue
        except (OSError, ValueError) as err:
            warnings.append(f"process network namespace {path}: {err}")
            continue
        namespaces.append(
            NetworkNamespace(path=path, inode=inode, source="process", pid=int(entry.name))
        )
    return namespaces, warnings


def collect_network_namespaces(paths: Paths) -> tuple[list[NetworkNamespace], list[str]]:
    """Collect named and process namespaces with their warnings."""
    namespaces: list[NetworkNamespace] = []
    warnings: list[str] = []
    sources = (
        (read_named_network_namespaces, paths.netns_dir, "network namespaces"),
        (read_process_network_namespaces, paths.proc_dir, "process network namespaces"),
    )
    for reader, directory, label in sources:
        try:
            found, found_warnings = reader(directory)
        except FileNotFoundError:
            continue
        except OSError as err:
            warnings.append(f"{label}: {err}")
            continue
        namespaces.extend(found)
        warnings.extend(found_warnings)
    return namespaces, warnings