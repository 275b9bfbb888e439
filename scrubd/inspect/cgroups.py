"""Finding container runtime control groups."""

from __future__ import annotations

import json
import os
import stat
from collections.abc import Iterable

from scrubd.inspect.mounts import split_comma
from scrubd.inspect.resources import Cgroup, Paths

_ENCODING = {"encoding": "utf-8", "errors": "surrogateescape", "newline": "\n"}


def parse_cgroup_line(line: str) -> Cgroup:
    """Parse one /proc/<pid>/cgroup line, raising ValueError if malformed."""
    fields = line.split(":", 2)
    if len(fields) != 3:
        raise ValueError(f"invalid line {json.dumps(line, ensure_ascii=False)}")
    return Cgroup(hierarchy_id=fields[0], controllers=split_comma(fields[1]), path=fields[2])


def parse_cgroups(stream: Iterable[str]) -> list[Cgroup]:
    """Parse every line of a /proc/<pid>/cgroup file."""
    cgroups = []
    for line in stream:
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        cgroups.append(parse_cgroup_line(line))
    return cgroups


def runtime_cgroup_path(path: str) -> bool:
    """Tell whether a cgroup path belongs to a container runtime."""
    path = path.lower()
    if "kubepods" in path:
        return "/pod" in path
    return "docker" in path or "containerd" in path or "libpod" in path


def read_cgroup_process_count(path: str) -> tuple[int, bool]:
    """Count the processes in a cgroup directory.

    Returns the count and whether it is known; a missing cgroup.procs file
    leaves the count unknown. Other read errors raise OSError.
    """
    try:
        with open(os.path.join(path, "cgroup.procs"), **_ENCODING) as handle:
            count = sum(1 for line in handle if line.strip())
    except FileNotFoundError:
        return 0, False
    return count, True


def _walk(directory: str, relative: str, cgroups: list[Cgroup], warnings: list[str]) -> None:
    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as err:
        warnings.append(f"cgroup {directory}: {err}")
        return

    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        if not is_dir:
            continue

        cgroup_path = f"{relative}/{entry.name}"
        if runtime_cgroup_path(cgroup_path):
            try:
                count, known = read_cgroup_process_count(entry.path)
            except OSError as err:
                warnings.append(f"cgroup {entry.path} processes: {err}")
                count, known = 0, False
            cgroups.append(
                Cgroup(
                    hierarchy_id="0",
                    path=cgroup_path,
                    process_count=count,
                    process_count_known=known,
                )
            )
        _walk(entry.path, cgroup_path, cgroups, warnings)


def scan_cgroup_root(root: str) -> tuple[list[Cgroup], list[str]]:
    """Walk a unified cgroup hierarchy and return runtime cgroups and warnings."""
    cgroups: list[Cgroup] = []
    warnings: list[str] = []
    try:
        info = os.lstat(root)
    except OSError as err:
        warnings.append(f"cgroup {root}: {err}")
        return cgroups, warnings
    if stat.S_ISDIR(info.st_mode):
        _walk(root, "", cgroups, warnings)
    return cgroups, warnings


def collect_cgroups(paths: Paths) -> tuple[list[Cgroup], list[str]]:
    """Collect cgroups from the cgroup root, or from the proc cgroup file."""
    if paths.cgroup_root:
        return scan_cgroup_root(paths.cgroup_root)

    try:
        with open(paths.cgroup, **_ENCODING) as handle:
            cgroups = parse_cgroups(handle)
    except FileNotFoundError:
        return [], []
    except (OSError, ValueError) as err:
        return [], [f"cgroup: {err}"]
    return cgroups, []