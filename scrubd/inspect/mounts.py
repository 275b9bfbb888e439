"""Reading the kernel mountinfo table."""

from __future__ import annotations

import json
from collections.abc import Iterable

from scrubd.inspect.resources import Mount


def split_comma(value: str) -> list[str]:
    """Split a comma separated list; an empty string gives an empty list."""
    if value == "":
        return []
    return value.split(",")


def unescape_mount_field(value: str) -> str:
    """Undo the octal escapes the kernel applies to mount paths."""
    value = value.replace("\\040", " ")
    value = value.replace("\\011", "\t")
    value = value.replace("\\012", "\n")
    return value.replace("\\134", "\\")


def parse_mount_info_line(line: str) -> Mount:
    """Parse one mountinfo line, raising ValueError if it is malformed."""
    before, separator, after = line.partition(" - ")
    fields = before.split()
    super_fields = after.split()
    if not separator or len(fields) < 6 or len(super_fields) < 3:
        raise ValueError(f"invalid line {json.dumps(line, ensure_ascii=False)}")
    return Mount(
        id=fields[0],
        parent_id=fields[1],
        major_minor=fields[2],
        root=unescape_mount_field(fields[3]),
        mount_point=unescape_mount_field(fields[4]),
        options=split_comma(fields[5]),
        fs_type=super_fields[0],
        source=super_fields[1],
        super_opts=split_comma(super_fields[2]),
    )


def _strip_line_end(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_mount_info(stream: Iterable[str]) -> list[Mount]:
    """Parse every line of a mountinfo table."""
    return [parse_mount_info_line(_strip_line_end(line)) for line in stream]


def collect_mounts(path: str) -> tuple[list[Mount], list[str]]:
    """Read the mountinfo file at path, returning mounts and warnings."""
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="\n") as handle:
            mounts = parse_mount_info(handle)
    except FileNotFoundError:
        return [], []
    except (OSError, ValueError) as err:
        return [], [f"mountinfo: {err}"]
    return mounts, []