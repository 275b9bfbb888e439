"""Listing processes from a proc filesystem."""

from __future__ import annotations

import os
import re

from scrubd.inspect.resources import Process

_PID = re.compile(r"[+-]?[0-9]+")


def _read(path: str) -> str | None:
    try:
        with open(path, "rb") as handle:
            return handle.read().decode("utf-8", errors="surrogateescape")
    except OSError:
        return None


def read_trimmed(path: str) -> str:
    """Return the file's text without surrounding whitespace, or "" if unreadable."""
    text = _read(path)
    return "" if text is None else text.strip()


def read_cmdline(path: str) -> list[str]:
    """Return the non-empty NUL separated arguments of a cmdline file."""
    text = _read(path)
    if not text:
        return []
    return [arg for arg in text.rstrip("\x00").split("\x00") if arg]


def read_processes(proc_dir: str) -> list[Process]:
    """List every numbered process directory; raises OSError if unreadable."""
    if not proc_dir:
        raise FileNotFoundError(2, "No such file or directory", proc_dir)
    with os.scandir(proc_dir) as iterator:
        entries = sorted(iterator, key=lambda entry: entry.name)

    processes = []
    for entry in entries:
        if not _PID.fullmatch(entry.name):
            continue
        try:
            if not entry.is_dir(follow_symlinks=False):
                continue
        except OSError:
            continue
        base = os.path.join(proc_dir, entry.name)
        processes.append(
            Process(
                pid=int(entry.name),
                command=read_trimmed(os.path.join(base, "comm")),
                args=read_cmdline(os.path.join(base, "cmdline")),
            )
        )
    return processes


def collect_processes(proc_dir: str) -> tuple[list[Process], list[str]]:
    """Collect processes, returning them with any warnings."""
    try:
        return read_processes(proc_dir), []
    except FileNotFoundError:
        return [], []
    except OSError as err:
        return [], [f"processes: {err}"]