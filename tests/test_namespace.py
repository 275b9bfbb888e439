import os

import pytest

from scrubd.inspect.namespace import (
    collect_network_namespaces,
    namespace_inode,
    read_named_network_namespaces,
    read_process_network_namespaces,
    stat_inode,
)
from scrubd.inspect.resources import Paths


def test_namespace_inode_from_link(tmp_path):
    path = tmp_path / "net"
    os.symlink("net:[4026531993]", path)
    assert namespace_inode(str(path)) == "4026531993"


def test_namespace_inode_falls_back_to_stat(tmp_path):
    path = tmp_path / "netns"
    path.write_bytes(b"")
    inode = namespace_inode(str(path))
    assert inode != ""
    assert inode.isdigit()
    assert inode == stat_inode(str(path))


def test_namespace_inode_rejects_bad_target(tmp_path):
    path = tmp_path / "bad"
    os.symlink("net:[]", path)
    with pytest.raises(ValueError, match="invalid namespace link target"):
        namespace_inode(str(path))


def test_stat_inode_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        stat_inode(str(tmp_path / "missing"))


def test_read_named_ignores_directories(tmp_path):
    os.symlink("net:[1]", tmp_path / "cni-a")
    (tmp_path / "nested").mkdir()
    namespaces, warnings = read_named_network_namespaces(str(tmp_path))
    assert warnings == []
    assert len(namespaces) == 1
    assert namespaces[0].inode == "1"
    assert namespaces[0].source == "netns"
    assert namespaces[0].path == str(tmp_path / "cni-a")


def test_read_named_skips_invalid_inode(tmp_path):
    os.symlink("not-a-namespace", tmp_path / "bad")
    namespaces, warnings = read_named_network_namespaces(str(tmp_path))
    assert namespaces == []
    assert len(warnings) == 1
    assert warnings[0].startswith("network namespace ")


def test_read_named_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_named_network_namespaces(str(tmp_path / "missing"))


def test_read_process_namespaces(tmp_path):
    ns_dir = tmp_path / "123" / "ns"
    ns_dir.mkdir(parents=True)
    os.symlink("net:[55]", ns_dir / "net")
    (tmp_path / "456").mkdir()
    (tmp_path / "self-like").mkdir()
    namespaces, warnings = read_process_network_namespaces(str(tmp_path))
    assert warnings == []
    assert len(namespaces) == 1
    assert namespaces[0].pid == 123
    assert namespaces[0].inode == "55"
    assert namespaces[0].source == "process"


def test_collect_ignores_missing_directories(tmp_path):
    paths = Paths(netns_dir=str(tmp_path / "a"), proc_dir=str(tmp_path / "b"))
    assert collect_network_namespaces(paths) == ([], [])


def test_collect_combines_sources(tmp_path):
    netns = tmp_path / "netns"
    netns.mkdir()
    os.symlink("net:[9]", netns / "named")
    proc = tmp_path / "proc"
    (proc / "7" / "ns").mkdir(parents=True)
    os.symlink("net:[10]", proc / "7" / "ns" / "net")
    namespaces, warnings = collect_network_namespaces(
        Paths(netns_dir=str(netns), proc_dir=str(proc))
    )
    assert warnings == []
    assert [(ns.source, ns.inode) for ns in namespaces] == [("netns", "9"), ("process", "10")]