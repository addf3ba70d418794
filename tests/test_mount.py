import os

import pytest

from procfs.mount import Mount


def test_missing_mount_point_fails(tmp_path):
    with pytest.raises(FileNotFoundError):
        Mount(str(tmp_path / "foobar"))


def test_file_mount_point_fails(tmp_path):
    regular = tmp_path / "doc.go"
    regular.write_text("package fs\n")
    with pytest.raises(NotADirectoryError):
        Mount(str(regular))


def test_directory_mount_point_succeeds(tmp_path):
    mount = Mount(str(tmp_path))
    assert mount.mount_point == str(tmp_path)


def test_accepts_path_objects(tmp_path):
    mount = Mount(tmp_path)
    assert mount.mount_point == str(tmp_path)
    assert os.fspath(mount) == str(tmp_path)


def test_path_joins_elements(tmp_path):
    mount = Mount(str(tmp_path))
    assert mount.path("net", "arp") == os.path.join(str(tmp_path), "net", "arp")


def test_path_without_elements_is_mount_point(tmp_path):
    mount = Mount(str(tmp_path))
    assert mount.path() == os.path.normpath(str(tmp_path))


def test_path_is_normalised(tmp_path):
    mount = Mount(str(tmp_path))
    assert mount.path("a/../b", "c") == os.path.join(str(tmp_path), "b", "c")