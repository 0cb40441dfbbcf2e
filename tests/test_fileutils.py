import os
import sys

import pytest

from keptnkit.fileutils import (
    expand_tilde,
    file_exists,
    read_file,
    read_file_as_str,
    user_home_dir,
)


@pytest.fixture
def posix_home(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def test_read_file(tmp_path):
    target = tmp_path / "data.bin"
    target.write_bytes(b"\x00abc\xff")
    assert read_file(str(target)) == b"\x00abc\xff"


def test_read_file_as_str(tmp_path):
    target = tmp_path / "data.txt"
    target.write_text("shipyard: yes\n", encoding="utf-8")
    assert read_file_as_str(str(target)) == "shipyard: yes\n"


def test_read_missing_file(tmp_path):
    missing = tmp_path / "nope.txt"
    with pytest.raises(FileNotFoundError, match="Cannot find file"):
        read_file(str(missing))
    with pytest.raises(FileNotFoundError):
        read_file_as_str(str(missing))


def test_read_file_from_home(posix_home):
    (posix_home / "sli.yaml").write_text("indicators: {}\n")
    assert read_file_as_str("~/sli.yaml") == "indicators: {}\n"


def test_file_exists(tmp_path):
    target = tmp_path / "f.txt"
    target.write_text("x")
    assert file_exists(str(target)) is True
    assert file_exists(str(tmp_path)) is False
    assert file_exists(str(tmp_path / "missing")) is False


def test_file_exists_with_tilde(posix_home):
    (posix_home / "f.txt").write_text("x")
    assert file_exists("~/f.txt") is True
    assert file_exists("~/g.txt") is False


def test_expand_tilde_alone(posix_home):
    assert expand_tilde("~") == str(posix_home)


def test_expand_tilde_prefix(posix_home):
    assert expand_tilde("~/a/b/c") == os.path.join(str(posix_home), "a", "b", "c")


@pytest.mark.parametrize("name", ["/etc/hosts", "relative/path", "~user/x", "a~/b"])
def test_expand_tilde_leaves_other_paths(posix_home, name):
    assert expand_tilde(name) == name


def test_user_home_dir_posix(posix_home):
    assert user_home_dir() == str(posix_home)


def test_user_home_dir_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("HOMEDRIVE", "C:")
    monkeypatch.setenv("HOMEPATH", "\\Users\\keptn")
    assert user_home_dir() == "C:\\Users\\keptn"


def test_user_home_dir_windows_fallback(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.delenv("HOMEDRIVE", raising=False)
    monkeypatch.delenv("HOMEPATH", raising=False)
    monkeypatch.setenv("USERPROFILE", "D:\\profile")
    assert user_home_dir() == "D:\\profile"