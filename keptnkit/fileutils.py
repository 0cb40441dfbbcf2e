"""Reading files with support for paths in the user's home directory."""

from __future__ import annotations

import os
import stat
import sys


def user_home_dir() -> str:
    """Return the user's home directory as given by the environment."""
    if sys.platform == "win32":
        home = os.environ.get("HOMEDRIVE", "") + os.environ.get("HOMEPATH", "")
        if not home:
            home = os.environ.get("USERPROFILE", "")
        return home
    return os.environ.get("HOME", "")


def expand_tilde(file_name: str) -> str:
    """Expand a leading ``~`` or ``~/`` to the user's home directory."""
    if file_name == "~":
        return user_home_dir()
    if file_name.startswith("~/"):
        parts = [part for part in (user_home_dir(), file_name[2:]) if part]
        return os.path.normpath(os.path.join(*parts)) if parts else ""
    return file_name


def read_file(file_name: str) -> bytes:
    """Read a file, expanding ``~``; raise FileNotFoundError if it is missing."""
    path = expand_tilde(file_name)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Cannot find file {path}")
    with open(path, "rb") as handle:
        return handle.read()


def read_file_as_str(file_name: str) -> str:
    """Read a file like read_file and return its content as text."""
    return read_file(file_name).decode("utf-8", errors="replace")


def file_exists(file_name: str) -> bool:
    """Tell whether the path, with ``~`` expanded, exists and is not a directory."""
    try:
        info = os.stat(expand_tilde(file_name))
    except FileNotFoundError:
        return False
    return not stat.S_ISDIR(info.st_mode)