"""Downloading content from URLs."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

import requests


def is_valid_url(str_url: str) -> bool:
    """Tell whether the string is an absolute URL with a scheme and a host."""
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in str_url):
        return False
    try:
        parts = urlsplit(str_url)
    except ValueError:
        return False
    if not parts.scheme or not parts.netloc:
        return False
    return " " not in parts.netloc


@dataclass(frozen=True)
class Downloader:
    """Downloads content; a timeout of None or 0 means no timeout."""

    timeout: float | None = None

    def download_from_url(self, url: str) -> bytes:
        """Fetch the URL and return the response body."""
        if not is_valid_url(url):
            raise ValueError(f"{url} is not a valid URL")
        response = requests.get(url, timeout=self.timeout or None)
        with response:
            return response.content


def download_from_url(url: str) -> bytes:
    """Fetch the URL with a default Downloader and return the response body."""
    return Downloader().download_from_url(url)