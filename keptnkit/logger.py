"""A logger that writes structured JSON log lines to standard output."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta

_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _format_timestamp(moment: datetime) -> str:
    """Format a time as RFC 3339 with trailing zeros of the fraction removed."""
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{moment.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _encode(payload: dict[str, str]) -> str:
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _ESCAPES.items():
        text = text.replace(char, escaped)
    return text


@dataclass
class Logger:
    """Prints log messages as JSON lines tagged with a level and a timestamp."""

    keptn_context: str = ""
    event_id: str = ""
    service_name: str = ""

    def info(self, message: str) -> None:
        """Log an info message."""
        self._emit("INFO", message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self._emit("ERROR", message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self._emit("DEBUG", message)

    def terminate(self, message: str) -> None:
        """Log the final message of a task; written at info level."""
        self._emit("INFO", message)

    def _emit(self, level: str, message: str) -> None:
        payload = {
            "timestamp": _format_timestamp(datetime.now().astimezone()),
            "logLevel": level,
            "message": message,
        }
        print(_encode(payload))