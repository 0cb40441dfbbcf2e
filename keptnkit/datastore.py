"""Access to the event datastore."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import requests

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?(Z|z|[+-]\d{2}:?\d{2})?$"
)


class DatastoreError(Exception):
    """Raised when the datastore cannot deliver the requested event."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


def _parse_time(value: Any) -> datetime:
    if value is None or value == "":
        return _ZERO_TIME
    match = _RFC3339.match(value) if isinstance(value, str) else None
    if match is None:
        raise DatastoreError(f"cannot parse time {value!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    if zone is None or zone in ("Z", "z"):
        tz = timezone.utc
    else:
        digits = zone[1:].replace(":", "")
        offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        tz = timezone(offset if zone[0] == "+" else -offset)
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tz
        )
    except ValueError as exc:
        raise DatastoreError(str(exc)) from exc


def _decode_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError as exc:
        raise DatastoreError(str(exc)) from exc


@dataclass
class EventHandler:
    """Reads events from the datastore; the base URL is given without scheme."""

    base_url: str
    auth_token: str = ""
    auth_header: str = ""
    session: requests.Session = field(default_factory=requests.Session, repr=False)
    scheme: str = "http"

    def __post_init__(self) -> None:
        self.base_url = self.base_url.removeprefix("http://").removeprefix("https://")

    def get_event(self, keptn_context: str, event_type: str) -> dict[str, Any]:
        """Return the latest event of the given type in the given context.

        Raises DatastoreError when no event is found or the request fails.
        """
        uri = (
            f"{self.scheme}://{self.base_url}/event?keptnContext={keptn_context}"
            f"&type={event_type}&pageSize=10"
        )
        headers = {"Content-Type": "application/json"}
        if self.auth_header and self.auth_token:
            headers[self.auth_header] = self.auth_token
        try:
            response = self.session.get(uri, headers=headers, verify=False)
        except requests.RequestException as exc:
            raise DatastoreError(str(exc)) from exc

        with response:
            body = response.content
            status = response.status_code

        if 200 <= status < 300:
            if body:
                latest = self._latest(_decode_json(body))
                if latest is not None:
                    return latest
            raise DatastoreError(
                f"No Keptn {event_type} event found for context: {keptn_context}", 404
            )

        payload = _decode_json(body)
        if not isinstance(payload, dict):
            raise DatastoreError(f"unexpected error response: {payload!r}")
        message = payload.get("message") or f"request failed with status {status}"
        return self._raise(message, payload.get("code", status))

    @staticmethod
    def _raise(message: str, code: Any) -> Any:
        raise DatastoreError(str(message), code if isinstance(code, int) else None)

    @staticmethod
    def _latest(payload: Any) -> dict[str, Any] | None:
        if not isinstance(payload, dict):
            raise DatastoreError(f"unexpected response: {payload!r}")
        latest: dict[str, Any] | None = None
        latest_time = _ZERO_TIME
        for event in payload.get("events") or []:
            if not isinstance(event, dict):
                raise DatastoreError(f"unexpected event: {event!r}")
            event_time = _parse_time(event.get("time"))
            if latest is None or latest_time < event_time:
                latest, latest_time = event, event_time
        return latest