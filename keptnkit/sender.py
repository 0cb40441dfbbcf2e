"""Sending CloudEvents over HTTP with retries."""

from __future__ import annotations

import dataclasses
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import requests

from keptnkit.base import get_exp_backoff_time
from keptnkit.cloudevent import CloudEvent

MAX_SEND_RETRIES = 3
DEFAULT_HTTP_EVENT_ENDPOINT = "http://localhost:8081/event"

_STRUCTURED_CONTENT_TYPE = "application/cloudevents+json; charset=UTF-8"


class SendError(Exception):
    """Raised when an event could not be delivered."""


def _validate_event(event: CloudEvent) -> None:
    missing = [
        name
        for name, value in (
            ("specversion", event.spec_version),
            ("id", event.id),
            ("source", event.source),
            ("type", event.type),
        )
        if not value
    ]
    if missing:
        raise ValueError("validation error: missing " + ", ".join(missing))


@dataclass
class HTTPEventSender:
    """Sends CloudEvents in structured mode to an HTTP endpoint."""

    events_endpoint: str = DEFAULT_HTTP_EVENT_ENDPOINT
    session: requests.Session = field(default_factory=requests.Session, repr=False)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if not self.events_endpoint:
            self.events_endpoint = DEFAULT_HTTP_EVENT_ENDPOINT

    def send_event(self, event: CloudEvent) -> None:
        """Send the event, retrying with back-off; raise SendError on failure.

        A missing id or time is filled in on a copy; the given event is not changed.
        """
        prepared = dataclasses.replace(event, extensions=dict(event.extensions))
        if not prepared.id:
            prepared.id = str(uuid.uuid4())
        if prepared.time is None:
            prepared.time = datetime.now(timezone.utc)

        failure = ""
        for attempt in range(MAX_SEND_RETRIES + 1):
            try:
                _validate_event(prepared)
                response = self.session.post(
                    self.events_endpoint,
                    data=prepared.to_json().encode("utf-8"),
                    headers={"Content-Type": _STRUCTURED_CONTENT_TYPE},
                )
            except (ValueError, requests.RequestException) as exc:
                failure = str(exc)
            else:
                with response:
                    status = response.status_code
                if 200 <= status < 300:
                    return
                failure = f"{status}: {response.reason}"
            self.sleep(get_exp_backoff_time(attempt + 1))
        raise SendError(f"Failed to send cloudevent: {failure}")