"""A CloudEvents 1.0 event with JSON data and structured-mode encoding."""

from __future__ import annotations

import base64
import dataclasses
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

SPEC_VERSION = "1.0"
APPLICATION_JSON = "application/json"
TEXT_PLAIN = "text/plain"

_EXTENSION_NAME = re.compile(r"^[a-z0-9]+$")
_TIME = re.compile(
    r"^(\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|z|[+-]\d{2}:\d{2})?$"
)
_RESERVED = frozenset(
    "specversion id source type time subject dataschema datacontenttype data".split()
)


def _media_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def _is_json(content_type: str | None) -> bool:
    media = _media_type(content_type)
    return media in ("", APPLICATION_JSON, "text/json") or media.endswith("+json")


def _json_default(value: Any) -> Any:
    if callable(getattr(value, "to_dict", None)):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"cannot encode {type(value).__name__} as JSON")


def _dump(value: Any) -> bytes:
    return json.dumps(
        value, default=_json_default, ensure_ascii=False, separators=(",", ":")
    ).encode("utf-8")


def _format_time(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds").replace(
        "+00:00", "Z"
    )


def _parse_time(value: Any) -> datetime:
    match = _TIME.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"invalid time {value!r}")
    head, fraction, zone = match.groups()
    micro = (fraction or "0")[:6].ljust(6, "0")
    zone = "+00:00" if zone in (None, "Z", "z") else zone
    return datetime.fromisoformat(f"{head.upper()}.{micro}{zone}")


def _text(attrs: dict[str, Any], name: str) -> str | None:
    value = attrs.pop(name, None)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"attribute {name} must be a string")
    return value


def _plain_extension(value: Any) -> Any:
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, datetime):
        return _format_time(value)
    return value


@dataclass
class CloudEvent:
    """A CloudEvent with its context attributes, extensions and encoded data."""

    id: str = ""
    source: str = ""
    type: str = ""
    spec_version: str = SPEC_VERSION
    time: datetime | None = None
    subject: str | None = None
    data_schema: str | None = None
    data_content_type: str | None = None
    data: bytes | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    def set_data(self, content_type: str, data: Any) -> None:
        """Encode the data for the content type and store it.

        Raises ValueError for an unsupported content type.
        """
        if content_type:
            self.data_content_type = content_type
        if isinstance(data, (bytes, bytearray)):
            self.data = bytes(data)
        elif _is_json(self.data_content_type):
            self.data = _dump(data)
        elif _media_type(self.data_content_type) == TEXT_PLAIN and isinstance(data, str):
            self.data = data.encode("utf-8")
        else:
            raise ValueError(f"codec not found for content type {self.data_content_type}")

    def data_as(self, cls: type) -> Any:
        """Decode the data into ``cls``, using its ``from_dict`` where it has one."""
        from_dict = getattr(cls, "from_dict", None)
        if self.data is None:
            return from_dict({}) if from_dict is not None else cls()
        if _is_json(self.data_content_type):
            decoded = json.loads(self.data)
        elif _media_type(self.data_content_type) == TEXT_PLAIN:
            decoded = self.data.decode("utf-8")
        else:
            raise ValueError(f"codec not found for content type {self.data_content_type}")
        if from_dict is not None:
            return from_dict(decoded)
        if isinstance(decoded, cls):
            return decoded
        raise TypeError(f"cannot decode event data into {cls.__name__}")

    def get_extension(self, name: str) -> Any:
        """Return the value of an extension attribute; raise KeyError if unset."""
        return self.extensions[name.lower()]

    def set_extension(self, name: str, value: Any) -> None:
        """Set an extension attribute; a value of None removes it."""
        key = name.lower()
        if not _EXTENSION_NAME.match(key):
            raise ValueError(
                f"bad key {name!r}: CloudEvents attribute names must consist of "
                "lower-case letters or digits"
            )
        if key in _RESERVED:
            raise ValueError(f"{name!r} is a reserved attribute name")
        if value is None:
            self.extensions.pop(key, None)
        else:
            self.extensions[key] = value

    def to_dict(self) -> dict[str, Any]:
        """Return the event in the structured JSON format."""
        result: dict[str, Any] = {
            "specversion": self.spec_version,
            "id": self.id,
            "source": self.source,
            "type": self.type,
        }
        optional = {
            "subject": self.subject,
            "dataschema": self.data_schema,
            "datacontenttype": self.data_content_type,
            "time": _format_time(self.time) if self.time is not None else None,
        }
        result.update((k, v) for k, v in optional.items() if v is not None)
        result.update((k, _plain_extension(v)) for k, v in self.extensions.items())
        if self.data is not None:
            if _is_json(self.data_content_type):
                result["data"] = json.loads(self.data)
            elif _media_type(self.data_content_type).startswith("text/"):
                result["data"] = self.data.decode("utf-8")
            else:
                result["data_base64"] = base64.b64encode(self.data).decode("ascii")
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CloudEvent:
        """Build an event from the structured JSON format."""
        attrs = dict(data)
        content_type = _text(attrs, "datacontenttype")
        time_value = attrs.pop("time", None)
        event = cls(
            id=_text(attrs, "id") or "",
            source=_text(attrs, "source") or "",
            type=_text(attrs, "type") or "",
            spec_version=_text(attrs, "specversion") or SPEC_VERSION,
            time=_parse_time(time_value) if time_value else None,
            subject=_text(attrs, "subject"),
            data_schema=_text(attrs, "dataschema"),
            data_content_type=content_type,
        )
        if "data_base64" in attrs:
            event.data = base64.b64decode(_text(attrs, "data_base64") or "")
        elif "data" in attrs:
            payload = attrs.pop("data")
            if isinstance(payload, str) and not _is_json(content_type):
                event.data = payload.encode("utf-8")
            else:
                event.data = _dump(payload)
        for name, value in attrs.items():
            event.set_extension(name, value)
        return event

    def to_json(self) -> str:
        """Return the event encoded as structured JSON."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))