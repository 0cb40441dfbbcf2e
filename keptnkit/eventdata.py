"""Event types, common event data and decoding of event payloads."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from keptnkit.cloudevent import CloudEvent, _dump

KEPTN_EVENT_TYPE_PREFIX = "sh.keptn.event."
KEPTN_TRIGGERED_EVENT_SUFFIX = ".triggered"
KEPTN_STARTED_EVENT_SUFFIX = ".started"
KEPTN_STATUS_CHANGED_EVENT_SUFFIX = ".status.changed"
KEPTN_FINISHED_EVENT_SUFFIX = ".finished"
KEPTN_INVALIDATED_EVENT_SUFFIX = ".invalidated"

KEPTN_CONTEXT_CE_EXTENSION = "shkeptncontext"
KEPTN_SPEC_VERSION_CE_EXTENSION = "shkeptnspecversion"
TRIGGERED_ID_CE_EXTENSION = "triggeredid"


class _TextEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


StatusType = _TextEnum(
    "StatusType",
    [("SUCCEEDED", "succeeded"), ("ERRORED", "errored"), ("UNKNOWN", "unknown")],
    module=__name__,
)

ResultType = _TextEnum(
    "ResultType",
    [("PASS", "pass"), ("WARNING", "warning"), ("FAILED", "fail")],
    module=__name__,
)


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key} must be a string")
    return value


def _enum_or_str(enum_cls: Any, value: str) -> Any:
    try:
        return enum_cls(value) if value else ""
    except ValueError:
        return value


@dataclass
class EventData:
    """Fields that every event payload carries."""

    project: str = ""
    stage: str = ""
    service: str = ""
    labels: dict[str, str] | None = None
    status: StatusType | str = ""
    result: ResultType | str = ""
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the payload as JSON data, leaving out empty fields."""
        values = {
            "project": self.project,
            "stage": self.stage,
            "service": self.service,
            "labels": dict(self.labels) if self.labels else None,
            "status": str(self.status),
            "result": str(self.result),
            "message": self.message,
        }
        return {k: v for k, v in values.items() if v}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> EventData:
        """Build the payload from JSON data; unknown keys are ignored."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError("event data must be a mapping")
        return cls(**cls._base_fields(data))

    @staticmethod
    def _base_fields(data: Mapping[str, Any]) -> dict[str, Any]:
        labels = data.get("labels")
        if labels is not None:
            if not isinstance(labels, Mapping) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in labels.items()
            ):
                raise ValueError("labels must map strings to strings")
            labels = dict(labels)
        return {
            "project": _string(data, "project"),
            "stage": _string(data, "stage"),
            "service": _string(data, "service"),
            "labels": labels,
            "status": _enum_or_str(StatusType, _string(data, "status")),
            "result": _enum_or_str(ResultType, _string(data, "result")),
            "message": _string(data, "message"),
        }


def get_triggered_event_type(task: str) -> str:
    """Return the triggered event type of a task."""
    return KEPTN_EVENT_TYPE_PREFIX + task + KEPTN_TRIGGERED_EVENT_SUFFIX


def get_started_event_type(task: str) -> str:
    """Return the started event type of a task."""
    return KEPTN_EVENT_TYPE_PREFIX + task + KEPTN_STARTED_EVENT_SUFFIX


def get_status_changed_event_type(task: str) -> str:
    """Return the status.changed event type of a task."""
    return KEPTN_EVENT_TYPE_PREFIX + task + KEPTN_STATUS_CHANGED_EVENT_SUFFIX


def get_finished_event_type(task: str) -> str:
    """Return the finished event type of a task."""
    return KEPTN_EVENT_TYPE_PREFIX + task + KEPTN_FINISHED_EVENT_SUFFIX


def get_invalidated_event_type(task: str) -> str:
    """Return the invalidated event type of a task."""
    return KEPTN_EVENT_TYPE_PREFIX + task + KEPTN_INVALIDATED_EVENT_SUFFIX


def get_event_type_for_triggered_event(
    base_triggered_event_type: str, new_event_type_suffix: str
) -> str:
    """Swap the ``.triggered`` suffix of an event type for another suffix."""
    if not base_triggered_event_type.endswith(KEPTN_TRIGGERED_EVENT_SUFFIX):
        raise ValueError("provided baseTriggeredEventType is not a .triggered event type")
    trimmed = base_triggered_event_type[: -len(KEPTN_TRIGGERED_EVENT_SUFFIX)]
    return trimmed + new_event_type_suffix


def decode(data: Any, cls: type) -> Any:
    """Convert data to JSON and decode it into ``cls``."""
    plain = json.loads(_dump(data))
    from_dict = getattr(cls, "from_dict", None)
    if from_dict is not None:
        return from_dict(plain)
    if plain is None:
        return cls()
    if isinstance(plain, cls):
        return plain
    raise TypeError(f"cannot decode {type(plain).__name__} into {cls.__name__}")


def event_data_as(event: Any, cls: type) -> Any:
    """Decode the data of an event, given as a CloudEvent or a mapping, into ``cls``."""
    if isinstance(event, CloudEvent):
        return event.data_as(cls)
    if isinstance(event, Mapping):
        return decode(event.get("data"), cls)
    return decode(getattr(event, "data"), cls)