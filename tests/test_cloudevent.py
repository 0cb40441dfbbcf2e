import json
from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from keptnkit.cloudevent import CloudEvent


@dataclass
class _Payload:
    project: str = ""
    stage: str = ""

    def to_dict(self):
        return {"project": self.project, "stage": self.stage}

    @classmethod
    def from_dict(cls, data):
        return cls(project=data.get("project", ""), stage=data.get("stage", ""))


def _sample_event():
    event = CloudEvent(
        id="8039eac3-9fb2-454f-8b2e-77f8310a81f1",
        source="https://test-source",
        type="sh.keptn.events.test",
        time=datetime(2019, 10, 21, 14, 12, 48, 123000, tzinfo=timezone.utc),
    )
    event.set_extension("shkeptncontext", "test-context")
    event.set_data("application/json", {"project": "sockshop"})
    return event


def test_set_data_json_round_trip():
    event = CloudEvent()
    event.set_data("application/json", {"project": "sockshop"})
    assert event.data_as(dict) == {"project": "sockshop"}
    assert event.data_content_type == "application/json"


def test_set_data_object_with_to_dict():
    event = CloudEvent()
    payload = _Payload(project="my-project", stage="my-stage")
    event.set_data("application/json", payload)
    assert event.data_as(_Payload) == payload


def test_set_data_bytes_are_kept():
    event = CloudEvent()
    event.set_data("application/octet-stream", b"\x00\x01raw")
    assert event.data == b"\x00\x01raw"


def test_set_data_unknown_content_type_raises():
    event = CloudEvent()
    with pytest.raises(ValueError):
        event.set_data("application/xml", {"a": "b"})


def test_text_plain_data():
    event = CloudEvent()
    event.set_data("text/plain", "hello")
    assert event.data_as(str) == "hello"


def test_data_as_without_data_gives_defaults():
    event = CloudEvent()
    assert event.data_as(dict) == {}
    assert event.data_as(_Payload) == _Payload()


def test_extension_set_and_get_ignore_case():
    event = CloudEvent()
    event.set_extension("ShKeptnContext", "my-context")
    assert event.get_extension("shkeptncontext") == "my-context"
    assert event.get_extension("SHKEPTNCONTEXT") == "my-context"


@pytest.mark.parametrize("name", ["", "my-ext", "with space", "id", "data"])
def test_invalid_extension_names(name):
    event = CloudEvent()
    with pytest.raises(ValueError):
        event.set_extension(name, "value")


def test_missing_extension_raises_key_error():
    with pytest.raises(KeyError):
        CloudEvent().get_extension("triggeredid")


def test_set_extension_none_removes_it():
    event = CloudEvent()
    event.set_extension("triggeredid", "my-triggered-id")
    event.set_extension("triggeredid", None)
    with pytest.raises(KeyError):
        event.get_extension("triggeredid")


def test_dict_round_trip():
    event = _sample_event()
    assert CloudEvent.from_dict(event.to_dict()) == event


def test_to_dict_structured_layout():
    result = _sample_event().to_dict()
    assert result["specversion"] == "1.0"
    assert result["id"] == "8039eac3-9fb2-454f-8b2e-77f8310a81f1"
    assert result["shkeptncontext"] == "test-context"
    assert result["data"] == {"project": "sockshop"}
    assert "data_base64" not in result


def test_binary_data_round_trip():
    event = CloudEvent(id="1", source="s", type="t")
    event.set_data("application/octet-stream", b"\xffbinary")
    result = event.to_dict()
    assert "data" not in result
    assert CloudEvent.from_dict(result).data == b"\xffbinary"


def test_from_dict_parses_time():
    event = CloudEvent.from_dict(
        {"id": "1", "source": "s", "type": "t", "time": "2019-10-21T14:12:48.000Z"}
    )
    assert event.time == datetime(2019, 10, 21, 14, 12, 48, tzinfo=timezone.utc)


def test_from_dict_rejects_bad_time():
    with pytest.raises(ValueError):
        CloudEvent.from_dict({"id": "1", "time": "yesterday"})


def test_to_json_matches_to_dict():
    event = _sample_event()
    assert json.loads(event.to_json()) == event.to_dict()