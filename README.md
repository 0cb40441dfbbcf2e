# keptnkit

keptnkit is a library for writing services that take part in Keptn task
sequences. It contains the following modules:

- `keptnkit.cloudevent`: `CloudEvent`, a CloudEvents 1.0 event. It has extension attributes and JSON or text data. It converts to and from the structured JSON format with `to_dict`, `from_dict` and `to_json`.
- `keptnkit.eventdata`: the common payload `EventData` and the enums `StatusType` and `ResultType`.
  - It builds event type names with `get_triggered_event_type`, `get_started_event_type`, `get_status_changed_event_type`, `get_finished_event_type` and `get_invalidated_event_type`.
  - `get_event_type_for_triggered_event` swaps the `.triggered` suffix of a type for another suffix.
  - `decode` and `event_data_as` turn event data into typed payloads.
- `keptnkit.tasks`: payload dataclasses for each task. The tasks are action, approval, configure-monitoring, deployment, evaluation, get-sli, project create and delete, release, remediation, rollback, service create and delete, and test. Each payload has `to_dict` and `from_dict`.
- `keptnkit.sender`: `HTTPEventSender`, which posts events in structured mode. A failed attempt is retried up to three times with randomised back-off. When every attempt fails it raises `SendError`.
- `keptnkit.shipyard`: the 0.2.0 shipyard spec. Use `decode_shipyard_yaml`, `Shipyard.from_dict` and `Shipyard.to_dict`.
- `keptnkit.remediation_v014`: the 0.1.4 remediation spec. Use `Remediation.from_yaml` and `Remediation.to_dict`.
- `keptnkit.datastore`: `EventHandler.get_event`, which returns the latest event of a type in a Keptn context. It raises `DatastoreError` when no event is found or the request fails. TLS certificates are not verified.
- `keptnkit.base`: the following helpers.
  - `KeptnBase` holds the state of a handler.
  - `get_sli_configuration` merges SLIs from project, stage and service level.
  - `get_keptn_resource` fetches a resource for the event's project, stage and service.
  - `validate_keptn_entity_name` and `validate_unix_directory_name` check names.
  - `get_service_endpoint` reads an endpoint from an environment variable, defaulting to `http`.
  - `get_exp_backoff_time` returns a back-off time in seconds.
- `keptnkit.strategies`: the enums `ApprovalStrategy`, `CanaryAction` and `DeploymentStrategy`, and `get_deployment_strategy`.
- `keptnkit.logger`: `Logger`, which prints JSON log lines with a timestamp and a level.
- `keptnkit.fileutils`: `read_file`, `read_file_as_str`, `file_exists`, `expand_tilde` and `user_home_dir`.
- `keptnkit.httputils`: `Downloader`, `download_from_url` and `is_valid_url`.
- `keptnkit.cmdutils`: `execute_command` and `execute_command_in_directory`. Both raise `CommandError` when a command fails.

## Installation

```
pip install keptnkit
```

## Example

```python
from keptnkit.cloudevent import CloudEvent
from keptnkit.eventdata import (
    EventData,
    ResultType,
    get_event_type_for_triggered_event,
    get_triggered_event_type,
)
from keptnkit.sender import HTTPEventSender, SendError

incoming = CloudEvent(
    id="my-triggered-id",
    source="my-service",
    type=get_triggered_event_type("evaluation"),
)
incoming.set_extension("shkeptncontext", "my-context")
incoming.set_data("application/json", EventData(project="my-project", stage="dev", service="carts"))

context = incoming.data_as(EventData)

finished = CloudEvent(
    source="my-service",
    type=get_event_type_for_triggered_event(incoming.type, ".finished"),
)
finished.set_extension("shkeptncontext", incoming.get_extension("shkeptncontext"))
finished.set_extension("triggeredid", incoming.id)
finished.set_data(
    "application/json",
    EventData(
        project=context.project,
        stage=context.stage,
        service=context.service,
        result=ResultType.PASS,
    ),
)

try:
    HTTPEventSender("http://localhost:8081/event").send_event(finished)
except SendError as exc:
    print(exc)
```

Reading a shipyard:

```python
from keptnkit.shipyard import decode_shipyard_yaml

shipyard = decode_shipyard_yaml(open("shipyard.yaml").read())
for stage in shipyard.spec.stages:
    print(stage.name, [sequence.name for sequence in stage.sequences])
```

## What the package does not do

- There is no ready-made handler that takes an incoming `.triggered` event and sends the matching `.started`, `.status.changed` and `.finished` events for you. Build those events yourself with `CloudEvent` and the helpers in `keptnkit.eventdata`, as in the example above.
- There is no in-memory event sender for tests. Any object with a `send_event(event)` method can stand in where an `EventSender` is expected.
- There is no client for the configuration service. `KeptnBase.get_sli_configuration` and `KeptnBase.get_keptn_resource` expect you to supply an object that follows the `ResourceHandler` protocol in `keptnkit.base`.
- Only the 0.2.0 shipyard and the 0.1.4 remediation spec are modelled. There are no types for SLO files or for the older shipyard and remediation layouts.

## Running the tests

```
pip install -e ".[test]"
pytest
```