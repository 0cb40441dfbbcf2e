"""Payloads of the task events: action, approval, deployment, evaluation and more."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from keptnkit.eventdata import EventData

ACTION_TASK_NAME = "action"
APPROVAL_TASK_NAME = "approval"
CONFIGURE_MONITORING_TASK_NAME = "configure-monitoring"
DEPLOYMENT_TASK_NAME = "deployment"
EVALUATION_TASK_NAME = "evaluation"
GET_SLI_TASK_NAME = "get-sli"
PROJECT_CREATE_TASK_NAME = "project.create"
PROJECT_DELETE_TASK_NAME = "project.delete"
RELEASE_TASK_NAME = "release"
REMEDIATION_TASK_NAME = "remediation"
ROLLBACK_TASK_NAME = "rollback"
SERVICE_CREATE_TASK_NAME = "service.create"
SERVICE_DELETE_TASK_NAME = "service.delete"
TEST_TASK_NAME = "test"

APPROVAL_AUTOMATIC = "automatic"
APPROVAL_MANUAL = "manual"


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict, tuple, bool, int, float)):
        return not value
    return False


@dataclass(frozen=True)
class _Kind:
    decode: Callable[[Any], Any]
    zero: Callable[[], Any]
    empty: Callable[[Any], bool] = _is_empty


@dataclass(frozen=True)
class _Spec:
    key: str
    kind: _Kind
    omitempty: bool


def _json(key: str, kind: _Kind, *, omitempty: bool = False) -> Any:
    return field(default_factory=kind.zero, metadata={"json": _Spec(key, kind, omitempty)})


def _decode_str(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {type(value).__name__}")
    return value


def _decode_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {type(value).__name__}")
    return float(value)


def _decode_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {type(value).__name__}")
    return value


def _decode_bool(value: Any) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {type(value).__name__}")
    return value


def _decode_str_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {type(value).__name__}")
    return [_decode_str(item) for item in value]


def _decode_any_map(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"expected a mapping, got {type(value).__name__}")
    return dict(value)


_STR = _Kind(_decode_str, str)
_FLOAT = _Kind(_decode_float, float)
_INT = _Kind(_decode_int, int)
_BOOL = _Kind(_decode_bool, bool)
_ANY = _Kind(lambda value: value, lambda: None, lambda value: value is None)
_STR_LIST = _Kind(_decode_str_list, lambda: None)
_ANY_MAP = _Kind(_decode_any_map, lambda: None)


def _obj(cls: type) -> _Kind:
    """A nested object that is always present."""
    return _Kind(lambda value: cls() if value is None else cls.from_dict(value), cls)


def _ptr(cls: type) -> _Kind:
    """A nested object that may be absent."""
    return _Kind(lambda value: None if value is None else cls.from_dict(value), lambda: None)


def _ptr_list(cls: type) -> _Kind:
    """A list of nested objects whose entries may be absent."""

    def decode(value: Any) -> list | None:
        if value is None:
            return None
        if not isinstance(value, list):
            raise ValueError(f"expected a list, got {type(value).__name__}")
        return [None if item is None else cls.from_dict(item) for item in value]

    return _Kind(decode, lambda: None)


def _encode(value: Any) -> Any:
    if isinstance(value, _JsonObject):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _encode(item) for key, item in value.items()}
    return value


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a mapping, got {type(data).__name__}")
    return data


def _encode_fields(obj: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for item in fields(obj):
        spec = item.metadata.get("json")
        if spec is None:
            continue
        value = getattr(obj, item.name)
        if spec.omitempty and spec.kind.empty(value):
            continue
        result[spec.key] = _encode(value)
    return result


def _decode_fields(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for item in fields(cls):
        spec = item.metadata.get("json")
        if spec is None or spec.key not in data:
            continue
        try:
            kwargs[item.name] = spec.kind.decode(data[spec.key])
        except ValueError as exc:
            raise ValueError(f"field {spec.key}: {exc}") from exc
    return kwargs


class _JsonObject:
    """Conversion between a dataclass and its JSON data."""

    def to_dict(self) -> dict[str, Any]:
        """Return the object as JSON data."""
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        """Build the object from JSON data; unknown keys are ignored."""
        return cls(**_decode_fields(cls, _require_mapping(data)))


class _TaskEventData(_JsonObject, EventData):
    """Event data with task specific fields after the common ones."""

    def to_dict(self) -> dict[str, Any]:
        result = EventData.to_dict(self)
        result.update(_encode_fields(self))
        return result

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        data = _require_mapping(data)
        return cls(**cls._base_fields(data), **_decode_fields(cls, data))


# Problem


@dataclass
class ProblemDetails(_JsonObject):
    """Information about a problem."""

    state: str = _json("State", _STR)
    problem_id: str = _json("ProblemID", _STR)
    problem_title: str = _json("ProblemTitle", _STR)
    problem_details: Any = _json("ProblemDetails", _ANY)
    pid: str = _json("PID", _STR)
    problem_url: str = _json("ProblemURL", _STR, omitempty=True)
    impacted_entity: str = _json("ImpactedEntity", _STR, omitempty=True)
    tags: str = _json("Tags", _STR, omitempty=True)


# Action


@dataclass
class ActionInfo(_JsonObject):
    """The action to be performed."""

    name: str = _json("name", _STR)
    action: str = _json("action", _STR)
    description: str = _json("description", _STR, omitempty=True)
    value: Any = _json("value", _ANY, omitempty=True)


@dataclass
class ActionData(_JsonObject):
    """Result of an executed action."""

    git_commit: str = _json("gitCommit", _STR, omitempty=True)


@dataclass
class ActionTriggeredEventData(_TaskEventData):
    """Data of an action.triggered event."""

    action: ActionInfo = _json("action", _obj(ActionInfo))
    problem: ProblemDetails = _json("problem", _obj(ProblemDetails))


@dataclass
class ActionStartedEventData(_TaskEventData):
    """Data of an action.started event."""


@dataclass
class ActionFinishedEventData(_TaskEventData):
    """Data of an action.finished event."""

    action: ActionData = _json("action", _obj(ActionData))


# Approval


@dataclass
class Approval(_JsonObject):
    """Approval strategies for passed and warning results."""

    pass_strategy: str = _json("pass", _STR)
    warning: str = _json("warning", _STR)


@dataclass
class ApprovalTriggeredEventData(_TaskEventData):
    """Data of an approval.triggered event."""

    approval: Approval = _json("approval", _obj(Approval))


@dataclass
class ApprovalStartedEventData(_TaskEventData):
    """Data of an approval.started event."""


@dataclass
class ApprovalStatusChangedEventData(_TaskEventData):
    """Data of an approval.status.changed event."""


@dataclass
class ApprovalFinishedEventData(_TaskEventData):
    """Data of an approval.finished event."""


# Configuration change and monitoring


@dataclass
class ConfigurationChange(_JsonObject):
    """Values to change in the configuration."""

    values: dict[str, Any] | None = _json("values", _ANY_MAP)


@dataclass
class ConfigureMonitoringTriggeredParams(_JsonObject):
    """The kind of monitoring to configure."""

    type: str = _json("type", _STR)


@dataclass
class ConfigureMonitoringTriggeredEventData(_TaskEventData):
    """Data of a configure-monitoring.triggered event."""

    configure_monitoring: ConfigureMonitoringTriggeredParams = _json(
        "configureMonitoring", _obj(ConfigureMonitoringTriggeredParams)
    )


@dataclass
class ConfigureMonitoringStartedEventData(_TaskEventData):
    """Data of a configure-monitoring.started event."""


@dataclass
class ConfigureMonitoringFinishedEventData(_TaskEventData):
    """Data of a configure-monitoring.finished event."""


# Deployment


@dataclass
class DeploymentTriggeredData(_JsonObject):
    """Deployment details of a deployment.triggered event."""

    deployment_uris_local: list[str] | None = _json("deploymentURIsLocal", _STR_LIST)
    deployment_uris_public: list[str] | None = _json(
        "deploymentURIsPublic", _STR_LIST, omitempty=True
    )
    deployment_strategy: str = _json("deploymentstrategy", _STR)


@dataclass
class DeploymentTriggeredEventData(_TaskEventData):
    """Data of a deployment.triggered event."""

    configuration_change: ConfigurationChange = _json(
        "configurationChange", _obj(ConfigurationChange)
    )
    deployment: DeploymentTriggeredData = _json("deployment", _obj(DeploymentTriggeredData))


@dataclass
class DeploymentStartedEventData(_TaskEventData):
    """Data of a deployment.started event."""


@dataclass
class DeploymentStatusChangedEventData(_TaskEventData):
    """Data of a deployment.status.changed event."""


@dataclass
class DeploymentFinishedData(_JsonObject):
    """Deployment details of a deployment.finished event."""

    deployment_strategy: str = _json("deploymentstrategy", _STR)
    deployment_uris_local: list[str] | None = _json("deploymentURIsLocal", _STR_LIST)
    deployment_uris_public: list[str] | None = _json(
        "deploymentURIsPublic", _STR_LIST, omitempty=True
    )
    deployment_names: list[str] | None = _json("deploymentNames", _STR_LIST)
    git_commit: str = _json("gitCommit", _STR)


@dataclass
class DeploymentFinishedEventData(_TaskEventData):
    """Data of a deployment.finished event."""

    deployment: DeploymentFinishedData = _json("deployment", _obj(DeploymentFinishedData))


# Evaluation


@dataclass
class Test(_JsonObject):
    """Time frame of the tests."""

    start: str = _json("start", _STR)
    end: str = _json("end", _STR)


@dataclass
class Evaluation(_JsonObject):
    """Time frame of the evaluation."""

    start: str = _json("start", _STR)
    end: str = _json("end", _STR)


@dataclass
class Deployment(_JsonObject):
    """Names of the evaluated deployments."""

    deployment_names: list[str] | None = _json("deploymentNames", _STR_LIST)


@dataclass
class EvaluationTriggeredEventData(_TaskEventData):
    """Data of an evaluation.triggered event."""

    test: Test = _json("test", _obj(Test))
    evaluation: Evaluation = _json("evaluation", _obj(Evaluation))
    deployment: Deployment = _json("deployment", _obj(Deployment))


@dataclass
class EvaluationStartedEventData(_TaskEventData):
    """Data of an evaluation.started event."""


@dataclass
class EvaluationStatusChangedEventData(_TaskEventData):
    """Data of an evaluation.status.changed event."""


@dataclass
class SLIResult(_JsonObject):
    """A fetched SLI value."""

    metric: str = _json("metric", _STR)
    value: float = _json("value", _FLOAT)
    success: bool = _json("success", _BOOL)
    message: str = _json("message", _STR, omitempty=True)


@dataclass
class SLITarget(_JsonObject):
    """A criterion and whether it was violated."""

    criteria: str = _json("criteria", _STR)
    target_value: float = _json("targetValue", _FLOAT)
    violated: bool = _json("violated", _BOOL)


@dataclass
class SLIEvaluationResult(_JsonObject):
    """The evaluation of a single SLI."""

    score: float = _json("score", _FLOAT)
    value: SLIResult | None = _json("value", _ptr(SLIResult))
    display_name: str = _json("displayName", _STR)
    pass_targets: list[SLITarget | None] | None = _json("passTargets", _ptr_list(SLITarget))
    warning_targets: list[SLITarget | None] | None = _json(
        "warningTargets", _ptr_list(SLITarget)
    )
    key_sli: bool = _json("keySli", _BOOL)
    status: str = _json("status", _STR)


@dataclass
class EvaluationDetails(_JsonObject):
    """The outcome of an evaluation."""

    time_start: str = _json("timeStart", _STR)
    time_end: str = _json("timeEnd", _STR)
    result: str = _json("result", _STR)
    score: float = _json("score", _FLOAT)
    slo_file_content: str = _json("sloFileContent", _STR)
    indicator_results: list[SLIEvaluationResult | None] | None = _json(
        "indicatorResults", _ptr_list(SLIEvaluationResult)
    )
    compared_events: list[str] | None = _json("comparedEvents", _STR_LIST, omitempty=True)
    git_commit: str = _json("gitCommit", _STR)


@dataclass
class EvaluationFinishedEventData(_TaskEventData):
    """Data of an evaluation.finished event."""

    evaluation: EvaluationDetails = _json(
        "evaluation", _obj(EvaluationDetails), omitempty=True
    )


# Get SLI


@dataclass
class SLIFilter(_JsonObject):
    """A filter applied to the SLIs."""

    key: str = _json("key", _STR)
    value: str = _json("value", _STR)


@dataclass
class GetSLI(_JsonObject):
    """What SLIs to fetch and from where."""

    sli_provider: str = _json("sliProvider", _STR)
    start: str = _json("start", _STR)
    end: str = _json("end", _STR)
    indicators: list[str] | None = _json("indicators", _STR_LIST, omitempty=True)
    custom_filters: list[SLIFilter | None] | None = _json(
        "customFilters", _ptr_list(SLIFilter), omitempty=True
    )


@dataclass
class GetSLITriggeredEventData(_TaskEventData):
    """Data of a get-sli.triggered event."""

    get_sli: GetSLI = _json("get-sli", _obj(GetSLI))
    deployment: str = _json("deployment", _STR)


@dataclass
class GetSLIStartedEventData(_TaskEventData):
    """Data of a get-sli.started event."""


@dataclass
class GetSLIFinished(_JsonObject):
    """The fetched SLI values."""

    start: str = _json("start", _STR)
    end: str = _json("end", _STR)
    indicator_values: list[SLIResult | None] | None = _json(
        "indicatorValues", _ptr_list(SLIResult), omitempty=True
    )


@dataclass
class GetSLIFinishedEventData(_TaskEventData):
    """Data of a get-sli.finished event."""

    get_sli: GetSLIFinished = _json("get-sli", _obj(GetSLIFinished))


# Projects


@dataclass
class ProjectCreateData(_JsonObject):
    """A project to create."""

    project_name: str = _json("projectName", _STR)
    git_remote_url: str = _json("gitRemoteURL", _STR, omitempty=True)
    shipyard: str = _json("shipyard", _STR)


@dataclass
class ProjectCreateStartedEventData(_TaskEventData):
    """Data of a project.create.started event."""


@dataclass
class ProjectCreateFinishedEventData(_TaskEventData):
    """Data of a project.create.finished event."""

    created_project: ProjectCreateData = _json("createdProject", _obj(ProjectCreateData))


@dataclass
class ProjectDeleteData(_JsonObject):
    """Details of a project deletion; carries no fields."""


@dataclass
class ProjectDeleteStartedEventData(_TaskEventData):
    """Data of a project.delete.started event."""


@dataclass
class ProjectDeleteFinishedEventData(_TaskEventData):
    """Data of a project.delete.finished event."""


# Release


@dataclass
class ReleaseData(_JsonObject):
    """The released version."""

    git_commit: str = _json("gitCommit", _STR)


@dataclass
class ReleaseTriggeredEventData(_TaskEventData):
    """Data of a release.triggered event."""

    deployment: DeploymentFinishedData = _json("deployment", _obj(DeploymentFinishedData))


@dataclass
class ReleaseStartedEventData(_TaskEventData):
    """Data of a release.started event."""


@dataclass
class ReleaseStatusChangedEventData(_TaskEventData):
    """Data of a release.status.changed event."""


@dataclass
class ReleaseFinishedEventData(_TaskEventData):
    """Data of a release.finished event."""

    release: ReleaseData = _json("release", _obj(ReleaseData))


# Remediation


@dataclass
class Remediation(_JsonObject):
    """The action a remediation is at."""

    action_index: int = _json("actionIndex", _INT)
    action_name: str = _json("actionName", _STR)


@dataclass
class RemediationTriggeredEventData(_TaskEventData):
    """Data of a remediation.triggered event."""

    problem: ProblemDetails = _json("problem", _obj(ProblemDetails))


@dataclass
class RemediationStartedEventData(_TaskEventData):
    """Data of a remediation.started event."""


@dataclass
class RemediationStatusChangedEventData(_TaskEventData):
    """Data of a remediation.status.changed event."""

    remediation: Remediation = _json("remediation", _obj(Remediation))


@dataclass
class RemediationFinishedEventData(_TaskEventData):
    """Data of a remediation.finished event."""


# Rollback


@dataclass
class RollbackData(_JsonObject):
    """Details of a rollback; carries no fields."""


@dataclass
class RollbackTriggeredEventData(_TaskEventData):
    """Data of a rollback.triggered event."""


@dataclass
class RollbackStartedEventData(_TaskEventData):
    """Data of a rollback.started event."""


@dataclass
class RollbackFinishedEventData(_TaskEventData):
    """Data of a rollback.finished event."""


# Services


@dataclass
class Helm(_JsonObject):
    """A Helm chart."""

    chart: str = _json("chart", _STR)


@dataclass
class ServiceCreateStartedEventData(_TaskEventData):
    """Data of a service.create.started event."""


@dataclass
class ServiceCreateStatusChangedEventData(_TaskEventData):
    """Data of a service.create.status.changed event."""


@dataclass
class ServiceCreateFinishedEventData(_TaskEventData):
    """Data of a service.create.finished event."""


@dataclass
class ServiceDeleteStartedEventData(_TaskEventData):
    """Data of a service.delete.started event."""


@dataclass
class ServiceDeleteStatusChangedEventData(_TaskEventData):
    """Data of a service.delete.status.changed event."""


@dataclass
class ServiceDeleteFinishedEventData(_TaskEventData):
    """Data of a service.delete.finished event."""


# Test


@dataclass
class TestTriggeredDetails(_JsonObject):
    """The test strategy to run."""

    test_strategy: str = _json("teststrategy", _STR)


@dataclass
class TestTriggeredDeploymentDetails(_JsonObject):
    """Where the deployment under test is reachable."""

    deployment_uris_local: list[str] | None = _json("deploymentURIsLocal", _STR_LIST)
    deployment_uris_public: list[str] | None = _json(
        "deploymentURIsPublic", _STR_LIST, omitempty=True
    )


@dataclass
class TestTriggeredEventData(_TaskEventData):
    """Data of a test.triggered event."""

    test: TestTriggeredDetails = _json("test", _obj(TestTriggeredDetails))
    deployment: TestTriggeredDeploymentDetails = _json(
        "deployment", _obj(TestTriggeredDeploymentDetails)
    )


@dataclass
class TestStartedEventData(_TaskEventData):
    """Data of a test.started event."""


@dataclass
class TestStatusChangedEventData(_TaskEventData):
    """Data of a test.status.changed event."""


@dataclass
class TestFinishedDetails(_JsonObject):
    """Time frame and version of the finished tests."""

    start: str = _json("start", _STR)
    end: str = _json("end", _STR)
    git_commit: str = _json("gitCommit", _STR)


@dataclass
class TestFinishedEventData(_TaskEventData):
    """Data of a test.finished event."""

    test: TestFinishedDetails = _json("test", _obj(TestFinishedDetails))