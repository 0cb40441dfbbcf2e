"""Remediation specification, version 0.1.4."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import yaml


def _expect(value: Any, kind: type) -> Any:
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise ValueError(f"expected {kind.__name__}, got {type(value).__name__}")
    return value


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ValueError(f"cannot use {value!r} as a string")
    return str(value)


@dataclass
class RemediationMetadata:
    """Metadata of a remediation resource."""

    name: str = ""


@dataclass
class RemediationActionsOnOpen:
    """An action run when a problem is opened."""

    name: str = ""
    action: str = ""
    description: str = ""
    value: Any = None


@dataclass
class RemediationMap:
    """The actions to run for one problem type."""

    problem_type: str = ""
    actions_on_open: list[RemediationActionsOnOpen] = field(default_factory=list)


@dataclass
class RemediationSpec:
    """The list of remediations."""

    remediations: list[RemediationMap] = field(default_factory=list)


def _action(data: Any) -> RemediationActionsOnOpen:
    data = _expect(data, dict)
    texts = {key: _as_str(data.get(key)) for key in ("name", "action", "description")}
    return RemediationActionsOnOpen(**texts, value=data.get("value"))


def _remediation_map(data: Any) -> RemediationMap:
    data = _expect(data, dict)
    return RemediationMap(
        _as_str(data.get("problemType")),
        [_action(a) for a in _expect(data.get("actionsOnOpen"), list)],
    )


@dataclass
class Remediation:
    """A remediation resource."""

    api_version: str = ""
    kind: str = ""
    metadata: RemediationMetadata = field(default_factory=RemediationMetadata)
    spec: RemediationSpec = field(default_factory=RemediationSpec)

    @classmethod
    def from_yaml(cls, text: str | bytes) -> Remediation:
        """Decode a remediation resource from YAML."""
        data = _expect(yaml.safe_load(text), dict)
        spec = _expect(data.get("spec"), dict)
        return cls(
            api_version=_as_str(data.get("apiVersion")),
            kind=_as_str(data.get("kind")),
            metadata=RemediationMetadata(_as_str(_expect(data.get("metadata"), dict).get("name"))),
            spec=RemediationSpec(
                [_remediation_map(r) for r in _expect(spec.get("remediations"), list)]
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the resource as plain data with its YAML keys."""
        remediations = [
            {"problemType": r.problem_type, "actionsOnOpen": [asdict(a) for a in r.actions_on_open]}
            for r in self.spec.remediations
        ]
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {"name": self.metadata.name},
            "spec": {"remediations": remediations},
        }