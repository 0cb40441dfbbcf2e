"""Shipyard specification, version 0.2.0."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml


def _mapping(value: Any) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected a mapping, got {type(value).__name__}")
    return value


def _sequence(value: Any) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"expected a sequence, got {type(value).__name__}")
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
class Metadata:
    """Metadata of a resource."""

    name: str = ""

    @classmethod
    def _from_mapping(cls, data: Any) -> Metadata:
        return cls(name=_as_str(_mapping(data).get("name")))

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class Selector:
    """Conditions that must hold for a trigger to fire."""

    match: dict[str, str] = field(default_factory=dict)

    @classmethod
    def _from_mapping(cls, data: Any) -> Selector:
        match = _mapping(_mapping(data).get("match"))
        return cls(match={_as_str(k): _as_str(v) for k, v in match.items()})

    def _to_dict(self) -> dict[str, Any]:
        return {"match": dict(self.match)}


@dataclass
class Trigger:
    """An event that activates a sequence."""

    event: str = ""
    selector: Selector = field(default_factory=Selector)

    @classmethod
    def _from_mapping(cls, data: Any) -> Trigger:
        data = _mapping(data)
        return cls(
            event=_as_str(data.get("event")),
            selector=Selector._from_mapping(data.get("selector")),
        )

    def _to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"event": self.event}
        if self.selector.match:
            result["selector"] = self.selector._to_dict()
        return result


@dataclass
class Task:
    """A task with its optional properties."""

    name: str = ""
    properties: Any = None

    @classmethod
    def _from_mapping(cls, data: Any) -> Task:
        data = _mapping(data)
        return cls(name=_as_str(data.get("name")), properties=data.get("properties"))

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "properties": self.properties}


@dataclass
class Sequence:
    """A named list of tasks, optionally started by triggers."""

    name: str = ""
    triggered_on: list[Trigger] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    @classmethod
    def _from_mapping(cls, data: Any) -> Sequence:
        data = _mapping(data)
        return cls(
            name=_as_str(data.get("name")),
            triggered_on=[Trigger._from_mapping(t) for t in _sequence(data.get("triggeredOn"))],
            tasks=[Task._from_mapping(t) for t in _sequence(data.get("tasks"))],
        )

    def _to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.triggered_on:
            result["triggeredOn"] = [t._to_dict() for t in self.triggered_on]
        result["tasks"] = [t._to_dict() for t in self.tasks]
        return result


@dataclass
class Stage:
    """A stage and its task sequences."""

    name: str = ""
    sequences: list[Sequence] = field(default_factory=list)

    @classmethod
    def _from_mapping(cls, data: Any) -> Stage:
        data = _mapping(data)
        return cls(
            name=_as_str(data.get("name")),
            sequences=[Sequence._from_mapping(s) for s in _sequence(data.get("sequences"))],
        )

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "sequences": [s._to_dict() for s in self.sequences]}


@dataclass
class ShipyardSpec:
    """The stages of a shipyard."""

    stages: list[Stage] = field(default_factory=list)

    @classmethod
    def _from_mapping(cls, data: Any) -> ShipyardSpec:
        return cls(stages=[Stage._from_mapping(s) for s in _sequence(_mapping(data).get("stages"))])

    def _to_dict(self) -> dict[str, Any]:
        return {"stages": [s._to_dict() for s in self.stages]}


@dataclass
class Shipyard:
    """A shipyard resource."""

    api_version: str = ""
    kind: str = ""
    metadata: Metadata = field(default_factory=Metadata)
    spec: ShipyardSpec = field(default_factory=ShipyardSpec)

    def to_dict(self) -> dict[str, Any]:
        """Return the shipyard as plain data with its YAML keys."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata._to_dict(),
            "spec": self.spec._to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Shipyard:
        """Build a shipyard from plain data; raise ValueError on malformed data."""
        data = _mapping(data)
        return cls(
            api_version=_as_str(data.get("apiVersion")),
            kind=_as_str(data.get("kind")),
            metadata=Metadata._from_mapping(data.get("metadata")),
            spec=ShipyardSpec._from_mapping(data.get("spec")),
        )


def decode_shipyard_yaml(shipyard_yaml: str | bytes) -> Shipyard:
    """Decode a shipyard from YAML; raise ValueError if it is not a valid shipyard."""
    if isinstance(shipyard_yaml, bytes):
        shipyard_yaml = shipyard_yaml.decode("utf-8")
    try:
        document = yaml.safe_load(shipyard_yaml)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid shipyard YAML: {exc}") from exc
    return Shipyard.from_dict(document)