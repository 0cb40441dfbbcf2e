"""Shared state and helpers for services that handle Keptn events."""

from __future__ import annotations

import os
import random
import re
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import SplitResult, urlsplit

import yaml

from keptnkit.datastore import EventHandler
from keptnkit.logger import Logger

CONFIGURATION_SERVICE_URL = "configuration-service:8080"
DATASTORE_URL = "mongodb-datastore:8080"
DEFAULT_LOGGING_SERVICE_NAME = "keptn"

_ENTITY_NAME = re.compile(r"(^[a-z][a-z0-9-]*[a-z0-9]\Z)|(^[a-z][a-z0-9]*)")
_FORBIDDEN_DIR_CHARS = ("/", ">", "<", "|", ":", "&")


class EventProperties(Protocol):
    """Event data carrying the context of a task sequence."""

    project: str
    stage: str
    service: str
    labels: dict[str, str] | None


class EventSender(Protocol):
    """Something that can send a CloudEvent."""

    def send_event(self, event: Any) -> None: ...


class ResourceHandler(Protocol):
    """Reads resources from the configuration service.

    Each method returns the resource content and raises on failure.
    """

    def get_project_resource(self, project: str, resource_uri: str) -> str: ...

    def get_stage_resource(self, project: str, stage: str, resource_uri: str) -> str: ...

    def get_service_resource(
        self, project: str, stage: str, service: str, resource_uri: str
    ) -> str: ...


@dataclass
class LoggingOpts:
    """Logging options of a handler."""

    enable_websocket: bool = False
    websocket_endpoint: str | None = None
    service_name: str | None = None


@dataclass
class KeptnOpts:
    """Options used to set up a handler."""

    use_local_file_system: bool = False
    configuration_service_url: str = ""
    event_broker_url: str = ""
    datastore_url: str = ""
    incoming_event: Any = None
    logging_options: LoggingOpts | None = None
    event_sender: EventSender | None = None


def _is_not_found(exc: Exception) -> bool:
    return "resource not found" in str(exc).lower()


def _yaml_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ValueError(f"cannot use {value!r} as a string")
    return str(value)


def add_resource_content_to_sli_map(
    slis: dict[str, str], resource_content: str | None
) -> dict[str, str]:
    """Merge the indicators of an SLI file into the map and return it."""
    if resource_content is None:
        return slis
    document = yaml.safe_load(resource_content) or {}
    if not isinstance(document, dict):
        raise ValueError("SLI configuration must be a mapping")
    indicators = document.get("indicators") or {}
    if not isinstance(indicators, dict):
        raise ValueError("SLI indicators must be a mapping")
    slis.update((_yaml_str(key), _yaml_str(value)) for key, value in indicators.items())
    return slis


@dataclass
class KeptnBase:
    """State shared by handlers of incoming events."""

    keptn_context: str = ""
    event: EventProperties | None = None
    cloud_event: Any = None
    logger: Logger | None = None
    event_sender: EventSender | None = None
    event_broker_url: str = ""
    use_local_file_system: bool = False
    resource_handler: ResourceHandler | None = None
    event_handler: EventHandler | None = None

    def get_sli_configuration(
        self, project: str, stage: str, service: str, resource_uri: str
    ) -> dict[str, str]:
        """Collect SLIs from project, stage and service level, later levels winning."""
        slis: dict[str, str] = {}
        lookups = []
        if project:
            lookups.append(lambda: self.resource_handler.get_project_resource(project, resource_uri))
            if stage:
                lookups.append(
                    lambda: self.resource_handler.get_stage_resource(project, stage, resource_uri)
                )
                if service:
                    lookups.append(
                        lambda: self.resource_handler.get_service_resource(
                            project, stage, service, resource_uri
                        )
                    )
        for lookup in lookups:
            try:
                content = lookup()
            except Exception as exc:
                if not _is_not_found(exc):
                    raise
                content = None
            add_resource_content_to_sli_map(slis, content)
        return slis

    def get_keptn_resource(self, resource: str) -> bytes:
        """Fetch a resource for the project, stage and service of the current event.

        In local mode the file is only checked for existence and its path is returned.
        """
        if self.use_local_file_system:
            os.stat(resource)
            return resource.encode()

        error: Exception | None = None
        content = ""
        try:
            content = self.resource_handler.get_service_resource(
                self.event.project, self.event.stage, self.event.service, resource
            )
        except Exception as exc:
            error = exc
        if error is not None or not content:
            raise LookupError(f"resource not found: {resource} - {error}")
        return content.encode()


def validate_keptn_entity_name(name: str) -> bool:
    """Tell whether the name is a valid project, stage or service name."""
    if not name:
        return False
    match = _ENTITY_NAME.search(name)
    return match is not None and len(match.group(0)) == len(name)


def validate_unix_directory_name(dir_name: str) -> bool:
    """Tell whether the name is usable as a directory name."""
    if dir_name in (".", ".."):
        return False
    return not any(char in dir_name for char in _FORBIDDEN_DIR_CHARS)


def get_service_endpoint(service: str) -> SplitResult:
    """Read an endpoint from the named environment variable, defaulting to http."""
    value = os.environ.get(service, "")
    if not value:
        raise ValueError(f"Provided environment variable {service} has no valid value")
    try:
        url = urlsplit(value)
    except ValueError as exc:
        raise ValueError(
            f"Failed to retrieve value from ENVIRONMENT_VARIABLE: {service}"
        ) from exc
    if not url.scheme:
        url = url._replace(scheme="http")
    if not url.netloc and url.path:
        url = url._replace(netloc=url.path, path="")
    return url


def get_exp_backoff_time(retry_nr: int) -> float:
    """Return a randomised back-off time in seconds for the given retry."""
    factor = 1.5 if retry_nr <= 1 else 1.5 * retry_nr
    current_ns = 500_000_000 * factor
    delta = 0.5 * current_ns
    min_ns = current_ns - delta
    max_ns = current_ns + delta
    duration_ns = int(min_ns + random.random() * (max_ns - min_ns + 1))
    return duration_ns / 1e9