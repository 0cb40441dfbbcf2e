"""Building blocks for Keptn services: CloudEvents, task payloads, an HTTP sender, specs and utilities."""

__version__ = "0.1.0"