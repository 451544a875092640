"""Error taxonomy for the probe.

Collaborator failures (fetch, output) are fatal unless a FetchError is marked
retryable. Derivation anomalies are never raised; they are recorded on the
sample instead (see ``container_probe.monitoring.deriver``).
"""

from __future__ import annotations


class ProbeError(Exception):
    """Base class for all probe errors."""


class ConfigurationError(ProbeError):
    """Invalid or missing configuration (e.g. no target container)."""


class FetchError(ProbeError):
    """Stats could not be fetched for a container.

    Attributes:
        container_id: The container the fetch was for
        retryable: True for transient runtime/network errors
    """

    def __init__(self, container_id: str, message: str, retryable: bool = False) -> None:
        super().__init__(f"{container_id}: {message}")
        self.container_id = container_id
        self.retryable = retryable


class ContainerNotFoundError(FetchError):
    """The container does not exist (or no longer exists)."""

    def __init__(self, container_id: str, message: str = "container not found") -> None:
        super().__init__(container_id, message, retryable=False)


class MalformedStatsError(FetchError):
    """The stats payload is missing required fields."""

    def __init__(self, container_id: str, message: str) -> None:
        super().__init__(container_id, message, retryable=False)


class OutputError(ProbeError):
    """The output destination could not be opened or written."""

    def __init__(self, destination: str, message: str) -> None:
        super().__init__(f"{destination}: {message}")
        self.destination = destination
