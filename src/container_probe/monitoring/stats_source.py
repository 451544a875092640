"""DockerStatsSource - BaseStatsSource implementation using the Docker stats API.

Takes one non-streaming stats reading per call and classifies failures into
retryable (daemon/network trouble) and fatal (container gone, bad payload).
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import docker
from docker.errors import DockerException, NotFound
from requests.exceptions import RequestException

from container_probe.core.errors import ContainerNotFoundError, FetchError, MalformedStatsError
from container_probe.monitoring.base import BaseStatsSource, RawSnapshot

if TYPE_CHECKING:
    import docker.models.containers

logger = logging.getLogger(__name__)


def parse_stats(container_id: str, stats: dict[str, Any]) -> tuple[int, int, int]:
    """Extract (cpu_total_usage_ns, memory_usage_bytes, memory_limit_bytes).

    Raises:
        MalformedStatsError: If a required field is missing or not an integer
    """
    try:
        cpu_total = stats["cpu_stats"]["cpu_usage"]["total_usage"]
        memory_stats = stats["memory_stats"]
        memory_usage = memory_stats["usage"]
        # Docker omits the limit when none is reported
        memory_limit = memory_stats.get("limit", 0)
    except (KeyError, TypeError) as e:
        raise MalformedStatsError(container_id, f"missing stats field {e}") from e

    values = (cpu_total, memory_usage, memory_limit)
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        raise MalformedStatsError(container_id, f"non-integer stats values: {values}")
    return values


class DockerStatsSource(BaseStatsSource):
    """Fetches raw stats snapshots for one container from the Docker daemon.

    Example:
        ```python
        source = DockerStatsSource("my-container")
        snapshot = source.fetch()
        print(snapshot.cpu_total_usage_ns)
        source.close()
        ```
    """

    def __init__(self, container_id: str, client: docker.DockerClient | None = None) -> None:
        """Initialize the stats source.

        Args:
            container_id: Docker container name or ID (short or full)
            client: Docker client to use; created from the environment if None
        """
        self._container_id = container_id
        self._client = client
        self._owns_client = client is None
        self._container: docker.models.containers.Container | None = None

    @property
    def container_id(self) -> str:
        return self._container_id

    def _get_container(self) -> docker.models.containers.Container:
        if self._container is not None:
            return self._container

        try:
            if self._client is None:
                self._client = docker.from_env()
            self._container = self._client.containers.get(self._container_id)
        except NotFound as e:
            raise ContainerNotFoundError(self._container_id) from e
        except (DockerException, RequestException) as e:
            raise FetchError(self._container_id, f"Docker API error: {e}", retryable=True) from e

        logger.debug(f"Resolved container {self._container_id} -> {self._container.short_id}")
        return self._container

    def _read_stats(self) -> Any:
        """One non-streaming stats read; NotFound from the stats call propagates."""
        container = self._get_container()
        try:
            return container.stats(stream=False)
        except NotFound:
            raise
        except (DockerException, RequestException) as e:
            raise FetchError(self._container_id, f"Docker API error: {e}", retryable=True) from e

    def fetch(self) -> RawSnapshot:
        """Fetch one stats snapshot for the container.

        Raises:
            ContainerNotFoundError: If the container does not exist
            MalformedStatsError: If the payload lacks required fields
            FetchError: For transient Docker API/network errors (retryable)
        """
        try:
            stats = self._read_stats()
        except NotFound:
            # The identifier may now name a recreated container; resolve it once more
            logger.info(f"Container {self._container_id} disappeared, resolving it again")
            self._container = None
            try:
                stats = self._read_stats()
            except NotFound as e:
                raise ContainerNotFoundError(
                    self._container_id, "container no longer exists"
                ) from e

        observed_at = datetime.now(UTC)
        monotonic_time = time.monotonic()

        if not isinstance(stats, dict):
            raise MalformedStatsError(
                self._container_id, f"unexpected stats payload type {type(stats).__name__}"
            )

        cpu_total, memory_usage, memory_limit = parse_stats(self._container_id, stats)
        return RawSnapshot(
            observed_at=observed_at,
            monotonic_time=monotonic_time,
            cpu_total_usage_ns=cpu_total,
            memory_usage_bytes=memory_usage,
            memory_limit_bytes=memory_limit,
        )

    def close(self) -> None:
        """Close the Docker client if this source created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
        self._container = None
