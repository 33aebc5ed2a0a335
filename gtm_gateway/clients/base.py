"""Job-platform protocol consumed by the consultation pipeline."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from gtm_gateway.models.job_models import JobRun


@runtime_checkable
class JobPlatform(Protocol):
    """Remote job-execution platform.

    Implementations raise ``gtm_gateway.errors.PlatformError`` on failure and
    ``PlatformTimeoutError`` when ``submit`` gives up waiting for a run.
    """

    async def submit(
        self,
        actor_id: str,
        run_input: dict[str, Any],
        *,
        timeout_secs: int,
        memory_mbytes: int,
    ) -> JobRun:
        """Start a run and block until it reaches a terminal state."""
        ...

    async def list_output_records(self, dataset_id: str) -> list[dict[str, Any]]: ...

    async def get_record(self, store_id: str, key: str) -> Optional[Any]: ...

    async def get_actor(self, actor_id: str) -> dict[str, Any]: ...

    async def list_runs(self, actor_id: str, *, limit: int = 10, desc: bool = True) -> list[JobRun]: ...

    async def aclose(self) -> None: ...
