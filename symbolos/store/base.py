"""Snapshot Store contract: where frames live between runs."""

from typing import List, Optional, Protocol, runtime_checkable

from symbolos.models.snapshot import WorldFrame


@runtime_checkable
class SnapshotStore(Protocol):
    """
    Async persistence of world frames, keyed by (pipeline, run, tick).

    Implementations wrap their backend failures in ``SnapshotError``.
    """

    async def save_frame(self, frame: WorldFrame) -> None: ...

    async def get_frame(self, pipeline_id: str, run_id: str, tick: int) -> Optional[WorldFrame]: ...

    async def list_frames(self, pipeline_id: str, run_id: str) -> List[str]:
        """Frame keys of a run, ordered by tick."""
        ...

    async def get_latest_frame(self, pipeline_id: str, run_id: str) -> Optional[WorldFrame]: ...

    async def delete_run(self, pipeline_id: str, run_id: str) -> None: ...

    async def list_runs(self, pipeline_id: str) -> List[str]: ...

    async def list_pipelines(self) -> List[str]: ...

    async def index_run(self, pipeline_id: str, run_id: str) -> None: ...


def tick_of(key: str) -> int:
    """Tick encoded as the last ``:`` segment of a frame key."""
    try:
        return int(key.rsplit(":", 1)[-1])
    except ValueError:
        return 0
