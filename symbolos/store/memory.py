"""In-memory snapshot store for tests, the API default and local runs."""

from typing import Dict, Iterable, List, Optional

from symbolos.models.snapshot import WorldFrame
from symbolos.store.base import tick_of


class InMemorySnapshotStore:
    """Frames held in a dict under ``<pipelineId>:<runId>:<tick>``."""

    def __init__(self, initial_frames: Iterable[WorldFrame] = ()):
        self._frames: Dict[str, WorldFrame] = {}
        for frame in initial_frames:
            self._frames[self._key(frame.pipeline_id, frame.run_id, frame.tick)] = frame

    @staticmethod
    def _key(pipeline_id: Optional[str], run_id: Optional[str], tick: int) -> str:
        return f"{pipeline_id}:{run_id}:{tick}"

    async def save_frame(self, frame: WorldFrame) -> None:
        self._frames[self._key(frame.pipeline_id, frame.run_id, frame.tick)] = frame

    async def get_frame(self, pipeline_id: str, run_id: str, tick: int) -> Optional[WorldFrame]:
        return self._frames.get(self._key(pipeline_id, run_id, tick))

    async def list_frames(self, pipeline_id: str, run_id: str) -> List[str]:
        prefix = f"{pipeline_id}:{run_id}:"
        keys = [k for k in self._frames if k.startswith(prefix)]
        return sorted(keys, key=tick_of)

    async def get_latest_frame(self, pipeline_id: str, run_id: str) -> Optional[WorldFrame]:
        keys = await self.list_frames(pipeline_id, run_id)
        if not keys:
            return None
        return self._frames[keys[-1]]

    async def delete_run(self, pipeline_id: str, run_id: str) -> None:
        for key in await self.list_frames(pipeline_id, run_id):
            del self._frames[key]

    async def list_runs(self, pipeline_id: str) -> List[str]:
        runs = set()
        for key in self._frames:
            pipeline, run, _ = key.rsplit(":", 2)
            if pipeline == pipeline_id:
                runs.add(run)
        return sorted(runs)

    async def list_pipelines(self) -> List[str]:
        return sorted({key.rsplit(":", 2)[0] for key in self._frames})

    async def index_run(self, pipeline_id: str, run_id: str) -> None:
        # Runs are derived from frame keys
        return None

    def __len__(self) -> int:
        return len(self._frames)
