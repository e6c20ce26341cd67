"""
Redis snapshot store.

Keys:
  <ns>:worlds:<pipelineId>:<runId>:frame:<tick>   gzip JSON frame
  <ns>:index:<pipelineId>                         set of run ids
"""

from typing import Any, List, Optional, Union

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

from symbolos.errors import SnapshotError
from symbolos.models.snapshot import WorldFrame
from symbolos.store.archive import encode_snapshot, load_snapshot
from symbolos.store.base import tick_of


def create_redis_client(url: str = "redis://localhost:6379") -> Redis:
    """Async client for ``url``; responses stay as bytes."""
    return Redis.from_url(url)


def _text(value: Union[str, bytes]) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisSnapshotStore:
    """``SnapshotStore`` over a ``redis.asyncio`` client."""

    def __init__(self, client: Any, namespace: str = "symbolos"):
        self.client = client
        self.namespace = namespace

    def frame_key(self, pipeline_id: str, run_id: str, tick: int) -> str:
        return f"{self.namespace}:worlds:{pipeline_id}:{run_id}:frame:{tick}"

    def index_key(self, pipeline_id: str) -> str:
        return f"{self.namespace}:index:{pipeline_id}"

    async def save_frame(self, frame: WorldFrame) -> None:
        key = self.frame_key(frame.pipeline_id, frame.run_id, frame.tick)
        try:
            await self.client.set(key, encode_snapshot(frame))
        except RedisError as err:
            raise SnapshotError(f"Failed to store frame {key}: {err}") from err
        logger.debug("Stored frame {} (tick {}, step {})", key, frame.tick, frame.step)

    async def _load(self, key: str) -> Optional[WorldFrame]:
        try:
            data = await self.client.get(key)
        except RedisError as err:
            raise SnapshotError(f"Failed to load frame {key}: {err}") from err
        if not data:
            return None
        try:
            return load_snapshot(data)
        except (EOFError, OSError, ValueError) as err:
            raise SnapshotError(f"Corrupt frame at {key}: {err}") from err

    async def get_frame(self, pipeline_id: str, run_id: str, tick: int) -> Optional[WorldFrame]:
        return await self._load(self.frame_key(pipeline_id, run_id, tick))

    async def list_frames(self, pipeline_id: str, run_id: str) -> List[str]:
        pattern = f"{self.namespace}:worlds:{pipeline_id}:{run_id}:frame:*"
        try:
            keys = await self.client.keys(pattern)
        except RedisError as err:
            raise SnapshotError(f"Failed to list frames for {pipeline_id}/{run_id}: {err}") from err
        return sorted((_text(k) for k in keys), key=tick_of)

    async def get_latest_frame(self, pipeline_id: str, run_id: str) -> Optional[WorldFrame]:
        keys = await self.list_frames(pipeline_id, run_id)
        if not keys:
            return None
        return await self._load(keys[-1])

    async def delete_run(self, pipeline_id: str, run_id: str) -> None:
        keys = await self.list_frames(pipeline_id, run_id)
        try:
            if keys:
                await self.client.delete(*keys)
            await self.client.srem(self.index_key(pipeline_id), run_id)
        except RedisError as err:
            raise SnapshotError(f"Failed to delete run {pipeline_id}/{run_id}: {err}") from err
        logger.info("Deleted run {}/{} ({} frames)", pipeline_id, run_id, len(keys))

    async def delete_pipeline(self, pipeline_id: str) -> None:
        """Delete every run of ``pipeline_id`` and its index entry."""
        for run_id in await self.list_runs(pipeline_id):
            await self.delete_run(pipeline_id, run_id)
        try:
            await self.client.delete(self.index_key(pipeline_id))
        except RedisError as err:
            raise SnapshotError(f"Failed to delete pipeline index {pipeline_id}: {err}") from err

    async def list_runs(self, pipeline_id: str) -> List[str]:
        try:
            runs = await self.client.smembers(self.index_key(pipeline_id))
        except RedisError as err:
            raise SnapshotError(f"Failed to list runs for {pipeline_id}: {err}") from err
        return sorted(_text(r) for r in runs)

    async def list_pipelines(self) -> List[str]:
        prefix = f"{self.namespace}:index:"
        try:
            keys = await self.client.keys(f"{prefix}*")
        except RedisError as err:
            raise SnapshotError(f"Failed to list pipelines: {err}") from err
        return sorted(_text(k)[len(prefix):] for k in keys)

    async def index_run(self, pipeline_id: str, run_id: str) -> None:
        try:
            await self.client.sadd(self.index_key(pipeline_id), run_id)
        except RedisError as err:
            raise SnapshotError(f"Failed to index run {pipeline_id}/{run_id}: {err}") from err
