"""
Durable world files: gzip JSON frames and archives on disk.

Layout under ``<output_root>/<archive_dir_name>/<pipelineId>_<YYYY-MM-DD_HH_MM>``:
  frame-<step+1>-tick-<tick>.world.json.gz   one per step, when enabled
  <pipelineId>.world.json.gz                 whole-run archive

Files keep the ``.gz`` suffix even when written uncompressed; readers
detect compression from the content.
"""

import gzip
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from symbolos.config import EngineConfig
from symbolos.errors import SnapshotError
from symbolos.models.object import revive_object, utcnow
from symbolos.models.snapshot import WorldArchive, WorldFrame
from symbolos.world.snapshot import to_archive, to_frame
from symbolos.world.state import WorldState

GZIP_MAGIC = b"\x1f\x8b"
WORLD_SUFFIX = ".world.json.gz"


def encode_snapshot(frame: WorldFrame, compress: bool = True) -> bytes:
    """Frame or archive as (optionally gzipped) camelCase JSON bytes."""
    data = frame.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    return gzip.compress(data) if compress else data


def decode_snapshot(data: bytes) -> Dict[str, Any]:
    """Raw snapshot mapping from gzipped or plain JSON bytes."""
    if data[:2] == GZIP_MAGIC:
        data = gzip.decompress(data)
    return json.loads(data.decode("utf-8"))


def load_snapshot(data: bytes) -> WorldFrame:
    """Typed ``WorldFrame``/``WorldArchive`` from snapshot bytes."""
    snapshot = decode_snapshot(data)
    snapshot.setdefault("type", "WorldFrame")
    return revive_object(snapshot)


def read_world_file(path: Union[str, Path]) -> WorldFrame:
    """Load a frame or archive file written by ``WorldArchiver``."""
    path = Path(path)
    try:
        return load_snapshot(path.read_bytes())
    except (EOFError, OSError, ValueError) as err:
        raise SnapshotError(f"Failed to read world file {path}: {err}") from err


class WorldArchiver:
    """Writes per-step frames and the final archive of one run."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self._run_dirs: Dict[str, Path] = {}

    def run_dir(self, world: WorldState) -> Path:
        """Output directory for ``world``'s run, fixed at first use."""
        if world.run_id not in self._run_dirs:
            stamp = utcnow().strftime("%Y-%m-%d_%H_%M")
            self._run_dirs[world.run_id] = (
                Path(self.config.output_root)
                / self.config.archive_dir_name
                / f"{world.pipeline_id}_{stamp}"
            )
        return self._run_dirs[world.run_id]

    def _write(self, path: Path, frame: WorldFrame) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(encode_snapshot(frame, compress=self.config.compress))
        except OSError as err:
            raise SnapshotError(f"Failed to write world file {path}: {err}") from err
        logger.debug("Wrote {} ({} members)", path, len(frame.members))
        return path

    def write_frame(self, world: WorldState, step_index: int) -> Path:
        frame = to_frame(world)
        name = f"frame-{step_index + 1}-tick-{world.tick}{WORLD_SUFFIX}"
        return self._write(self.run_dir(world) / name, frame)

    def archive_path(self, world: WorldState) -> Path:
        return self.run_dir(world) / f"{world.pipeline_id}{WORLD_SUFFIX}"

    def write_archive(self, world: WorldState) -> WorldArchive:
        archive = to_archive(world)
        path = self.archive_path(world)
        archive.file_path = str(path)
        self._write(path, archive)
        return archive
