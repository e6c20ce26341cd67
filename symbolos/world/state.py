"""
World State: the mutable execution unit of a pipeline run.

Owned by exactly one in-flight run; there is no internal locking.
Objects placed in ``artifacts`` are treated as values: an update should be
a new object with a new id pointing back via ``parent_id``/``origin_id``,
because forks share object instances with their source.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Union
from uuid import uuid4

from loguru import logger

from symbolos.models.object import SymbolicObject, utcnow
from symbolos.models.snapshot import WorldFrame
from symbolos.world.context import WorldContext


def generate_run_id() -> str:
    """Timestamp-derived run id, e.g. ``2025-01-01T10-00-00-000000-1a2b3c4d``."""
    stamp = utcnow().strftime("%Y-%m-%dT%H-%M-%S-%f")
    return f"{stamp}-{uuid4().hex[:8]}"


class WorldState:
    """Artifacts indexed by id plus run metadata and an ephemeral context."""

    def __init__(
        self,
        pipeline_id: str,
        run_id: Optional[str] = None,
        tick: int = 0,
        step: int = 0,
        artifacts: Optional[Dict[str, SymbolicObject]] = None,
        context: Optional[WorldContext] = None,
    ):
        if tick < 0:
            raise ValueError(f"tick must be >= 0, got {tick}")
        self.pipeline_id = pipeline_id
        self.run_id = run_id or generate_run_id()
        self.tick = tick
        self.step = step
        self.artifacts: Dict[str, SymbolicObject] = artifacts if artifacts is not None else {}
        self.context = context if context is not None else WorldContext(self.artifacts)
        self.context.artifacts = self.artifacts

    def __repr__(self) -> str:
        return (
            f"WorldState(pipeline_id={self.pipeline_id!r}, run_id={self.run_id!r}, "
            f"tick={self.tick}, step={self.step}, artifacts={len(self.artifacts)})"
        )

    # --- Mutation ---

    def add(self, objects: Union[SymbolicObject, Iterable[SymbolicObject]]) -> "WorldState":
        """Insert one or more records; invalid entries are skipped and logged."""
        batch = [objects] if isinstance(objects, SymbolicObject) else list(objects)
        for obj in batch:
            if not isinstance(obj, SymbolicObject) or not obj.id or not obj.type:
                logger.warning("Skipping invalid object: {!r}", obj)
                continue
            self.artifacts[obj.id] = obj
        return self

    def remove(self, object_id: str) -> bool:
        """Remove a record. Unknown ids are logged and ignored."""
        if object_id in self.artifacts:
            del self.artifacts[object_id]
            return True
        logger.warning("Cannot remove {}: not in world {}", object_id, self.run_id)
        return False

    def tick_forward(self) -> "WorldState":
        self.tick += 1
        return self

    # --- Lookup ---

    def get_by_id(self, object_id: str) -> Optional[SymbolicObject]:
        """The record with ``object_id``, or None when it is not present."""
        return self.artifacts.get(object_id)

    def get_by_ids(self, object_ids: Iterable[str]) -> List[SymbolicObject]:
        return [self.artifacts[i] for i in object_ids if i in self.artifacts]

    def get_by_type(self, type_name: str) -> List[SymbolicObject]:
        return [o for o in self.artifacts.values() if o.type == type_name]

    def get_latest_of_type(self, type_name: str) -> Optional[SymbolicObject]:
        """Record of ``type_name`` with the highest tick."""
        candidates = self.get_by_type(type_name)
        if not candidates:
            return None
        return max(candidates, key=lambda o: o.tick or 0)

    def get_all(self) -> List[SymbolicObject]:
        return list(self.artifacts.values())

    def summary(self) -> Dict[str, int]:
        """Artifact counts by type, largest first."""
        counts = Counter(o.type for o in self.artifacts.values())
        return dict(counts.most_common())

    def to_frame(self) -> WorldFrame:
        from symbolos.world.snapshot import to_frame

        return to_frame(self)


def new_world(pipeline_id: str, run_id: Optional[str] = None) -> WorldState:
    """A fresh world at tick 0, step 0."""
    return WorldState(pipeline_id=pipeline_id, run_id=run_id)
