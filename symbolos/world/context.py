"""
World Context: transient execution scratch space for one pipeline run.

Never persisted. Holds named step outputs, the queue of outputs awaiting
action recording, run identity and fork lineage. Entries are read and
written through accessors; a step that stores a value declares its key,
and readers can require the value's kind with ``expect``.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from symbolos.errors import ContextKeyError
from symbolos.models.object import SymbolicObject
from symbolos.models.pipeline import BatchedEntry
from symbolos.models.provenance import PipelineArgs

T = TypeVar("T")

PIPELINE_ARGS = "pipeline_args"
PIPELINE_ID = "pipeline_id"
RUN_ID = "run_id"
FORKED_FROM_RUN_ID = "forked_from_run_id"
ACTING_FRAME = "acting_frame"
CONTEXTUAL_FRAME = "contextual_frame"


class WorldContext:
    """Typed key/value store bound to a world's artifact map."""

    def __init__(
        self,
        artifacts: Optional[Dict[str, SymbolicObject]] = None,
        entries: Optional[Dict[str, Any]] = None,
    ):
        self.artifacts: Dict[str, SymbolicObject] = artifacts if artifacts is not None else {}
        self._entries: Dict[str, Any] = dict(entries or {})
        self.batched_entries: List[BatchedEntry] = []

    # --- Generic access ---

    def store(self, key: str, value: Any) -> None:
        """Expose ``value`` to later steps under ``key``."""
        self._entries[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def expect(self, key: str, kind: Union[Type[T], Tuple[type, ...]]) -> T:
        """Return the entry for ``key``, which must exist and be a ``kind``."""
        if key not in self._entries:
            raise ContextKeyError(key)
        value = self._entries[key]
        if not isinstance(value, kind):
            raise TypeError(
                f"Context entry {key!r} is {type(value).__name__}, "
                f"expected {getattr(kind, '__name__', kind)}"
            )
        return value

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._entries)

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._entries.items()))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def copy_for(self, artifacts: Dict[str, SymbolicObject]) -> "WorldContext":
        """A context over ``artifacts`` seeded with this context's entries."""
        return WorldContext(artifacts=artifacts, entries=self._entries)

    # --- Well-known entries ---

    @property
    def pipeline_args(self) -> Optional[PipelineArgs]:
        return self._entries.get(PIPELINE_ARGS)

    @pipeline_args.setter
    def pipeline_args(self, value: Optional[PipelineArgs]) -> None:
        self._entries[PIPELINE_ARGS] = value

    @property
    def pipeline_id(self) -> Optional[str]:
        return self._entries.get(PIPELINE_ID)

    @pipeline_id.setter
    def pipeline_id(self, value: Optional[str]) -> None:
        self._entries[PIPELINE_ID] = value

    @property
    def run_id(self) -> Optional[str]:
        return self._entries.get(RUN_ID)

    @run_id.setter
    def run_id(self, value: Optional[str]) -> None:
        self._entries[RUN_ID] = value

    @property
    def forked_from_run_id(self) -> Optional[str]:
        return self._entries.get(FORKED_FROM_RUN_ID)

    @forked_from_run_id.setter
    def forked_from_run_id(self, value: Optional[str]) -> None:
        self._entries[FORKED_FROM_RUN_ID] = value

    @property
    def acting_frame(self) -> Optional[SymbolicObject]:
        """The declared actor credited for actions with no primary output."""
        return self._entries.get(ACTING_FRAME)

    @acting_frame.setter
    def acting_frame(self, value: Optional[SymbolicObject]) -> None:
        self._entries[ACTING_FRAME] = value

    @property
    def contextual_frame(self) -> Optional[SymbolicObject]:
        return self._entries.get(CONTEXTUAL_FRAME)

    @contextual_frame.setter
    def contextual_frame(self, value: Optional[SymbolicObject]) -> None:
        self._entries[CONTEXTUAL_FRAME] = value
