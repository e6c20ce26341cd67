"""Functor contract, pipeline steps and per-run bookkeeping records."""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field

from symbolos.models.object import SymbolicObject
from symbolos.models.provenance import PipelineRun, SymbolicAction


class Functor(Protocol):
    """
    A pluggable transformation capability.

    ``apply`` may be a plain function or a coroutine function; the executor
    awaits whatever it returns when it is awaitable. The output may be a
    single record, a list, a nested structure holding records, or a
    ``FunctorResult``.
    """

    id: str
    name: str
    method: str

    def apply(self, input: Any, context: Any) -> Any: ...

    def describe_provenance(self, input: Any, output: Any) -> Dict[str, Any]: ...


InputResolver = Callable[[Any, Any], Union[Any, Awaitable[Any]]]


class FunctorStep(BaseModel):
    """Declarative pipeline unit."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    functor: Any
    purpose: str
    resolve_input: Optional[Callable[..., Any]] = None
    store_output_as: Optional[str] = None
    tick_advance: bool = True
    description: Optional[str] = None


class FunctorResult(BaseModel):
    """
    Explicit result of one functor application.

    ``outputs`` is flattened like any other output. ``primary`` names the
    object whose lineage root is credited as the actor of every action
    recorded for this application.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outputs: List[Any] = Field(default_factory=list)
    primary: Optional[SymbolicObject] = None


class BatchedEntry(BaseModel):
    """An output awaiting action recording at the end of a run."""

    entry: SymbolicObject
    transformation_id: str
    instrument_id: str
    purpose: str
    tick: int
    step_prefix: str
    primary: Optional[SymbolicObject] = None


class PipelineResult(BaseModel):
    """What a completed run hands back to its caller."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    world: Any
    actions: List[SymbolicAction]
    tick_count: int
    pipeline_run: Optional[PipelineRun] = None
    duration_ms: float
