"""
Provenance & Action Recorder.

Turns functor applications into ``Transformation`` records (what happened)
and produced objects into ``SymbolicAction`` records (who did it, with
what, and why). Action recording is deferred to the end of a run: outputs
are queued on the context as ``BatchedEntry`` items and drained here.

Actor resolution order for an action:
  1. the lineage root of the application's primary output
  2. the context's declared acting frame
  3. the produced object's own lineage root
  4. "unknown-actor"
"""

from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

from symbolos.models.object import SymbolicObject, create_symbolic_object, object_id
from symbolos.models.pipeline import BatchedEntry, FunctorResult
from symbolos.models.provenance import PipelineRun, SymbolicAction, Transformation
from symbolos.world.context import WorldContext

UNKNOWN_ACTOR = "unknown-actor"
UNKNOWN_CONTEXT = "unknown-context"


def output_ids(output: Any) -> Optional[Union[str, List[str]]]:
    """The id, or ids, a functor output names at its top level."""
    if isinstance(output, FunctorResult):
        if output.outputs:
            return output_ids(list(output.outputs))
        return object_id(output.primary)
    if isinstance(output, (list, tuple)):
        return [i for i in (object_id(o) for o in output) if i]
    return object_id(output)


def build_transformation(functor: Any, item: Any, output: Any, tick: int) -> Transformation:
    """Provenance record of applying ``functor`` to ``item``."""
    metadata: Dict[str, Any] = {}
    if output:
        metadata = functor.describe_provenance(item, output) or {}
    return create_symbolic_object(
        "Transformation",
        id=f"tx-{uuid4()}",
        label=getattr(functor, "name", None) or functor.method,
        method=functor.method,
        tick=tick,
        input_id=object_id(item),
        output_id=output_ids(output) if output else None,
        input_type=getattr(functor, "input_type", None),
        output_type=getattr(functor, "output_type", None),
        metadata=metadata,
        root_id="transformation-root",
    )


def resolve_actor(
    entry: SymbolicObject,
    context: WorldContext,
    primary: Optional[SymbolicObject] = None,
) -> str:
    if primary is not None and primary.root_id:
        return primary.root_id
    if context.acting_frame is not None:
        return context.acting_frame.id
    if entry.root_id:
        return entry.root_id
    return UNKNOWN_ACTOR


def record_action(
    entry: SymbolicObject,
    transformation_id: str,
    instrument_id: str,
    purpose: str,
    tick: int,
    context: WorldContext,
    primary: Optional[SymbolicObject] = None,
) -> SymbolicAction:
    """
    Record that ``entry`` was produced, and insert the action into the
    context's artifact map. Every call is a distinct event with a fresh id.
    """
    action = create_symbolic_object(
        "SymbolicAction",
        id=f"action-{uuid4()}",
        label=f"{entry.type} Action",
        transformation_id=transformation_id,
        actor_id=resolve_actor(entry, context, primary),
        context_id=context.contextual_frame.id if context.contextual_frame else UNKNOWN_CONTEXT,
        instrument_id=instrument_id,
        purpose=purpose,
        input_id=(primary.root_id if primary is not None else None) or entry.root_id or entry.id,
        output_id=entry.id,
        root_id="action-root",
        tick=tick,
    )
    context.artifacts[action.id] = action
    return action


def drain_batched_entries(context: WorldContext) -> List[SymbolicAction]:
    """Record an action for every queued output, then clear the queue."""
    actions = [
        record_action(
            entry=batched.entry,
            transformation_id=batched.transformation_id,
            instrument_id=batched.instrument_id,
            purpose=batched.purpose,
            tick=batched.tick,
            context=context,
            primary=batched.primary,
        )
        for batched in context.batched_entries
    ]
    context.batched_entries = []
    return actions


def create_pipeline_run(
    pipeline_id: str,
    run_id: str,
    tick_count: int,
    steps: List[Any],
    forked_from_run_id: Optional[str] = None,
    pipeline_args_id: Optional[str] = None,
    started_at: Any = None,
) -> PipelineRun:
    fields: Dict[str, Any] = {}
    if forked_from_run_id:
        fields["forked_from_run_id"] = forked_from_run_id
    run = create_symbolic_object(
        "PipelineRun",
        id=f"pipeline-run-{uuid4()}",
        label=f"Forked Run from {forked_from_run_id}" if forked_from_run_id else "Pipeline Run",
        pipeline_id=pipeline_id,
        run_id=run_id,
        tick_count=tick_count,
        step_count=len(steps),
        step_ids=[s.id for s in steps],
        pipeline_args_id=pipeline_args_id,
        started_at=started_at,
        **fields,
    )
    run.completed_at = run.created_at
    return run


def enqueue_outputs(
    context: WorldContext,
    outputs: List[SymbolicObject],
    transformation_ids: Dict[str, str],
    primaries: Dict[str, Optional[SymbolicObject]],
    instrument_id: str,
    purpose: str,
    tick: int,
    step_index: int,
) -> None:
    """Queue one entry per output produced by a step."""
    prefix = str(step_index + 1).zfill(3)
    for entry in outputs:
        context.batched_entries.append(
            BatchedEntry(
                entry=entry,
                transformation_id=transformation_ids[entry.id],
                instrument_id=instrument_id,
                purpose=purpose,
                tick=tick,
                step_prefix=prefix,
                primary=primaries.get(entry.id),
            )
        )
