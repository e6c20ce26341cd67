"""
Fork/Snapshot Manager.

- ``to_frame`` / ``to_archive``: read-only dumps of a world.
- ``world_from_frame``: rebuild a world from a persisted snapshot.
- ``fork_world``: branch a world. The fork owns a new artifact map, so
  inserts and deletes never reach the source, but it holds the same object
  instances; mutating a shared object's fields is visible on both sides.
"""

from typing import Any, Dict, Mapping, Optional, Union
from uuid import uuid4

from symbolos.models.object import SymbolicObject, create_symbolic_object, revive_object
from symbolos.models.snapshot import WorldArchive, WorldFrame
from symbolos.world.state import WorldState


def _frame_metadata(world: WorldState) -> Dict[str, Any]:
    ctx = world.context
    return {
        "pipelineId": world.pipeline_id,
        "runId": world.run_id,
        "tick": world.tick,
        "step": world.step,
        "artifactCount": len(world.artifacts),
        "actingFrameId": ctx.acting_frame.id if ctx.acting_frame else None,
        "contextualFrameId": ctx.contextual_frame.id if ctx.contextual_frame else None,
        "pipelineArgsId": ctx.pipeline_args.id if ctx.pipeline_args else None,
    }


def to_frame(world: WorldState) -> WorldFrame:
    """Capture every artifact of ``world`` at its current tick/step."""
    members = list(world.artifacts.values())
    return create_symbolic_object(
        "WorldFrame",
        id=f"frame-{world.tick}",
        description=f"World frame for tick {world.tick}",
        tick=world.tick,
        step=world.step,
        run_id=world.run_id,
        pipeline_id=world.pipeline_id,
        members=members,
        member_ids=[m.id for m in members],
        metadata=_frame_metadata(world),
    )


def to_archive(world: WorldState) -> WorldArchive:
    """The whole-run snapshot; ``file_path`` is filled in once written."""
    members = list(world.artifacts.values())
    return create_symbolic_object(
        "WorldArchive",
        id=f"world-{uuid4()}",
        name=f"World Archive for {world.pipeline_id} - {world.run_id}",
        label=f"World Archive - {world.run_id}",
        description=f"World archive for pipeline {world.pipeline_id}, run {world.run_id}",
        tick=world.tick,
        step=world.step,
        run_id=world.run_id,
        pipeline_id=world.pipeline_id,
        members=members,
        member_ids=[m.id for m in members],
        metadata=_frame_metadata(world),
    )


def world_from_frame(
    frame: Union[WorldFrame, Mapping[str, Any]],
    pipeline_id: str,
    run_id: str,
) -> WorldState:
    """
    Rebuild a world from a frame or archive (model or raw mapping).

    Members are keyed by id; on duplicate ids the last one wins. The
    context starts empty.
    """
    if isinstance(frame, Mapping):
        members = [revive_object(m) for m in frame.get("members") or []]
        tick = frame.get("tick") or 0
        step = frame.get("step") or 0
    else:
        members = list(frame.members)
        tick = frame.tick or 0
        step = frame.step or 0

    artifacts: Dict[str, SymbolicObject] = {}
    for obj in members:
        artifacts[obj.id] = obj

    return WorldState(
        pipeline_id=pipeline_id,
        run_id=run_id,
        tick=tick,
        step=step,
        artifacts=artifacts,
    )


def fork_world(source: WorldState, new_params: Optional[Dict[str, Any]] = None) -> WorldState:
    """
    Branch ``source`` under a new run id.

    Tick, step and pipeline id carry over. The fork's context starts from
    the source's entries, records ``forked_from_run_id`` and, when
    ``new_params`` is given, replaces the pipeline arguments with them.
    """
    artifacts = dict(source.artifacts)
    run_id = f"forked-{uuid4()}"
    context = source.context.copy_for(artifacts)
    context.forked_from_run_id = source.run_id
    if new_params is not None:
        context.pipeline_args = create_symbolic_object(
            "PipelineArgs",
            pipeline_id=source.pipeline_id,
            run_id=run_id,
            params=dict(new_params),
        )

    return WorldState(
        pipeline_id=source.pipeline_id,
        run_id=run_id,
        tick=source.tick,
        step=source.step,
        artifacts=artifacts,
        context=context,
    )
