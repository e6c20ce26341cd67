"""
Pipeline Executor: drives a world through an ordered list of steps.

States:
  IDLE → RUNNING → FINALIZING → COMPLETED
  RUNNING | FINALIZING → FAILED (on any error from a resolver, a functor
  or a snapshot call; the error is re-raised unchanged)

Behavioral Contract:
- Steps run strictly in order; within a step, input items run strictly in
  order, and item i's records are in ``artifacts`` before item i+1 starts.
- Suspension happens only while awaiting a resolver, a functor or a store.
- Nothing is retried and nothing is rolled back: a failed run leaves the
  world with whatever ticks and artifacts it had reached.
"""

import inspect
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from loguru import logger

from symbolos.config import EngineConfig
from symbolos.models.object import SymbolicObject, create_symbolic_object, utcnow
from symbolos.models.pipeline import FunctorResult, FunctorStep, PipelineResult
from symbolos.models.provenance import PipelineArgs
from symbolos.pipeline.flatten import flatten_symbolic_objects
from symbolos.provenance.recorder import (
    build_transformation,
    create_pipeline_run,
    drain_batched_entries,
    enqueue_outputs,
)
from symbolos.world.snapshot import to_frame
from symbolos.world.state import WorldState

FrameHandler = Callable[[WorldState], Any]


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class PipelineExecutor:
    """
    Runs functor steps against a world and records provenance.

    Optional collaborators:
      archiver      - writes frame/archive files (``WorldArchiver``)
      store         - receives a frame after every step (``SnapshotStore``)
      frame_handler - called with the world after every step
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        archiver: Any = None,
        store: Any = None,
        frame_handler: Optional[FrameHandler] = None,
    ):
        self.config = config or EngineConfig()
        self.archiver = archiver
        self.store = store
        self.frame_handler = frame_handler
        self._status = RunStatus.IDLE

    @property
    def status(self) -> RunStatus:
        return self._status

    async def run(
        self,
        world: WorldState,
        args: Optional[PipelineArgs],
        steps: Sequence[FunctorStep],
    ) -> PipelineResult:
        """Execute ``steps`` against ``world``, mutating it in place."""
        start = time.perf_counter()
        started_at = utcnow()
        self._status = RunStatus.RUNNING

        ctx = world.context
        ctx.artifacts = world.artifacts
        args = args or ctx.pipeline_args or create_symbolic_object(
            "PipelineArgs",
            id=f"pipeline-args-{world.run_id}",
            pipeline_id=world.pipeline_id,
            run_id=world.run_id,
            params={},
        )
        ctx.pipeline_args = args
        ctx.pipeline_id = world.pipeline_id
        ctx.run_id = world.run_id
        world.artifacts[args.id] = args

        logger.info(
            "Running pipeline {} (run {}) from tick {} with {} step(s)",
            world.pipeline_id, world.run_id, world.tick, len(steps),
        )

        try:
            previous: Any = args
            for index, step in enumerate(steps):
                previous = await self._run_step(world, step, index, previous)
                await self._after_step(world, index)

            self._status = RunStatus.FINALIZING
            actions = drain_batched_entries(ctx)

            pipeline_run = None
            if args.store_pipeline_run:
                pipeline_run = create_pipeline_run(
                    pipeline_id=world.pipeline_id,
                    run_id=world.run_id,
                    tick_count=world.tick,
                    steps=list(steps),
                    forked_from_run_id=ctx.forked_from_run_id,
                    pipeline_args_id=args.id,
                    started_at=started_at,
                )
                world.artifacts[pipeline_run.id] = pipeline_run

            await self._finalize(world)
        except Exception:
            self._status = RunStatus.FAILED
            logger.exception(
                "Pipeline {} (run {}) failed at step {}, tick {}",
                world.pipeline_id, world.run_id, world.step, world.tick,
            )
            raise

        self._status = RunStatus.COMPLETED
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline {} (run {}) completed at tick {}: {} artifact(s), {} action(s) in {:.1f} ms",
            world.pipeline_id, world.run_id, world.tick,
            len(world.artifacts), len(actions), duration_ms,
        )
        return PipelineResult(
            world=world,
            actions=actions,
            tick_count=world.tick,
            pipeline_run=pipeline_run,
            duration_ms=round(duration_ms, 3),
        )

    async def _run_step(
        self,
        world: WorldState,
        step: FunctorStep,
        index: int,
        previous: Any,
    ) -> List[SymbolicObject]:
        """Apply one step to every resolved input item; return its output."""
        world.step = index
        if step.tick_advance:
            world.tick += 1
        tick = world.tick
        ctx = world.context
        functor = step.functor

        if step.resolve_input is not None:
            resolved = await _resolve(step.resolve_input(previous, ctx))
        else:
            resolved = previous
        items = list(resolved) if isinstance(resolved, (list, tuple)) else [resolved]

        logger.info(
            "[{}] Step {}: {} ({}) on {} item(s)",
            tick, index + 1, step.id, functor.method, len(items),
        )

        produced: Dict[str, SymbolicObject] = {}
        transformation_ids: Dict[str, str] = {}
        primaries: Dict[str, Optional[SymbolicObject]] = {}

        for item_index, item in enumerate(items):
            result = await _resolve(functor.apply(item, ctx))

            primary = None
            payload = result
            if isinstance(result, FunctorResult):
                primary = result.primary
                payload = result.outputs or primary

            transformation = build_transformation(functor, item, result, tick)
            flattened = flatten_symbolic_objects(payload) if payload else []
            if not flattened:
                logger.warning(
                    "No output from {} for item {} of step {}",
                    functor.method, item_index + 1, step.id,
                )

            world.artifacts[transformation.id] = transformation
            for obj in flattened:
                if obj.tick is None:
                    obj.tick = tick
                if obj.id in produced:
                    logger.debug("Step {} replaced earlier output {}", step.id, obj.id)
                world.artifacts[obj.id] = obj
                produced[obj.id] = obj
                transformation_ids[obj.id] = transformation.id
                primaries[obj.id] = primary

        outputs: List[SymbolicObject] = list(produced.values())

        if self.config.verbose and outputs:
            counts: Dict[str, int] = {}
            for obj in outputs:
                counts[obj.type] = counts.get(obj.type, 0) + 1
            logger.info(
                "Step {} output: {} item(s) ({})",
                step.id, len(outputs),
                ", ".join(f"{t}: {c}" for t, c in counts.items()),
            )

        if step.store_output_as:
            ctx.store(step.store_output_as, outputs[0] if len(outputs) == 1 else outputs)

        enqueue_outputs(
            ctx,
            outputs,
            transformation_ids=transformation_ids,
            primaries=primaries,
            instrument_id=functor.id,
            purpose=step.purpose,
            tick=tick,
            step_index=index,
        )
        return outputs

    async def _after_step(self, world: WorldState, index: int) -> None:
        if self.frame_handler is not None:
            await _resolve(self.frame_handler(world))
        if self.archiver is not None and self.config.store_frames:
            path = self.archiver.write_frame(world, index)
            if self.config.verbose:
                logger.info("Saved frame t{}-s{} to {}", world.tick, index, path)
        if self.store is not None:
            await self.store.save_frame(to_frame(world))

    async def _finalize(self, world: WorldState) -> None:
        if self.archiver is not None and self.config.store_archive:
            archive = self.archiver.write_archive(world)
            logger.info("Archive saved to {}", archive.file_path)
        if self.store is not None:
            await self.store.save_frame(to_frame(world))
            await self.store.index_run(world.pipeline_id, world.run_id)


async def run_pipeline(
    world: WorldState,
    args: Optional[PipelineArgs],
    steps: Sequence[FunctorStep],
    config: Optional[EngineConfig] = None,
    archiver: Any = None,
    store: Any = None,
    frame_handler: Optional[Callable[[WorldState], Optional[Awaitable[None]]]] = None,
) -> PipelineResult:
    """Run ``steps`` with a one-off executor."""
    executor = PipelineExecutor(
        config=config, archiver=archiver, store=store, frame_handler=frame_handler
    )
    return await executor.run(world, args, steps)
