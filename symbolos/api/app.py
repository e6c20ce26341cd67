"""
Symbolos API: FastAPI endpoints.

Exposes the world engine over HTTP for:
- Pipeline discovery
- Running pipelines (fresh or forked from a stored run)
- Stored run and frame inspection
- Run deletion
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from symbolos.config import EngineConfig
from symbolos.errors import PipelineNotFoundError
from symbolos.models.object import create_symbolic_object
from symbolos.pipeline.executor import PipelineExecutor
from symbolos.pipeline.registry import PipelineRegistry, default_registry, merge_params
from symbolos.store.base import SnapshotStore
from symbolos.store.memory import InMemorySnapshotStore
from symbolos.world.snapshot import fork_world, world_from_frame
from symbolos.world.state import new_world


# --- Request Models ---

class RunRequest(BaseModel):
    params: Dict[str, Any] = {}
    from_run_id: Optional[str] = None


# --- Application Factory ---

def create_app(
    store: Optional[SnapshotStore] = None,
    registry: Optional[PipelineRegistry] = None,
    config: Optional[EngineConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Symbolos API",
        description="Symbolos world engine",
        version="0.1.0",
    )

    snapshots = store if store is not None else InMemorySnapshotStore()
    pipelines = registry if registry is not None else default_registry()
    engine_config = config or EngineConfig()

    app.state.store = snapshots
    app.state.registry = pipelines
    app.state.config = engine_config

    # === PIPELINES ===

    @app.get("/pipelines")
    def list_pipelines():
        """Registered pipeline definitions."""
        return [d.summary() for d in pipelines.list()]

    @app.get("/pipelines/stored")
    async def list_stored_pipelines():
        """Pipeline ids that have stored runs."""
        return await snapshots.list_pipelines()

    # === RUNS ===

    @app.get("/pipelines/{pipeline_id}/runs")
    async def list_runs(pipeline_id: str):
        return await snapshots.list_runs(pipeline_id)

    @app.post("/pipelines/{pipeline_id}/runs")
    async def start_run(pipeline_id: str, req: RunRequest):
        """Run a registered pipeline, optionally forked from a stored run."""
        try:
            definition = pipelines.get(pipeline_id)
        except PipelineNotFoundError:
            raise HTTPException(404, "Pipeline not found")

        try:
            params = merge_params(definition, req.params)
        except ValueError as err:
            raise HTTPException(422, str(err))

        if req.from_run_id:
            frame = await snapshots.get_latest_frame(pipeline_id, req.from_run_id)
            if frame is None:
                raise HTTPException(404, "Run not found")
            source = world_from_frame(frame, pipeline_id=pipeline_id, run_id=req.from_run_id)
            world = fork_world(source, params)
        else:
            world = new_world(pipeline_id)

        args = create_symbolic_object(
            "PipelineArgs",
            label="API Arguments",
            pipeline_id=pipeline_id,
            run_id=world.run_id,
            params=params,
        )
        executor = PipelineExecutor(config=engine_config, store=snapshots)
        result = await executor.run(world, args, definition.build_steps(args))

        return {
            "pipeline_id": pipeline_id,
            "run_id": world.run_id,
            "forked_from_run_id": world.context.forked_from_run_id,
            "status": executor.status.value,
            "tick_count": result.tick_count,
            "artifact_count": len(world.artifacts),
            "action_count": len(result.actions),
            "duration_ms": result.duration_ms,
            "params": params,
        }

    @app.delete("/pipelines/{pipeline_id}/runs/{run_id}")
    async def delete_run(pipeline_id: str, run_id: str):
        await snapshots.delete_run(pipeline_id, run_id)
        return {"status": "deleted", "pipeline_id": pipeline_id, "run_id": run_id}

    # === FRAMES ===

    @app.get("/pipelines/{pipeline_id}/runs/{run_id}/frames")
    async def list_frames(pipeline_id: str, run_id: str):
        return await snapshots.list_frames(pipeline_id, run_id)

    @app.get("/pipelines/{pipeline_id}/runs/{run_id}/frames/latest")
    async def get_latest_frame(pipeline_id: str, run_id: str):
        frame = await snapshots.get_latest_frame(pipeline_id, run_id)
        if frame is None:
            raise HTTPException(404, "Frame not found")
        return frame.to_json_dict()

    @app.get("/pipelines/{pipeline_id}/runs/{run_id}/frames/{tick}")
    async def get_frame(pipeline_id: str, run_id: str, tick: int):
        frame = await snapshots.get_frame(pipeline_id, run_id, tick)
        if frame is None:
            raise HTTPException(404, "Frame not found")
        return frame.to_json_dict()

    return app
