"""
Symbolos: a world engine that runs functor pipelines against a versioned
world state and records the provenance of every transformation.
"""

from symbolos.config import EngineConfig
from symbolos.errors import ContextKeyError, PipelineNotFoundError, SnapshotError, SymbolosError
from symbolos.models import (
    FunctorResult,
    FunctorStep,
    PipelineArgs,
    PipelineResult,
    SymbolicObject,
    WorldArchive,
    WorldFrame,
    create_symbolic_object,
)
from symbolos.pipeline.executor import PipelineExecutor, run_pipeline
from symbolos.world.context import WorldContext
from symbolos.world.snapshot import fork_world, to_frame, world_from_frame
from symbolos.world.state import WorldState, new_world

__version__ = "0.1.0"

__all__ = [
    "ContextKeyError",
    "EngineConfig",
    "FunctorResult",
    "FunctorStep",
    "PipelineArgs",
    "PipelineExecutor",
    "PipelineNotFoundError",
    "PipelineResult",
    "SnapshotError",
    "SymbolicObject",
    "SymbolosError",
    "WorldArchive",
    "WorldContext",
    "WorldFrame",
    "WorldState",
    "create_symbolic_object",
    "fork_world",
    "new_world",
    "run_pipeline",
    "to_frame",
    "world_from_frame",
]
