"""Symbolos data models."""

from symbolos.models.object import (
    SymbolicObject,
    create_symbolic_object,
    looks_symbolic,
    object_id,
    revive_object,
)
from symbolos.models.pipeline import (
    BatchedEntry,
    Functor,
    FunctorResult,
    FunctorStep,
    PipelineResult,
)
from symbolos.models.provenance import (
    PipelineArgs,
    PipelineRun,
    SymbolicAction,
    Transformation,
)
from symbolos.models.snapshot import WorldArchive, WorldFrame

__all__ = [
    "BatchedEntry",
    "Functor",
    "FunctorResult",
    "FunctorStep",
    "PipelineArgs",
    "PipelineResult",
    "PipelineRun",
    "SymbolicAction",
    "SymbolicObject",
    "Transformation",
    "WorldArchive",
    "WorldFrame",
    "create_symbolic_object",
    "looks_symbolic",
    "object_id",
    "revive_object",
]
