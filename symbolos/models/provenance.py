"""Provenance records: what happened, who did it, and the run that held it."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from symbolos.models.object import SymbolicObject, register_object_type, utcnow


@register_object_type
class Transformation(SymbolicObject):
    """One functor application to one input item."""

    type: str = "Transformation"
    method: str
    input_id: Optional[str] = None
    output_id: Optional[Union[str, List[str]]] = None
    input_type: Optional[str] = None
    output_type: Optional[str] = None
    status: str = "complete"
    root_id: Optional[str] = "transformation-root"


@register_object_type
class SymbolicAction(SymbolicObject):
    """
    Audit record linking a produced object to its actor, context,
    instrument and purpose. Always created in the completed state.
    """

    type: str = "SymbolicAction"
    actor_id: str
    context_id: str
    instrument_id: str
    purpose: str
    transformation_id: str
    input_id: str
    output_id: str
    status: str = "completed"
    root_id: Optional[str] = "action-root"
    timestamp: datetime = Field(default_factory=utcnow)


@register_object_type
class PipelineArgs(SymbolicObject):
    """Parameters handed to a pipeline definition and to its first step."""

    type: str = "PipelineArgs"
    params: Dict[str, Any] = Field(default_factory=dict)
    pipeline_id: Optional[str] = None
    run_id: Optional[str] = None
    store_pipeline_run: bool = True


@register_object_type
class PipelineRun(SymbolicObject):
    """Summary of one completed pipeline execution."""

    type: str = "PipelineRun"
    pipeline_id: str
    run_id: str
    tick_count: int
    step_count: int
    forked_from_run_id: Optional[str] = None
    pipeline_args_id: Optional[str] = None
    step_ids: List[str] = []
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    status: str = "completed"
