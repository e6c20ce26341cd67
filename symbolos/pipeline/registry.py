"""
Pipeline Registry: named, parameterized pipeline definitions.

A definition turns a ``PipelineArgs`` record into its list of steps. The
CLI and the API look definitions up here by id.
"""

from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from symbolos.errors import PipelineNotFoundError
from symbolos.models.pipeline import FunctorStep
from symbolos.models.provenance import PipelineArgs


class PipelineDefinition(BaseModel):
    """A runnable pipeline: metadata, default params and a step builder."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    label: str
    description: str = ""
    defaults: Dict[str, Any] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)
    build_steps: Callable[[PipelineArgs], List[FunctorStep]]

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "defaults": dict(self.defaults),
            "required": list(self.required),
        }


def merge_params(
    definition: PipelineDefinition,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Defaults overlaid with ``overrides``; required keys must end up set."""
    params = dict(definition.defaults)
    params.update(overrides or {})
    missing = [key for key in definition.required if params.get(key) is None]
    if missing:
        raise ValueError(
            f"Pipeline {definition.id} is missing required params: {', '.join(missing)}"
        )
    return params


class PipelineRegistry:
    """In-memory registry of pipeline definitions, keyed by id."""

    def __init__(self, definitions: Optional[List[PipelineDefinition]] = None):
        self._definitions: Dict[str, PipelineDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: PipelineDefinition) -> PipelineDefinition:
        self._definitions[definition.id] = definition
        return definition

    def get(self, pipeline_id: str) -> PipelineDefinition:
        definition = self._definitions.get(pipeline_id)
        if definition is None:
            raise PipelineNotFoundError(pipeline_id)
        return definition

    def list(self) -> List[PipelineDefinition]:
        return list(self._definitions.values())

    def ids(self) -> List[str]:
        return list(self._definitions)

    def __contains__(self, pipeline_id: object) -> bool:
        return pipeline_id in self._definitions

    def __iter__(self) -> Iterator[PipelineDefinition]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._definitions)


def default_registry() -> PipelineRegistry:
    """A registry holding the bundled example pipelines."""
    from symbolos.examples.conway import conway_game

    return PipelineRegistry([conway_game])
