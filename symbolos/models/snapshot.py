"""World snapshots: point-in-time frames and whole-run archives."""

from typing import Any, List, Optional

from pydantic import Field, SerializeAsAny, field_validator

from symbolos.models.object import SymbolicObject, register_object_type, revive_object


@register_object_type
class WorldFrame(SymbolicObject):
    """Every artifact of a world at one tick/step."""

    type: str = "WorldFrame"
    tick: int = 0
    step: int = 0
    pipeline_id: Optional[str] = None
    run_id: Optional[str] = None
    members: List[SerializeAsAny[SymbolicObject]] = Field(default_factory=list)
    member_ids: List[str] = Field(default_factory=list)
    status: str = "archived"

    @field_validator("members", mode="before")
    @classmethod
    def _revive_members(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [revive_object(m) for m in value]
        return value


@register_object_type
class WorldArchive(WorldFrame):
    """Final whole-run snapshot; ``file_path`` is set once persisted."""

    type: str = "WorldArchive"
    name: Optional[str] = None
    file_path: Optional[str] = None
