"""Symbolic Object: the universal record shape stored in a world."""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Type
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SymbolicObject(BaseModel):
    """
    A value record identified by ``id`` and discriminated by ``type``.

    Records are open: fields beyond the declared ones are kept as extras.
    Serialized field names are camelCase (``rootId``, ``createdAt``) so
    archives stay readable by other tooling; both spellings are accepted
    on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    status: str = "active"
    root_id: Optional[str] = None           # Lineage root, self by default
    tick: Optional[int] = None              # Simulation tick that produced it
    label: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    origin_id: Optional[str] = None
    revision_number: Optional[int] = None
    source: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_json_dict(self) -> dict:
        """Serializable form with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


OBJECT_TYPES: Dict[str, Type[SymbolicObject]] = {}


def register_object_type(cls: Type[SymbolicObject]) -> Type[SymbolicObject]:
    """Class decorator: make ``revive_object`` build ``cls`` for its type."""
    OBJECT_TYPES[cls.model_fields["type"].default] = cls
    return cls


def revive_object(data: Any) -> SymbolicObject:
    """Build the most specific registered record for a mapping."""
    if isinstance(data, SymbolicObject):
        return data
    cls = OBJECT_TYPES.get(data.get("type"), SymbolicObject)
    return cls.model_validate(data)


def looks_symbolic(value: Any) -> bool:
    """True for records, or mappings carrying a non-empty string id and type."""
    if isinstance(value, SymbolicObject):
        return True
    if not isinstance(value, Mapping):
        return False
    id_, type_ = value.get("id"), value.get("type")
    return isinstance(id_, str) and bool(id_) and isinstance(type_, str) and bool(type_)


def object_id(value: Any) -> Optional[str]:
    """Best-effort id of an arbitrary input item; only string ids count."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        id_ = value.get("id")
    else:
        id_ = getattr(value, "id", None)
    return id_ if isinstance(id_, str) else None


def _kebab(type_name: str) -> str:
    return re.sub(r"([a-z])([A-Z])", r"\1-\2", type_name).lower()


def create_symbolic_object(type_name: str, **fields: Any) -> SymbolicObject:
    """
    Factory for new records.

    Generates ``<kebab-type>-<uuid4>`` when no id is given, defaults the
    lineage root to the object itself and stamps both timestamps.
    """
    object_id_ = fields.pop("id", None) or f"{_kebab(type_name)}-{uuid4()}"
    now = utcnow()
    fields.setdefault("root_id", object_id_)
    fields["created_at"] = now
    fields["updated_at"] = now
    cls = OBJECT_TYPES.get(type_name, SymbolicObject)
    if cls is SymbolicObject:
        return SymbolicObject(id=object_id_, type=type_name, **fields)
    return cls(id=object_id_, **fields)
