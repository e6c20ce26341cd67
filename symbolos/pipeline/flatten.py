"""
Structural flattening of functor output.

A functor may return one record, a list, or an arbitrary nesting such as
``{"primary": obj, "related": [...]}``. Every embedded symbolic object is
collected exactly once (by id), in pre-order with siblings kept in their
natural order. Containers are visited at most once by identity, so
self-referencing structures terminate.
"""

from typing import Any, Iterable, List, Mapping, Set

from pydantic import BaseModel

from symbolos.models.object import SymbolicObject, looks_symbolic, revive_object


def _children(value: Any) -> Iterable[Any]:
    if isinstance(value, BaseModel):
        children = list(value.__dict__.values())
        if value.__pydantic_extra__:
            children.extend(value.__pydantic_extra__.values())
        return children
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return ()


def flatten_symbolic_objects(value: Any) -> List[SymbolicObject]:
    """All symbolic objects reachable from ``value``."""
    results: List[SymbolicObject] = []
    seen_ids: Set[str] = set()
    visited: Set[int] = set()
    stack: List[Any] = [value]

    while stack:
        current = stack.pop()
        if current is None or isinstance(current, (str, bytes, int, float, bool)):
            continue
        if id(current) in visited:
            continue
        visited.add(id(current))

        if looks_symbolic(current):
            record = revive_object(current)
            if record.id not in seen_ids:
                seen_ids.add(record.id)
                results.append(record)

        stack.extend(reversed(list(_children(current))))

    return results
