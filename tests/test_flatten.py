"""Tests for structural flattening of functor output."""

from symbolos.models import SymbolicObject, Transformation
from symbolos.pipeline.flatten import flatten_symbolic_objects


def _obj(id_: str, **extra) -> SymbolicObject:
    return SymbolicObject(id=id_, type="T", **extra)


class TestFlatten:
    def test_single_object(self):
        assert [o.id for o in flatten_symbolic_objects(_obj("a"))] == ["a"]

    def test_list_keeps_order(self):
        result = flatten_symbolic_objects([_obj("a"), _obj("b"), _obj("c")])
        assert [o.id for o in result] == ["a", "b", "c"]

    def test_nested_bundle(self):
        bundle = {"primary": _obj("p"), "related": [_obj("r1"), {"deep": _obj("r2")}]}
        assert [o.id for o in flatten_symbolic_objects(bundle)] == ["p", "r1", "r2"]

    def test_objects_nested_in_objects(self):
        parent = _obj("parent", objects=[_obj("c1"), _obj("c2")])
        assert [o.id for o in flatten_symbolic_objects(parent)] == ["parent", "c1", "c2"]

    def test_duplicates_captured_once(self):
        a = _obj("a")
        result = flatten_symbolic_objects([a, {"again": a}, _obj("a")])
        assert [o.id for o in result] == ["a"]

    def test_mappings_are_revived(self):
        result = flatten_symbolic_objects([{"id": "tx", "type": "Transformation", "method": "m"}])
        assert isinstance(result[0], Transformation)

    def test_ignores_scalars_and_partial_records(self):
        assert flatten_symbolic_objects(None) == []
        assert flatten_symbolic_objects("text") == []
        assert flatten_symbolic_objects([1, 2.5, {"id": "only-id"}]) == []

    def test_non_string_ids_are_not_records(self):
        assert flatten_symbolic_objects({"id": 5, "type": "T"}) == []
        assert [o.id for o in flatten_symbolic_objects([{"id": 7, "type": "T"}, _obj("a")])] == ["a"]

    def test_reference_cycle_terminates(self):
        bag = {"item": _obj("a")}
        bag["self"] = bag
        loop = [bag]
        loop.append(loop)
        assert [o.id for o in flatten_symbolic_objects(loop)] == ["a"]

    def test_idempotent(self):
        structure = {"x": [_obj("a"), {"y": _obj("b", children=[_obj("c")])}]}
        once = flatten_symbolic_objects(structure)
        twice = flatten_symbolic_objects(once)
        assert {o.id for o in once} == {o.id for o in twice} == {"a", "b", "c"}
