"""Tests for symbolic object records and their factory."""

import pytest
from pydantic import ValidationError

from symbolos.models import (
    PipelineArgs,
    PipelineRun,
    SymbolicAction,
    SymbolicObject,
    Transformation,
    WorldArchive,
    WorldFrame,
    create_symbolic_object,
    looks_symbolic,
    object_id,
    revive_object,
)


class TestSymbolicObject:
    def test_requires_id_and_type(self):
        with pytest.raises(ValidationError):
            SymbolicObject(id="", type="Thing")
        with pytest.raises(ValidationError):
            SymbolicObject(id="a", type="")

    def test_extra_fields_are_kept(self):
        obj = SymbolicObject(id="a", type="Thing", colour="red")
        assert obj.colour == "red"
        assert obj.to_json_dict()["colour"] == "red"

    def test_json_uses_camel_case(self):
        obj = SymbolicObject(id="a", type="Thing", root_id="a", parent_id="p")
        data = obj.to_json_dict()
        assert data["rootId"] == "a"
        assert data["parentId"] == "p"
        assert "createdAt" in data
        assert "root_id" not in data

    def test_accepts_camel_case_input(self):
        obj = SymbolicObject.model_validate({"id": "a", "type": "Thing", "rootId": "r"})
        assert obj.root_id == "r"


class TestFactory:
    def test_generates_kebab_id(self):
        obj = create_symbolic_object("ConwayCell")
        assert obj.id.startswith("conway-cell-")
        assert obj.type == "ConwayCell"

    def test_root_defaults_to_self(self):
        obj = create_symbolic_object("Thing", id="t1")
        assert obj.root_id == "t1"

    def test_explicit_root_kept(self):
        obj = create_symbolic_object("Thing", id="t1", root_id="origin")
        assert obj.root_id == "origin"

    def test_stamps_timestamps(self):
        obj = create_symbolic_object("Thing")
        assert obj.created_at is not None
        assert obj.updated_at == obj.created_at

    def test_builds_registered_class(self):
        args = create_symbolic_object("PipelineArgs", params={"steps": 2})
        assert isinstance(args, PipelineArgs)
        assert args.store_pipeline_run is True


class TestRevive:
    def test_revives_registered_types(self):
        assert isinstance(
            revive_object({"id": "tx", "type": "Transformation", "method": "m"}), Transformation
        )
        action = revive_object({
            "id": "a1",
            "type": "SymbolicAction",
            "actorId": "x",
            "contextId": "c",
            "instrumentId": "f",
            "purpose": "p",
            "transformationId": "tx",
            "inputId": "i",
            "outputId": "o",
        })
        assert isinstance(action, SymbolicAction)
        assert action.output_id == "o"

    def test_unknown_type_is_plain_object(self):
        obj = revive_object({"id": "x", "type": "Mystery", "n": 1})
        assert type(obj) is SymbolicObject
        assert obj.n == 1

    def test_instance_passes_through(self):
        obj = SymbolicObject(id="x", type="T")
        assert revive_object(obj) is obj


class TestHelpers:
    def test_looks_symbolic(self):
        assert looks_symbolic(SymbolicObject(id="x", type="T"))
        assert looks_symbolic({"id": "x", "type": "T"})
        assert not looks_symbolic({"id": "x"})
        assert not looks_symbolic({"id": "", "type": "T"})
        assert not looks_symbolic({"id": 5, "type": "T"})
        assert not looks_symbolic({"id": "x", "type": 3})
        assert not looks_symbolic("x")

    def test_object_id(self):
        assert object_id(None) is None
        assert object_id({"id": "a"}) == "a"
        assert object_id(SymbolicObject(id="b", type="T")) == "b"
        assert object_id(42) is None
        assert object_id({"id": 5}) is None


class TestWorldFrame:
    def test_members_revived_by_type(self):
        frame = WorldFrame(
            id="frame-1",
            members=[
                {"id": "tx", "type": "Transformation", "method": "m"},
                {"id": "o", "type": "Thing"},
            ],
        )
        assert isinstance(frame.members[0], Transformation)
        assert frame.status == "archived"

    def test_serializes_subclass_fields(self):
        run = PipelineRun(
            id="run", pipeline_id="p", run_id="r", tick_count=2, step_count=2
        )
        frame = WorldFrame(id="frame-2", members=[run])
        data = frame.to_json_dict()
        assert data["members"][0]["pipelineId"] == "p"
        assert data["members"][0]["tickCount"] == 2

    def test_archive_is_frame(self):
        archive = WorldArchive(id="world-1", name="n")
        assert isinstance(archive, WorldFrame)
        assert archive.type == "WorldArchive"
