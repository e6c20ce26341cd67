"""Tests for transformation and action recording."""

from symbolos.models import FunctorResult, FunctorStep, SymbolicObject
from symbolos.provenance.recorder import (
    UNKNOWN_ACTOR,
    UNKNOWN_CONTEXT,
    build_transformation,
    create_pipeline_run,
    drain_batched_entries,
    enqueue_outputs,
    record_action,
    resolve_actor,
)
from symbolos.world.context import WorldContext


class EchoFunctor:
    id = "functor-echo"
    name = "Echo"
    method = "echo"
    input_type = "T"
    output_type = "T"

    def __init__(self):
        self.calls = []

    def apply(self, input, context):
        return input

    def describe_provenance(self, input, output):
        self.calls.append((input, output))
        return {"seen": True}


def _obj(id_: str, root_id=None) -> SymbolicObject:
    return SymbolicObject(id=id_, type="T", root_id=root_id)


class TestBuildTransformation:
    def test_records_ids_and_metadata(self):
        functor = EchoFunctor()
        tx = build_transformation(functor, _obj("in"), _obj("out"), tick=3)
        assert tx.id.startswith("tx-")
        assert tx.type == "Transformation"
        assert tx.method == "echo"
        assert tx.label == "Echo"
        assert tx.tick == 3
        assert tx.input_id == "in"
        assert tx.output_id == "out"
        assert tx.input_type == "T"
        assert tx.metadata == {"seen": True}
        assert tx.root_id == "transformation-root"
        assert tx.status == "complete"

    def test_list_output_ids(self):
        tx = build_transformation(EchoFunctor(), {"n": 1}, [_obj("a"), _obj("b")], tick=1)
        assert tx.input_id is None
        assert tx.output_id == ["a", "b"]

    def test_functor_result_output_ids(self):
        result = FunctorResult(outputs=[_obj("a")], primary=_obj("p"))
        tx = build_transformation(EchoFunctor(), _obj("in"), result, tick=1)
        assert tx.output_id == ["a"]

    def test_no_output(self):
        functor = EchoFunctor()
        tx = build_transformation(functor, _obj("in"), None, tick=1)
        assert tx.output_id is None
        assert tx.metadata == {}
        assert functor.calls == []


class TestActorResolution:
    def setup_method(self):
        self.context = WorldContext()

    def test_primary_root_wins(self):
        self.context.acting_frame = _obj("actor")
        entry = _obj("e", root_id="entry-root")
        assert resolve_actor(entry, self.context, _obj("p", root_id="primary-root")) == "primary-root"

    def test_acting_frame_next(self):
        self.context.acting_frame = _obj("actor")
        assert resolve_actor(_obj("e", root_id="entry-root"), self.context) == "actor"

    def test_entry_root_next(self):
        assert resolve_actor(_obj("e", root_id="entry-root"), self.context) == "entry-root"

    def test_unknown_actor(self):
        assert resolve_actor(_obj("e"), self.context) == UNKNOWN_ACTOR


class TestRecordAction:
    def setup_method(self):
        self.context = WorldContext()

    def test_inserts_action(self):
        entry = _obj("o1", root_id="o1")
        action = record_action(entry, "tx-1", "functor-echo", "testing", 2, self.context)
        assert self.context.artifacts[action.id] is action
        assert action.output_id == "o1"
        assert action.input_id == "o1"
        assert action.transformation_id == "tx-1"
        assert action.instrument_id == "functor-echo"
        assert action.purpose == "testing"
        assert action.tick == 2
        assert action.status == "completed"
        assert action.label == "T Action"
        assert action.root_id == "action-root"
        assert action.context_id == UNKNOWN_CONTEXT

    def test_contextual_frame(self):
        self.context.contextual_frame = _obj("ctx-frame")
        action = record_action(_obj("o1"), "tx", "f", "p", 1, self.context)
        assert action.context_id == "ctx-frame"

    def test_input_falls_back_to_entry_id(self):
        action = record_action(_obj("o1"), "tx", "f", "p", 1, self.context)
        assert action.input_id == "o1"
        assert action.actor_id == UNKNOWN_ACTOR

    def test_primary_drives_input(self):
        action = record_action(
            _obj("o1", root_id="o1"), "tx", "f", "p", 1, self.context, primary=_obj("p", root_id="lineage")
        )
        assert action.input_id == "lineage"
        assert action.actor_id == "lineage"
        assert action.output_id == "o1"

    def test_each_call_is_distinct(self):
        entry = _obj("o1")
        first = record_action(entry, "tx", "f", "p", 1, self.context)
        second = record_action(entry, "tx", "f", "p", 1, self.context)
        assert first.id != second.id
        assert len(self.context.artifacts) == 2


class TestBatching:
    def test_enqueue_and_drain(self):
        context = WorldContext()
        outputs = [_obj("a"), _obj("b")]
        primary = _obj("p", root_id="root-p")
        enqueue_outputs(
            context,
            outputs,
            transformation_ids={"a": "tx-a", "b": "tx-b"},
            primaries={"a": primary},
            instrument_id="f",
            purpose="p",
            tick=4,
            step_index=1,
        )
        assert [b.step_prefix for b in context.batched_entries] == ["002", "002"]

        actions = drain_batched_entries(context)
        assert context.batched_entries == []
        assert [a.output_id for a in actions] == ["a", "b"]
        assert [a.transformation_id for a in actions] == ["tx-a", "tx-b"]
        assert actions[0].actor_id == "root-p"
        assert actions[1].actor_id == UNKNOWN_ACTOR
        assert all(a.tick == 4 for a in actions)


class TestPipelineRun:
    def _steps(self):
        functor = EchoFunctor()
        return [
            FunctorStep(id="one", functor=functor, purpose="p"),
            FunctorStep(id="two", functor=functor, purpose="p"),
        ]

    def test_plain_run(self):
        run = create_pipeline_run("p", "r", tick_count=2, steps=self._steps())
        assert run.label == "Pipeline Run"
        assert run.step_count == 2
        assert run.step_ids == ["one", "two"]
        assert run.forked_from_run_id is None
        assert run.completed_at == run.created_at

    def test_forked_run(self):
        run = create_pipeline_run("p", "r", tick_count=0, steps=[], forked_from_run_id="r0")
        assert run.label == "Forked Run from r0"
        assert run.forked_from_run_id == "r0"
