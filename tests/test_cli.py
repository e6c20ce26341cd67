"""Tests for the command line interface."""

import gzip
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from symbolos.cli import app, parse_params

runner = CliRunner()


def _archive_dir(root: Path) -> Path:
    [run_dir] = list((root / "archives").iterdir())
    return run_dir


class TestParseParams:
    def test_numbers_and_strings(self):
        assert parse_params(["steps=3", "ratio=0.5", "seedPattern=toad"]) == {
            "steps": 3,
            "ratio": 0.5,
            "seedPattern": "toad",
        }

    def test_empty(self):
        assert parse_params(None) == {}

    def test_rejects_missing_separator(self):
        with pytest.raises(typer.BadParameter):
            parse_params(["steps"])


class TestCommands:
    def test_list(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "conway-game-of-life" in result.output

    def test_run_new_world(self, tmp_path):
        result = runner.invoke(app, [
            "run", "--param", "steps=2", "--param", "width=4", "--param", "height=4",
            "--output-root", str(tmp_path),
        ])
        assert result.exit_code == 0, result.output
        assert "Final tick: 2" in result.output
        assert "steps: 2" in result.output

    def test_unknown_pipeline(self, tmp_path):
        result = runner.invoke(app, ["run", "--pipeline", "nope", "--output-root", str(tmp_path)])
        assert result.exit_code == 1

    def test_archive_then_fork_and_inspect(self, tmp_path):
        result = runner.invoke(app, [
            "run", "--param", "steps=1", "--param", "width=3", "--param", "height=3",
            "--archive", "--output-root", str(tmp_path),
        ])
        assert result.exit_code == 0, result.output
        archive = _archive_dir(tmp_path) / "conway-game-of-life.world.json.gz"
        assert archive.exists()
        assert f"Archive: {archive}" in result.output

        forked = runner.invoke(app, [
            "run", "--from-archive", str(archive), "--param", "steps=2",
            "--param", "width=3", "--param", "height=3",
            "--output-root", str(tmp_path / "fork"),
        ])
        assert forked.exit_code == 0, forked.output
        assert "Final tick: 3" in forked.output

        inspected = runner.invoke(app, ["inspect", str(archive)])
        assert inspected.exit_code == 0, inspected.output
        assert "WorldArchive" in inspected.output
        assert "ConwayCell: 18" in inspected.output

    def test_store_frames_uncompressed(self, tmp_path):
        result = runner.invoke(app, [
            "run", "--param", "steps=1", "--param", "width=3", "--param", "height=3",
            "--store-frames", "--no-compress", "--output-root", str(tmp_path),
        ])
        assert result.exit_code == 0, result.output
        names = sorted(p.name for p in _archive_dir(tmp_path).iterdir())
        assert names == [
            "frame-1-tick-0.world.json.gz",
            "frame-2-tick-1.world.json.gz",
            "frame-3-tick-1.world.json.gz",
        ]
        assert (_archive_dir(tmp_path) / names[0]).read_bytes()[:1] == b"{"

    def test_resume_from_frame(self, tmp_path):
        runner.invoke(app, [
            "run", "--param", "steps=1", "--param", "width=3", "--param", "height=3",
            "--store-frames", "--output-root", str(tmp_path),
        ])
        frame = _archive_dir(tmp_path) / "frame-3-tick-1.world.json.gz"
        result = runner.invoke(app, [
            "run", "--from-frame", str(frame), "--param", "steps=1",
            "--param", "width=3", "--param", "height=3",
            "--output-root", str(tmp_path / "resumed"),
        ])
        assert result.exit_code == 0, result.output
        assert "Final tick: 2" in result.output

    def test_inspect_missing_file(self, tmp_path):
        result = runner.invoke(app, ["inspect", str(tmp_path / "nope.world.json.gz")])
        assert result.exit_code == 1

    def test_inspect_truncated_file(self, tmp_path):
        path = tmp_path / "cut.world.json.gz"
        path.write_bytes(gzip.compress(b'{"id": "f", "type": "WorldFrame"}')[:-8])
        result = runner.invoke(app, ["inspect", str(path)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, EOFError)
