"""
Symbolos CLI: run, list and inspect world pipelines.

Commands:
  run      run a pipeline on a new world or one restored from a world file
  list     show the registered pipelines
  inspect  summarize a frame or archive file
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from loguru import logger

from symbolos.config import EngineConfig
from symbolos.errors import SymbolosError
from symbolos.log import configure_logging
from symbolos.models.object import create_symbolic_object, utcnow
from symbolos.pipeline.executor import run_pipeline
from symbolos.pipeline.registry import default_registry, merge_params
from symbolos.store.archive import WorldArchiver, read_world_file
from symbolos.world.snapshot import fork_world, world_from_frame
from symbolos.world.state import generate_run_id, new_world

DEFAULT_PIPELINE = "conway-game-of-life"

app = typer.Typer(help="Symbolos world engine CLI", no_args_is_help=True)


def _number(value: str) -> Any:
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def parse_params(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """``key=value`` pairs to a dict; numeric values become numbers."""
    params: Dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--param")
        params[key] = _number(value)
    return params


@app.command()
def run(
    pipeline: str = typer.Option(DEFAULT_PIPELINE, "--pipeline", "-p", help="Pipeline ID"),
    from_frame: Optional[Path] = typer.Option(None, "--from-frame", help="Frame file to resume from"),
    from_archive: Optional[Path] = typer.Option(None, "--from-archive", help="Archive file to fork from"),
    param: Optional[List[str]] = typer.Option(None, "--param", help="Pipeline parameter as key=value"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    store_frames: bool = typer.Option(False, "--store-frames", help="Write a frame file after every step"),
    archive: bool = typer.Option(False, "--archive", help="Write the whole-run archive"),
    no_compress: bool = typer.Option(False, "--no-compress", help="Write world files as plain JSON"),
    output_root: Optional[str] = typer.Option(None, "--output-root", help="Directory for world files"),
):
    """
    Run a pipeline: resume from a frame, fork from an archive, or start fresh.
    """
    config = EngineConfig.from_env()
    updates: Dict[str, Any] = {"verbose": verbose or config.verbose}
    if store_frames:
        updates["store_frames"] = True
    if archive:
        updates["store_archive"] = True
    if no_compress:
        updates["compress"] = False
    if output_root:
        updates["output_root"] = output_root
    config = config.model_copy(update=updates)
    configure_logging("DEBUG" if config.verbose else config.log_level)

    registry = default_registry()
    cli_params = parse_params(param)

    try:
        definition = registry.get(pipeline)
        params = merge_params(definition, cli_params)

        if from_frame is not None:
            logger.info("Resuming world from {}", from_frame)
            frame = read_world_file(from_frame)
            world = world_from_frame(frame, pipeline_id=definition.id, run_id=generate_run_id())
            logger.info("World restored at tick {}, step {}", world.tick, world.step)
        elif from_archive is not None:
            logger.info("Forking world from archive {}", from_archive)
            source = read_world_file(from_archive)
            base = world_from_frame(
                source,
                pipeline_id=source.pipeline_id or definition.id,
                run_id=source.run_id or generate_run_id(),
            )
            world = fork_world(base, cli_params)
            logger.info("Forked world {} from run {}", world.run_id, base.run_id)
        else:
            world = new_world(definition.id)
            logger.info("New world initialized with run id {}", world.run_id)

        args = create_symbolic_object(
            "PipelineArgs",
            id=f"user-args-{int(utcnow().timestamp() * 1000)}",
            label="User Arguments",
            pipeline_id=definition.id,
            run_id=world.run_id,
            params=params,
        )
        archiver = WorldArchiver(config) if (config.store_frames or config.store_archive) else None
        result = asyncio.run(
            run_pipeline(world, args, definition.build_steps(args), config=config, archiver=archiver)
        )
    except (SymbolosError, ValueError) as err:
        logger.error("Run failed: {}", err)
        raise typer.Exit(code=1)

    typer.echo(f"Pipeline: {definition.id} ({definition.label})")
    typer.echo(f"Run ID: {world.run_id}")
    typer.echo(f"Final tick: {result.tick_count}")
    typer.echo(f"Artifacts: {len(world.artifacts)}")
    typer.echo(f"Actions: {len(result.actions)}")
    typer.echo("Parameters:")
    for key, value in params.items():
        typer.echo(f"  {key}: {value}")
    if archiver is not None and config.store_archive:
        typer.echo(f"Archive: {archiver.archive_path(world)}")


@app.command("list")
def list_pipelines():
    """
    List available pipeline IDs
    """
    for definition in default_registry().list():
        typer.echo(f"{definition.id} - {definition.label}")


@app.command()
def inspect(path: Path):
    """
    Summarize a frame or archive file
    """
    configure_logging()
    try:
        frame = read_world_file(path)
    except SymbolosError as err:
        logger.error("{}", err)
        raise typer.Exit(code=1)

    typer.echo(f"{frame.type}: {frame.id}")
    typer.echo(f"Pipeline: {frame.pipeline_id}  Run: {frame.run_id}")
    typer.echo(f"Tick: {frame.tick}  Step: {frame.step}  Members: {len(frame.members)}")
    world = world_from_frame(frame, pipeline_id=frame.pipeline_id or "", run_id=frame.run_id or "")
    for type_name, count in world.summary().items():
        typer.echo(f"  {type_name}: {count}")


if __name__ == "__main__":
    app()
