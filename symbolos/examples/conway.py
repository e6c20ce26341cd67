"""
Conway's Game of Life as a world pipeline.

Each generation is a ``Constellation`` whose ``objects`` are ``ConwayCell``
records (``position`` [x, y], ``status`` alive/dead). Cells never mutate:
generation t+1 is a new constellation with new cell ids pointing back at
their prior cell through ``generated_from``.
"""

from typing import Any, Dict, List, Tuple

from symbolos.examples.common import link_symbols
from symbolos.models.object import SymbolicObject, create_symbolic_object, revive_object
from symbolos.models.pipeline import FunctorStep
from symbolos.models.provenance import PipelineArgs
from symbolos.pipeline.registry import PipelineDefinition

PATTERNS: Dict[str, List[Tuple[int, int]]] = {
    "glider": [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)],
    "blinker": [(1, 0), (1, 1), (1, 2)],
    "beacon": [(0, 0), (1, 0), (0, 1), (2, 2), (3, 2), (3, 3)],
    "toad": [(1, 1), (2, 1), (3, 1), (0, 2), (1, 2), (2, 2)],
}

NEIGHBOURS = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]


def cells_of(constellation: SymbolicObject) -> List[SymbolicObject]:
    """Cells of a constellation, revived if it was loaded from a snapshot."""
    return [revive_object(c) for c in getattr(constellation, "objects", None) or []]


def alive_positions(constellation: SymbolicObject) -> List[Tuple[int, int]]:
    return sorted(
        (c.position[0], c.position[1]) for c in cells_of(constellation) if c.status == "alive"
    )


class InitializeConwayCells:
    """Seed a width x height grid with a named pattern."""

    id = "functor-init-conway-cells"
    name = "InitializeConwayCells"
    method = "seed-conway"
    input_type = "Conway"
    output_type = "Constellation<ConwayCell>"

    def apply(self, input: Dict[str, Any], context: Any) -> SymbolicObject:
        width = int(input["width"])
        height = int(input["height"])
        seed = set(PATTERNS.get(input["seedPattern"], PATTERNS["glider"]))
        constellation_id = "constellation-conway-t0"

        cells = [
            create_symbolic_object(
                "ConwayCell",
                id=f"cell-{x}-{y}-t0",
                position=[x, y],
                tick=0,
                status="alive" if (x, y) in seed else "dead",
                root_id=constellation_id,
            )
            for y in range(height)
            for x in range(width)
        ]
        return create_symbolic_object(
            "Constellation",
            id=constellation_id,
            source="symbolos",
            status="candidate",
            revision_number=1,
            objects=cells,
        )

    def describe_provenance(self, input: Dict[str, Any], output: Any) -> Dict[str, Any]:
        return {
            "seedPattern": input["seedPattern"],
            "width": input["width"],
            "height": input["height"],
            "timestamp": output.created_at.isoformat(),
        }


class StepConwayCells:
    """Apply the birth/survival rules once over the constellation's bounds."""

    id = "functor-step-conway-cells"
    name = "StepConway"
    method = "step-conway"
    input_type = "Constellation<ConwayCell>"
    output_type = "Constellation<ConwayCell>"

    def apply(self, input: Dict[str, Any], context: Any) -> SymbolicObject:
        constellation = input["constellation"]
        step = input["step"]
        grid = {(c.position[0], c.position[1]): c for c in cells_of(constellation)}
        root_id = constellation.root_id or constellation.id

        cells = []
        if grid:
            xs = [x for x, _ in grid]
            ys = [y for _, y in grid]
            for y in range(min(ys), max(ys) + 1):
                for x in range(min(xs), max(xs) + 1):
                    alive = sum(
                        1
                        for dx, dy in NEIGHBOURS
                        if (x + dx, y + dy) in grid and grid[(x + dx, y + dy)].status == "alive"
                    )
                    prev = grid.get((x, y))
                    was_alive = prev is not None and prev.status == "alive"
                    lives = alive == 3 or (was_alive and alive == 2)
                    cells.append(
                        create_symbolic_object(
                            "ConwayCell",
                            id=f"cell-{x}-{y}-t{step}",
                            position=[x, y],
                            tick=step,
                            status="alive" if lives else "dead",
                            root_id=root_id,
                            generated_from={"priorId": prev.id if prev else ""},
                        )
                    )

        return create_symbolic_object(
            "Constellation",
            id=f"constellation-conway-t{step}",
            source="symbolos",
            status="candidate",
            root_id=root_id,
            revision_number=step,
            parent_id=constellation.id,
            objects=cells,
        )

    def describe_provenance(self, input: Dict[str, Any], output: Any) -> Dict[str, Any]:
        return {
            "tick": input["step"],
            "from": input["constellation"].id,
            "timestamp": output.created_at.isoformat(),
        }


initialize_conway_cells = InitializeConwayCells()
step_conway_cells = StepConwayCells()


def _generation(context: Any, n: int) -> SymbolicObject:
    """The constellation stored for generation ``n``."""
    value = context.expect(f"Conway_t{n}", (list, SymbolicObject))
    return value[0] if isinstance(value, list) else value


def build_conway_steps(args: PipelineArgs) -> List[FunctorStep]:
    params = args.params
    steps = [
        FunctorStep(
            id="initialize-conway",
            functor=initialize_conway_cells,
            purpose="initialize-conway-cells",
            resolve_input=lambda _, ctx: {
                "width": params.get("width") or 9,
                "height": params.get("height") or 9,
                "seedPattern": params.get("seedPattern") or "glider",
            },
            store_output_as="Conway_t0",
            tick_advance=False,
        )
    ]
    for i in range(int(params.get("steps") or 0)):
        steps.append(
            FunctorStep(
                id=f"step-conway-{i + 1}",
                functor=step_conway_cells,
                purpose="step-conway-cells",
                resolve_input=lambda _, ctx, i=i: {
                    "step": i + 1,
                    "constellation": _generation(ctx, i),
                },
                store_output_as=f"Conway_t{i + 1}",
            )
        )
        steps.append(
            FunctorStep(
                id=f"link-conway-{i + 1}",
                functor=link_symbols,
                purpose="link-conway-frames",
                resolve_input=lambda _, ctx, i=i: {
                    "from": _generation(ctx, i),
                    "to": _generation(ctx, i + 1),
                    "relationship": "next",
                    "label": "Next Generation",
                },
                store_output_as=f"ConwayLink_t{i + 1}",
                tick_advance=False,
            )
        )
    return steps


conway_game = PipelineDefinition(
    id="conway-game-of-life",
    label="Conway's Game of Life",
    description="Run Conway's Game of Life simulation over a fixed number of iterations.",
    defaults={"steps": 20, "seedPattern": "glider", "width": 9, "height": 9},
    required=["steps"],
    build_steps=build_conway_steps,
)
