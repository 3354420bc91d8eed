from __future__ import annotations

import random
from typing import Iterable, List, Sequence

from nebula.components.board import Grid
from nebula.components.tile import Tile
from nebula.engine.tile_factory import TileFactory
from nebula.events.bus import EVENT_TICK, EventBus
from nebula.utils.game_state import get_board
from nebula.world import create_world

PATTERN_TYPES = ['a', 'b', 'c', 'd']


class ScriptedFactory(TileFactory):
    """Hands out queued tile types first, then alternates 'x'/'y' so refills stay match-free."""

    def __init__(self, script: Iterable[str] = ()):
        super().__init__(['x', 'y', 'z'], rng=random.Random(0))
        self.script: List[str] = list(script)
        self.generated: List[Tile] = []
        self._flip = False

    def generate(self, row: int, col: int) -> Tile:
        if self.script:
            type_name = self.script.pop(0)
        else:
            type_name = 'x' if not self._flip else 'y'
            self._flip = not self._flip
        tile = Tile(id=self._next_id(), type_name=type_name, row=row, col=col)
        self.generated.append(tile)
        return tile


def grid_from_types(rows: Sequence[Sequence[str | None]], first_id: int = 1000) -> Grid:
    grid: Grid = []
    next_id = first_id
    for r, row in enumerate(rows):
        cells = []
        for c, type_name in enumerate(row):
            if type_name is None:
                cells.append(None)
            else:
                cells.append(Tile(id=next_id, type_name=type_name, row=r, col=c))
                next_id += 1
        grid.append(cells)
    return grid


def pattern_types(size: int = 5) -> List[List[str]]:
    """Match-free layout: rows alternate two types, columns cycle through four."""
    return [[PATTERN_TYPES[(r + 2 * c) % 4] for c in range(size)] for r in range(size)]


def pattern_grid(size: int = 5) -> Grid:
    return grid_from_types(pattern_types(size))


def types_of(grid: Grid) -> List[List[str | None]]:
    return [[tile.type_name if tile is not None else None for tile in row] for row in grid]


def drive_ticks(bus: EventBus, count: int = 30, dt: float = 0.05) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def make_world(bus: EventBus, types: Sequence[Sequence[str | None]] | None = None, script: Iterable[str] = ()):
    """World on a 5x5 board laid out from types (match-free pattern by default)."""
    world = create_world(bus, size=5, rng=random.Random(0))
    world.tile_factory = ScriptedFactory(script)
    get_board(world).grid = grid_from_types(types if types is not None else pattern_types(5))
    return world


def record(bus: EventBus, event_name: str) -> List[dict]:
    """Collect the payload of every emission of event_name."""
    seen: List[dict] = []

    def handler(sender, **kwargs):
        seen.append(kwargs)

    bus.subscribe(event_name, handler)
    return seen
