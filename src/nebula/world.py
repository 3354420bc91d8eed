import random

from esper import World

from nebula.events.bus import EventBus
from nebula.components.board import Board
from nebula.components.game_state import GameState, GameStatus
from nebula.components.hint_state import HintState
from nebula.components.item_inventory import ItemInventory
from nebula.components.moves import MovesCounter
from nebula.components.score import Score
from nebula.components.settings import Settings
from nebula.components.tile_type_registry import TileTypeRegistry
from nebula.components.tile_types import TileTypes
from nebula.constants import GRID_SIZE, MAX_MOVES, TILE_TYPES
from nebula.engine.board_ops import create_board
from nebula.engine.tile_factory import TileFactory


def create_world(
    event_bus: EventBus,
    *,
    size: int = GRID_SIZE,
    rng: random.Random | None = None,
    factory: TileFactory | None = None,
) -> World:
    """Create the session world with every singleton component registered.

    The world carries its random source and tile factory as attributes so systems
    share one seeded stream.
    """
    world = World()
    rng = rng or random.Random()
    setattr(world, "random", rng)
    factory = factory or TileFactory(list(TILE_TYPES.keys()), rng=rng)
    setattr(world, "tile_factory", factory)

    # Global session state resource.
    world.create_entity(
        GameState(status=GameStatus.IDLE),
        Score(),
        MovesCounter(remaining=MAX_MOVES),
        ItemInventory(),
        Settings(),
        HintState(),
    )

    world.create_entity(Board(size=size, grid=create_board(factory, size)))

    # Single registry entity with canonical types
    world.create_entity(
        TileTypeRegistry(),
        TileTypes(types=dict(TILE_TYPES)),
    )
    return world
