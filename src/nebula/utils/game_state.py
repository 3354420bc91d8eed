from __future__ import annotations

from typing import Type, TypeVar

from esper import World

from nebula.components.board import Board
from nebula.components.game_state import GameState, GameStatus
from nebula.components.hint_state import HintState
from nebula.components.item_inventory import ItemInventory
from nebula.components.moves import MovesCounter
from nebula.components.score import Score
from nebula.components.settings import Settings
from nebula.components.tile_type_registry import TileTypeRegistry
from nebula.components.tile_types import TileTypes
from nebula.events.bus import EVENT_GAME_OVER, EVENT_GAME_STATUS_CHANGED, EventBus

T = TypeVar("T")


def get_singleton(world: World, component_type: Type[T]) -> T:
    """Return the only instance of component_type, raising when it was never registered."""
    for _, component in world.get_component(component_type):
        return component
    raise RuntimeError(f"{component_type.__name__} component not found")


def get_game_state(world: World) -> GameState:
    return get_singleton(world, GameState)


def get_board(world: World) -> Board:
    return get_singleton(world, Board)


def get_score(world: World) -> Score:
    return get_singleton(world, Score)


def get_moves(world: World) -> MovesCounter:
    return get_singleton(world, MovesCounter)


def get_inventory(world: World) -> ItemInventory:
    return get_singleton(world, ItemInventory)


def get_settings(world: World) -> Settings:
    return get_singleton(world, Settings)


def get_hint_state(world: World) -> HintState:
    return get_singleton(world, HintState)


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def set_game_status(world: World, event_bus: EventBus, status: GameStatus) -> None:
    """Update the session status and emit a change event when it differs."""

    state = get_game_state(world)
    previous = state.status
    if previous == status:
        return
    state.status = status
    event_bus.emit(EVENT_GAME_STATUS_CHANGED, previous=previous, status=status)


def input_allowed(world: World) -> bool:
    return get_game_state(world).status == GameStatus.IDLE


def finish_turn(world: World, event_bus: EventBus) -> GameStatus:
    """Settle the session after a resolution or swap revert completes.

    The game ends once no moves remain; otherwise input is unlocked again.
    """
    moves = get_moves(world)
    if moves.remaining <= 0:
        set_game_status(world, event_bus, GameStatus.GAMEOVER)
        event_bus.emit(EVENT_GAME_OVER, score=get_score(world).value)
        return GameStatus.GAMEOVER
    set_game_status(world, event_bus, GameStatus.IDLE)
    return GameStatus.IDLE
