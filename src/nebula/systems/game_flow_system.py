from __future__ import annotations

from esper import World

from nebula.components.game_state import GameStatus, PowerupMode
from nebula.constants import MAX_MOVES
from nebula.engine.board_ops import create_board
from nebula.events.bus import (
    EVENT_CLEAR_DATA_REQUEST,
    EVENT_GAME_RESET,
    EVENT_GAME_RESET_REQUEST,
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_HINT_UPDATED,
    EVENT_ITEMS_CHANGED,
    EVENT_MOVES_CHANGED,
    EVENT_POWERUP_MODE_CHANGED,
    EVENT_SCORE_CHANGED,
    EventBus,
)
from nebula.utils.game_state import (
    get_board,
    get_game_state,
    get_hint_state,
    get_inventory,
    get_moves,
    get_score,
    set_game_status,
)


class GameFlowSystem:
    """Starts fresh sessions and wipes stored progress on request."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_GAME_RESET_REQUEST, self._on_reset_request)
        self.event_bus.subscribe(EVENT_CLEAR_DATA_REQUEST, self._on_clear_data_request)

    def _on_reset_request(self, sender, **kwargs) -> None:
        self.reset()

    def _on_clear_data_request(self, sender, **kwargs) -> None:
        score = get_score(self.world)
        score.high_score = 0
        self.event_bus.emit(EVENT_HIGH_SCORE_CHANGED, high_score=0)
        self.reset()

    def reset(self) -> None:
        """Discard the current board and counters; the high score survives."""
        board = get_board(self.world)
        factory = getattr(self.world, "tile_factory", None)
        board.grid = create_board(factory, board.size)
        board.selected = None

        score = get_score(self.world)
        score.value = 0
        moves = get_moves(self.world)
        moves.remaining = MAX_MOVES
        inventory = get_inventory(self.world)
        inventory.reset()
        hint = get_hint_state(self.world)
        hint.text = None
        hint.loading = False

        state = get_game_state(self.world)
        mode_changed = state.powerup_mode != PowerupMode.NONE
        state.powerup_mode = PowerupMode.NONE
        self.event_bus.emit(EVENT_GAME_RESET)
        set_game_status(self.world, self.event_bus, GameStatus.IDLE)
        if mode_changed:
            self.event_bus.emit(EVENT_POWERUP_MODE_CHANGED, mode=PowerupMode.NONE)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, delta=0)
        self.event_bus.emit(EVENT_MOVES_CHANGED, remaining=moves.remaining, delta=0)
        self.event_bus.emit(EVENT_ITEMS_CHANGED, counts=dict(inventory.counts))
        self.event_bus.emit(EVENT_HINT_UPDATED, text=None)
