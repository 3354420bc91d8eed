from typing import Optional, Tuple

from esper import World

from nebula.components.game_state import GameStatus, PowerupMode
from nebula.components.item_inventory import ItemKind
from nebula.constants import SWAP_REVERT_DELAY
from nebula.engine.board_ops import check_position, find_matches, is_adjacent, swap_tiles
from nebula.events.bus import (
    EventBus,
    EVENT_BOARD_CHANGED,
    EVENT_GAME_RESET,
    EVENT_ITEM_USE_REQUEST,
    EVENT_MOUSE_PRESS,
    EVENT_MOVES_CHANGED,
    EVENT_SWAP_REVERTED,
    EVENT_TICK,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAPPED,
)
from nebula.utils.game_state import (
    finish_turn,
    get_board,
    get_game_state,
    get_moves,
    input_allowed,
    set_game_status,
)

Position = Tuple[int, int]


class BoardSystem:
    """Turns tile clicks into selections, swaps and hammer targets.

    A swap always costs one move. When it creates no match the tiles are swapped
    back after revert_delay seconds of ticks; the move is not refunded.
    """

    def __init__(self, world: World, event_bus: EventBus, *, revert_delay: float = SWAP_REVERT_DELAY):
        self.world = world
        self.event_bus = event_bus
        self.revert_delay = revert_delay
        self._pending_revert: Optional[Tuple[Position, Position]] = None
        self._revert_elapsed = 0.0
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_GAME_RESET, self.on_game_reset)

    @property
    def selected(self) -> Optional[Position]:
        return get_board(self.world).selected

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        board = get_board(self.world)
        check_position(board.grid, (row, col))
        if not input_allowed(self.world):
            return
        if get_game_state(self.world).powerup_mode == PowerupMode.HAMMER:
            self.event_bus.emit(EVENT_ITEM_USE_REQUEST, kind=ItemKind.HAMMER, target=(row, col))
            return
        if board.selected is None:
            board.selected = (row, col)
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
            return
        src = board.selected
        if src == (row, col):
            return
        if is_adjacent(src[0], src[1], row, col):
            board.selected = None
            self.swap(src, (row, col))
        else:
            # Move selection to the new tile
            board.selected = (row, col)
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)

    def swap(self, src: Position, dst: Position) -> bool:
        """Apply a player swap; returns True when it produced a match."""
        board = get_board(self.world)
        board.grid = swap_tiles(board.grid, src, dst)
        moves = get_moves(self.world)
        moves.remaining -= 1
        self.event_bus.emit(EVENT_MOVES_CHANGED, remaining=moves.remaining, delta=-1)
        matched = bool(find_matches(board.grid))
        self.event_bus.emit(EVENT_TILE_SWAPPED, src=src, dst=dst, matched=matched)
        if matched:
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason='swap')
        else:
            set_game_status(self.world, self.event_bus, GameStatus.SWAPPING)
            self._pending_revert = (src, dst)
            self._revert_elapsed = 0.0
            if self.revert_delay <= 0.0:
                self._revert()
        return matched

    def on_tick(self, sender, **kwargs):
        if self._pending_revert is None:
            return
        self._revert_elapsed += float(kwargs.get('dt', 1 / 60))
        if self._revert_elapsed >= self.revert_delay:
            self._revert()

    def _revert(self):
        src, dst = self._pending_revert
        self._pending_revert = None
        self._revert_elapsed = 0.0
        board = get_board(self.world)
        board.grid = swap_tiles(board.grid, src, dst)
        self.event_bus.emit(EVENT_SWAP_REVERTED, src=src, dst=dst)
        finish_turn(self.world, self.event_bus)

    def on_mouse_press(self, sender, **kwargs):
        # Right-click (arcade button 4) always clears the current selection.
        if kwargs.get('button') != 4:
            return
        board = get_board(self.world)
        prev = board.selected
        if prev is not None:
            board.selected = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason='right_click', prev_row=prev[0], prev_col=prev[1])

    def on_game_reset(self, sender, **kwargs):
        self._pending_revert = None
        self._revert_elapsed = 0.0
