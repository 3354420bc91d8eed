from __future__ import annotations

from typing import Dict, Tuple

from esper import World

from nebula.components.game_state import GameStatus, PowerupMode
from nebula.components.item_inventory import ItemKind
from nebula.constants import EXTRA_MOVES_BONUS
from nebula.engine.board_ops import apply_gravity, check_position, clear_positions, shuffle_board
from nebula.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_ITEM_AWARDED,
    EVENT_ITEM_INSUFFICIENT,
    EVENT_ITEM_USE_REQUEST,
    EVENT_ITEM_USED,
    EVENT_ITEMS_CHANGED,
    EVENT_MOVES_CHANGED,
    EVENT_POWERUP_MODE_CHANGED,
    EVENT_REWARD_TOAST,
    EventBus,
)
from nebula.systems.settings_system import emit_feedback
from nebula.utils.game_state import (
    get_board,
    get_game_state,
    get_inventory,
    get_moves,
    input_allowed,
)

REWARD_MESSAGES: Dict[ItemKind, Tuple[str, str]] = {
    ItemKind.HAMMER: ("Earned 1 hammer!", "hammer"),
    ItemKind.SHUFFLE: ("Earned 1 shuffle!", "shuffle"),
    ItemKind.EXTRA_MOVES: ("Triple combo! Earned +5 moves!", "hourglass"),
}


class ItemSystem:
    """Owns the power-up inventory: credits awards and applies item effects.

    Logic:
      - On EVENT_ITEM_AWARDED: add to the inventory and announce a reward toast.
      - On EVENT_ITEM_USE_REQUEST: spend one item and mutate the board or moves.
        Using an item that is not held is a no-op reported via EVENT_ITEM_INSUFFICIENT.
      - The hammer is two-phase: a request without a target arms it, the next
        tile click (forwarded by BoardSystem with target=(r,c)) fires it.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_ITEM_AWARDED, self.on_item_awarded)
        self.event_bus.subscribe(EVENT_ITEM_USE_REQUEST, self.on_use_request)

    def on_item_awarded(self, sender, **kwargs):
        kind = kwargs.get('kind')
        amount = int(kwargs.get('amount', 1))
        if not isinstance(kind, ItemKind) or amount <= 0:
            return
        inventory = get_inventory(self.world)
        inventory.add(kind, amount)
        self._emit_items_changed()
        text, icon = REWARD_MESSAGES[kind]
        self.event_bus.emit(EVENT_REWARD_TOAST, text=text, icon=icon)
        emit_feedback(self.world, self.event_bus, 'reward', (50, 30, 50))

    def on_use_request(self, sender, **kwargs):
        kind = kwargs.get('kind')
        if kind == ItemKind.HAMMER:
            target = kwargs.get('target')
            if target is None:
                self.toggle_hammer()
            else:
                self.use_hammer(target)
        elif kind == ItemKind.SHUFFLE:
            self.use_shuffle()
        elif kind == ItemKind.EXTRA_MOVES:
            self.use_extra_moves()

    def toggle_hammer(self) -> bool:
        """Arm the hammer (or disarm it when already armed). Returns True when armed."""
        state = get_game_state(self.world)
        if state.powerup_mode == PowerupMode.HAMMER:
            self._set_mode(PowerupMode.NONE)
            return False
        if get_inventory(self.world).get(ItemKind.HAMMER) <= 0:
            self.event_bus.emit(EVENT_ITEM_INSUFFICIENT, kind=ItemKind.HAMMER)
            return False
        self._set_mode(PowerupMode.HAMMER)
        return True

    def use_hammer(self, target: Tuple[int, int]) -> bool:
        state = get_game_state(self.world)
        if state.powerup_mode != PowerupMode.HAMMER or not input_allowed(self.world):
            return False
        board = get_board(self.world)
        check_position(board.grid, target)
        if not get_inventory(self.world).spend(ItemKind.HAMMER):
            self._set_mode(PowerupMode.NONE)
            self.event_bus.emit(EVENT_ITEM_INSUFFICIENT, kind=ItemKind.HAMMER)
            return False
        self._set_mode(PowerupMode.NONE)
        board.selected = None
        factory = getattr(self.world, 'tile_factory', None)
        board.grid = apply_gravity(clear_positions(board.grid, [target]), factory)
        self._emit_items_changed()
        self.event_bus.emit(EVENT_ITEM_USED, kind=ItemKind.HAMMER, target=target)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason='hammer')
        return True

    def use_shuffle(self) -> bool:
        if not input_allowed(self.world):
            return False
        if not get_inventory(self.world).spend(ItemKind.SHUFFLE):
            self.event_bus.emit(EVENT_ITEM_INSUFFICIENT, kind=ItemKind.SHUFFLE)
            return False
        board = get_board(self.world)
        board.selected = None
        board.grid = shuffle_board(board.grid, getattr(self.world, 'random', None))
        self._emit_items_changed()
        self.event_bus.emit(EVENT_ITEM_USED, kind=ItemKind.SHUFFLE)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason='shuffle')
        return True

    def use_extra_moves(self) -> bool:
        if get_game_state(self.world).status == GameStatus.GAMEOVER:
            return False
        if not get_inventory(self.world).spend(ItemKind.EXTRA_MOVES):
            self.event_bus.emit(EVENT_ITEM_INSUFFICIENT, kind=ItemKind.EXTRA_MOVES)
            return False
        moves = get_moves(self.world)
        moves.remaining += EXTRA_MOVES_BONUS
        self._emit_items_changed()
        self.event_bus.emit(EVENT_ITEM_USED, kind=ItemKind.EXTRA_MOVES)
        self.event_bus.emit(EVENT_MOVES_CHANGED, remaining=moves.remaining, delta=EXTRA_MOVES_BONUS)
        self.event_bus.emit(EVENT_REWARD_TOAST, text="Moves added!", icon="hourglass")
        return True

    def _set_mode(self, mode: PowerupMode) -> None:
        state = get_game_state(self.world)
        if state.powerup_mode == mode:
            return
        state.powerup_mode = mode
        self.event_bus.emit(EVENT_POWERUP_MODE_CHANGED, mode=mode)

    def _emit_items_changed(self) -> None:
        self.event_bus.emit(EVENT_ITEMS_CHANGED, counts=dict(get_inventory(self.world).counts))
