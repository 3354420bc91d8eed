from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods alive for systems nobody stores in a variable.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"  # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"          # payload: x, y, button
EVENT_KEY_PRESS = "key_press"              # payload: symbol, modifiers
EVENT_TILE_CLICK = "tile_click"            # payload: row, col


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev_row, prev_col
EVENT_TILE_SWAPPED = "tile_swapped"                # payload: src=(r,c), dst=(r,c), matched=bool
EVENT_SWAP_REVERTED = "swap_reverted"              # payload: src=(r,c), dst=(r,c)
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str
EVENT_RESOLUTION_STARTED = "resolution_started"    # payload: reason=str, steps=int
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], size=int, combo=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: combo=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: combo=int, points=int, awards=dict
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: combo=int, score_delta=int


# ============================================================================
# SCORE & MOVES
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_HIGH_SCORE_CHANGED = "high_score_changed"    # payload: high_score=int
EVENT_MOVES_CHANGED = "moves_changed"              # payload: remaining=int, delta=int


# ============================================================================
# ITEMS & POWER-UPS
# ============================================================================
EVENT_ITEM_AWARDED = "item_awarded"                # payload: kind=ItemKind, amount=int, combo=int
EVENT_ITEMS_CHANGED = "items_changed"              # payload: counts=dict[str,int]
EVENT_ITEM_USE_REQUEST = "item_use_request"        # payload: kind=ItemKind, target=(r,c) optional
EVENT_ITEM_USED = "item_used"                      # payload: kind=ItemKind, target=(r,c) for hammer
EVENT_ITEM_INSUFFICIENT = "item_insufficient"      # payload: kind=ItemKind
EVENT_POWERUP_MODE_CHANGED = "powerup_mode_changed"  # payload: mode=PowerupMode
EVENT_REWARD_TOAST = "reward_toast"                # payload: text=str, icon=str


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_GAME_STATUS_CHANGED = "game_status_changed"  # payload: previous=GameStatus, status=GameStatus
EVENT_GAME_OVER = "game_over"                      # payload: score=int
EVENT_GAME_RESET_REQUEST = "game_reset_request"    # payload: None
EVENT_GAME_RESET = "game_reset"                    # payload: None
EVENT_CLEAR_DATA_REQUEST = "clear_data_request"    # payload: None


# ============================================================================
# SETTINGS, FEEDBACK & HINTS
# ============================================================================
EVENT_SETTING_TOGGLE = "setting_toggle"            # payload: setting=str
EVENT_SETTINGS_CHANGED = "settings_changed"        # payload: settings=dict[str,bool]
EVENT_FEEDBACK = "feedback"                        # payload: kind=str, pattern=tuple[int,...]
EVENT_HINT_REQUEST = "hint_request"                # payload: None
EVENT_HINT_UPDATED = "hint_updated"                # payload: text=str|None
