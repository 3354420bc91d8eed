from typing import Any, Dict, Optional, Tuple

from esper import World

from nebula.components.game_state import GameStatus, PowerupMode
from nebula.constants import IDLE_HINT, REWARD_TOAST_DURATION
from nebula.events.bus import EVENT_REWARD_TOAST, EVENT_TICK, EventBus
from nebula.ui.layout import cell_center, compute_board_geometry
from nebula.utils.game_state import (
    get_board,
    get_game_state,
    get_hint_state,
    get_inventory,
    get_moves,
    get_score,
    get_tile_registry,
)

PADDING = 4
FALLBACK_COLOR = (120, 120, 120)
MATCHED_ALPHA = 110


class RenderSystem:
    """Draws the board, HUD and reward toast from world state.

    Each frame first rebuilds tile_layout (cell -> center, radius, type) without
    touching arcade; draw calls are skipped when no window is active.
    """

    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_REWARD_TOAST, self.on_reward_toast)
        self.toast: Optional[Dict[str, Any]] = None
        self._last_tile_layout: Dict[Tuple[int, int], Dict[str, Any]] = {}

    def on_tick(self, sender, **kwargs):
        if self.toast is None:
            return
        self.toast['remaining'] -= float(kwargs.get('dt', 1 / 60))
        if self.toast['remaining'] <= 0.0:
            self.toast = None

    def on_reward_toast(self, sender, **kwargs):
        self.toast = {
            'text': kwargs.get('text', ''),
            'icon': kwargs.get('icon', ''),
            'remaining': REWARD_TOAST_DURATION,
        }

    @property
    def tile_layout(self) -> Dict[Tuple[int, int], Dict[str, Any]]:
        return self._last_tile_layout

    def build_tile_layout(self) -> float:
        """Recompute where every tile is drawn; returns the tile radius."""
        board = get_board(self.world)
        tile_size, _, _ = compute_board_geometry(self.window.width, self.window.height, board.size)
        radius = max(tile_size - PADDING, 4) / 2
        self._last_tile_layout = {}
        for row in board.grid:
            for tile in row:
                if tile is None:
                    continue
                cx, cy = cell_center(tile.row, tile.col, self.window.width, self.window.height, board.size)
                self._last_tile_layout[(tile.row, tile.col)] = {
                    'id': tile.id,
                    'type_name': tile.type_name,
                    'center': (cx, cy),
                    'radius': radius,
                    'matched': tile.is_matched,
                }
        return radius

    def process(self):
        radius = self.build_tile_layout()
        # Local import keeps tests headless without creating a window.
        import arcade
        try:
            arcade.get_window()
        except Exception:
            return
        board = get_board(self.world)
        self._draw_board(arcade, get_tile_registry(self.world), board.selected, radius)
        self._draw_hud(arcade)
        self._draw_toast(arcade)

    def _draw_board(self, arcade, registry, selected, radius):
        for (row, col), entry in self._last_tile_layout.items():
            cx, cy = entry['center']
            entry_type = entry['type_name']
            color, symbol = registry.types.get(entry_type, (FALLBACK_COLOR, '?'))
            if entry['matched']:
                color = (*color, MATCHED_ALPHA)
            arcade.draw_circle_filled(cx, cy, radius, color)
            arcade.draw_text(symbol, cx, cy, (255, 255, 255), radius * 0.8, anchor_x='center', anchor_y='center')
            if selected == (row, col):
                arcade.draw_circle_outline(cx, cy, radius + 3, (255, 255, 255), 3)

    def _draw_hud(self, arcade):
        width = self.window.width
        height = self.window.height
        score = get_score(self.world)
        moves = get_moves(self.world)
        state = get_game_state(self.world)
        hint = get_hint_state(self.world)
        counts = get_inventory(self.world).counts
        moves_color = (244, 63, 94) if moves.remaining < 5 else (255, 255, 255)
        arcade.draw_text(f"Score {score.value}", 16, height - 40, (250, 204, 21), 20)
        arcade.draw_text(f"{moves.remaining} moves", width / 2, height - 40, moves_color, 20, anchor_x='center')
        arcade.draw_text(f"Best {score.high_score}", width - 16, height - 40, (52, 211, 153), 16, anchor_x='right')
        hint_text = "Thinking..." if hint.loading else (hint.text or IDLE_HINT)
        arcade.draw_text(hint_text, 16, height - 80, (199, 210, 254), 11, width=width - 32, multiline=True)
        items_line = (
            f"[H] Hammer x{counts.get('hammer', 0)}   "
            f"[S] Shuffle x{counts.get('shuffle', 0)}   "
            f"[E] +5 Moves x{counts.get('extra_moves', 0)}"
        )
        arcade.draw_text(items_line, width / 2, 90, (226, 232, 240), 12, anchor_x='center')
        arcade.draw_text("[T] Hint  [R] Restart  [M/N/V] Music/Sound/Vibration", width / 2, 60,
                         (148, 163, 184), 10, anchor_x='center')
        if state.powerup_mode == PowerupMode.HAMMER:
            arcade.draw_text("Pick a tile to smash", width / 2, 120, (244, 63, 94), 14, anchor_x='center')
        if state.status == GameStatus.GAMEOVER:
            arcade.draw_text("Game over", width / 2, height / 2 + 20, (255, 255, 255), 36,
                             anchor_x='center', anchor_y='center')
            arcade.draw_text(f"Final score: {score.value}  -  press R to play again", width / 2, height / 2 - 24,
                             (250, 204, 21), 14, anchor_x='center', anchor_y='center')

    def _draw_toast(self, arcade):
        if self.toast is None:
            return
        arcade.draw_text(self.toast['text'], self.window.width / 2, self.window.height - 140,
                         (250, 204, 21), 16, anchor_x='center', bold=True)
