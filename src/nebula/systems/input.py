from nebula.components.item_inventory import ItemKind
from nebula.constants import GRID_SIZE
from nebula.events.bus import (
    EventBus,
    EVENT_CLEAR_DATA_REQUEST,
    EVENT_GAME_RESET_REQUEST,
    EVENT_HINT_REQUEST,
    EVENT_ITEM_USE_REQUEST,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_PRESS,
    EVENT_SETTING_TOGGLE,
    EVENT_TILE_CLICK,
)
from nebula.ui.layout import pixel_to_cell
from nebula.utils.game_state import get_board

# arcade.key values are the lowercase ASCII codes for letter keys.
KEY_BINDINGS = {
    ord('h'): (EVENT_ITEM_USE_REQUEST, {'kind': ItemKind.HAMMER}),
    ord('s'): (EVENT_ITEM_USE_REQUEST, {'kind': ItemKind.SHUFFLE}),
    ord('e'): (EVENT_ITEM_USE_REQUEST, {'kind': ItemKind.EXTRA_MOVES}),
    ord('r'): (EVENT_GAME_RESET_REQUEST, {}),
    ord('t'): (EVENT_HINT_REQUEST, {}),
    ord('m'): (EVENT_SETTING_TOGGLE, {'setting': 'music'}),
    ord('n'): (EVENT_SETTING_TOGGLE, {'setting': 'sound'}),
    ord('v'): (EVENT_SETTING_TOGGLE, {'setting': 'vibration'}),
    ord('x'): (EVENT_CLEAR_DATA_REQUEST, {}),
}


class InputSystem:
    """Maps raw window input onto board and item events."""

    def __init__(self, event_bus: EventBus, window, world=None):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button')
        if x is None or y is None:
            return
        # Left button (1) drives tile clicks; right-click deselect is handled by BoardSystem.
        if button != 1:
            return
        size = get_board(self.world).size if self.world is not None else GRID_SIZE
        cell = pixel_to_cell(x, y, self.window.width, self.window.height, size)
        if cell is None:
            return
        row, col = cell
        self.event_bus.emit(EVENT_TILE_CLICK, row=row, col=col)

    def on_key_press(self, sender, **kwargs):
        symbol = kwargs.get('symbol')
        binding = KEY_BINDINGS.get(symbol)
        if binding is None:
            return
        event_name, payload = binding
        self.event_bus.emit(event_name, **payload)
