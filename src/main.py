"""Entry point for the Nebula Match puzzle.

Sets up the ECS world, event bus, systems, and Arcade window.
"""
import logging

from arcade import Window, run, set_background_color

from nebula.constants import WINDOW_HEIGHT, WINDOW_WIDTH
from nebula.events.bus import EVENT_KEY_PRESS, EVENT_MOUSE_PRESS, EVENT_TICK, EventBus
from nebula.systems.board import BoardSystem
from nebula.systems.game_flow_system import GameFlowSystem
from nebula.systems.hint_system import HintSystem
from nebula.systems.input import InputSystem
from nebula.systems.item_system import ItemSystem
from nebula.systems.match_resolution import MatchResolutionSystem
from nebula.systems.persistence_system import PersistenceSystem
from nebula.systems.render import RenderSystem
from nebula.systems.settings_system import SettingsSystem
from nebula.world import create_world


class NebulaWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, "Nebula Match")
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus)

        # Storage first so loaded inventory/settings are in place before play.
        self.persistence_system = PersistenceSystem(self.world, self.event_bus)
        self.settings_system = SettingsSystem(self.world, self.event_bus)
        self.game_flow_system = GameFlowSystem(self.world, self.event_bus)

        # Board and resolution systems
        self.board_system = BoardSystem(self.world, self.event_bus)
        self.match_resolution_system = MatchResolutionSystem(self.world, self.event_bus)
        self.item_system = ItemSystem(self.world, self.event_bus)
        self.hint_system = HintSystem(self.world, self.event_bus)

        # Interface systems
        self.input_system = InputSystem(self.event_bus, self, self.world)
        self.render_system = RenderSystem(self.world, self.event_bus, self)

        set_background_color((15, 23, 42))

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        self.event_bus.emit(EVENT_KEY_PRESS, symbol=symbol, modifiers=modifiers)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    NebulaWindow()
    run()

if __name__ == "__main__":
    main()
