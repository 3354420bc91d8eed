from __future__ import annotations

from typing import Tuple

from esper import World

from nebula.events.bus import (
    EVENT_FEEDBACK,
    EVENT_SETTING_TOGGLE,
    EVENT_SETTINGS_CHANGED,
    EventBus,
)
from nebula.utils.game_state import get_settings

SETTING_NAMES = ("music", "sound", "vibration")


def emit_feedback(world: World, event_bus: EventBus, kind: str, pattern: Tuple[int, ...]) -> bool:
    """Emit a vibration pattern (milliseconds) when vibration is enabled."""
    if not get_settings(world).vibration:
        return False
    event_bus.emit(EVENT_FEEDBACK, kind=kind, pattern=pattern)
    return True


class SettingsSystem:
    """Toggles the music/sound/vibration switches and announces the new bundle."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_SETTING_TOGGLE, self.on_toggle)

    def on_toggle(self, sender, **kwargs):
        setting = kwargs.get('setting')
        if setting not in SETTING_NAMES:
            return
        settings = get_settings(self.world)
        setattr(settings, setting, not getattr(settings, setting))
        self.event_bus.emit(EVENT_SETTINGS_CHANGED, settings=settings.as_dict())
