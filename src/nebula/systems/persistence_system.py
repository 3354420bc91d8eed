from __future__ import annotations

import logging
from pathlib import Path

from esper import World

from nebula.components.item_inventory import ItemKind
from nebula.events.bus import (
    EVENT_CLEAR_DATA_REQUEST,
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_ITEMS_CHANGED,
    EVENT_SETTINGS_CHANGED,
    EventBus,
)
from nebula.utils.game_state import get_inventory, get_score, get_settings
from nebula.utils.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "match3_highscore"
ITEMS_KEY = "match3_items"
SETTINGS_KEY = "match3_settings"


class PersistenceSystem:
    """Loads and saves the high score, item inventory and settings bundle."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        store: KeyValueStore | None = None,
        save_path: Path | None = None,
        load_existing: bool = True,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.store = store if store is not None else KeyValueStore(save_path)

        self.event_bus.subscribe(EVENT_CLEAR_DATA_REQUEST, self._on_clear_data)
        self.event_bus.subscribe(EVENT_HIGH_SCORE_CHANGED, self._on_high_score_changed)
        self.event_bus.subscribe(EVENT_ITEMS_CHANGED, self._on_items_changed)
        self.event_bus.subscribe(EVENT_SETTINGS_CHANGED, self._on_settings_changed)

        if load_existing:
            self.load()

    def load(self) -> None:
        score = get_score(self.world)
        try:
            score.high_score = max(0, int(self.store.get(HIGH_SCORE_KEY, 0)))
        except (TypeError, ValueError):
            logger.warning("Discarding malformed high score %r", self.store.get(HIGH_SCORE_KEY))
            score.high_score = 0

        items = self.store.get(ITEMS_KEY)
        if isinstance(items, dict):
            inventory = get_inventory(self.world)
            for kind in ItemKind:
                value = items.get(kind.value)
                if isinstance(value, int) and value >= 0:
                    inventory.counts[kind.value] = value

        settings_payload = self.store.get(SETTINGS_KEY)
        if isinstance(settings_payload, dict):
            get_settings(self.world).update_from(settings_payload)

    def _on_high_score_changed(self, sender, **kwargs) -> None:
        self.store.set(HIGH_SCORE_KEY, int(kwargs.get("high_score", get_score(self.world).high_score)))

    def _on_items_changed(self, sender, **kwargs) -> None:
        counts = kwargs.get("counts")
        if not isinstance(counts, dict):
            counts = get_inventory(self.world).counts
        self.store.set(ITEMS_KEY, dict(counts))

    def _on_settings_changed(self, sender, **kwargs) -> None:
        self.store.set(SETTINGS_KEY, get_settings(self.world).as_dict())

    def _on_clear_data(self, sender, **kwargs) -> None:
        self.store.clear()
