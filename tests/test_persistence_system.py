import json

from nebula.components.game_state import GameStatus
from nebula.components.item_inventory import ItemKind
from nebula.events.bus import (
    EventBus,
    EVENT_BOARD_CHANGED,
    EVENT_CLEAR_DATA_REQUEST,
    EVENT_FEEDBACK,
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_ITEM_AWARDED,
    EVENT_SETTING_TOGGLE,
    EVENT_SETTINGS_CHANGED,
)
from nebula.systems.game_flow_system import GameFlowSystem
from nebula.systems.item_system import ItemSystem
from nebula.systems.match_resolution import MatchResolutionSystem
from nebula.systems.persistence_system import (
    HIGH_SCORE_KEY,
    ITEMS_KEY,
    SETTINGS_KEY,
    PersistenceSystem,
)
from nebula.systems.settings_system import SettingsSystem, emit_feedback
from nebula.utils.game_state import get_game_state, get_inventory, get_score, get_settings
from nebula.utils.kv_store import KeyValueStore, MemoryStore
from tests.helpers import make_world, pattern_types, record


def test_load_restores_saved_progress():
    bus = EventBus()
    world = make_world(bus)
    store = MemoryStore({
        HIGH_SCORE_KEY: 1234,
        ITEMS_KEY: {'hammer': 9, 'shuffle': 0, 'mystery': 4},
        SETTINGS_KEY: {'music': False, 'sound': True, 'vibration': False},
    })
    PersistenceSystem(world, bus, store=store)
    assert get_score(world).high_score == 1234
    assert get_inventory(world).counts == {'hammer': 9, 'shuffle': 0, 'extra_moves': 1}
    settings = get_settings(world)
    assert (settings.music, settings.sound, settings.vibration) == (False, True, False)


def test_malformed_values_fall_back_to_defaults():
    bus = EventBus()
    world = make_world(bus)
    store = MemoryStore({HIGH_SCORE_KEY: "lots", ITEMS_KEY: {'hammer': -2}, SETTINGS_KEY: [1, 2]})
    PersistenceSystem(world, bus, store=store)
    assert get_score(world).high_score == 0
    assert get_inventory(world).get(ItemKind.HAMMER) == 3
    assert get_settings(world).music is True


def test_changes_are_written_to_disk(tmp_path):
    path = tmp_path / "save.json"
    bus = EventBus()
    world = make_world(bus)
    PersistenceSystem(world, bus, save_path=path)
    ItemSystem(world, bus)
    SettingsSystem(world, bus)

    bus.emit(EVENT_ITEM_AWARDED, kind=ItemKind.SHUFFLE, amount=1)
    bus.emit(EVENT_SETTING_TOGGLE, setting='music')

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved[ITEMS_KEY]['shuffle'] == 3
    assert saved[SETTINGS_KEY] == {'music': False, 'sound': True, 'vibration': True}

    # A new session on the same file picks the values back up.
    other_bus = EventBus()
    other_world = make_world(other_bus)
    PersistenceSystem(other_world, other_bus, save_path=path)
    assert get_inventory(other_world).get(ItemKind.SHUFFLE) == 3
    assert get_settings(other_world).music is False


def test_clear_data_wipes_store_and_resets_session(tmp_path):
    path = tmp_path / "save.json"
    bus = EventBus()
    world = make_world(bus)
    PersistenceSystem(world, bus, save_path=path)
    GameFlowSystem(world, bus)
    get_score(world).high_score = 500
    bus.emit(EVENT_HIGH_SCORE_CHANGED, high_score=500)
    assert json.loads(path.read_text(encoding="utf-8"))[HIGH_SCORE_KEY] == 500

    bus.emit(EVENT_CLEAR_DATA_REQUEST)

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved.get(HIGH_SCORE_KEY, 0) == 0
    assert get_score(world).high_score == 0


def test_corrupt_save_file_is_ignored(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("{not json", encoding="utf-8")
    store = KeyValueStore(path)
    assert store.get(HIGH_SCORE_KEY) is None
    store.set(HIGH_SCORE_KEY, 10)
    assert json.loads(path.read_text(encoding="utf-8")) == {HIGH_SCORE_KEY: 10}


def test_unknown_setting_toggle_is_ignored():
    bus = EventBus()
    world = make_world(bus)
    SettingsSystem(world, bus)
    changed = record(bus, EVENT_SETTINGS_CHANGED)
    bus.emit(EVENT_SETTING_TOGGLE, setting='brightness')
    bus.emit(EVENT_SETTING_TOGGLE, setting='vibration')
    assert changed == [{'settings': {'music': True, 'sound': True, 'vibration': False}}]


def test_feedback_only_when_vibration_enabled():
    bus = EventBus()
    world = make_world(bus)
    feedback = record(bus, EVENT_FEEDBACK)
    assert emit_feedback(world, bus, 'match', (20,)) is True
    get_settings(world).vibration = False
    assert emit_feedback(world, bus, 'match', (20,)) is False
    assert feedback == [{'kind': 'match', 'pattern': (20,)}]


def test_unwritable_save_file_does_not_interrupt_a_cascade(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    path = blocker / "save.json"
    types = pattern_types(5)
    for c in range(4):
        types[0][c] = 'e'
    bus = EventBus()
    world = make_world(bus, types)
    PersistenceSystem(world, bus, save_path=path)
    ItemSystem(world, bus)
    MatchResolutionSystem(world, bus, mark_delay=0.0, clear_delay=0.0, gravity_delay=0.0)

    bus.emit(EVENT_BOARD_CHANGED, reason='swap')

    assert get_score(world).value == 40
    assert get_score(world).high_score == 40
    assert get_inventory(world).get(ItemKind.HAMMER) == 4
    assert get_game_state(world).status == GameStatus.IDLE
    assert not path.exists()


def test_default_save_path_lives_in_the_home_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    store = KeyValueStore()
    assert store.path == tmp_path / ".nebula-match" / "save.json"
    assert store.get(HIGH_SCORE_KEY) is None
