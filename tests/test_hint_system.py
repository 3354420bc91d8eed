import random

from nebula.components.game_state import GameStatus
from nebula.components.item_inventory import ItemKind
from nebula.constants import FALLBACK_HINT
from nebula.events.bus import (
    EventBus,
    EVENT_HINT_REQUEST,
    EVENT_HINT_UPDATED,
    EVENT_ITEM_USED,
    EVENT_TILE_SWAPPED,
)
from nebula.systems.hint_system import (
    HintRequest,
    HintSystem,
    SwapSuggestionAdvisor,
    build_hint_prompt,
    summarize_grid,
)
from nebula.utils.game_state import get_board, get_game_state, get_hint_state, get_moves, get_score
from tests.helpers import grid_from_types, make_world, pattern_types, record


def test_advisor_receives_snapshot_and_text_is_stored():
    bus = EventBus()
    world = make_world(bus)
    get_score(world).value = 120
    seen = []

    def advisor(request):
        seen.append(request)
        return "  Look at the left edge!  "

    HintSystem(world, bus, advisor=advisor)
    updates = record(bus, EVENT_HINT_UPDATED)
    bus.emit(EVENT_HINT_REQUEST)

    assert seen[0].score == 120
    assert seen[0].moves == get_moves(world).remaining
    assert seen[0].grid is get_board(world).grid
    assert "Score: 120" in seen[0].prompt
    assert get_hint_state(world).text == "Look at the left edge!"
    assert get_hint_state(world).loading is False
    assert updates == [{'text': "Look at the left edge!"}]


def test_failing_advisor_falls_back_without_touching_game_state():
    bus = EventBus()
    world = make_world(bus)
    before = [row[:] for row in get_board(world).grid]

    def advisor(request):
        raise ConnectionError("offline")

    HintSystem(world, bus, advisor=advisor)
    bus.emit(EVENT_HINT_REQUEST)
    assert get_hint_state(world).text == FALLBACK_HINT
    assert get_hint_state(world).loading is False
    assert get_board(world).grid == before
    assert get_game_state(world).status == GameStatus.IDLE


def test_empty_advice_uses_fallback():
    bus = EventBus()
    world = make_world(bus)
    HintSystem(world, bus, advisor=lambda request: "   ")
    bus.emit(EVENT_HINT_REQUEST)
    assert get_hint_state(world).text == FALLBACK_HINT


def test_hint_not_requested_when_busy_or_out_of_moves():
    bus = EventBus()
    world = make_world(bus)
    calls = []
    system = HintSystem(world, bus, advisor=lambda request: calls.append(request) or "tip")
    get_game_state(world).status = GameStatus.RESOLVING
    assert system.request_hint() is None
    get_game_state(world).status = GameStatus.IDLE
    get_moves(world).remaining = 0
    assert system.request_hint() is None
    get_hint_state(world).loading = True
    get_moves(world).remaining = 3
    assert system.request_hint() is None
    assert calls == []


def test_hint_cleared_when_board_moves():
    bus = EventBus()
    world = make_world(bus)
    HintSystem(world, bus, advisor=lambda request: "tip")
    bus.emit(EVENT_HINT_REQUEST)
    bus.emit(EVENT_TILE_SWAPPED, src=(0, 0), dst=(0, 1), matched=False)
    assert get_hint_state(world).text is None

    bus.emit(EVENT_HINT_REQUEST)
    bus.emit(EVENT_ITEM_USED, kind=ItemKind.EXTRA_MOVES)
    assert get_hint_state(world).text == "tip"
    bus.emit(EVENT_ITEM_USED, kind=ItemKind.SHUFFLE)
    assert get_hint_state(world).text is None


def test_swap_suggestion_names_a_working_swap():
    types = pattern_types(5)
    types[0][0] = types[0][1] = 'e'
    types[1][2] = 'e'
    grid = grid_from_types(types)
    prompt = build_hint_prompt(grid, 0, 0, 10)
    request = HintRequest(prompt=prompt, grid=grid, score=0, high_score=0, moves=10)
    text = SwapSuggestionAdvisor(random.Random(0))(request)
    assert text == "Try swapping row 1, column 3 with row 2, column 3."


def test_summarize_grid_marks_empty_cells():
    types = pattern_types(3)
    types[1][1] = None
    assert summarize_grid(grid_from_types(types)) == "a c a\nb - b\nc a c"
