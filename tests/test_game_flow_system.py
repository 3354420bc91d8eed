from nebula.components.game_state import GameStatus, PowerupMode
from nebula.constants import INITIAL_ITEMS, MAX_MOVES
from nebula.engine.board_ops import find_matches
from nebula.events.bus import (
    EventBus,
    EVENT_CLEAR_DATA_REQUEST,
    EVENT_GAME_RESET,
    EVENT_GAME_RESET_REQUEST,
    EVENT_HIGH_SCORE_CHANGED,
)
from nebula.systems.game_flow_system import GameFlowSystem
from nebula.utils.game_state import (
    get_board,
    get_game_state,
    get_hint_state,
    get_inventory,
    get_moves,
    get_score,
)
from tests.helpers import make_world


def finished_session():
    bus = EventBus()
    world = make_world(bus)
    GameFlowSystem(world, bus)
    score = get_score(world)
    score.value = 420
    score.high_score = 900
    get_moves(world).remaining = 0
    get_inventory(world).counts = {'hammer': 0, 'shuffle': 7, 'extra_moves': 0}
    get_hint_state(world).text = "Try the corner"
    state = get_game_state(world)
    state.status = GameStatus.GAMEOVER
    state.powerup_mode = PowerupMode.HAMMER
    get_board(world).selected = (1, 1)
    return bus, world


def test_reset_starts_a_fresh_session_but_keeps_high_score():
    bus, world = finished_session()
    old_ids = {t.id for row in get_board(world).grid for t in row}
    resets = []
    bus.subscribe(EVENT_GAME_RESET, lambda sender, **kwargs: resets.append(kwargs))

    bus.emit(EVENT_GAME_RESET_REQUEST)

    board = get_board(world)
    assert resets == [{}]
    assert board.selected is None
    assert find_matches(board.grid) == set()
    assert old_ids.isdisjoint({t.id for row in board.grid for t in row})
    assert get_score(world).value == 0
    assert get_score(world).high_score == 900
    assert get_moves(world).remaining == MAX_MOVES
    assert get_inventory(world).counts == INITIAL_ITEMS
    assert get_hint_state(world).text is None
    assert get_game_state(world).status == GameStatus.IDLE
    assert get_game_state(world).powerup_mode == PowerupMode.NONE


def test_clear_data_also_forgets_high_score():
    bus, world = finished_session()
    high_scores = []
    bus.subscribe(EVENT_HIGH_SCORE_CHANGED, lambda sender, **kwargs: high_scores.append(kwargs))
    bus.emit(EVENT_CLEAR_DATA_REQUEST)
    assert get_score(world).high_score == 0
    assert high_scores == [{'high_score': 0}]
    assert get_moves(world).remaining == MAX_MOVES
