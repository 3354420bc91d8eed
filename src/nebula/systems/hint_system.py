from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from esper import World

from nebula.components.board import Grid
from nebula.components.item_inventory import ItemKind
from nebula.constants import FALLBACK_HINT
from nebula.engine.board_ops import find_valid_swaps
from nebula.events.bus import (
    EVENT_HINT_REQUEST,
    EVENT_HINT_UPDATED,
    EVENT_ITEM_USED,
    EVENT_TILE_SWAPPED,
    EventBus,
)
from nebula.utils.game_state import (
    get_board,
    get_hint_state,
    get_moves,
    get_score,
    input_allowed,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HintRequest:
    """Snapshot handed to an advisor; prompt is the plain-text summary."""

    prompt: str
    grid: Grid
    score: int
    high_score: int
    moves: int


HintAdvisor = Callable[[HintRequest], Optional[str]]


def summarize_grid(grid: Grid) -> str:
    return "\n".join(
        " ".join(tile.type_name if tile is not None else "-" for tile in row)
        for row in grid
    )


def build_hint_prompt(grid: Grid, score: int, high_score: int, moves: int) -> str:
    return (
        "You are a strategy assistant for a match-three puzzle.\n"
        f"Current board (row 0 is the top):\n{summarize_grid(grid)}\n"
        f"Score: {score}, high score: {high_score}, moves left: {moves}.\n"
        "Reply with one short, playful suggestion. "
        "Clearing four or more tiles at once earns a reward."
    )


class SwapSuggestionAdvisor:
    """Offline advisor that names one swap which creates a match."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def __call__(self, request: HintRequest) -> Optional[str]:
        swaps = find_valid_swaps(request.grid)
        if not swaps:
            return "No swaps left here. A shuffle would shake things up!"
        (r1, c1), (r2, c2) = self.rng.choice(swaps)
        return f"Try swapping row {r1 + 1}, column {c1 + 1} with row {r2 + 1}, column {c2 + 1}."


class HintSystem:
    """Asks the advisor for a suggestion; advisor failures never touch game state."""

    def __init__(self, world: World, event_bus: EventBus, *, advisor: HintAdvisor | None = None):
        self.world = world
        self.event_bus = event_bus
        self.advisor: HintAdvisor = advisor or SwapSuggestionAdvisor(getattr(world, "random", None))
        self.event_bus.subscribe(EVENT_HINT_REQUEST, self.on_hint_request)
        self.event_bus.subscribe(EVENT_TILE_SWAPPED, self.on_board_moved)
        self.event_bus.subscribe(EVENT_ITEM_USED, self.on_item_used)

    def on_hint_request(self, sender, **kwargs):
        self.request_hint()

    def request_hint(self) -> Optional[str]:
        hint = get_hint_state(self.world)
        moves = get_moves(self.world)
        if hint.loading or moves.remaining <= 0 or not input_allowed(self.world):
            return None
        board = get_board(self.world)
        score = get_score(self.world)
        request = HintRequest(
            prompt=build_hint_prompt(board.grid, score.value, score.high_score, moves.remaining),
            grid=board.grid,
            score=score.value,
            high_score=score.high_score,
            moves=moves.remaining,
        )
        hint.loading = True
        try:
            text = self.advisor(request)
        except Exception as exc:
            logger.warning("Hint advisor failed, using fallback: %s", exc)
            text = None
        finally:
            hint.loading = False
        if not isinstance(text, str) or not text.strip():
            text = FALLBACK_HINT
        hint.text = text.strip()
        self.event_bus.emit(EVENT_HINT_UPDATED, text=hint.text)
        return hint.text

    def on_board_moved(self, sender, **kwargs):
        self._clear()

    def on_item_used(self, sender, **kwargs):
        if kwargs.get("kind") in (ItemKind.HAMMER, ItemKind.SHUFFLE):
            self._clear()

    def _clear(self):
        hint = get_hint_state(self.world)
        if hint.text is None:
            return
        hint.text = None
        self.event_bus.emit(EVENT_HINT_UPDATED, text=None)
