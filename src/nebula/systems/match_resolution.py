from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque

from esper import World

from nebula.components.game_state import GameStatus
from nebula.constants import CLEAR_DELAY, GRAVITY_DELAY, MARK_DELAY
from nebula.engine.resolution import AwardPolicy, CascadeStep, ResolutionResult, resolve
from nebula.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GAME_RESET,
    EVENT_GRAVITY_APPLIED,
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_ITEM_AWARDED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_RESOLUTION_STARTED,
    EVENT_SCORE_CHANGED,
    EVENT_TICK,
    EventBus,
)
from nebula.systems.settings_system import emit_feedback
from nebula.utils.game_state import finish_turn, get_board, get_game_state, get_score, set_game_status

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Stage:
    kind: str  # 'mark' | 'clear' | 'gravity'
    step: CascadeStep
    delay: float


class MatchResolutionSystem:
    """Runs the cascade engine on board changes and plays its steps back on the tick clock.

    Each cascade iteration is shown in three stages (mark, clear, gravity). Score
    and item awards are credited when the matching 'mark' stage is shown. The
    session stays RESOLVING until the last stage has waited out its delay.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        policy: AwardPolicy | None = None,
        mark_delay: float = MARK_DELAY,
        clear_delay: float = CLEAR_DELAY,
        gravity_delay: float = GRAVITY_DELAY,
    ):
        self.world = world
        self.event_bus = event_bus
        self.policy = policy or AwardPolicy()
        self.delays = {'mark': mark_delay, 'clear': clear_delay, 'gravity': gravity_delay}
        self._pending: Deque[_Stage] = deque()
        self._wait = 0.0
        self._active: ResolutionResult | None = None
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self.on_board_changed)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_GAME_RESET, self.on_game_reset)

    @property
    def active(self) -> bool:
        return self._active is not None

    def on_board_changed(self, sender, **kwargs):
        # A loop in progress must finish before another may start.
        if self._active is not None:
            return
        self.start(reason=kwargs.get('reason', 'board_changed'))

    def start(self, reason: str) -> ResolutionResult:
        board = get_board(self.world)
        factory = getattr(self.world, 'tile_factory', None)
        result = resolve(board.grid, factory, policy=self.policy)
        if not result.steps:
            finish_turn(self.world, self.event_bus)
            return result
        self._active = result
        for step in result.steps:
            for kind in ('mark', 'clear', 'gravity'):
                self._pending.append(_Stage(kind=kind, step=step, delay=self.delays[kind]))
        set_game_status(self.world, self.event_bus, GameStatus.RESOLVING)
        self.event_bus.emit(EVENT_RESOLUTION_STARTED, reason=reason, steps=len(result.steps))
        logger.debug("resolution started reason=%s steps=%d", reason, len(result.steps))
        self._wait = 0.0
        self._advance(0.0)
        return result

    def on_tick(self, sender, **kwargs):
        if self._active is None:
            return
        self._advance(float(kwargs.get('dt', 1 / 60)))

    def on_game_reset(self, sender, **kwargs):
        # The grid being played back no longer exists.
        self._pending.clear()
        self._active = None
        self._wait = 0.0

    def _advance(self, dt: float) -> None:
        self._wait -= dt
        while self._wait <= 0.0 and self._pending:
            stage = self._pending.popleft()
            self._apply(stage)
            self._wait += stage.delay
        if self._wait <= 0.0 and not self._pending:
            self._complete()

    def _apply(self, stage: _Stage) -> None:
        board = get_board(self.world)
        step = stage.step
        positions = sorted(step.matched)
        if stage.kind == 'mark':
            board.grid = step.marked
            self._credit(step)
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), combo=step.combo)
            self.event_bus.emit(EVENT_CASCADE_STEP, combo=step.combo, points=step.points, awards=dict(step.awards))
            emit_feedback(self.world, self.event_bus, 'match', (20,))
        elif stage.kind == 'clear':
            board.grid = step.cleared
            self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions)
        else:
            board.grid = step.refilled
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, combo=step.combo)

    def _credit(self, step: CascadeStep) -> None:
        score = get_score(self.world)
        raised = score.add(step.points)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.value, delta=step.points)
        if raised:
            self.event_bus.emit(EVENT_HIGH_SCORE_CHANGED, high_score=score.high_score)
        for kind, amount in step.awards.items():
            self.event_bus.emit(EVENT_ITEM_AWARDED, kind=kind, amount=amount, combo=step.combo)

    def _complete(self) -> None:
        result = self._active
        self._active = None
        self._wait = 0.0
        if result is None:
            return
        board = get_board(self.world)
        board.grid = result.final_grid
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, combo=result.combo_reached, score_delta=result.score_delta)
        if get_game_state(self.world).status == GameStatus.RESOLVING:
            finish_turn(self.world, self.event_bus)
