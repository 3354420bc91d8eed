from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List

from nebula.components.board import Grid
from nebula.components.item_inventory import ItemKind
from nebula.constants import (
    AREA_CLEAR_MATCH_SIZE,
    EXTRA_MOVES_COMBO,
    POINTS_PER_TILE,
    RESHUFFLE_MIN_MATCH_SIZE,
)
from nebula.engine.board_ops import (
    Position,
    apply_gravity,
    clear_positions,
    copy_grid,
    find_matches,
    mark_matched,
)
from nebula.engine.tile_factory import TileFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AwardPolicy:
    """Bonus item thresholds; each condition is checked independently per iteration."""

    area_clear_size: int = AREA_CLEAR_MATCH_SIZE
    reshuffle_min_size: int = RESHUFFLE_MIN_MATCH_SIZE
    extra_moves_combo: int = EXTRA_MOVES_COMBO
    points_per_tile: int = POINTS_PER_TILE

    def awards_for(self, matched_count: int, combo: int) -> Dict[ItemKind, int]:
        awards: Dict[ItemKind, int] = {}
        if matched_count == self.area_clear_size:
            awards[ItemKind.HAMMER] = 1
        if matched_count >= self.reshuffle_min_size:
            awards[ItemKind.SHUFFLE] = 1
        if combo == self.extra_moves_combo:
            awards[ItemKind.EXTRA_MOVES] = 1
        return awards

    def points_for(self, matched_count: int, combo: int) -> int:
        return matched_count * self.points_per_tile * combo


@dataclass(frozen=True, slots=True)
class CascadeStep:
    """One iteration of the resolution loop with the snapshots a host can animate."""

    combo: int
    matched: FrozenSet[Position]
    points: int
    awards: Dict[ItemKind, int]
    marked: Grid
    cleared: Grid
    refilled: Grid


@dataclass(slots=True)
class ResolutionResult:
    final_grid: Grid
    score_delta: int = 0
    item_awards: Dict[ItemKind, int] = field(default_factory=dict)
    combo_reached: int = 0
    steps: List[CascadeStep] = field(default_factory=list)

    @property
    def matched_any(self) -> bool:
        return bool(self.steps)


def resolve(grid: Grid, factory: TileFactory | None = None, *, policy: AwardPolicy | None = None) -> ResolutionResult:
    """Run match -> score -> clear -> gravity until the grid is stable.

    There is no iteration cap: refills are drawn at random and the next pass
    simply resolves any run they happen to form.
    """
    factory = factory or TileFactory()
    policy = policy or AwardPolicy()
    current = copy_grid(grid)
    result = ResolutionResult(final_grid=current)
    combo = 0
    while True:
        matches = find_matches(current)
        if not matches:
            break
        combo += 1
        matched_count = len(matches)
        points = policy.points_for(matched_count, combo)
        awards = policy.awards_for(matched_count, combo)
        marked = mark_matched(current, matches)
        cleared = clear_positions(marked, matches)
        refilled = apply_gravity(cleared, factory)
        logger.debug("cascade combo=%d matched=%d points=%d awards=%s", combo, matched_count, points, awards)
        result.steps.append(
            CascadeStep(
                combo=combo,
                matched=frozenset(matches),
                points=points,
                awards=awards,
                marked=marked,
                cleared=cleared,
                refilled=refilled,
            )
        )
        result.score_delta += points
        for kind, amount in awards.items():
            result.item_awards[kind] = result.item_awards.get(kind, 0) + amount
        current = refilled
    result.final_grid = current
    result.combo_reached = combo
    return result
