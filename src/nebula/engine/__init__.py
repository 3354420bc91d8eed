"""Stateless board engine: every call maps an input grid to a fresh grid."""

from nebula.engine.board_ops import (
    apply_gravity,
    create_board,
    find_matches,
    find_valid_swaps,
    is_adjacent,
    shuffle_board,
    swap_tiles,
)
from nebula.engine.resolution import AwardPolicy, CascadeStep, ResolutionResult, resolve
from nebula.engine.tile_factory import TileFactory

__all__ = [
    "AwardPolicy",
    "CascadeStep",
    "ResolutionResult",
    "TileFactory",
    "apply_gravity",
    "create_board",
    "find_matches",
    "find_valid_swaps",
    "is_adjacent",
    "resolve",
    "shuffle_board",
    "swap_tiles",
]
