GRID_SIZE = 8
MAX_MOVES = 30

# Starting power-up inventory; restored on reset.
INITIAL_ITEMS = {
    "hammer": 3,
    "shuffle": 2,
    "extra_moves": 1,
}
EXTRA_MOVES_BONUS = 5

# Scoring: matched tiles * POINTS_PER_TILE * combo depth.
POINTS_PER_TILE = 10
MIN_RUN = 3

# Award thresholds for a single cascade iteration.
AREA_CLEAR_MATCH_SIZE = 4
RESHUFFLE_MIN_MATCH_SIZE = 5
EXTRA_MOVES_COMBO = 3

# Stage pacing used by the host when playing back a resolution (seconds).
MARK_DELAY = 0.3
CLEAR_DELAY = 0.1
GRAVITY_DELAY = 0.4
SWAP_REVERT_DELAY = 0.4
REWARD_TOAST_DURATION = 2.0

# Tile type name -> (fill color, symbol).
TILE_TYPES = {
    "blue": ((59, 130, 246), "D"),
    "red": ((244, 63, 94), "H"),
    "green": ((16, 185, 129), "C"),
    "yellow": ((251, 191, 36), "S"),
    "purple": ((139, 92, 246), "M"),
    "orange": ((249, 115, 22), "F"),
}

# Window / layout
WINDOW_WIDTH = 480
WINDOW_HEIGHT = 760
BOTTOM_MARGIN = 150
HUD_HEIGHT = 120
BOARD_MAX_WIDTH_PCT = 0.94
BOARD_MAX_HEIGHT_PCT = 0.70

FALLBACK_HINT = "Chain cascades together to earn bonus moves!"
IDLE_HINT = "Did you know? Clearing four at once earns a reward!"
