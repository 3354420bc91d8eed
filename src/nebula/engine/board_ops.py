from __future__ import annotations

import random
from dataclasses import replace
from typing import Iterable, List, Optional, Set, Tuple

from nebula.components.board import Grid
from nebula.components.tile import Tile
from nebula.constants import GRID_SIZE, MIN_RUN
from nebula.engine.tile_factory import TileFactory

Position = Tuple[int, int]


def check_grid(grid: Grid) -> int:
    """Return the side length of a square grid, raising ValueError otherwise."""
    size = len(grid)
    if size < MIN_RUN:
        raise ValueError(f"Grid must be at least {MIN_RUN}x{MIN_RUN}, got {size} rows")
    for r, row in enumerate(grid):
        if len(row) != size:
            raise ValueError(f"Grid is not square: row {r} has {len(row)} cells, expected {size}")
    return size


def check_position(grid: Grid, pos: Position) -> None:
    size = len(grid)
    row, col = pos
    if not (0 <= row < size and 0 <= col < size):
        raise ValueError(f"Position {pos} is outside a {size}x{size} grid")


def copy_grid(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def empty_grid(size: int) -> Grid:
    return [[None] * size for _ in range(size)]


def create_board(factory: TileFactory | None = None, size: int = GRID_SIZE) -> Grid:
    """Build a full grid with no horizontal or vertical run of three.

    Cells are filled in row-major order; a candidate is redrawn while it would
    complete a run with the two cells to its left or the two cells above it.
    """
    if size < MIN_RUN:
        raise ValueError(f"Board size must be at least {MIN_RUN}, got {size}")
    factory = factory or TileFactory()
    grid = empty_grid(size)
    for r in range(size):
        for c in range(size):
            while True:
                tile = factory.generate(r, c)
                if c >= 2:
                    left1 = grid[r][c - 1]
                    left2 = grid[r][c - 2]
                    if left1 and left2 and left1.type_name == tile.type_name == left2.type_name:
                        continue
                if r >= 2:
                    up1 = grid[r - 1][c]
                    up2 = grid[r - 2][c]
                    if up1 and up2 and up1.type_name == tile.type_name == up2.type_name:
                        continue
                break
            grid[r][c] = tile
    return grid


def _same_type(a: Optional[Tile], b: Optional[Tile], c: Optional[Tile]) -> bool:
    return a is not None and b is not None and c is not None and a.type_name == b.type_name == c.type_name


def find_matches(grid: Grid) -> Set[Position]:
    """Return every cell that belongs to a horizontal or vertical run of three or more."""
    size = check_grid(grid)
    matches: Set[Position] = set()
    # Horizontal windows
    for r in range(size):
        for c in range(size - 2):
            if _same_type(grid[r][c], grid[r][c + 1], grid[r][c + 2]):
                matches.update(((r, c), (r, c + 1), (r, c + 2)))
    # Vertical windows
    for c in range(size):
        for r in range(size - 2):
            if _same_type(grid[r][c], grid[r + 1][c], grid[r + 2][c]):
                matches.update(((r, c), (r + 1, c), (r + 2, c)))
    return matches


def apply_gravity(grid: Grid, factory: TileFactory | None = None) -> Grid:
    """Settle surviving tiles to the bottom of each column and refill from the top.

    Row 0 is the top of the board. Relative order inside a column is kept, so a
    tile that started above another still ends above it.
    """
    size = check_grid(grid)
    factory = factory or TileFactory()
    settled = copy_grid(grid)
    for c in range(size):
        empty_row = size - 1
        for r in range(size - 1, -1, -1):
            tile = settled[r][c]
            if tile is None:
                continue
            settled[r][c] = None
            settled[empty_row][c] = tile if tile.row == empty_row and tile.col == c else replace(tile, row=empty_row, col=c)
            empty_row -= 1
        for r in range(empty_row, -1, -1):
            settled[r][c] = factory.generate(r, c)
    return settled


def shuffle_board(grid: Grid, rng: random.Random | None = None) -> Grid:
    """Randomly re-lay every existing tile in row-major order (Fisher-Yates)."""
    size = check_grid(grid)
    rng = rng or random.Random()
    tiles: List[Tile] = [tile for row in grid for tile in row if tile is not None]
    for i in range(len(tiles) - 1, 0, -1):
        j = rng.randint(0, i)
        tiles[i], tiles[j] = tiles[j], tiles[i]
    shuffled = empty_grid(size)
    for index, tile in enumerate(tiles):
        r, c = divmod(index, size)
        shuffled[r][c] = replace(tile, row=r, col=c)
    return shuffled


def is_adjacent(r1: int, c1: int, r2: int, c2: int) -> bool:
    return abs(r1 - r2) + abs(c1 - c2) == 1


def swap_tiles(grid: Grid, src: Position, dst: Position) -> Grid:
    """Return a copy of grid with the tiles at src and dst exchanged."""
    check_grid(grid)
    check_position(grid, src)
    check_position(grid, dst)
    swapped = copy_grid(grid)
    a = grid[src[0]][src[1]]
    b = grid[dst[0]][dst[1]]
    swapped[src[0]][src[1]] = replace(b, row=src[0], col=src[1]) if b is not None else None
    swapped[dst[0]][dst[1]] = replace(a, row=dst[0], col=dst[1]) if a is not None else None
    return swapped


def mark_matched(grid: Grid, positions: Iterable[Position]) -> Grid:
    marked = copy_grid(grid)
    for r, c in positions:
        tile = marked[r][c]
        if tile is not None:
            marked[r][c] = replace(tile, is_matched=True)
    return marked


def clear_positions(grid: Grid, positions: Iterable[Position]) -> Grid:
    cleared = copy_grid(grid)
    for pos in positions:
        check_position(grid, pos)
        cleared[pos[0]][pos[1]] = None
    return cleared


def type_map(grid: Grid) -> dict[Position, str]:
    return {
        (tile.row, tile.col): tile.type_name
        for row in grid
        for tile in row
        if tile is not None
    }


def _has_line_match(types: dict[Position, str], pos: Position) -> bool:
    """Return True if a horizontal or vertical run of three passes through pos."""
    row, col = pos
    tval = types.get(pos)
    if tval is None:
        return False
    # Horizontal sweep
    h_run = 1
    c_left = col - 1
    while types.get((row, c_left)) == tval:
        h_run += 1
        c_left -= 1
    c_right = col + 1
    while types.get((row, c_right)) == tval:
        h_run += 1
        c_right += 1
    if h_run >= MIN_RUN:
        return True
    # Vertical sweep
    v_run = 1
    r_up = row - 1
    while types.get((r_up, col)) == tval:
        v_run += 1
        r_up -= 1
    r_down = row + 1
    while types.get((r_down, col)) == tval:
        v_run += 1
        r_down += 1
    return v_run >= MIN_RUN


def predict_swap_creates_match(types: dict[Position, str], src: Position, dst: Position) -> bool:
    if src not in types or dst not in types:
        return False
    swapped = types.copy()
    swapped[src], swapped[dst] = swapped[dst], swapped[src]
    return _has_line_match(swapped, src) or _has_line_match(swapped, dst)


def find_valid_swaps(grid: Grid) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    size = check_grid(grid)
    types = type_map(grid)
    swaps: List[Tuple[Position, Position]] = []
    for row in range(size):
        for col in range(size):
            pos = (row, col)
            if pos not in types:
                continue
            right = (row, col + 1)
            if col + 1 < size and predict_swap_creates_match(types, pos, right):
                swaps.append((pos, right))
            down = (row + 1, col)
            if row + 1 < size and predict_swap_creates_match(types, pos, down):
                swaps.append((pos, down))
    return swaps
