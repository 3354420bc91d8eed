from nebula.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    GRID_SIZE,
    HUD_HEIGHT,
)


def compute_board_geometry(window_width: int, window_height: int, size: int = GRID_SIZE):
    """Return (tile_size, start_x, start_y) for a size x size board.

    start_x/start_y is the bottom-left corner in arcade coordinates. Shared by
    RenderSystem and InputSystem so clicks land on the tiles that were drawn.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = min(window_height - BOTTOM_MARGIN - HUD_HEIGHT, window_height * BOARD_MAX_HEIGHT_PCT)
    tile_size = int(min(max_board_w / size, max_board_h / size))
    if tile_size < 20:
        tile_size = 20
    total_width = size * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def pixel_to_cell(x: float, y: float, window_width: int, window_height: int, size: int = GRID_SIZE):
    """Map a window point to (row, col) with row 0 at the top, or None when off the board."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, size)
    total = size * tile_size
    if x < start_x or x >= start_x + total:
        return None
    if y < start_y or y >= start_y + total:
        return None
    col = int((x - start_x) // tile_size)
    row_from_bottom = int((y - start_y) // tile_size)
    return size - 1 - row_from_bottom, col


def cell_center(row: int, col: int, window_width: int, window_height: int, size: int = GRID_SIZE):
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, size)
    cx = start_x + col * tile_size + tile_size / 2
    cy = start_y + (size - 1 - row) * tile_size + tile_size / 2
    return cx, cy
