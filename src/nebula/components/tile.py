from dataclasses import dataclass

@dataclass(frozen=True, slots=True)
class Tile:
    """A single typed tile occupying one grid cell.

    id is stable across moves; row/col always mirror the cell holding the tile.
    is_matched is a transient rendering flag set while a match is displayed.
    """
    id: int
    type_name: str
    row: int
    col: int
    is_matched: bool = False
