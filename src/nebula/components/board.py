from dataclasses import dataclass, field
from typing import List, Optional

from nebula.components.tile import Tile

Grid = List[List[Optional[Tile]]]

@dataclass(slots=True)
class Board:
    size: int
    grid: Grid = field(default_factory=list)
    selected: Optional[tuple[int, int]] = None
