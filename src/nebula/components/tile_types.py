from dataclasses import dataclass
from typing import Dict, Tuple

Color = Tuple[int, int, int]

@dataclass(slots=True)
class TileTypes:
    """Canonical tile type definitions stored on a single entity.

    This component lives alongside TileTypeRegistry (tag) and maps each type name
    to its fill color and display symbol.
    """
    types: Dict[str, Tuple[Color, str]]
