from dataclasses import dataclass

from nebula.constants import MAX_MOVES

@dataclass(slots=True)
class MovesCounter:
    remaining: int = MAX_MOVES
