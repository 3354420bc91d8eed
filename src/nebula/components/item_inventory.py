from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from nebula.constants import INITIAL_ITEMS


class ItemKind(str, Enum):
    HAMMER = "hammer"            # area-clear: removes one chosen tile
    SHUFFLE = "shuffle"          # reshuffle the whole board
    EXTRA_MOVES = "extra_moves"  # grants EXTRA_MOVES_BONUS moves


@dataclass(slots=True)
class ItemInventory:
    """Stores consumable power-ups keyed by item name.

    counts: mapping of item name -> number held. Unknown keys are ignored on load.
    """
    counts: Dict[str, int] = field(default_factory=lambda: dict(INITIAL_ITEMS))

    def get(self, kind: ItemKind) -> int:
        return self.counts.get(kind.value, 0)

    def add(self, kind: ItemKind, amount: int = 1):
        if amount <= 0:
            return
        self.counts[kind.value] = self.counts.get(kind.value, 0) + amount

    def spend(self, kind: ItemKind) -> bool:
        """Consume one item; returns False (and changes nothing) when none are held."""
        held = self.counts.get(kind.value, 0)
        if held <= 0:
            return False
        self.counts[kind.value] = held - 1
        return True

    def reset(self) -> None:
        self.counts = dict(INITIAL_ITEMS)
