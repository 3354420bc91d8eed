from __future__ import annotations

import itertools
import random
from typing import Callable, Iterator, Sequence

from nebula.components.tile import Tile
from nebula.constants import TILE_TYPES


class TileFactory:
    """Creates tiles with a uniformly drawn type and a fresh id.

    Both the random source and the id sequence are injected so boards can be
    reproduced exactly in tests.
    """

    def __init__(
        self,
        types: Sequence[str] | None = None,
        *,
        rng: random.Random | None = None,
        ids: Iterator[int] | Callable[[], int] | None = None,
    ) -> None:
        self.types = list(types) if types is not None else list(TILE_TYPES.keys())
        if len(self.types) < 3:
            raise ValueError("At least three tile types are required")
        self.rng = rng or random.Random()
        if ids is None:
            ids = itertools.count(1)
        self._next_id: Callable[[], int] = ids if callable(ids) else ids.__next__

    def generate(self, row: int, col: int) -> Tile:
        return Tile(id=self._next_id(), type_name=self.rng.choice(self.types), row=row, col=col)
