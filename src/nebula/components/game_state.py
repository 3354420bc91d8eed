"""Game state resource describing the session status and armed power-up."""
from dataclasses import dataclass
from enum import Enum, auto


class GameStatus(Enum):
    """Host-level status; input is only accepted while IDLE."""
    IDLE = auto()
    SWAPPING = auto()
    RESOLVING = auto()
    GAMEOVER = auto()


class PowerupMode(Enum):
    """Which click behaviour is armed on the board."""
    NONE = auto()
    HAMMER = auto()


@dataclass
class GameState:
    """Singleton component storing the current status and power-up mode."""
    status: GameStatus = GameStatus.IDLE
    powerup_mode: PowerupMode = PowerupMode.NONE
