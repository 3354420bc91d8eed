from dataclasses import dataclass

@dataclass(slots=True)
class Score:
    """Session score plus the best score ever reached.

    value never decreases within a session; high_score is loaded from storage.
    """
    value: int = 0
    high_score: int = 0

    def add(self, points: int) -> bool:
        """Add points and return True when the high score was raised."""
        if points <= 0:
            return False
        self.value += points
        if self.value > self.high_score:
            self.high_score = self.value
            return True
        return False
