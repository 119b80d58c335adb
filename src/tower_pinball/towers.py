"""Tower queue.

Towers are placed from a short queue of upcoming picks. Placing the front
tower shifts the queue and draws a fresh tower onto the back, so the player
always sees the next few towers.
"""

from collections import deque
from enum import Enum
from typing import List, Optional

from .config import TowerConfig
from .sampler import WeightedSampler
from .table import WeightedChoiceTable


class Tower(Enum):
    BUMPER = "bumper"
    DISPENSER = "dispenser"

    @staticmethod
    def table(config: Optional[TowerConfig] = None) -> WeightedChoiceTable["Tower"]:
        config = config or TowerConfig()
        return WeightedChoiceTable.from_pairs(
            [(Tower.BUMPER, config.bumper_weight), (Tower.DISPENSER, config.dispenser_weight)],
            name="towers",
        )

    @classmethod
    def random(cls, rng, config: Optional[TowerConfig] = None) -> "Tower":
        return WeightedSampler(cls.table(config)).sample(rng)


class TowerQueue:
    """Fixed-length queue of upcoming towers."""

    def __init__(self, rng, config: Optional[TowerConfig] = None):
        self.config = config or TowerConfig()
        if self.config.queue_length < 1:
            raise ValueError(f"Queue length must be >= 1, got {self.config.queue_length}")
        self.rng = rng
        self._sampler = WeightedSampler(Tower.table(self.config))
        self._queue = deque(self._sampler.iter(rng, self.config.queue_length))

    def __len__(self) -> int:
        return len(self._queue)

    def peek(self) -> List[Tower]:
        """Upcoming towers, next one first."""
        return list(self._queue)

    def place(self) -> Tower:
        """Take the next tower and refill the back of the queue."""
        tower = self._queue.popleft()
        self._queue.append(self._sampler.sample(self.rng))
        return tower
