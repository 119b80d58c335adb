"""Stage progression and scoring.

A run is a sequence of stages. Each stage has a point quota and a number of
spare balls. When the last ball drains the stage is settled:
- quota met, win level reached -> WIN
- quota met otherwise -> ADVANCE (points reset, feature selection follows)
- quota missed -> LOSE (run ends, leaderboard follows)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .config import StageConfig
from .selection import FeaturePack

logger = logging.getLogger(__name__)


class StageOutcome(Enum):
    RESPAWN = "respawn"  # Spare ball used, stage continues
    ADVANCE = "advance"
    WIN = "win"
    LOSE = "lose"


@dataclass
class Scoreboard:
    """Points and money for the current run."""
    points: int = 0  # Current stage, reset on advance
    total_points: int = 0  # Whole run
    money: int = 0

    def add_points(self, points: int) -> None:
        if points < 0:
            raise ValueError(f"Points must be >= 0, got {points}")
        self.points += points
        self.total_points += points

    def add_money(self, money: int) -> None:
        self.money += money

    def reset_points(self) -> None:
        self.points = 0


@dataclass
class Stage:
    """Current stage: quota, level and spare balls."""
    config: StageConfig = field(default_factory=StageConfig)
    level: int = 0
    points: int = field(init=False)
    lives: int = field(init=False)

    def __post_init__(self):
        self.points = self.config.quota(self.level)
        self.lives = self.config.lives

    @property
    def won(self) -> bool:
        return self.level >= self.config.win_level

    def progress(self, acquired_points: int) -> bool:
        """Move to the next level. Returns True if the quota was met."""
        met = acquired_points >= self.points
        self.level += 1
        if not self.won:
            self.points = self.config.quota(self.level)
        self.lives = self.config.lives
        return met

    def ball_lost(self, scoreboard: Scoreboard) -> StageOutcome:
        """Settle the loss of the last ball in play."""
        if self.lives > 0:
            self.lives -= 1
            logger.debug("ball lost, %d spare balls left", self.lives)
            return StageOutcome.RESPAWN

        if not self.progress(scoreboard.points):
            logger.info("stage lost at level %d with %d points", self.level - 1, scoreboard.points)
            return StageOutcome.LOSE
        if self.won:
            logger.info("you win! %d total points", scoreboard.total_points)
            return StageOutcome.WIN

        logger.info("advancing to level %d", self.level)
        scoreboard.reset_points()
        return StageOutcome.ADVANCE

    def reward_packs(self, outcome: StageOutcome) -> List[FeaturePack]:
        """Feature packs granted for an outcome (only ADVANCE grants any)."""
        if outcome is StageOutcome.ADVANCE:
            return FeaturePack.triple_starter()
        return []


def new_run(config: Optional[StageConfig] = None) -> Tuple[Stage, Scoreboard]:
    return Stage(config=config or StageConfig()), Scoreboard()
