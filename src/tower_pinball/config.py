"""Configuration system for the pinball meta-progression.

Every weight table the game draws from is defined here, next to the stage
rules it feeds. Components take a config object instead of reading constants,
so alternate rule sets (sandbox, generous) are just another preset.

This design separates:
- Tuning values (what we configure) - defined in these dataclasses
- Weight tables (how we draw) - built from configs by the gameplay modules
- Outcomes (what the player sees) - measured by analysis.draw_report
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, ClassVar, Optional

import numpy as np


@dataclass
class SelectionConfig:
    """Feature selection (draft) parameters."""

    offer_count: int = 3  # Features shown per pack; drawn without replacement
    rare_weight: float = 0.1  # Rare feature weight as a fraction of its base probability
    rare_increase: float = 0.05  # Pity growth per pack without a rare, spread across the offers

    RARE_WEIGHT_RANGE: ClassVar[Tuple[float, float]] = (0.02, 0.3)
    RARE_INCREASE_RANGE: ClassVar[Tuple[float, float]] = (0.0, 0.15)

    @property
    def rare_step(self) -> float:
        """Pity offset added per offered feature when a pack has no rare."""
        return self.rare_increase / self.offer_count

    @classmethod
    def sample(cls, rng: Optional[np.random.Generator] = None) -> "SelectionConfig":
        rng = rng or np.random.default_rng()
        return cls(
            rare_weight=float(rng.uniform(*cls.RARE_WEIGHT_RANGE)),
            rare_increase=float(rng.uniform(*cls.RARE_INCREASE_RANGE)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offer_count": self.offer_count,
            "rare_weight": self.rare_weight,
            "rare_increase": self.rare_increase,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SelectionConfig":
        return cls(
            offer_count=d.get("offer_count", 3),
            rare_weight=d.get("rare_weight", 0.1),
            rare_increase=d.get("rare_increase", 0.05),
        )


@dataclass
class StageConfig:
    """Stage progression rules."""

    quotas: Tuple[int, ...] = (20, 1_000, 1_000, 1_000, 1_000, 1_000, 1_000)  # Points needed per level
    lives: int = 1  # Extra balls per level
    win_level: int = 2  # Reaching this level wins the run

    def __post_init__(self):
        if self.lives < 0:
            raise ValueError(f"lives must be >= 0, got {self.lives}")
        if not 1 <= self.win_level <= len(self.quotas):
            raise ValueError(
                f"win_level {self.win_level} needs a quota for every level below it "
                f"({len(self.quotas)} quotas configured)"
            )

    def quota(self, level: int) -> int:
        if not 0 <= level < len(self.quotas):
            raise ValueError(f"No point quota for level {level}")
        return self.quotas[level]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quotas": list(self.quotas),
            "lives": self.lives,
            "win_level": self.win_level,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StageConfig":
        return cls(
            quotas=tuple(d.get("quotas", cls.quotas)),
            lives=d.get("lives", 1),
            win_level=d.get("win_level", 2),
        )


@dataclass
class TowerConfig:
    """Tower queue parameters."""

    queue_length: int = 4  # Towers shown in the queue
    bumper_weight: float = 1.0
    dispenser_weight: float = 0.5

    DISPENSER_WEIGHT_RANGE: ClassVar[Tuple[float, float]] = (0.2, 1.0)

    @classmethod
    def sample(cls, rng: Optional[np.random.Generator] = None) -> "TowerConfig":
        rng = rng or np.random.default_rng()
        return cls(dispenser_weight=float(rng.uniform(*cls.DISPENSER_WEIGHT_RANGE)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "queue_length": self.queue_length,
            "bumper_weight": self.bumper_weight,
            "dispenser_weight": self.dispenser_weight,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TowerConfig":
        return cls(
            queue_length=d.get("queue_length", 4),
            bumper_weight=d.get("bumper_weight", 1.0),
            dispenser_weight=d.get("dispenser_weight", 0.5),
        )


@dataclass
class LottoConfig:
    """Lotto feature payouts. Default: lose $1, or a 1 in 5 chance of $7."""

    loss: int = -1
    loss_weight: float = 4.0
    jackpot: int = 7
    jackpot_weight: float = 1.0

    @property
    def jackpot_chance(self) -> float:
        return self.jackpot_weight / (self.loss_weight + self.jackpot_weight)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loss": self.loss,
            "loss_weight": self.loss_weight,
            "jackpot": self.jackpot,
            "jackpot_weight": self.jackpot_weight,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LottoConfig":
        return cls(
            loss=d.get("loss", -1),
            loss_weight=d.get("loss_weight", 4.0),
            jackpot=d.get("jackpot", 7),
            jackpot_weight=d.get("jackpot_weight", 1.0),
        )


@dataclass
class GameConfig:
    """Complete game configuration combining all parameter groups."""
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    stage: StageConfig = field(default_factory=StageConfig)
    towers: TowerConfig = field(default_factory=TowerConfig)
    lotto: LottoConfig = field(default_factory=LottoConfig)

    @classmethod
    def sample_full(cls, rng: Optional[np.random.Generator] = None) -> "GameConfig":
        """Sample the tunable draw parameters; stage rules stay default."""
        rng = rng or np.random.default_rng()
        return cls(
            selection=SelectionConfig.sample(rng),
            towers=TowerConfig.sample(rng),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "selection": self.selection.to_dict(),
            "stage": self.stage.to_dict(),
            "towers": self.towers.to_dict(),
            "lotto": self.lotto.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GameConfig":
        return cls(
            selection=SelectionConfig.from_dict(d.get("selection", {})),
            stage=StageConfig.from_dict(d.get("stage", {})),
            towers=TowerConfig.from_dict(d.get("towers", {})),
            lotto=LottoConfig.from_dict(d.get("lotto", {})),
        )


# Predefined configurations for testing/demo
CONFIGS = {
    # Shipped rules
    "default": GameConfig(),

    # Free play: many balls, tiny quotas, never wins on its own
    "sandbox": GameConfig(
        stage=StageConfig(quotas=(0,) * 7, lives=99, win_level=7),
    ),

    # Rares show up often, extra lives
    "generous": GameConfig(
        selection=SelectionConfig(rare_weight=0.3, rare_increase=0.15),
        stage=StageConfig(lives=3),
    ),
}
