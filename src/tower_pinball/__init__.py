"""tower-pinball — weighted draws and meta-progression for a tower pinball game.

The core is a weighted random sampler (single draws, lazy runs of draws, and
unique draws without replacement) over validated weight tables. On top of it
sit the engine-independent parts of the game loop: the feature catalog and
draft, the tower queue, lotto payouts and stage progression.
"""

from .table import WeightedChoiceTable, SamplerError, ConstructionError
from .sampler import WeightedSampler, PreconditionViolation
from .config import SelectionConfig, StageConfig, TowerConfig, LottoConfig, GameConfig, CONFIGS
from .features import Rarity, Bonks, Feature, FEATURES, feature_table, lotto_payout
from .selection import FeaturePack, Offer, SelectionDirector
from .towers import Tower, TowerQueue
from .stage import Stage, StageOutcome, Scoreboard

__all__ = [
    "WeightedChoiceTable",
    "SamplerError",
    "ConstructionError",
    "WeightedSampler",
    "PreconditionViolation",
    "SelectionConfig",
    "StageConfig",
    "TowerConfig",
    "LottoConfig",
    "GameConfig",
    "CONFIGS",
    "Rarity",
    "Bonks",
    "Feature",
    "FEATURES",
    "feature_table",
    "lotto_payout",
    "FeaturePack",
    "Offer",
    "SelectionDirector",
    "Tower",
    "TowerQueue",
    "Stage",
    "StageOutcome",
    "Scoreboard",
]
