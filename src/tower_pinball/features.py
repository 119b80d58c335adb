"""Feature catalog for the selection draft.

A feature is something the player places on the table between stages:
bumpers, dispensers, splitters and so on. This module holds what each
feature is (points, bonk budget, rarity) and the small pieces of feature
behaviour that do not depend on the physics world:
- Bonks: how many hits a placed feature survives
- Lotto payouts, drawn from a weighted table
- Bouncer income, which decays with every ball contact
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .config import LottoConfig, SelectionConfig
from .sampler import WeightedSampler
from .table import WeightedChoiceTable

logger = logging.getLogger(__name__)


class Rarity(Enum):
    COMMON = "common"
    RARE = "rare"

    def weight(self, base: float, rare_offset: float = 0.0, rare_weight: float = 0.1) -> float:
        """Draft weight for a feature with base probability ``base``.

        Rare features are scaled down by ``rare_weight`` and pushed back up by
        the pity offset accumulated since the last rare offer.
        """
        if self is Rarity.RARE:
            return base * rare_weight + rare_offset
        return base


@dataclass
class Bonks:
    """Bonk budget of a placed feature.

    max=None means unlimited. A limited budget counts down to zero and the
    feature is spent; a reloading budget refills to max when it hits zero.
    """
    max: Optional[int] = None
    reloading: bool = False
    current: Optional[int] = None

    def __post_init__(self):
        if self.max is not None and self.max < 1:
            raise ValueError(f"Bonk budget must be >= 1, got {self.max}")
        if self.reloading and self.max is None:
            raise ValueError("Reloading bonks need a max")
        if self.current is None:
            self.current = self.max

    @classmethod
    def unlimited(cls) -> "Bonks":
        return cls()

    @classmethod
    def limited(cls, n: int) -> "Bonks":
        return cls(max=n)

    @classmethod
    def reloading_every(cls, n: int) -> "Bonks":
        return cls(max=n, reloading=True)

    @property
    def spent(self) -> bool:
        return self.max is not None and not self.reloading and self.current == 0

    def bonk(self) -> bool:
        """Register one hit. Returns True when a reloading budget refills."""
        if self.max is None:
            return False
        self.current = max(0, self.current - 1)
        if self.reloading and self.current == 0:
            self.current = self.max
            return True
        return False


@dataclass(frozen=True)
class Feature:
    """Static description of a placeable feature."""
    name: str
    description: str
    rarity: Rarity = Rarity.COMMON
    prob: float = 1.0  # Base draft probability before rarity scaling
    points: int = 0  # Points per bonk
    bonk_impulse: float = 1.0  # Factor applied to the impulse of a bonk
    bonk_limit: Optional[int] = None  # None = unlimited
    money_per_bonk: int = 0

    @property
    def title(self) -> str:
        """Display name, e.g. 'MoneyBumper' -> 'Money Bumper'."""
        out = []
        for i, ch in enumerate(self.name):
            if ch.isupper() and i > 0:
                out.append(" ")
            out.append(ch)
        return "".join(out)

    def new_bonks(self) -> Bonks:
        return Bonks(max=self.bonk_limit)

    def draft_weight(self, rare_offset: float = 0.0, config: Optional[SelectionConfig] = None) -> float:
        config = config or SelectionConfig()
        return self.rarity.weight(self.prob, rare_offset, config.rare_weight)


FEATURES = [
    Feature("Bumper", "Gives balls impulses when bonked.",
            points=20, bonk_impulse=2.0),
    Feature("MoneyBumper", "Produce $1 when bonked.",
            bonk_impulse=1.25, bonk_limit=3, money_per_bonk=1),
    Feature("Dispenser", "Produce 1 new ball.",
            points=10, bonk_limit=10),
    Feature("Splitter", "Consumes ball, produces two new balls.",
            rarity=Rarity.RARE, points=10),
    Feature("Lotto", "Lose $1 when bonked. Every bonk has a 1 in 5 chance to produce $7.",
            rarity=Rarity.RARE, bonk_impulse=1.25),
    Feature("Bouncer", "Every second, gain $2 for every ball on the screen."),
]


def get_feature(name: str) -> Feature:
    for feature in FEATURES:
        if feature.name == name:
            return feature
    raise ValueError(f"Unknown feature: {name}")


def feature_table(
    features: Iterable[Feature] = FEATURES,
    rare_offset: float = 0.0,
    config: Optional[SelectionConfig] = None,
) -> WeightedChoiceTable[Feature]:
    """Draft weight table over ``features`` at the given pity offset."""
    config = config or SelectionConfig()
    return WeightedChoiceTable.from_pairs(
        ((f, f.draft_weight(rare_offset, config)) for f in features),
        name="features",
    )


def lotto_table(config: Optional[LottoConfig] = None) -> WeightedChoiceTable[int]:
    config = config or LottoConfig()
    return WeightedChoiceTable.from_pairs(
        [(config.loss, config.loss_weight), (config.jackpot, config.jackpot_weight)],
        name="lotto",
    )


def lotto_payout(rng, config: Optional[LottoConfig] = None) -> int:
    """Money delta for one Lotto bonk."""
    payout = WeightedSampler(lotto_table(config)).sample(rng)
    logger.debug("lotto payout %+d", payout)
    return payout


class Bouncer:
    """Income source that pays per ball every second.

    Each ball contact halves the per-ball rate. The rate recovers only when
    the stage ends and feature selection begins (see reset).
    """

    BASE_RATE = 2.0

    def __init__(self, rate: float = BASE_RATE):
        self.base_rate = rate
        self.rate = rate

    def contact(self) -> None:
        self.rate /= 2.0

    def tick(self, balls: int) -> float:
        """Pay out for one second with ``balls`` on screen."""
        return self.rate * balls

    def reset(self) -> None:
        self.rate = self.base_rate


def rare_features(features: Iterable[Feature] = FEATURES) -> List[Feature]:
    return [f for f in features if f.rarity is Rarity.RARE]
