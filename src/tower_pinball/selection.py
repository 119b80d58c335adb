"""Feature selection between stages.

After a stage is cleared the player is handed one or more feature packs.
Each pack opens into an offer: a few distinct features drawn without
replacement from the catalog, of which the player keeps one.

Rare features start with a small draft weight. Every pack that opens without
a rare raises their weight a little (the pity offset); opening a rare resets it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from .config import SelectionConfig
from .features import FEATURES, Bouncer, Feature, Rarity, feature_table
from .sampler import WeightedSampler

logger = logging.getLogger(__name__)


class FeaturePack(Enum):
    STARTER = "starter"

    @classmethod
    def triple_starter(cls) -> List["FeaturePack"]:
        return [cls.STARTER] * 3


@dataclass
class Offer:
    """Features presented for one pack, in display order."""
    pack: FeaturePack
    entries: List[Tuple[Feature, float]]  # (feature, draft weight)

    @property
    def features(self) -> List[Feature]:
        return [feature for feature, _ in self.entries]

    @property
    def has_rare(self) -> bool:
        return any(f.rarity is Rarity.RARE for f in self.features)

    def choose(self, index: int) -> Feature:
        if not 0 <= index < len(self.entries):
            raise ValueError(f"Offer has {len(self.entries)} features, no index {index}")
        return self.entries[index][0]


@dataclass
class SelectionDirector:
    """Opens feature packs and tracks the rare pity offset across offers."""
    config: SelectionConfig = field(default_factory=SelectionConfig)
    catalog: Sequence[Feature] = field(default_factory=lambda: list(FEATURES))
    rare_offset: float = 0.0
    packs: List[FeaturePack] = field(default_factory=list)

    def enter(self, packs: Sequence[FeaturePack], bouncers: Iterable[Bouncer] = ()) -> None:
        """Queue packs for the coming selection.

        Bouncers on the board get their income rate back between stages.
        """
        if not packs:
            raise ValueError("Selection needs at least 1 pack")
        self.packs.extend(packs)
        for bouncer in bouncers:
            bouncer.reset()
        logger.debug("selection entered with %d packs", len(packs))

    @property
    def pending(self) -> int:
        return len(self.packs)

    def next_offer(self, rng) -> Offer:
        """Open the most recently queued pack.

        Raises:
            ValueError: No packs are queued.
            PreconditionViolation: The catalog has fewer features than an
                offer shows.
        """
        if not self.packs:
            raise ValueError("No feature packs left to open")
        pack = self.packs.pop()

        sampler = WeightedSampler(feature_table(self.catalog, self.rare_offset, self.config))
        if pack is FeaturePack.STARTER:
            entries = sampler.sample_unique(rng, self.config.offer_count)
        else:
            raise ValueError(f"Unknown feature pack: {pack}")

        offer = Offer(pack=pack, entries=entries)
        self._update_pity(offer)
        logger.info(
            "offer: %s (rare offset %.3f)",
            ", ".join(f.name for f in offer.features), self.rare_offset,
        )
        return offer

    def _update_pity(self, offer: Offer) -> None:
        # Resets on a rare in the offer, not on a rare anywhere in the catalog:
        # the full catalog always holds rares, so that test would pin the
        # offset at zero.
        if offer.has_rare:
            self.rare_offset = 0.0
        else:
            self.rare_offset += self.config.rare_step

    def reset(self) -> None:
        self.rare_offset = 0.0
        self.packs.clear()
