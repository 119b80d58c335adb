"""Tests for the feature catalog."""

from collections import Counter

import pytest

from tower_pinball.config import LottoConfig, SelectionConfig
from tower_pinball.features import (
    FEATURES,
    Bonks,
    Bouncer,
    Feature,
    Rarity,
    feature_table,
    get_feature,
    lotto_payout,
    lotto_table,
    rare_features,
)


class TestRarity:
    def test_common_uses_base(self):
        assert Rarity.COMMON.weight(1.0, rare_offset=0.5) == 1.0

    def test_rare_scaled_and_offset(self):
        assert Rarity.RARE.weight(1.0, rare_offset=0.0, rare_weight=0.1) == pytest.approx(0.1)
        assert Rarity.RARE.weight(2.0, rare_offset=0.05, rare_weight=0.1) == pytest.approx(0.25)


class TestBonks:
    def test_unlimited_never_spent(self):
        bonks = Bonks.unlimited()
        for _ in range(100):
            assert bonks.bonk() is False
        assert not bonks.spent

    def test_limited_counts_down(self):
        bonks = Bonks.limited(3)
        bonks.bonk()
        bonks.bonk()
        assert not bonks.spent
        bonks.bonk()
        assert bonks.spent
        bonks.bonk()  # saturates at zero
        assert bonks.current == 0

    def test_reloading_refills(self):
        bonks = Bonks.reloading_every(2)
        assert bonks.bonk() is False
        assert bonks.bonk() is True
        assert bonks.current == 2
        assert not bonks.spent

    def test_invalid_budgets(self):
        with pytest.raises(ValueError):
            Bonks.limited(0)
        with pytest.raises(ValueError, match="Reloading"):
            Bonks(reloading=True)


class TestFeature:
    def test_catalog_names_unique(self):
        names = [f.name for f in FEATURES]
        assert len(names) == len(set(names))

    def test_every_feature_documented(self):
        assert all(f.description for f in FEATURES)

    def test_title(self):
        assert get_feature("MoneyBumper").title == "Money Bumper"
        assert get_feature("Bumper").title == "Bumper"

    def test_get_unknown_feature(self):
        with pytest.raises(ValueError, match="Unknown feature: Flipper"):
            get_feature("Flipper")

    def test_new_bonks_from_limit(self):
        assert get_feature("Dispenser").new_bonks().max == 10
        assert get_feature("Bumper").new_bonks().max is None

    def test_new_bonks_are_independent(self):
        feature = get_feature("MoneyBumper")
        first = feature.new_bonks()
        first.bonk()
        assert feature.new_bonks().current == 3

    def test_rare_features(self):
        rares = rare_features()
        assert rares
        assert all(f.rarity is Rarity.RARE for f in rares)


class TestFeatureTable:
    def test_weights_follow_rarity(self):
        config = SelectionConfig(rare_weight=0.1)
        table = feature_table(config=config)
        for feature, weight in table.pairs():
            if feature.rarity is Rarity.RARE:
                assert weight == pytest.approx(0.1)
            else:
                assert weight == pytest.approx(1.0)

    def test_offset_raises_rare_weight(self):
        low = dict(feature_table(rare_offset=0.0).pairs())
        high = dict(feature_table(rare_offset=0.2).pairs())
        for feature in FEATURES:
            if feature.rarity is Rarity.RARE:
                assert high[feature] > low[feature]
            else:
                assert high[feature] == low[feature]

    def test_custom_catalog(self):
        catalog = [Feature("Only", "Just one.")]
        table = feature_table(catalog)
        assert table.choices == (catalog[0],)


class TestLotto:
    def test_table(self):
        table = lotto_table()
        assert table.pairs() == ((-1, 4.0), (7, 1.0))

    def test_payouts(self, rng):
        counts = Counter(lotto_payout(rng) for _ in range(20_000))
        assert set(counts) == {-1, 7}
        assert 0.18 <= counts[7] / 20_000 <= 0.22

    def test_custom_config(self, rng):
        config = LottoConfig(loss=-2, loss_weight=0.0, jackpot=50)
        assert all(lotto_payout(rng, config) == 50 for _ in range(100))


class TestBouncer:
    def test_pays_per_ball(self):
        assert Bouncer().tick(balls=3) == pytest.approx(6.0)

    def test_contact_halves_rate(self):
        bouncer = Bouncer()
        bouncer.contact()
        bouncer.contact()
        assert bouncer.tick(balls=2) == pytest.approx(1.0)

    def test_rate_persists_across_ticks(self):
        bouncer = Bouncer()
        bouncer.contact()
        bouncer.tick(balls=1)
        assert bouncer.tick(balls=1) == pytest.approx(1.0)

    def test_reset_restores_base_rate(self):
        bouncer = Bouncer()
        bouncer.contact()
        bouncer.contact()
        bouncer.reset()
        assert bouncer.tick(balls=1) == pytest.approx(2.0)
