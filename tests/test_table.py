"""Tests for weighted choice tables."""

import dataclasses

import pytest

from tower_pinball.table import WeightedChoiceTable, ConstructionError


class TestValidation:
    def test_valid_table(self):
        table = WeightedChoiceTable(choices=["a", "b"], weights=[1, 2])
        assert table.choices == ("a", "b")
        assert table.weights == (1.0, 2.0)
        assert all(isinstance(w, float) for w in table.weights)
        assert len(table) == 2

    def test_empty_rejected(self):
        with pytest.raises(ConstructionError, match="no choices"):
            WeightedChoiceTable(choices=(), weights=())

    def test_length_mismatch_rejected(self):
        with pytest.raises(ConstructionError, match="2 choices but 1 weights"):
            WeightedChoiceTable(choices=("a", "b"), weights=(1.0,))

    def test_all_zero_rejected(self):
        with pytest.raises(ConstructionError, match="sum of weights"):
            WeightedChoiceTable.from_pairs([("a", 0.0), ("b", 0.0)])

    def test_negative_rejected_with_index(self):
        with pytest.raises(ConstructionError, match="index 1"):
            WeightedChoiceTable.from_pairs([("a", 1.0), ("b", -0.5)])

    def test_overflowing_total_rejected(self):
        with pytest.raises(ConstructionError, match="overflows"):
            WeightedChoiceTable.from_pairs([("a", 1e308), ("b", 1e308)])

    def test_none_weight_rejected(self):
        with pytest.raises(ConstructionError, match="not a number"):
            WeightedChoiceTable.from_pairs([("a", None)])

    def test_name_in_error(self):
        with pytest.raises(ConstructionError, match="rewards"):
            WeightedChoiceTable.from_pairs([], name="rewards")

    def test_immutable(self):
        table = WeightedChoiceTable.from_pairs([("a", 1.0)])
        with pytest.raises(dataclasses.FrozenInstanceError):
            table.weights = (2.0,)


class TestConstructors:
    def test_from_dict_keeps_order(self):
        table = WeightedChoiceTable.from_dict({"z": 1.0, "a": 2.0, "m": 3.0})
        assert table.choices == ("z", "a", "m")
        assert table.weights == (1.0, 2.0, 3.0)

    def test_pairs(self):
        table = WeightedChoiceTable.from_pairs([("a", 1.0), ("b", 0.0)])
        assert table.pairs() == (("a", 1.0), ("b", 0.0))

    def test_linear(self):
        table = WeightedChoiceTable.linear(["a", "b", "c", "d"], 0.0, 30.0, name="ramp")
        assert table.weights == pytest.approx((0.0, 10.0, 20.0, 30.0))
        assert table.name == "ramp"

    def test_linear_two_choices(self):
        table = WeightedChoiceTable.linear(["low", "high"], 1.0, 4.0)
        assert table.weights == pytest.approx((0.0, 3.0))


class TestDerived:
    def test_total(self):
        assert WeightedChoiceTable.from_pairs([("a", 1.5), ("b", 2.5)]).total == 4.0

    def test_normalised(self):
        table = WeightedChoiceTable.from_pairs([("a", 1.0), ("b", 0.0), ("c", 3.0)])
        assert table.normalised() == pytest.approx((0.25, 0.0, 0.75))
        assert sum(table.normalised()) == pytest.approx(1.0)

    def test_to_dict(self):
        d = WeightedChoiceTable.from_pairs([("a", 1.0)], name="one").to_dict()
        assert d == {"name": "one", "choices": ["'a'"], "weights": [1.0]}
