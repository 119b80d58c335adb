"""Weighted choice tables.

A WeightedChoiceTable is the declarative half of weighted sampling: the
choices and their relative weights, validated once at construction. Samplers
wrap a table for repeated draws, so a reward table can be checked on its own
before any gameplay code touches it.

Validation rules:
1. At least one choice
2. One weight per choice
3. Every weight finite and non-negative
4. Weights sum to more than zero, and the sum is finite
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, Mapping, Tuple, TypeVar

T = TypeVar("T")


class SamplerError(ValueError):
    """Base class for weighted sampling errors."""


class ConstructionError(SamplerError):
    """Raised when a weight table or weight ramp cannot be built."""


def _as_weight(value: Any, index: int, name: str) -> float:
    try:
        weight = float(value)
    except (TypeError, ValueError):
        raise ConstructionError(
            f"{name}: weight {value!r} at index {index} is not a number"
        ) from None
    if not math.isfinite(weight):
        raise ConstructionError(f"{name}: weight {weight} at index {index} is not finite")
    if weight < 0:
        raise ConstructionError(f"{name}: negative weight {weight} at index {index}")
    return weight


@dataclass(frozen=True)
class WeightedChoiceTable(Generic[T]):
    """Immutable (choice, weight) table.

    Choices keep their insertion order and stay index-aligned with weights.
    """
    choices: Tuple[T, ...]
    weights: Tuple[float, ...]
    name: str = "unnamed"

    def __post_init__(self):
        choices = tuple(self.choices)
        raw_weights = tuple(self.weights)

        if not choices:
            raise ConstructionError(f"{self.name}: table has no choices")
        if len(choices) != len(raw_weights):
            raise ConstructionError(
                f"{self.name}: {len(choices)} choices but {len(raw_weights)} weights"
            )

        weights = tuple(_as_weight(w, i, self.name) for i, w in enumerate(raw_weights))
        total = sum(weights)
        if total <= 0.0:
            raise ConstructionError(f"{self.name}: sum of weights must be > 0")
        if not math.isfinite(total):
            raise ConstructionError(f"{self.name}: sum of weights overflows")

        object.__setattr__(self, "choices", choices)
        object.__setattr__(self, "weights", weights)

    def __len__(self) -> int:
        return len(self.choices)

    @property
    def total(self) -> float:
        return float(sum(self.weights))

    def pairs(self) -> Tuple[Tuple[T, float], ...]:
        return tuple(zip(self.choices, self.weights))

    def normalised(self) -> Tuple[float, ...]:
        """Weights scaled to sum to 1.0, index-aligned with choices."""
        total = self.total
        return tuple(w / total for w in self.weights)

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[Tuple[T, float]], name: str = "unnamed"
    ) -> "WeightedChoiceTable[T]":
        pairs = list(pairs)
        return cls(
            choices=tuple(choice for choice, _ in pairs),
            weights=tuple(weight for _, weight in pairs),
            name=name,
        )

    @classmethod
    def from_dict(
        cls, weight_map: Mapping[T, float], name: str = "unnamed"
    ) -> "WeightedChoiceTable[T]":
        """Build from a {choice: weight} mapping (mapping order is kept)."""
        return cls.from_pairs(weight_map.items(), name=name)

    @classmethod
    def linear(
        cls,
        choices: Iterable[T],
        start: float,
        end: float,
        name: str = "unnamed",
    ) -> "WeightedChoiceTable[T]":
        """Linearly increasing weight ramp.

        Choice ``i`` gets weight ``step * i`` where
        ``step = (end - start) / (len(choices) - 1)``. The first choice always
        gets weight 0 and the last gets ``end - start``; ``start`` only shapes
        the step, it is not a weight floor.

        Raises:
            ConstructionError: fewer than 2 choices, a negative or non-finite
                bound, or ``end <= start``.
        """
        choices = tuple(choices)

        if not (math.isfinite(start) and math.isfinite(end)):
            raise ConstructionError(f"{name}: ramp bounds must be finite, got ({start}, {end})")
        if start < 0 or end < 0:
            raise ConstructionError(f"{name}: ramp bounds must be non-negative, got ({start}, {end})")
        if end <= start:
            raise ConstructionError(f"{name}: ramp end {end} must be greater than start {start}")
        if len(choices) < 2:
            raise ConstructionError(f"{name}: ramp needs at least 2 choices, got {len(choices)}")

        step = (end - start) / (len(choices) - 1)
        return cls(
            choices=choices,
            weights=tuple(step * i for i in range(len(choices))),
            name=name,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "choices": [repr(c) for c in self.choices],
            "weights": list(self.weights),
        }
