"""Weighted random sampling over a WeightedChoiceTable.

Draw modes:
1. sample: one draw, with replacement
2. iter: a lazy run of independent draws
3. sample_unique: several draws without replacement

The random source is always passed in by the caller. Anything with a
``random()`` method returning a uniform float in [0, 1) works, e.g.
``numpy.random.Generator`` or ``random.Random``. The sampler keeps no RNG and
no state between draws, so the same instance can be reused freely.
"""

from typing import Generic, Iterable, Iterator, List, Sequence, Tuple, TypeVar, Union

import numpy as np

from .table import SamplerError, WeightedChoiceTable

T = TypeVar("T")


class PreconditionViolation(SamplerError):
    """Raised when a draw is requested with an invalid count."""


def _pick(cumulative: np.ndarray, u: float) -> int:
    """Index of the bucket containing ``u * total`` in a cumulative weight array.

    Zero-weight buckets have zero width and are never hit. If rounding pushes
    the target past the last bucket, the last positive-weight index wins.
    """
    total = cumulative[-1]
    index = int(np.searchsorted(cumulative, u * total, side="right"))
    if index >= len(cumulative):
        index = int(np.searchsorted(cumulative, total, side="left"))
    return index


class WeightedSampler(Generic[T]):
    """Draws choices with probability proportional to their weight.

    Usage:
        sampler = WeightedSampler([("bumper", 1.0), ("dispenser", 0.5)])
        rng = np.random.default_rng(7)
        tower = sampler.sample(rng)
        offers = sampler.sample_unique(rng, 2)
    """

    def __init__(self, choices: Union[WeightedChoiceTable[T], Sequence[Tuple[T, float]]]):
        """Build a sampler.

        Args:
            choices: A validated WeightedChoiceTable, or (value, weight) pairs.

        Raises:
            ConstructionError: The weights are empty, all zero, negative,
                or not finite.
        """
        if isinstance(choices, WeightedChoiceTable):
            table = choices
        else:
            table = WeightedChoiceTable.from_pairs(choices)

        self.table = table
        self.choices: Tuple[T, ...] = table.choices
        self.weights = np.array(table.weights, dtype=np.float64)
        self._cumulative = np.cumsum(self.weights)
        # Frozen after construction, like the table itself
        self.weights.setflags(write=False)
        self._cumulative.setflags(write=False)

    @classmethod
    def linear(cls, choices: Iterable[T], start: float, end: float) -> "WeightedSampler[T]":
        """Sampler over a linear weight ramp (see WeightedChoiceTable.linear)."""
        return cls(WeightedChoiceTable.linear(choices, start, end))

    def __len__(self) -> int:
        return len(self.choices)

    def __repr__(self) -> str:
        return f"WeightedSampler({self.table.name!r}, n={len(self.choices)})"

    def probabilities(self) -> np.ndarray:
        """Normalised weights, index-aligned with choices."""
        return self.weights / self._cumulative[-1]

    def sample_index(self, rng) -> int:
        return _pick(self._cumulative, rng.random())

    def sample(self, rng) -> T:
        """Draw one choice (with replacement)."""
        return self.choices[self.sample_index(rng)]

    def iter(self, rng, n: int) -> Iterator[T]:
        """Lazily yield exactly ``n`` independent draws.

        Each call starts a fresh sequence and consumes ``n`` draws from ``rng``
        as it is iterated.
        """
        if n < 0:
            raise PreconditionViolation(f"Draw count must be >= 0, got {n}")
        return (self.sample(rng) for _ in range(n))

    def sample_unique(self, rng, n: int) -> List[Tuple[T, float]]:
        """Draw ``n`` distinct choices without replacement.

        After each draw the chosen index leaves the pool and the remaining
        weights keep their relative proportions. Once only zero-weight
        candidates remain, each of them is equally likely.

        Returns:
            List of (choice, original weight) pairs, in draw order.

        Raises:
            PreconditionViolation: ``n`` is negative or larger than the
                number of choices.
        """
        if n < 0 or n > len(self.choices):
            raise PreconditionViolation(
                f"Cannot draw {n} unique choices from {len(self.choices)}"
            )

        remaining = list(range(len(self.choices)))
        picked = []
        for _ in range(n):
            pool = self.weights[remaining]
            if pool.sum() > 0:
                slot = _pick(np.cumsum(pool), rng.random())
            else:
                slot = min(int(rng.random() * len(remaining)), len(remaining) - 1)
            index = remaining.pop(slot)
            picked.append((self.choices[index], float(self.weights[index])))

        return picked
