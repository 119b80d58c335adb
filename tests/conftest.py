"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest


class ScriptedRng:
    """Random source that replays a fixed list of uniforms, cycling."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def rng():
    """Seeded numpy generator, fresh for each test."""
    return np.random.default_rng(1234)


@pytest.fixture
def scripted():
    """Factory for ScriptedRng instances."""
    return ScriptedRng
