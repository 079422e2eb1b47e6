"""
Shared fixtures: a deterministic simulation and a tick-context factory
for driving individual systems.
"""
import random

import pytest

from base_assault.context import TickContext
from base_assault.simulation import Simulation


class FixedRandom(random.Random):
    """Random source that always rolls the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def sim():
    """Seeded simulation whose clock never moves on its own."""
    return Simulation(seed=1234, clock=lambda: 0.0)


@pytest.fixture
def fixed_rng():
    return FixedRandom


@pytest.fixture
def make_ctx(sim):
    """Build a TickContext over the fixture simulation's world."""
    def _make(now=0.0, controls=(), rng=None, delta=1.0):
        return TickContext(
            world=sim.world,
            hero_id=sim.hero_id,
            player_base_id=sim.player_base_id,
            enemy_base_id=sim.enemy_base_id,
            rng=rng if rng is not None else sim.rng,
            now=now,
            delta=delta,
            controls=frozenset(controls),
        )
    return _make
