"""
Tick Context
=============
Everything a system needs for one simulation step, resolved once at the
start of the tick and passed explicitly into every system.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, List, Optional
import random

from .ecs import World


VICTORY = 'victory'
DEFEAT = 'defeat'


class Control(Enum):
    """Held-input codes consumed by the hero."""
    LEFT = auto()
    RIGHT = auto()
    JUMP = auto()
    CROUCH = auto()
    FIRE = auto()


@dataclass
class TickContext:
    """
    Per-tick view of the simulation.

    `now` is a single monotonic timestamp in milliseconds shared by every
    wall-clock timer this tick. `delta` scales motion by how long the tick
    actually took relative to the nominal frame interval.
    """
    world: World
    hero_id: int
    player_base_id: int
    enemy_base_id: int
    rng: random.Random
    now: float = 0.0
    delta: float = 1.0
    controls: FrozenSet[Control] = frozenset()
    events: List[dict] = field(default_factory=list)
    outcome: Optional[str] = None  # Set mid-tick when the hero runs out of lives

    def held(self, control: Control) -> bool:
        return control in self.controls
