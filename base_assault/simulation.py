"""
Simulation
===========
Owns the world and drives one fixed-order tick at a time:

    hero → units → projectiles (+prune) → pickups → combat
         → spawner → bases → win/loss → compact removals

Wall-clock timers all compare against one monotonic timestamp taken at
the start of the tick. Once an outcome is recorded the simulation stops
advancing.
"""

from typing import Callable, FrozenSet, Iterable, List, Optional
import logging
import random
import time

from .ecs import World
from .context import TickContext, Control, VICTORY, DEFEAT
from .components import Health, Side
from .bases import create_player_base, create_enemy_base, base_system
from .player import create_hero, hero_spawn_point, hero_system
from .units import unit_ai_system
from .projectiles import projectile_system
from .pickups import pickup_system
from .combat import combat_system
from .spawner import Spawner
from .snapshot import FrameSnapshot, build_snapshot
from .settings import HERO_RESPAWNS

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class Simulation:
    """Central simulation state container."""

    def __init__(self, seed: Optional[int] = None,
                 respawns: int = HERO_RESPAWNS,
                 clock: Callable[[], float] = monotonic_ms):
        self.seed = seed
        self.respawns = respawns
        self.clock = clock
        self.rng = random.Random(seed)
        self.reset()

    def reset(self):
        """Start a fresh match. The RNG keeps its stream across restarts."""
        self.world = World()
        self.player_base_id = create_player_base(self.world)
        self.enemy_base_id = create_enemy_base(self.world)
        x, y = hero_spawn_point(self.world, self.player_base_id)
        self.hero_id = create_hero(self.world, x, y, respawns=self.respawns)
        self.spawner = Spawner()

        self.tick_count = 0
        self.kills = 0
        self.outcome: Optional[str] = None
        self.now = self.clock()
        logger.info('New match (seed=%s)', self.seed)

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    def tick(self, controls: Iterable[Control] = frozenset(),
             delta: float = 1.0, now: Optional[float] = None) -> List[dict]:
        """
        Advance one tick. Returns the events raised during it.

        `controls` is latched into a frozenset before any system runs.
        `now` defaults to a fresh clock reading.
        """
        if self.is_over:
            return []

        self.now = self.clock() if now is None else now
        ctx = TickContext(
            world=self.world,
            hero_id=self.hero_id,
            player_base_id=self.player_base_id,
            enemy_base_id=self.enemy_base_id,
            rng=self.rng,
            now=self.now,
            delta=delta,
            controls=frozenset(controls),
        )

        hero_system(ctx)
        unit_ai_system(ctx)
        projectile_system(ctx)
        pickup_system(ctx)
        combat_system(ctx)
        self.spawner.update(ctx)
        base_system(ctx)

        if ctx.outcome is not None:
            self._finish(ctx.outcome)
        self.evaluate_outcome()

        self.world.process_dead_entities()
        self.tick_count += 1

        for event in ctx.events:
            logger.debug('tick %d: %s', self.tick_count, event)
            if event['type'] == 'unit_killed' and event['side'] == Side.ENEMY:
                self.kills += 1
        return ctx.events

    def evaluate_outcome(self) -> Optional[str]:
        """Check both bases. The first outcome recorded is final."""
        if self.is_over:
            return self.outcome

        if self.world.get_component(self.player_base_id, Health).current <= 0:
            self._finish(DEFEAT)
        elif self.world.get_component(self.enemy_base_id, Health).current <= 0:
            self._finish(VICTORY)
        return self.outcome

    def _finish(self, outcome: str):
        if self.outcome is None:
            self.outcome = outcome
            logger.info('Match over: %s after %d ticks', outcome, self.tick_count)

    def snapshot(self) -> FrameSnapshot:
        """Immutable view of the current state for the renderer."""
        return build_snapshot(
            self.world, self.hero_id, self.player_base_id, self.enemy_base_id,
            self.tick_count, self.now, self.kills, self.outcome,
        )

    def run(self, ticks: int, controls: FrozenSet[Control] = frozenset(),
            step_ms: Optional[float] = None) -> Optional[str]:
        """
        Run up to `ticks` ticks with constant input, stopping at an outcome.

        With `step_ms`, time advances by that much per tick from the
        current timestamp instead of reading the clock.
        """
        now = self.now
        for _ in range(ticks):
            if self.is_over:
                break
            if step_ms is None:
                self.tick(controls)
            else:
                now += step_ms
                self.tick(controls, now=now)
        return self.outcome
