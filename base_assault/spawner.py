"""
Spawn Scheduling
=================
Frame-counted wave timers for both garrisons with weighted-random
enemy category selection.
"""

from dataclasses import dataclass
from typing import List
import logging
import random

from .context import TickContext
from .components import Position, CollisionBox, Side
from .units import create_unit
from .settings import (
    GROUND_Y, UNIT_STATS, FRIENDLY_UNIT_HP,
    ENEMY_SPAWN_INTERVAL, FRIENDLY_SPAWN_INTERVAL,
    ENEMY_SPAWN_OFFSET, FRIENDLY_SPAWN_OFFSET, ENEMY_SPAWN_TABLE
)

logger = logging.getLogger(__name__)


def select_enemy_category(rng: random.Random) -> str:
    """Roll an enemy category: 10% heavy, 20% elite, 70% light."""
    roll = rng.random()
    for category, threshold in ENEMY_SPAWN_TABLE:
        if roll < threshold:
            return category
    return ENEMY_SPAWN_TABLE[-1][0]


@dataclass
class Spawner:
    """
    Two independent countdowns, advanced once per tick.

    The enemy timer fires every ENEMY_SPAWN_INTERVAL ticks, the friendly
    timer every FRIENDLY_SPAWN_INTERVAL ticks.
    """
    enemy_timer: int = 0
    friendly_timer: int = 0
    enemy_interval: int = ENEMY_SPAWN_INTERVAL
    friendly_interval: int = FRIENDLY_SPAWN_INTERVAL

    def reset(self):
        self.enemy_timer = 0
        self.friendly_timer = 0

    def update(self, ctx: TickContext) -> List[int]:
        """Advance both timers and spawn what is due. Returns new unit ids."""
        spawned = []

        self.enemy_timer += 1
        if self.enemy_timer >= self.enemy_interval:
            spawned.append(spawn_enemy(ctx))
            self.enemy_timer = 0

        self.friendly_timer += 1
        if self.friendly_timer >= self.friendly_interval:
            spawned.append(spawn_friendly(ctx))
            self.friendly_timer = 0

        return spawned


def spawn_enemy(ctx: TickContext) -> int:
    """Spawn a rolled enemy just outside the enemy base, feet on the ground."""
    category = select_enemy_category(ctx.rng)
    size = UNIT_STATS[category][1]
    base_pos = ctx.world.get_component(ctx.enemy_base_id, Position)

    eid = create_unit(ctx.world, category, Side.ENEMY,
                      int(base_pos.x - ENEMY_SPAWN_OFFSET), GROUND_Y - size)
    ctx.events.append({'type': 'unit_spawned', 'side': Side.ENEMY,
                       'category': category})
    logger.debug('Spawned enemy %s', category)
    return eid


def spawn_friendly(ctx: TickContext) -> int:
    """Spawn a 2-hp light friendly just outside the player base."""
    size = UNIT_STATS['light'][1]
    base_pos = ctx.world.get_component(ctx.player_base_id, Position)
    base_box = ctx.world.get_component(ctx.player_base_id, CollisionBox)

    eid = create_unit(ctx.world, 'light', Side.FRIENDLY,
                      int(base_pos.x + base_box.width + FRIENDLY_SPAWN_OFFSET),
                      GROUND_Y - size, hp=FRIENDLY_UNIT_HP)
    ctx.events.append({'type': 'unit_spawned', 'side': Side.FRIENDLY,
                       'category': 'light'})
    logger.debug('Spawned friendly light')
    return eid
