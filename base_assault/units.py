"""
Unit Archetypes
================
Autonomous combat units and their AI.

Every unit walks straight at the opposing base and opens fire once it
has advanced far enough from its own base:
    walk → (past threshold) fire on cooldown → breach or die
"""

from typing import Optional
import logging

from .ecs import World
from .context import TickContext
from .components import (
    Position, Velocity, CollisionBox, Health, Team, Side, Origin,
    FireControl, UnitTag, LootDrop
)
from .physics import integrate_linear
from .pickups import roll_pickup_kind, spawn_pickup
from .projectiles import spawn_projectile
from .settings import UNIT_STATS, UNIT_FIRE_THRESHOLD

logger = logging.getLogger(__name__)


def create_unit(world: World, category: str, side: Side,
                x: float, y: float, hp: Optional[int] = None) -> int:
    """
    Create a unit of the given category.

    Category fixes size, speed, fire rate, projectile damage and drop
    chance. `hp` overrides the category's hit points (friendly light
    units spawn with 2).
    """
    if category not in UNIT_STATS:
        raise ValueError(f'Unknown unit category: {category!r}')

    base_hp, size, speed, fire_rate, damage, drop_chance = UNIT_STATS[category]
    hp = base_hp if hp is None else hp
    direction = 1 if side == Side.FRIENDLY else -1

    entity_id = world.create_entity()

    world.add_component(entity_id, Position(float(x), float(y)))
    world.add_component(entity_id, Velocity(direction * speed, 0.0))
    world.add_component(entity_id, CollisionBox(size, size))

    world.add_component(entity_id, Health(hp, hp))
    world.add_component(entity_id, Team(side))
    world.add_component(entity_id, FireControl(fire_rate=fire_rate, damage=damage))
    world.add_component(entity_id, LootDrop(drop_chance))

    world.add_component(entity_id, UnitTag(category))

    return entity_id


# =============================================================================
# LIGHT / ELITE / HEAVY
# =============================================================================

def create_light(world: World, x: float, y: float,
                 side: Side = Side.ENEMY, hp: Optional[int] = None) -> int:
    """Baseline infantry. 1 hp as an enemy."""
    return create_unit(world, 'light', side, x, y, hp)


def create_elite(world: World, x: float, y: float) -> int:
    """Elite trooper: 3 hp, always drops a pickup."""
    return create_unit(world, 'elite', Side.ENEMY, x, y)


def create_heavy(world: World, x: float, y: float) -> int:
    """Heavy machine gunner: 5 hp, slow, fast double-damage fire."""
    return create_unit(world, 'heavy', Side.ENEMY, x, y)


UNIT_FACTORIES = {
    'light': create_light,
    'elite': create_elite,
    'heavy': create_heavy,
}


# =============================================================================
# AI
# =============================================================================

def unit_ai_system(ctx: TickContext):
    """
    Advance every unit toward the opposing base and fire when allowed.

    Friendly units fire once past the threshold to the right of the
    player base, enemy units once past it to the left of the enemy base.
    """
    world = ctx.world
    player_base = world.get_component(ctx.player_base_id, Position)
    enemy_base = world.get_component(ctx.enemy_base_id, Position)

    for entity_id, pos, vel, box, team, fire, _ in world.query(
        Position, Velocity, CollisionBox, Team, FireControl, UnitTag
    ):
        integrate_linear(pos, vel, ctx.delta)

        if fire.fire_timer <= 0:
            if team.side == Side.FRIENDLY:
                in_range = pos.x > player_base.x + UNIT_FIRE_THRESHOLD
            else:
                in_range = pos.x < enemy_base.x - UNIT_FIRE_THRESHOLD
            if in_range:
                _unit_fire(world, pos, box, team, fire)
                fire.fire_timer = fire.fire_rate
        fire.fire_timer = max(0, fire.fire_timer - 1)


def _unit_fire(world: World, pos: Position, box: CollisionBox,
               team: Team, fire: FireControl) -> int:
    direction = 1 if team.side == Side.FRIENDLY else -1
    return spawn_projectile(
        world,
        int(pos.x) + int(box.width) // 2,
        int(pos.y) + int(box.height) * 3 // 4,
        direction,
        owner=team.side,
        origin=Origin.UNIT,
        damage=fire.damage,
    )


def damage_unit(ctx: TickContext, entity_id: int, amount: int) -> bool:
    """
    Apply damage to a unit. Returns True if this call killed it.

    A killed unit is marked for removal and rolls its loot drop.
    """
    world = ctx.world
    if not world.is_alive(entity_id):
        return False
    health = world.get_component(entity_id, Health)
    if health is None:
        return False

    health.current = max(0, health.current - amount)
    if health.current > 0:
        return False

    pos = world.get_component(entity_id, Position)
    tag = world.get_component(entity_id, UnitTag)
    team = world.get_component(entity_id, Team)
    loot = world.get_component(entity_id, LootDrop)

    world.destroy_entity(entity_id)
    ctx.events.append({'type': 'unit_killed', 'category': tag.category,
                       'side': team.side, 'x': pos.x, 'y': pos.y})
    logger.debug('%s %s unit killed at x=%.0f', team.side.name.lower(),
                 tag.category, pos.x)

    # Elite chance is 1.0, so it never consumes a roll
    if loot and (loot.chance >= 1.0 or ctx.rng.random() < loot.chance):
        kind = roll_pickup_kind(ctx.rng)
        spawn_pickup(world, int(pos.x), int(pos.y), kind)
        ctx.events.append({'type': 'pickup_dropped', 'kind': kind,
                           'x': pos.x, 'y': pos.y})

    return True
