"""
Bases
======
The two garrisons: stationary structures with hit points, a defensive
tower that fires at random, and (player side) a recovery zone.
"""

from typing import Optional, Tuple
import logging

from .ecs import World
from .context import TickContext
from .components import (
    Position, CollisionBox, Health, Team, Side, Origin,
    BaseTag, Tower, UnitTag
)
from .physics import get_bounds
from .projectiles import spawn_projectile
from .settings import (
    BASE_SIZE, GROUND_Y, PLAYER_BASE_X, ENEMY_BASE_X,
    PLAYER_BASE_HP, ENEMY_BASE_HP,
    TOWER_DISABLE_MS, TOWER_FIRE_CHANCE, TOWER_SHOT_OFFSET, TOWER_SHOT_RISE,
    PLAYER_TOWER_DAMAGE, ENEMY_TOWER_DAMAGE
)

logger = logging.getLogger(__name__)


def create_base(world: World, x: float, y: float, width: float, height: float,
                is_player: bool, max_hp: int) -> int:
    """Create a base entity."""
    entity_id = world.create_entity()
    world.add_component(entity_id, Position(float(x), float(y)))
    world.add_component(entity_id, CollisionBox(width, height))
    world.add_component(entity_id, Health(max_hp, max_hp))
    world.add_component(entity_id, Team(Side.FRIENDLY if is_player else Side.ENEMY))
    world.add_component(entity_id, BaseTag(is_player))
    world.add_component(entity_id, Tower())
    return entity_id


def create_player_base(world: World) -> int:
    return create_base(world, PLAYER_BASE_X, GROUND_Y - BASE_SIZE,
                       BASE_SIZE, BASE_SIZE, True, PLAYER_BASE_HP)


def create_enemy_base(world: World) -> int:
    return create_base(world, ENEMY_BASE_X, GROUND_Y - BASE_SIZE,
                       BASE_SIZE, BASE_SIZE, False, ENEMY_BASE_HP)


def recovery_zone(world: World, base_id: int) -> Tuple[int, int, int, int]:
    """The heal rectangle: the player base's own footprint."""
    return get_bounds(world.get_component(base_id, Position),
                      world.get_component(base_id, CollisionBox))


# =============================================================================
# TOWER
# =============================================================================

def disable_tower(world: World, base_id: int, now: float) -> None:
    """Switch a tower off for TOWER_DISABLE_MS starting at `now`."""
    tower = world.get_component(base_id, Tower)
    tower.enabled = False
    tower.disabled_at = now
    logger.info('Tower disabled for %d ms', TOWER_DISABLE_MS)


def update_tower(tower: Tower, now: float) -> bool:
    """Re-enable the tower once the disable window elapsed. Returns True on change."""
    if not tower.enabled and tower.disabled_at is not None:
        if now - tower.disabled_at >= TOWER_DISABLE_MS:
            tower.enabled = True
            tower.disabled_at = None
            return True
    return False


def base_system(ctx: TickContext):
    """
    Per-tick base logic: tower timer expiry, then a small random chance
    for each base to fire its tower. Player base runs first.
    """
    for base_id in (ctx.player_base_id, ctx.enemy_base_id):
        tower = ctx.world.get_component(base_id, Tower)
        if update_tower(tower, ctx.now):
            logger.info('Tower re-enabled')

        if ctx.rng.random() < TOWER_FIRE_CHANCE:
            tower_fire(ctx, base_id)


def tower_fire(ctx: TickContext, base_id: int) -> Optional[int]:
    """
    Fire a base's tower at the opposing garrison.

    Only checks that a target exists (the first opposing unit); the shot
    itself flies straight from the tower. The player tower respects its
    disable window, the enemy tower ignores it. Returns the projectile id,
    or None when nothing was fired.
    """
    world = ctx.world
    pos = world.get_component(base_id, Position)
    box = world.get_component(base_id, CollisionBox)
    tag = world.get_component(base_id, BaseTag)
    tower = world.get_component(base_id, Tower)

    if tag.is_player:
        if not tower.enabled or first_unit(world, Side.ENEMY) is None:
            return None
        return spawn_projectile(
            world,
            int(pos.x + TOWER_SHOT_OFFSET), int(pos.y - TOWER_SHOT_RISE),
            1, owner=Side.FRIENDLY, origin=Origin.TOWER,
            damage=PLAYER_TOWER_DAMAGE,
        )

    if first_unit(world, Side.FRIENDLY) is None:
        return None
    return spawn_projectile(
        world,
        int(pos.x + box.width - TOWER_SHOT_OFFSET), int(pos.y - TOWER_SHOT_RISE),
        -1, owner=Side.ENEMY, origin=Origin.TOWER,
        damage=ENEMY_TOWER_DAMAGE,
    )


def first_unit(world: World, side: Side) -> Optional[int]:
    """First live unit of a side in collection order, or None."""
    for entity_id, team, _ in world.query(Team, UnitTag):
        if team.side == side:
            return entity_id
    return None


def damage_base(ctx: TickContext, base_id: int, amount: int) -> bool:
    """Damage a base, clamping at zero. Returns True if it is destroyed."""
    health = ctx.world.get_component(base_id, Health)
    health.current = max(0, health.current - amount)
    tag = ctx.world.get_component(base_id, BaseTag)
    ctx.events.append({'type': 'base_damaged', 'is_player': tag.is_player,
                       'amount': amount, 'hp': health.current})
    return health.current <= 0
