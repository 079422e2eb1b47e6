"""
Projectile System
==================
Projectile lifecycle: spawn, move, prune once off the arena. Hits are
resolved later in the tick by the combat resolver.
"""

from .ecs import World
from .context import TickContext
from .components import (
    Position, Velocity, CollisionBox, Projectile, Side, Origin
)
from .physics import integrate_linear, is_off_arena
from .settings import PROJECTILE_SPEED, PROJECTILE_SIZE


def spawn_projectile(
    world: World,
    x: float, y: float,
    direction: int,
    owner: Side,
    origin: Origin,
    damage: int = 1,
    speed: float = PROJECTILE_SPEED,
) -> int:
    """Spawn a single projectile entity travelling horizontally."""
    eid = world.create_entity()

    world.add_component(eid, Position(float(x), float(y)))
    world.add_component(eid, Velocity(direction * speed, 0.0))
    world.add_component(eid, CollisionBox(PROJECTILE_SIZE, PROJECTILE_SIZE))
    world.add_component(eid, Projectile(
        damage=damage,
        direction=direction,
        speed=speed,
        owner=owner,
        origin=origin,
    ))

    return eid


def projectile_system(ctx: TickContext) -> int:
    """
    Move projectiles and destroy the ones that left the arena.

    Returns the number of projectiles pruned.
    """
    pruned = 0
    for proj_id, pos, vel, _ in ctx.world.query(Position, Velocity, Projectile):
        integrate_linear(pos, vel, ctx.delta)
        if is_off_arena(pos):
            ctx.world.destroy_entity(proj_id)
            pruned += 1
    return pruned
