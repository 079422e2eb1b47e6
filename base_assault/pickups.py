"""
Pickups
========
Collectibles dropped by defeated units. They hop up, fall under gravity
and rest on the ground until the hero walks over them.
"""

import random

from .ecs import World
from .context import TickContext
from .components import (
    Position, Velocity, CollisionBox, Gravity, Pickup, PickupKind
)
from .physics import integrate_gravity
from .settings import PICKUP_SIZE, PICKUP_HOP, PICKUP_TABLE, GRAVITY


def roll_pickup_kind(rng: random.Random) -> PickupKind:
    """Pick a kind from the cumulative table (60/30/8/2 percent)."""
    roll = rng.random() * 100
    for name, threshold in PICKUP_TABLE:
        if roll < threshold:
            return PickupKind(name)
    return PickupKind(PICKUP_TABLE[-1][0])


def spawn_pickup(world: World, x: float, y: float, kind: PickupKind) -> int:
    """Create a pickup entity with its initial upward hop."""
    if not isinstance(kind, PickupKind):
        raise ValueError(f'Unknown pickup kind: {kind!r}')

    eid = world.create_entity()
    world.add_component(eid, Position(float(x), float(y)))
    world.add_component(eid, Velocity(0.0, PICKUP_HOP))
    world.add_component(eid, CollisionBox(PICKUP_SIZE, PICKUP_SIZE))
    world.add_component(eid, Gravity(GRAVITY))
    world.add_component(eid, Pickup(kind))
    return eid


def pickup_system(ctx: TickContext):
    """Apply gravity to pickups and settle them on the ground."""
    for eid, pos, vel, box, grav, _ in ctx.world.query(
        Position, Velocity, CollisionBox, Gravity, Pickup
    ):
        integrate_gravity(pos, vel, box.height, ctx.delta, grav.strength)
