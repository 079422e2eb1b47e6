"""
Combat Resolver
================
All pairwise interaction rules, run once per tick after everything moved.

Order matters and is fixed:
    1. projectiles vs hero / enemy units / enemy base
    2. hero vs pickups
    3. enemy units breaching the player base
    4. friendly units breaching the enemy base

Removals are marked on the world and compacted at the end of the tick,
so anything destroyed here is already invisible to the later steps.
"""

from typing import List
import logging

from .context import TickContext
from .components import (
    Position, CollisionBox, Team, Side, Origin, Projectile, Pickup, UnitTag
)
from .bases import damage_base
from .player import damage_hero, apply_pickup
from .units import damage_unit
from .physics import get_bounds, rects_intersect
from .settings import (
    ENEMY_BREACH_DAMAGE, FRIENDLY_BREACH_DAMAGE, HERO_SHOT_BASE_DAMAGE
)

logger = logging.getLogger(__name__)


def combat_system(ctx: TickContext) -> List[dict]:
    """Resolve one tick of combat. Returns the events raised here."""
    first_event = len(ctx.events)

    _resolve_projectiles(ctx)
    _resolve_pickups(ctx)
    _resolve_breaches(ctx)

    return ctx.events[first_event:]


def _resolve_projectiles(ctx: TickContext):
    world = ctx.world
    enemy_base_rect = _rect(ctx, ctx.enemy_base_id)

    for proj_id, pos, box, proj in world.query(Position, CollisionBox, Projectile):
        proj_rect = get_bounds(pos, box)
        hit = False

        if proj.owner == Side.ENEMY:
            if rects_intersect(proj_rect, _rect(ctx, ctx.hero_id)):
                damage_hero(ctx, proj.damage)
                hit = True
        else:
            # One hit consumes the projectile: first intersecting unit only
            for unit_id, u_pos, u_box, team, _ in world.query(
                Position, CollisionBox, Team, UnitTag
            ):
                if team.side != Side.ENEMY:
                    continue
                if rects_intersect(proj_rect, get_bounds(u_pos, u_box)):
                    damage_unit(ctx, unit_id, proj.damage)
                    hit = True
                    break

            # Hero shots also chip the enemy base, even after a unit hit
            if proj.origin == Origin.HERO and rects_intersect(proj_rect, enemy_base_rect):
                damage_base(ctx, ctx.enemy_base_id, HERO_SHOT_BASE_DAMAGE)
                hit = True

        if hit:
            world.destroy_entity(proj_id)


def _resolve_pickups(ctx: TickContext):
    world = ctx.world
    hero_rect = _rect(ctx, ctx.hero_id)
    for pickup_id, pos, box, pickup in world.query(Position, CollisionBox, Pickup):
        if rects_intersect(get_bounds(pos, box), hero_rect):
            apply_pickup(ctx, pickup.kind)
            world.destroy_entity(pickup_id)
            ctx.events.append({'type': 'pickup_collected', 'kind': pickup.kind})
            logger.debug('Collected %s', pickup.kind.value)


def _resolve_breaches(ctx: TickContext):
    """Units that reach the opposing base blow up against it."""
    world = ctx.world
    player_pos = world.get_component(ctx.player_base_id, Position)
    player_box = world.get_component(ctx.player_base_id, CollisionBox)
    enemy_pos = world.get_component(ctx.enemy_base_id, Position)

    for unit_id, pos, team, tag in world.query(Position, Team, UnitTag):
        if team.side == Side.ENEMY and pos.x < player_pos.x + player_box.width:
            damage_base(ctx, ctx.player_base_id, ENEMY_BREACH_DAMAGE)
            world.destroy_entity(unit_id)
            ctx.events.append({'type': 'unit_breached', 'side': team.side,
                               'category': tag.category})

    for unit_id, pos, box, team, tag in world.query(Position, CollisionBox, Team, UnitTag):
        if team.side == Side.FRIENDLY and pos.x > enemy_pos.x - box.width:
            damage_base(ctx, ctx.enemy_base_id, FRIENDLY_BREACH_DAMAGE)
            world.destroy_entity(unit_id)
            ctx.events.append({'type': 'unit_breached', 'side': team.side,
                               'category': tag.category})


def _rect(ctx: TickContext, entity_id: int):
    return get_bounds(ctx.world.get_component(entity_id, Position),
                      ctx.world.get_component(entity_id, CollisionBox))
