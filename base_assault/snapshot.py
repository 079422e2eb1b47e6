"""
Frame Snapshots
================
Immutable per-tick views of the simulation handed to the renderer.
Nothing in here aliases live component state.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .ecs import World
from .components import (
    Position, CollisionBox, Health, Team, Side, Origin, HeroState,
    Invincibility, UnitTag, Projectile, Pickup, PickupKind, BaseTag, Tower
)


@dataclass(frozen=True)
class HeroView:
    x: float
    y: float
    size: float
    hp: int
    max_hp: int
    direction: int
    is_jumping: bool
    is_crouching: bool
    is_healing: bool
    is_invincible: bool


@dataclass(frozen=True)
class BaseView:
    x: float
    y: float
    width: float
    height: float
    hp: int
    max_hp: int
    is_player: bool
    tower_enabled: bool


@dataclass(frozen=True)
class UnitView:
    x: float
    y: float
    size: float
    hp: int
    max_hp: int
    side: Side
    category: str


@dataclass(frozen=True)
class ProjectileView:
    x: float
    y: float
    size: float
    direction: int
    owner: Side
    origin: Origin


@dataclass(frozen=True)
class PickupView:
    x: float
    y: float
    size: float
    kind: PickupKind


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the rendering collaborator reads for one tick."""
    tick: int
    now: float
    hero: HeroView
    player_base: BaseView
    enemy_base: BaseView
    units: Tuple[UnitView, ...]
    projectiles: Tuple[ProjectileView, ...]
    pickups: Tuple[PickupView, ...]
    coins: int
    respawns: int
    kills: int
    outcome: Optional[str]

    @property
    def is_over(self) -> bool:
        return self.outcome is not None


def build_snapshot(world: World, hero_id: int, player_base_id: int,
                   enemy_base_id: int, tick: int, now: float, kills: int,
                   outcome: Optional[str]) -> FrameSnapshot:
    """Copy the live world into a FrameSnapshot."""
    hero_pos = world.get_component(hero_id, Position)
    hero_box = world.get_component(hero_id, CollisionBox)
    hero_hp = world.get_component(hero_id, Health)
    state = world.get_component(hero_id, HeroState)
    invuln = world.get_component(hero_id, Invincibility)

    hero = HeroView(
        x=hero_pos.x, y=hero_pos.y, size=hero_box.width,
        hp=hero_hp.current, max_hp=hero_hp.maximum,
        direction=state.direction,
        is_jumping=state.is_jumping,
        is_crouching=state.is_crouching,
        is_healing=state.is_healing,
        is_invincible=now < invuln.until,
    )

    units = tuple(
        UnitView(pos.x, pos.y, box.width, hp.current, hp.maximum, team.side, tag.category)
        for _, pos, box, hp, team, tag in world.query(
            Position, CollisionBox, Health, Team, UnitTag)
    )
    projectiles = tuple(
        ProjectileView(pos.x, pos.y, box.width, proj.direction, proj.owner, proj.origin)
        for _, pos, box, proj in world.query(Position, CollisionBox, Projectile)
    )
    pickups = tuple(
        PickupView(pos.x, pos.y, box.width, pickup.kind)
        for _, pos, box, pickup in world.query(Position, CollisionBox, Pickup)
    )

    return FrameSnapshot(
        tick=tick,
        now=now,
        hero=hero,
        player_base=_base_view(world, player_base_id),
        enemy_base=_base_view(world, enemy_base_id),
        units=units,
        projectiles=projectiles,
        pickups=pickups,
        coins=state.coins,
        respawns=state.respawns_remaining,
        kills=kills,
        outcome=outcome,
    )


def _base_view(world: World, base_id: int) -> BaseView:
    pos = world.get_component(base_id, Position)
    box = world.get_component(base_id, CollisionBox)
    hp = world.get_component(base_id, Health)
    tag = world.get_component(base_id, BaseTag)
    tower = world.get_component(base_id, Tower)
    return BaseView(pos.x, pos.y, box.width, box.height, hp.current, hp.maximum,
                    tag.is_player, tower.enabled)
