"""
Player Module
==============
Hero entity creation, the hero state machine and input latching.
"""

from typing import FrozenSet
import logging

from .ecs import World
from .context import TickContext, Control, DEFEAT
from .components import (
    Position, Velocity, CollisionBox, Health, Team, Side, Origin,
    FireControl, Invincibility, HeroState, HeroTag, PickupKind
)
from .bases import disable_tower, recovery_zone
from .physics import integrate_gravity, clamp_to_arena, get_bounds, rects_intersect
from .projectiles import spawn_projectile
from .settings import (
    GROUND_Y, HERO_SIZE, HERO_CROUCH_SIZE, HERO_SPEED, HERO_JUMP_IMPULSE,
    HERO_MAX_HP, HERO_FIRE_RATE, HERO_RESPAWNS, HERO_SPAWN_OFFSET_X,
    HERO_SHOT_DAMAGE, HIT_INVINCIBILITY_MS, RESPAWN_INVINCIBILITY_MS,
    SHIELD_INVINCIBILITY_MS, HEAL_INTERVAL_MS, WEAPON_BOOST_MS, COIN_VALUE
)

logger = logging.getLogger(__name__)


def create_hero(world: World, x: float, y: float,
                respawns: int = HERO_RESPAWNS) -> int:
    """Create the hero entity with all required components."""
    entity_id = world.create_entity()

    # Core physics
    world.add_component(entity_id, Position(float(x), float(y)))
    world.add_component(entity_id, Velocity(0.0, 0.0))
    world.add_component(entity_id, CollisionBox(HERO_SIZE, HERO_SIZE))

    # Combat
    world.add_component(entity_id, Health(HERO_MAX_HP, HERO_MAX_HP))
    world.add_component(entity_id, Team(Side.FRIENDLY))
    world.add_component(entity_id, FireControl(
        fire_rate=HERO_FIRE_RATE,
        damage=HERO_SHOT_DAMAGE
    ))
    world.add_component(entity_id, Invincibility())

    # Player state
    world.add_component(entity_id, HeroState(
        speed=HERO_SPEED,
        respawns_remaining=respawns,
        base_fire_rate=HERO_FIRE_RATE
    ))
    world.add_component(entity_id, HeroTag())

    return entity_id


def hero_spawn_point(world: World, player_base_id: int):
    """Where the hero (re)appears: beside the player base, standing on the ground."""
    base_pos = world.get_component(player_base_id, Position)
    return base_pos.x + HERO_SPAWN_OFFSET_X, float(GROUND_Y - HERO_SIZE)


# =============================================================================
# HERO UPDATE
# =============================================================================

def hero_system(ctx: TickContext):
    """
    Advance the hero one tick.

    Order: horizontal input, gravity/landing, jump, crouch, fire, timer
    expiry, healing. Flags are not a strict FSM; crouch is recomputed
    from input every tick.
    """
    world = ctx.world
    hero_id = ctx.hero_id
    pos = world.get_component(hero_id, Position)
    vel = world.get_component(hero_id, Velocity)
    box = world.get_component(hero_id, CollisionBox)
    state = world.get_component(hero_id, HeroState)
    fire = world.get_component(hero_id, FireControl)

    # Movement
    if ctx.held(Control.LEFT):
        pos.x -= state.speed * ctx.delta
        state.direction = -1
    if ctx.held(Control.RIGHT):
        pos.x += state.speed * ctx.delta
        state.direction = 1
    clamp_to_arena(pos, box.width)

    # Gravity and jumping
    if integrate_gravity(pos, vel, box.height, ctx.delta):
        state.is_jumping = False

    if ctx.held(Control.JUMP) and not state.is_jumping:
        vel.y = HERO_JUMP_IMPULSE
        state.is_jumping = True

    state.is_crouching = ctx.held(Control.CROUCH)
    if state.is_crouching:
        pos.y = GROUND_Y - HERO_CROUCH_SIZE
        box.width = box.height = HERO_CROUCH_SIZE
    else:
        box.width = box.height = HERO_SIZE

    # Firing (frame counted)
    if ctx.held(Control.FIRE) and fire.fire_timer <= 0:
        hero_fire(world, pos, box, state, fire)
        fire.fire_timer = fire.fire_rate
    fire.fire_timer = max(0, fire.fire_timer - 1)

    # Weapon boost expiry
    if state.boost_ends_at is not None and ctx.now >= state.boost_ends_at:
        fire.fire_rate = state.base_fire_rate
        state.boost_ends_at = None

    _handle_healing(ctx, pos, box, state)


def hero_fire(world: World, pos: Position, box: CollisionBox,
              state: HeroState, fire: FireControl) -> int:
    """Shoot from the leading edge at gun height."""
    size = int(box.width)
    bullet_x = int(pos.x + (size if state.direction == 1 else 0))
    return spawn_projectile(
        world,
        bullet_x, int(pos.y) + size * 3 // 4,
        state.direction,
        owner=Side.FRIENDLY,
        origin=Origin.HERO,
        damage=fire.damage,
    )


def _handle_healing(ctx: TickContext, pos: Position, box: CollisionBox,
                    state: HeroState):
    """
    Heal 1 hp per HEAL_INTERVAL_MS of continuous eligibility.

    Eligible: inside the recovery zone, not moving, below max hp. Any
    ineligible tick restarts the interval. Firing does not interrupt it.
    """
    health = ctx.world.get_component(ctx.hero_id, Health)
    zone = recovery_zone(ctx.world, ctx.player_base_id)

    inside_zone = rects_intersect(get_bounds(pos, box), zone)
    is_moving = ctx.held(Control.LEFT) or ctx.held(Control.RIGHT)

    if state.last_heal_time is None:
        state.last_heal_time = ctx.now

    if inside_zone and not is_moving and health.current < health.maximum:
        state.is_healing = True
        if ctx.now - state.last_heal_time >= HEAL_INTERVAL_MS:
            health.current = min(health.maximum, health.current + 1)
            # Overshoot past the interval counts toward the next heal
            state.last_heal_time += HEAL_INTERVAL_MS
    else:
        state.is_healing = False
        state.last_heal_time = ctx.now


# =============================================================================
# DAMAGE, DEATH, PICKUPS
# =============================================================================

def is_invincible(world: World, hero_id: int, now: float) -> bool:
    invuln = world.get_component(hero_id, Invincibility)
    return now < invuln.until


def grant_invincibility(world: World, hero_id: int, now: float, duration: float):
    """Start a fresh window. Windows reset, they never add up."""
    world.get_component(hero_id, Invincibility).until = now + duration


def damage_hero(ctx: TickContext, amount: int) -> bool:
    """
    Damage the hero unless invincible. Returns True if this hit killed it.

    A successful hit grants hit invincibility; a lethal one runs the
    death/respawn logic.
    """
    world = ctx.world
    if ctx.outcome is not None or is_invincible(world, ctx.hero_id, ctx.now):
        return False

    health = world.get_component(ctx.hero_id, Health)
    health.current = max(0, health.current - amount)
    grant_invincibility(world, ctx.hero_id, ctx.now, HIT_INVINCIBILITY_MS)
    ctx.events.append({'type': 'hero_hit', 'amount': amount, 'hp': health.current})

    if health.current <= 0:
        _hero_die(ctx)
        return True
    return False


def _hero_die(ctx: TickContext):
    """Spend a respawn (with penalties) or end the match in defeat."""
    world = ctx.world
    state = world.get_component(ctx.hero_id, HeroState)
    state.respawns_remaining -= 1
    ctx.events.append({'type': 'hero_killed',
                       'respawns_remaining': max(0, state.respawns_remaining)})

    if state.respawns_remaining < 0:
        state.respawns_remaining = 0
        ctx.outcome = DEFEAT
        logger.info('Hero killed with no respawns left')
        return

    # Respawn penalty
    state.coins = 0
    disable_tower(world, ctx.player_base_id, ctx.now)

    health = world.get_component(ctx.hero_id, Health)
    health.current = health.maximum

    pos = world.get_component(ctx.hero_id, Position)
    pos.x, pos.y = hero_spawn_point(world, ctx.player_base_id)
    world.get_component(ctx.hero_id, Velocity).y = 0.0
    box = world.get_component(ctx.hero_id, CollisionBox)
    box.width = box.height = HERO_SIZE

    grant_invincibility(world, ctx.hero_id, ctx.now, RESPAWN_INVINCIBILITY_MS)
    logger.info('Hero respawned, %d respawns left', state.respawns_remaining)


def apply_pickup(ctx: TickContext, kind: PickupKind):
    """Apply a collected pickup to the hero."""
    world = ctx.world
    state = world.get_component(ctx.hero_id, HeroState)

    if kind == PickupKind.COIN:
        state.coins += COIN_VALUE
    elif kind == PickupKind.HEALTH:
        health = world.get_component(ctx.hero_id, Health)
        health.current = min(health.maximum, health.current + 1)
    elif kind == PickupKind.WEAPON:
        fire = world.get_component(ctx.hero_id, FireControl)
        fire.fire_rate = state.base_fire_rate // 2
        state.boost_ends_at = ctx.now + WEAPON_BOOST_MS
    elif kind == PickupKind.SHIELD:
        grant_invincibility(world, ctx.hero_id, ctx.now, SHIELD_INVINCIBILITY_MS)
    else:
        raise ValueError(f'Unknown pickup kind: {kind!r}')


# =============================================================================
# INPUT
# =============================================================================

MOVE_KEYS = {
    'a': Control.LEFT,
    'd': Control.RIGHT,
    'w': Control.JUMP,
    's': Control.CROUCH,
    ' ': Control.FIRE,
}

SEQUENCE_KEYS = {
    'KEY_LEFT': Control.LEFT,
    'KEY_RIGHT': Control.RIGHT,
    'KEY_UP': Control.JUMP,
    'KEY_DOWN': Control.CROUCH,
}


class InputHandler:
    """
    Handles player input with key hold detection.

    Uses tick-based timers to simulate key hold in terminals that don't
    support key-up events. latch() returns an immutable snapshot so a
    tick never observes input changing underneath it.
    """

    def __init__(self, hold_duration: int = 3):
        self.keys_held: dict = {}  # Control -> ticks remaining
        self.hold_duration = hold_duration

        # Actions triggered this frame (consumed on read)
        self._quit_triggered = False
        self._restart_triggered = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        name = getattr(key, 'name', None)
        is_sequence = getattr(key, 'is_sequence', False)
        key_str = str(key).lower() if not is_sequence else ''

        # Quit
        if key_str == 'q' or name == 'KEY_ESCAPE':
            self._quit_triggered = True
            return

        if key_str == 'r':
            self._restart_triggered = True
            return

        control = SEQUENCE_KEYS.get(name) if is_sequence else MOVE_KEYS.get(key_str)
        if control is not None:
            self.press(control)

    def press(self, control: Control) -> None:
        """Mark a control as held, refreshing its hold timer."""
        self.keys_held[control] = self.hold_duration

    def release_all(self) -> None:
        self.keys_held.clear()

    def latch(self) -> FrozenSet[Control]:
        """Snapshot the held controls for this tick."""
        return frozenset(self.keys_held)

    def update(self) -> None:
        """Update key hold timers (call once per tick, after latching)."""
        expired = []
        for control, ticks in self.keys_held.items():
            self.keys_held[control] = ticks - 1
            if self.keys_held[control] <= 0:
                expired.append(control)
        for control in expired:
            del self.keys_held[control]

    def consume_quit(self) -> bool:
        """Check and consume quit trigger."""
        triggered = self._quit_triggered
        self._quit_triggered = False
        return triggered

    def consume_restart(self) -> bool:
        """Check and consume restart trigger."""
        triggered = self._restart_triggered
        self._restart_triggered = False
        return triggered
