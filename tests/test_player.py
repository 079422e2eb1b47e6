"""
Tests for the hero: movement, jump/crouch, firing, invincibility,
healing, death/respawn, pickups and input latching.
"""
import pytest
from blessed.keyboard import Keystroke

from base_assault.context import Control, DEFEAT
from base_assault.components import (
    Position, Velocity, CollisionBox, Health, HeroState, FireControl,
    Invincibility, Projectile, Origin, Side, PickupKind, Tower
)
from base_assault.player import (
    hero_system, damage_hero, apply_pickup, is_invincible, InputHandler
)
from base_assault.settings import (
    GROUND_Y, HERO_SIZE, HERO_CROUCH_SIZE, HERO_JUMP_IMPULSE, ARENA_WIDTH
)


def _hero(sim, component):
    return sim.world.get_component(sim.hero_id, component)


def _projectiles(sim):
    return [proj for _, proj in sim.world.query(Projectile)]


class TestMovement:

    def test_starts_on_ground_beside_base(self, sim):
        pos = _hero(sim, Position)
        assert pos.x == 58
        assert pos.y == GROUND_Y - HERO_SIZE

    def test_move_right_and_left(self, sim, make_ctx):
        pos = _hero(sim, Position)
        state = _hero(sim, HeroState)

        hero_system(make_ctx(controls=[Control.RIGHT]))
        assert pos.x == pytest.approx(64)
        assert state.direction == 1

        hero_system(make_ctx(controls=[Control.LEFT], delta=2.0))
        assert pos.x == pytest.approx(52)
        assert state.direction == -1

    def test_clamped_to_arena(self, sim, make_ctx):
        pos = _hero(sim, Position)
        pos.x = 2

        hero_system(make_ctx(controls=[Control.LEFT]))
        assert pos.x == 0

        pos.x = ARENA_WIDTH - HERO_SIZE - 1
        hero_system(make_ctx(controls=[Control.RIGHT]))
        assert pos.x == ARENA_WIDTH - HERO_SIZE

    def test_jump_only_when_grounded(self, sim, make_ctx):
        vel = _hero(sim, Velocity)
        state = _hero(sim, HeroState)

        hero_system(make_ctx(controls=[Control.JUMP]))
        assert state.is_jumping
        assert vel.y == HERO_JUMP_IMPULSE

        hero_system(make_ctx(controls=[Control.JUMP]))
        # Gravity applied, no second impulse
        assert vel.y == pytest.approx(HERO_JUMP_IMPULSE + 0.5)

    def test_lands_after_jump(self, sim, make_ctx):
        pos = _hero(sim, Position)
        state = _hero(sim, HeroState)

        hero_system(make_ctx(controls=[Control.JUMP]))
        for _ in range(200):
            hero_system(make_ctx())
            if not state.is_jumping:
                break

        assert not state.is_jumping
        assert pos.y == GROUND_Y - HERO_SIZE

    def test_crouch_recomputed_every_tick(self, sim, make_ctx):
        pos = _hero(sim, Position)
        box = _hero(sim, CollisionBox)
        state = _hero(sim, HeroState)

        hero_system(make_ctx(controls=[Control.CROUCH]))
        assert state.is_crouching
        assert box.width == box.height == HERO_CROUCH_SIZE
        assert pos.y == GROUND_Y - HERO_CROUCH_SIZE

        hero_system(make_ctx())
        assert not state.is_crouching
        assert box.width == box.height == HERO_SIZE


class TestFiring:

    def test_fires_hero_shot_from_leading_edge(self, sim, make_ctx):
        hero_system(make_ctx(controls=[Control.FIRE]))

        shots = list(sim.world.query(Position, Projectile))
        assert len(shots) == 1
        _, pos, proj = shots[0]
        assert pos.x == 58 + HERO_SIZE
        assert pos.y == GROUND_Y - HERO_SIZE + HERO_SIZE * 3 // 4
        assert proj.damage == 10
        assert proj.origin == Origin.HERO
        assert proj.owner == Side.FRIENDLY
        assert proj.direction == 1

    def test_fires_left_from_left_edge(self, sim, make_ctx):
        sim.world.get_component(sim.hero_id, Position).x = 300
        hero_system(make_ctx(controls=[Control.LEFT, Control.FIRE]))

        _, pos, proj = next(sim.world.query(Position, Projectile))
        assert proj.direction == -1
        assert pos.x == 294

    def test_cooldown_is_frame_counted(self, sim, make_ctx):
        fired_on = []
        for tick in range(25):
            before = len(_projectiles(sim))
            # Time jumps do not matter for the fire cooldown
            hero_system(make_ctx(now=tick * 10000, controls=[Control.FIRE]))
            if len(_projectiles(sim)) > before:
                fired_on.append(tick)

        assert fired_on == [0, 10, 20]


class TestInvincibility:

    def test_hit_grants_two_seconds(self, sim, make_ctx):
        health = _hero(sim, Health)

        assert not damage_hero(make_ctx(now=0), 1)
        assert health.current == 4

        for now in (1, 500, 1999):
            damage_hero(make_ctx(now=now), 1)
        assert health.current == 4

        damage_hero(make_ctx(now=2000), 1)
        assert health.current == 3

    def test_windows_reset_instead_of_stacking(self, sim, make_ctx):
        apply_pickup(make_ctx(now=0), PickupKind.SHIELD)
        apply_pickup(make_ctx(now=1000), PickupKind.SHIELD)

        assert _hero(sim, Invincibility).until == 6000
        assert is_invincible(sim.world, sim.hero_id, 5999)
        assert not is_invincible(sim.world, sim.hero_id, 6000)

    def test_hp_never_negative(self, sim, make_ctx):
        _hero(sim, HeroState).respawns_remaining = 0
        ctx = make_ctx(now=0)

        assert damage_hero(ctx, 50)
        assert _hero(sim, Health).current == 0


class TestHealing:

    def test_heals_one_hp_per_interval(self, sim):
        health = _hero(sim, Health)
        health.current = 2

        for now in range(0, 3001, 100):
            sim.tick(now=now)

        assert health.current == 4

    def test_nominal_frame_rate_keeps_overshoot(self, sim):
        health = _hero(sim, Health)
        health.current = 1

        # 66 ms does not divide 1500, heals land at 1518 and 3000
        for now in range(0, 3001, 66):
            sim.tick(now=now)
        assert health.current == 2

        sim.tick(now=3000)
        assert health.current == 3

    def test_firing_does_not_interrupt(self, sim):
        health = _hero(sim, Health)
        health.current = 2

        for now in range(0, 1501, 100):
            sim.tick([Control.FIRE], now=now)

        assert health.current == 3
        assert _hero(sim, HeroState).is_healing

    def test_movement_resets_interval(self, sim):
        health = _hero(sim, Health)
        health.current = 2

        for now in range(0, 1401, 100):
            sim.tick(now=now)
        sim.tick([Control.RIGHT], now=1450)
        for now in range(1500, 2801, 100):
            sim.tick(now=now)
        assert health.current == 2

        sim.tick(now=2950)
        assert health.current == 3

    def test_leaving_zone_resets_interval(self, sim, make_ctx):
        health = _hero(sim, Health)
        pos = _hero(sim, Position)
        health.current = 2

        hero_system(make_ctx(now=0))
        pos.x = 400
        hero_system(make_ctx(now=1000))
        pos.x = 58
        hero_system(make_ctx(now=1600))
        assert health.current == 2
        assert _hero(sim, HeroState).is_healing

        hero_system(make_ctx(now=2500))
        assert health.current == 3

    def test_capped_at_max(self, sim):
        health = _hero(sim, Health)
        health.current = 4

        for now in range(0, 6001, 100):
            sim.tick(now=now)

        assert health.current == health.maximum
        assert not _hero(sim, HeroState).is_healing


class TestDeath:

    def test_respawn_penalties(self, sim, make_ctx):
        state = _hero(sim, HeroState)
        health = _hero(sim, Health)
        pos = _hero(sim, Position)
        state.coins = 70
        health.current = 1
        pos.x, pos.y = 400, 200

        ctx = make_ctx(now=1000)
        assert damage_hero(ctx, 1)

        assert state.respawns_remaining == 2
        assert state.coins == 0
        assert health.current == health.maximum
        assert (pos.x, pos.y) == (58, GROUND_Y - HERO_SIZE)
        assert _hero(sim, Invincibility).until == 5000

        tower = sim.world.get_component(sim.player_base_id, Tower)
        assert not tower.enabled
        assert tower.disabled_at == 1000
        assert ctx.outcome is None

    def test_last_death_is_defeat(self, sim, make_ctx):
        state = _hero(sim, HeroState)
        state.respawns_remaining = 0
        state.coins = 30
        _hero(sim, Health).current = 1

        ctx = make_ctx(now=0)
        assert damage_hero(ctx, 1)

        assert ctx.outcome == DEFEAT
        assert _hero(sim, Health).current == 0
        assert state.respawns_remaining == 0
        # No respawn happened
        assert state.coins == 30
        assert sim.world.get_component(sim.player_base_id, Tower).enabled

    def test_no_damage_after_defeat(self, sim, make_ctx):
        ctx = make_ctx(now=0)
        ctx.outcome = DEFEAT
        assert not damage_hero(ctx, 1)
        assert _hero(sim, Health).current == 5


class TestPickups:

    def test_coin(self, sim, make_ctx):
        apply_pickup(make_ctx(), PickupKind.COIN)
        apply_pickup(make_ctx(), PickupKind.COIN)
        assert _hero(sim, HeroState).coins == 20

    def test_health_capped(self, sim, make_ctx):
        health = _hero(sim, Health)
        health.current = 4
        apply_pickup(make_ctx(), PickupKind.HEALTH)
        apply_pickup(make_ctx(), PickupKind.HEALTH)
        assert health.current == 5

    def test_weapon_boost_expires(self, sim, make_ctx):
        fire = _hero(sim, FireControl)

        apply_pickup(make_ctx(now=0), PickupKind.WEAPON)
        assert fire.fire_rate == 5

        hero_system(make_ctx(now=4999))
        assert fire.fire_rate == 5

        hero_system(make_ctx(now=5000))
        assert fire.fire_rate == 10
        assert _hero(sim, HeroState).boost_ends_at is None

    def test_weapon_repickup_restarts_window(self, sim, make_ctx):
        fire = _hero(sim, FireControl)
        apply_pickup(make_ctx(now=0), PickupKind.WEAPON)
        apply_pickup(make_ctx(now=3000), PickupKind.WEAPON)

        hero_system(make_ctx(now=6000))
        assert fire.fire_rate == 5
        hero_system(make_ctx(now=8000))
        assert fire.fire_rate == 10

    def test_shield(self, sim, make_ctx):
        apply_pickup(make_ctx(now=100), PickupKind.SHIELD)
        assert _hero(sim, Invincibility).until == 5100

    def test_unknown_kind_rejected(self, make_ctx):
        with pytest.raises(ValueError):
            apply_pickup(make_ctx(), 'GEM')


class TestInputHandler:

    def test_keys_map_to_controls(self):
        handler = InputHandler()
        for key in ('a', 'D', 'w', 's', ' '):
            handler.process_key(Keystroke(key))

        assert handler.latch() == frozenset(Control)

    def test_arrow_keys(self):
        handler = InputHandler()
        handler.process_key(Keystroke('\x1b[D', 260, 'KEY_LEFT'))
        handler.process_key(Keystroke('\x1b[A', 259, 'KEY_UP'))

        assert handler.latch() == {Control.LEFT, Control.JUMP}

    def test_hold_expires(self):
        handler = InputHandler(hold_duration=2)
        handler.process_key(Keystroke('d'))

        handler.update()
        assert Control.RIGHT in handler.latch()
        handler.update()
        assert handler.latch() == frozenset()

    def test_latch_is_a_snapshot(self):
        handler = InputHandler()
        handler.press(Control.FIRE)
        latched = handler.latch()

        handler.press(Control.LEFT)
        handler.release_all()

        assert latched == {Control.FIRE}

    def test_quit_and_restart_consumed_once(self):
        handler = InputHandler()
        handler.process_key(Keystroke('q'))
        handler.process_key(Keystroke('r'))

        assert handler.consume_quit()
        assert not handler.consume_quit()
        assert handler.consume_restart()
        assert not handler.consume_restart()
