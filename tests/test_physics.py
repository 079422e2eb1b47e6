"""
Tests for gravity integration and AABB helpers.
"""
import pytest

from base_assault.components import Position, Velocity, CollisionBox
from base_assault.physics import (
    integrate_gravity, clamp_to_arena, is_off_arena, rects_intersect,
    collision_check, get_bounds
)
from base_assault.settings import GROUND_Y, ARENA_WIDTH


class TestGravity:

    def test_falls_and_accelerates(self):
        pos = Position(0, 100)
        vel = Velocity(0, 0)

        landed = integrate_gravity(pos, vel, 10, 1.0)

        assert not landed
        assert vel.y == pytest.approx(0.5)
        assert pos.y == pytest.approx(100.5)

    def test_delta_scales_step(self):
        pos = Position(0, 100)
        vel = Velocity(0, 0)

        integrate_gravity(pos, vel, 10, 2.0)

        assert vel.y == pytest.approx(1.0)
        assert pos.y == pytest.approx(102.0)

    def test_lands_on_ground_line(self):
        pos = Position(0, GROUND_Y - 10)
        vel = Velocity(0, 8)

        assert integrate_gravity(pos, vel, 10, 1.0)
        assert pos.y == GROUND_Y - 10
        assert vel.y == 0


class TestBounds:

    def test_clamp_to_arena(self):
        pos = Position(-5, 0)
        clamp_to_arena(pos, 32)
        assert pos.x == 0

        pos.x = ARENA_WIDTH
        clamp_to_arena(pos, 32)
        assert pos.x == ARENA_WIDTH - 32

    def test_off_arena_margin(self):
        assert not is_off_arena(Position(-10, 0))
        assert is_off_arena(Position(-10.5, 0))
        assert not is_off_arena(Position(ARENA_WIDTH + 10, 0))
        assert is_off_arena(Position(ARENA_WIDTH + 11, 0))

    def test_bounds_truncate_position(self):
        assert get_bounds(Position(10.9, 5.2), CollisionBox(4, 4)) == (10, 5, 4, 4)


class TestIntersection:

    def test_overlap(self):
        assert rects_intersect((0, 0, 10, 10), (5, 5, 10, 10))

    def test_touching_edges_do_not_intersect(self):
        assert not rects_intersect((0, 0, 10, 10), (10, 0, 10, 10))
        assert not rects_intersect((0, 0, 10, 10), (0, 10, 10, 10))

    def test_empty_rect_never_intersects(self):
        assert not rects_intersect((0, 0, 0, 10), (0, 0, 10, 10))

    def test_collision_check_uses_truncated_positions(self):
        a = Position(9.9, 0)
        b = Position(0, 0)
        # int(9.9) == 9, so the 10-wide box at 0 still overlaps
        assert collision_check(a, CollisionBox(4, 4), b, CollisionBox(10, 10))
