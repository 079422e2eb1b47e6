"""
Physics Utilities
==================
Gravity integration, ground clamping and AABB collision helpers shared by
every entity kind. All motion is scaled by the tick's delta factor (elapsed
time over the nominal frame interval).
"""

from typing import Tuple

from .components import Position, Velocity, CollisionBox
from .settings import ARENA_WIDTH, GROUND_Y, GRAVITY, OFFSCREEN_MARGIN


def integrate_gravity(pos: Position, vel: Velocity, height: float,
                      delta: float, strength: float = GRAVITY) -> bool:
    """
    Apply gravity and clamp to the ground line.

    Returns True if the body is resting on the ground after the step.
    """
    vel.y += strength * delta
    pos.y += vel.y * delta
    if pos.y >= GROUND_Y - height:
        pos.y = GROUND_Y - height
        vel.y = 0.0
        return True
    return False


def integrate_linear(pos: Position, vel: Velocity, delta: float) -> None:
    """Straight-line motion for units and projectiles."""
    pos.x += vel.x * delta
    pos.y += vel.y * delta


def clamp_to_arena(pos: Position, width: float) -> None:
    """Keep a box horizontally inside the arena."""
    pos.x = max(0.0, min(pos.x, ARENA_WIDTH - width))


def is_off_arena(pos: Position) -> bool:
    """True once a projectile has left the arena past the margin."""
    return pos.x < -OFFSCREEN_MARGIN or pos.x > ARENA_WIDTH + OFFSCREEN_MARGIN


def get_bounds(pos: Position, box: CollisionBox) -> Tuple[int, int, int, int]:
    """Integer pixel rectangle (x, y, width, height), truncating position."""
    return int(pos.x), int(pos.y), int(box.width), int(box.height)


def rects_intersect(a: Tuple[int, int, int, int],
                    b: Tuple[int, int, int, int]) -> bool:
    """Strict overlap test. Touching edges and empty rectangles never intersect."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    if aw <= 0 or ah <= 0 or bw <= 0 or bh <= 0:
        return False
    return (
        ax < bx + bw and
        ax + aw > bx and
        ay < by + bh and
        ay + ah > by
    )


def collision_check(
    pos1: Position, box1: CollisionBox,
    pos2: Position, box2: CollisionBox
) -> bool:
    """Check AABB overlap between two entities."""
    return rects_intersect(get_bounds(pos1, box1), get_bounds(pos2, box2))
