"""
Game Settings
==============
Arena geometry, physics, timers and balance tables in one place.
"""

# =============================================================================
# ARENA
# =============================================================================

ARENA_WIDTH = 800
ARENA_HEIGHT = 450
SCALING = 4  # Pixel scale every sprite/feature size derives from
GROUND_Y = ARENA_HEIGHT - 30
OFFSCREEN_MARGIN = 10  # Projectiles past this margin are pruned

# =============================================================================
# TIMING
# =============================================================================

TARGET_FPS = 15
FRAME_DELAY_MS = 1000 // TARGET_FPS  # Nominal tick interval, 66 ms

# =============================================================================
# PHYSICS
# =============================================================================

GRAVITY = 0.5  # Units per tick^2

# =============================================================================
# HERO
# =============================================================================

HERO_SIZE = SCALING * 8
HERO_CROUCH_SIZE = SCALING * 6
HERO_SPEED = SCALING * 1.5
HERO_JUMP_IMPULSE = -SCALING * 5
HERO_MAX_HP = 5
HERO_FIRE_RATE = 10  # Ticks between shots
HERO_RESPAWNS = 3
HERO_SPAWN_OFFSET_X = 50  # From the player base's left edge
HERO_SHOT_DAMAGE = 10

HIT_INVINCIBILITY_MS = 2000
RESPAWN_INVINCIBILITY_MS = 4000
SHIELD_INVINCIBILITY_MS = 5000
HEAL_INTERVAL_MS = 1500
WEAPON_BOOST_MS = 5000

COIN_VALUE = 10

# =============================================================================
# BASES
# =============================================================================

BASE_SIZE = SCALING * 25
PLAYER_BASE_X = SCALING * 2
ENEMY_BASE_X = ARENA_WIDTH - SCALING * 27
PLAYER_BASE_HP = 100
ENEMY_BASE_HP = 1000

TOWER_DISABLE_MS = 5000
TOWER_FIRE_CHANCE = 0.01  # Per base, per tick
TOWER_SHOT_OFFSET = SCALING * 4  # Inset from the base's outer corner
TOWER_SHOT_RISE = SCALING * 2  # Height above the base roof
PLAYER_TOWER_DAMAGE = 10
ENEMY_TOWER_DAMAGE = 1

ENEMY_BREACH_DAMAGE = 10  # Enemy unit reaching the player base
FRIENDLY_BREACH_DAMAGE = 20  # Friendly unit reaching the enemy base
HERO_SHOT_BASE_DAMAGE = 1

# =============================================================================
# PROJECTILES & PICKUPS
# =============================================================================

PROJECTILE_SPEED = SCALING * 3
PROJECTILE_SIZE = SCALING * 1

PICKUP_SIZE = SCALING * 4
PICKUP_HOP = -5

# Cumulative percentage thresholds, checked in order against a [0, 100) roll
PICKUP_TABLE = [
    ('COIN', 60),
    ('HEALTH', 90),
    ('WEAPON', 98),
    ('SHIELD', 100),
]

# =============================================================================
# UNITS
# =============================================================================

UNIT_FIRE_THRESHOLD = 200  # Distance a unit walks from home before firing
UNIT_DROP_CHANCE = 0.1

# category -> (hp, size, speed, fire_rate, projectile damage, drop chance)
UNIT_STATS = {
    'light': (1, SCALING * 6, 1.0, 45, 1, UNIT_DROP_CHANCE),
    'elite': (3, SCALING * 6, 1.0, 45, 1, 1.0),
    'heavy': (5, SCALING * 8, 0.5, 20, 2, UNIT_DROP_CHANCE),
}

FRIENDLY_UNIT_HP = 2

# =============================================================================
# SPAWNING
# =============================================================================

ENEMY_SPAWN_INTERVAL = 120  # Ticks
FRIENDLY_SPAWN_INTERVAL = 300  # Ticks
ENEMY_SPAWN_OFFSET = SCALING * 8  # Left of the enemy base
FRIENDLY_SPAWN_OFFSET = SCALING * 2  # Right of the player base

# Cumulative probability thresholds for enemy categories
ENEMY_SPAWN_TABLE = [
    ('heavy', 0.1),
    ('elite', 0.3),
    ('light', 1.0),
]
