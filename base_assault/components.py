"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum, auto


class Side(Enum):
    """Which garrison an entity fights for."""
    FRIENDLY = auto()
    ENEMY = auto()


class Origin(Enum):
    """Who fired a projectile."""
    HERO = auto()
    UNIT = auto()
    TOWER = auto()


class PickupKind(Enum):
    """Collectible types dropped by defeated units."""
    COIN = 'COIN'
    HEALTH = 'HEALTH'
    WEAPON = 'WEAPON'
    SHIELD = 'SHIELD'


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Top-left corner in arena pixels."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in pixels per nominal tick."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class CollisionBox:
    """Axis-aligned bounding box anchored at Position."""
    width: float = 1.0
    height: float = 1.0


@dataclass
class Gravity:
    """Falls under gravity and rests on the ground line."""
    strength: float = 0.5


# =============================================================================
# COMBAT COMPONENTS
# =============================================================================

@dataclass
class Health:
    """Entity health pool."""
    current: int = 1
    maximum: int = 1


@dataclass
class Team:
    side: Side = Side.ENEMY


@dataclass
class FireControl:
    """Frame-counted weapon cooldown."""
    fire_rate: int = 45  # Ticks between shots
    fire_timer: int = 0
    damage: int = 1


@dataclass
class Invincibility:
    """Wall-clock invincibility window. Damage is ignored while now < until."""
    until: float = 0.0


@dataclass
class LootDrop:
    """Chance of dropping a pickup on death."""
    chance: float = 0.1


# =============================================================================
# HERO COMPONENTS
# =============================================================================

@dataclass
class HeroState:
    """Player avatar flags, economy and respawn budget."""
    direction: int = 1  # 1: right, -1: left
    speed: float = 6.0
    is_jumping: bool = False
    is_crouching: bool = False
    is_healing: bool = False
    last_heal_time: Optional[float] = None  # None until first evaluated
    coins: int = 0
    respawns_remaining: int = 3
    base_fire_rate: int = 10
    boost_ends_at: Optional[float] = None  # Weapon pickup expiry


# =============================================================================
# TAG COMPONENTS
# =============================================================================

@dataclass
class HeroTag:
    """Marks the hero entity."""
    pass


@dataclass
class UnitTag:
    """Marks an autonomous combat unit."""
    category: str = 'light'


@dataclass
class Projectile:
    """Straight-line projectile flight data."""
    damage: int = 1
    direction: int = 1
    speed: float = 12.0
    owner: Side = Side.FRIENDLY
    origin: Origin = Origin.UNIT


@dataclass
class Pickup:
    kind: PickupKind = PickupKind.COIN


@dataclass
class BaseTag:
    """Marks a garrison base."""
    is_player: bool = True


@dataclass
class Tower:
    """Base defensive tower. Only the player tower honours the disable."""
    enabled: bool = True
    disabled_at: Optional[float] = None
