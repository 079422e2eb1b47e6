"""
Rendering Engine
=================
Double-buffered terminal renderer. Draws a FrameSnapshot by mapping arena
pixels onto terminal cells; it never touches live simulation state.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from blessed import Terminal

from .components import Side, PickupKind
from .snapshot import FrameSnapshot, BaseView
from .settings import ARENA_WIDTH, ARENA_HEIGHT, GROUND_Y


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208
NEON_BLUE = 27

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238

WHITE = 255

HUD_ROWS = 2

PICKUP_GLYPHS = {
    PickupKind.COIN: ('$', NEON_YELLOW),
    PickupKind.HEALTH: ('+', NEON_GREEN),
    PickupKind.WEAPON: ('W', NEON_BLUE),
    PickupKind.SHIELD: ('O', NEON_CYAN),
}

UNIT_GLYPHS = {
    'light': 'i',
    'elite': 'E',
    'heavy': 'H',
}

OUTCOME_BANNERS = {
    'victory': ('VICTORY - Enemy Base Destroyed!', NEON_GREEN),
    'defeat': ('DEFEAT - Player Base Destroyed!', NEON_RED),
    'defeat_hero': ('DEFEAT - Hero Out of Lives!', NEON_RED),
}


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7

    def matches(self, other: 'Cell') -> bool:
        return self.char == other.char and self.fg_color == other.fg_color

    def reset(self):
        self.char = ' '
        self.fg_color = 7


class DoubleBuffer:
    """
    Writes to a back buffer, then swaps to the front buffer, emitting
    only the cells that changed. No screen clears needed.
    """

    def __init__(self, term: Terminal, width: int, height: int):
        self.term = term
        self.width = width
        self.height = height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def present(self) -> str:
        """Swap buffers and return the escape sequence for changed cells."""
        output_parts = []
        normal = self.term.normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if not back_cell.matches(self.front[y][x]):
                    output_parts.append(self.term.move_xy(x, y))
                    output_parts.append(normal)
                    output_parts.append(self.term.color(back_cell.fg_color))
                    output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


@dataclass
class ArenaRenderer:
    """
    Draws snapshots of the arena. The playfield takes every row but the
    last HUD_ROWS; arena pixels are scaled to fit.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term, self.term.width, self.term.height)

    @property
    def game_height(self) -> int:
        return self.buffer.height - HUD_ROWS

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)

    def to_cell(self, x: float, y: float) -> Tuple[int, int]:
        """Map arena pixels to a terminal cell."""
        return to_cell(x, y, self.buffer.width, self.game_height)

    def fill_rect(self, x: float, y: float, w: float, h: float, char: str, color: int):
        x0, y0 = self.to_cell(x, y)
        x1, y1 = self.to_cell(x + w - 1, y + h - 1)
        for cy in range(y0, y1 + 1):
            for cx in range(x0, x1 + 1):
                if cy < self.game_height:
                    self.buffer.put(cx, cy, char, color)

    def render(self, snap: FrameSnapshot) -> str:
        """Draw one frame and return the terminal output for it."""
        self.buffer.clear_back()

        # Ground line
        _, ground_row = self.to_cell(0, GROUND_Y)
        for cx in range(self.buffer.width):
            self.buffer.put(cx, ground_row, '=', GRAY_DARK)

        self._draw_base(snap.player_base)
        self._draw_base(snap.enemy_base)

        for pickup in snap.pickups:
            char, color = PICKUP_GLYPHS[pickup.kind]
            self.fill_rect(pickup.x, pickup.y, pickup.size, pickup.size, char, color)

        for unit in snap.units:
            color = NEON_BLUE if unit.side == Side.FRIENDLY else NEON_RED
            if unit.category == 'elite':
                color = NEON_MAGENTA
            self.fill_rect(unit.x, unit.y, unit.size, unit.size,
                           UNIT_GLYPHS.get(unit.category, '?'), color)

        hero = snap.hero
        if hero.is_invincible and snap.tick % 2:
            hero_color = NEON_ORANGE
        elif hero.is_healing:
            hero_color = NEON_GREEN
        else:
            hero_color = WHITE
        self.fill_rect(hero.x, hero.y, hero.size, hero.size,
                       'o' if hero.is_crouching else '@', hero_color)

        for proj in snap.projectiles:
            color = NEON_YELLOW if proj.owner == Side.FRIENDLY else NEON_RED
            cx, cy = self.to_cell(proj.x, proj.y)
            if cy < self.game_height:
                self.buffer.put(cx, cy, '-', color)

        self._draw_hud(snap)

        if snap.outcome is not None:
            text, color = OUTCOME_BANNERS[outcome_banner_key(snap)]
            cx = max(0, (self.buffer.width - len(text)) // 2)
            self.buffer.put_string(cx, self.game_height // 2, text, color)
            hint = 'R - restart   Q - quit'
            self.buffer.put_string(max(0, (self.buffer.width - len(hint)) // 2),
                                   self.game_height // 2 + 1, hint, GRAY_LIGHT)

        return self.buffer.present()

    def _draw_base(self, base: BaseView):
        self.fill_rect(base.x, base.y, base.width, base.height, '#', GRAY_MED)
        if base.is_player:
            # Recovery zone label
            cx, cy = self.to_cell(base.x + base.width / 2, base.y + base.height / 2)
            self.buffer.put_string(cx - 2, cy, 'HEAL', NEON_GREEN)

        # Tower status light above the roof
        tower_x = base.x + 12 if base.is_player else base.x + base.width - 12
        cx, cy = self.to_cell(tower_x, base.y - 8)
        self.buffer.put(cx, cy, '^', NEON_RED if base.tower_enabled else GRAY_DARK)

    def _draw_hud(self, snap: FrameSnapshot):
        row = self.game_height
        hero = snap.hero
        hearts = '♥' * hero.hp + '·' * (hero.max_hp - hero.hp)
        self.buffer.put_string(0, row, f'HP {hearts}', NEON_RED)
        self.buffer.put_string(12 + hero.max_hp, row,
                               f'COINS {snap.coins}  LIVES {snap.respawns}  KILLS {snap.kills}',
                               NEON_YELLOW)

        status = f'BASE {snap.player_base.hp}/{snap.player_base.max_hp}'
        status += f'   ENEMY {snap.enemy_base.hp}/{snap.enemy_base.max_hp}'
        if not snap.player_base.tower_enabled:
            status += '   TOWER OFFLINE'
        self.buffer.put_string(0, row + 1, status, GRAY_LIGHT)


def to_cell(x: float, y: float, cols: int, rows: int) -> Tuple[int, int]:
    """Scale an arena pixel position into a cols x rows cell grid."""
    cx = int(x * cols / ARENA_WIDTH)
    cy = int(y * rows / ARENA_HEIGHT)
    return max(0, min(cols - 1, cx)), max(0, min(rows - 1, cy))


def outcome_banner_key(snap: FrameSnapshot) -> str:
    """
    Banner for a finished match. A defeat with the player base still
    standing means the hero ran out of lives.
    """
    if snap.outcome == 'defeat' and snap.player_base.hp > 0:
        return 'defeat_hero'
    return snap.outcome
