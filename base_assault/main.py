#!/usr/bin/env python3
"""
BASE ASSAULT - Terminal Edition
================================
Hold the line, push the enemy garrison back, and blow up its base.

Controls:
    A/D or LEFT/RIGHT   - Move
    W or UP             - Jump
    S or DOWN           - Crouch
    SPACE               - Fire
    R                   - Restart after the match ends
    Q/ESC               - Quit

Stand still inside your own base to heal.
"""

import argparse
import logging
import sys
import time

from blessed import Terminal

from .engine import ArenaRenderer
from .player import InputHandler
from .simulation import Simulation, monotonic_ms
from .settings import TARGET_FPS

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_WIDTH = 80
MIN_HEIGHT = 24
DEFAULT_LOG_FILE = 'base_assault.log'
MAX_DELTA = 5.0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='base_assault',
        description='Side-view two-base combat arena in your terminal.'
    )
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for spawns, drops and tower fire')
    parser.add_argument('--fps', type=int, default=TARGET_FPS,
                        help='Simulation ticks per second (default: %(default)s)')
    parser.add_argument('--headless', action='store_true',
                        help='Run without a terminal UI and print a summary')
    parser.add_argument('--ticks', type=int, default=3000,
                        help='Tick budget for --headless (default: %(default)s)')
    parser.add_argument('--log-file', default=None,
                        help=f'Log destination (default: {DEFAULT_LOG_FILE}, '
                             'stderr with --headless)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    args = parser.parse_args(argv)
    if args.fps <= 0:
        parser.error('--fps must be positive')
    return args


def configure_logging(args: argparse.Namespace) -> None:
    """The terminal UI owns the screen, so interactive runs log to a file."""
    log_file = args.log_file
    if log_file is None and not args.headless:
        log_file = DEFAULT_LOG_FILE

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        filename=log_file,
    )


# =============================================================================
# GAME LOOP
# =============================================================================

class Game:
    """
    Single-threaded cooperative loop: drain input, latch it, tick the
    simulation, snapshot, render. Rendering only ever sees snapshots.
    """

    def __init__(self, term: Terminal, sim: Simulation, fps: int = TARGET_FPS):
        self.term = term
        self.sim = sim
        self.frame_ms = 1000 // fps
        self.renderer = ArenaRenderer(term)
        self.input_handler = InputHandler()
        self.running = True
        self.last_tick_at = None

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.input_handler.process_key(key)
            key = self.term.inkey(timeout=0)

        if self.input_handler.consume_quit():
            self.running = False
        if self.input_handler.consume_restart() and self.sim.is_over:
            self.sim.reset()
            self.input_handler.release_all()
            self.last_tick_at = None

    def step(self):
        """One loop iteration. Returns the terminal output for the frame."""
        self.handle_input()

        now = monotonic_ms()
        if self.last_tick_at is None:
            self.last_tick_at = now - self.frame_ms
        elapsed = now - self.last_tick_at

        if elapsed >= self.frame_ms:
            controls = self.input_handler.latch()
            # Clamp delta so a stall cannot teleport everything
            delta = min(elapsed / self.frame_ms, MAX_DELTA)
            self.sim.tick(controls, delta=delta, now=now)
            self.input_handler.update()
            self.last_tick_at = now

        return self.renderer.render(self.sim.snapshot())


def run_terminal(args: argparse.Namespace) -> int:
    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        return 1

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        game = Game(term, Simulation(seed=args.seed), fps=args.fps)

        # Initial clear (only time we clear the whole screen)
        print(term.home + term.clear, end='', flush=True)

        while game.running:
            frame_start = time.perf_counter()

            output = game.step()
            if output:
                print(output, end='', flush=True)

            # Sleep for remaining frame time
            elapsed = time.perf_counter() - frame_start
            sleep_time = game.frame_ms / 1000.0 - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)

        print(term.normal, end='', flush=True)

    logger.info('Quit after %d ticks', game.sim.tick_count)
    return 0


def run_headless(args: argparse.Namespace) -> int:
    """Run the simulation with no input, stepping time by one nominal frame."""
    sim = Simulation(seed=args.seed)
    outcome = sim.run(args.ticks, step_ms=1000 // args.fps)

    snap = sim.snapshot()
    print(
        f'ticks={snap.tick} outcome={outcome or "none"} '
        f'player_base={snap.player_base.hp}/{snap.player_base.max_hp} '
        f'enemy_base={snap.enemy_base.hp}/{snap.enemy_base.max_hp} '
        f'kills={snap.kills} units={len(snap.units)}'
    )
    return 0


def main(argv=None):
    """Entry point."""
    args = parse_args(argv)

    configure_logging(args)

    if args.headless:
        sys.exit(run_headless(args))
    sys.exit(run_terminal(args))


if __name__ == '__main__':
    main()
