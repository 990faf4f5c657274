"""The playable window: draws the board, feeds it keys and drives its timers."""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pygame

from bomberman.bomb import BURST_IMAGE_NAMES
from bomberman.game import DIFFICULTY, SIZE_X, SIZE_Y, TIMER_INTERVALS, Game, GameEnded
from bomberman.sprites import TILE_SIZE, SpriteSheet

FPS = 60
WINDOW_SIZE = (SIZE_X * TILE_SIZE, SIZE_Y * TILE_SIZE)
SHEET_NAME = "bomberma_sprites.png"
BACKGROUND_NAME = "fondo.png"
KEY_REPEAT_DELAY = 200
KEY_REPEAT_INTERVAL = 50

_KEYS = {
    pygame.K_w: "w",
    pygame.K_a: "a",
    pygame.K_s: "s",
    pygame.K_d: "d",
    pygame.K_SPACE: "space",
}


class GameWindow:
    """Shows a game in a window and runs it until it ends or the window closes."""

    def __init__(self, game: Game, surface: Optional[pygame.Surface] = None, clock: Any = None):
        self.game = game
        if surface is None:
            surface = pygame.display.set_mode(WINDOW_SIZE)
            pygame.display.set_caption("Bomberman")
        self.surface = surface
        self.clock = clock if clock is not None else pygame.time.Clock()
        self._elapsed: Dict[str, int] = {}
        self._seen_epoch: Dict[str, int] = {}
        self._handlers: Dict[str, Callable[[], None]] = {
            "burst": game.burst,
            "burst_flame": game.burst_flame,
            "destruction_block": game.destruction_block,
            "dead_bomberman": game.dead_bomberman,
            "move_enemies": game.move_enemies,
            "dead_enemy": game.dead_enemy,
        }
        missing = set(TIMER_INTERVALS) - set(self._handlers)
        if missing:
            raise ValueError(f"no handler for timers: {sorted(missing)}")

    def run(self) -> Optional[bool]:
        """Play until the game ends; return whether it was won, or None if closed."""
        pygame.key.set_repeat(KEY_REPEAT_DELAY, KEY_REPEAT_INTERVAL)
        try:
            while True:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        return None
                    if event.type == pygame.KEYDOWN and event.key in _KEYS:
                        self.game.key_press(_KEYS[event.key])
                self._advance(self.clock.tick(FPS))
                self._draw()
        except GameEnded as ended:
            return ended.won

    def _advance(self, elapsed_ms: int) -> None:
        game = self.game
        for name in list(game.timers):
            epoch = game.timer_epoch.get(name, 0)
            if self._seen_epoch.get(name) != epoch:
                self._seen_epoch[name] = epoch
                self._elapsed[name] = 0
            self._elapsed[name] += elapsed_ms
            while name in game.timers and self._elapsed[name] >= game.timers[name]:
                self._elapsed[name] -= game.timers[name]
                self._handlers[name]()
                if game.timer_epoch.get(name, 0) != epoch:
                    break

    def _draw(self) -> None:
        self.surface.fill((0, 0, 0))
        for _, actor in sorted(self.game.scene, key=lambda item: item[0]):
            if actor.image is not None:
                self.surface.blit(actor.image, (int(actor.x), int(actor.y)))
        if pygame.display.get_surface() is self.surface:
            pygame.display.flip()


def _probability(text: str) -> float:
    value = float(text)
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError("must lie between 0 and 1")
    return value


def parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    """Read the command line."""
    parser = argparse.ArgumentParser(prog="bomberman", description="Play a level of Bomberman.")
    parser.add_argument(
        "--images",
        type=Path,
        default=Path("Images"),
        help="directory holding the sprite sheet, background and explosion images",
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for the random layout")
    parser.add_argument(
        "--difficulty",
        type=_probability,
        default=DIFFICULTY,
        help="chance that a free cell holds a brick",
    )
    return parser.parse_args(argv)


def _load_images(directory: Path) -> tuple[SpriteSheet, List[pygame.Surface]]:
    sheet = SpriteSheet.load(directory / SHEET_NAME, directory / BACKGROUND_NAME)
    bursts = [pygame.image.load(directory / name) for name in BURST_IMAGE_NAMES]
    return sheet, bursts


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the game window."""
    args = parse_args(argv)
    pygame.init()
    try:
        try:
            sheet, bursts = _load_images(args.images)
        except (OSError, pygame.error) as error:
            print(f"bomberman: cannot load images: {error}", file=sys.stderr)
            return 1
        game = Game(
            rng=random.Random(args.seed),
            sheet=sheet,
            burst_images=bursts,
            difficulty=args.difficulty,
        )
        GameWindow(game).run()
        return 0
    finally:
        pygame.quit()