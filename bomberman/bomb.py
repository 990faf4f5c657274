"""The bomb: its fuse, blast and brick-destruction animations and blast reach."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import pygame

from bomberman.character import Actor, Coordinates
from bomberman.sprites import MAP_SCALE, Tile, cell_index

BOMB_ROW = 3
BOMB_COLUMNS = range(0, 3)
DESTRUCTION_COLUMNS = range(4, 11)
BURST_IMAGE_NAMES = tuple(f"explosion{number}.png" for number in range(1, 5))


def _show(actor: Actor, frames: Sequence[Any], index: int) -> None:
    actor.frame = index
    if frames:
        actor.image = frames[index]


def _brick_at(coordinates: Coordinates, column: int, row: int) -> bool:
    return coordinates.get((column, row), Tile.EMPTY) == Tile.BRICK


class Bomb:
    """Animates a bomb and its blast, and finds bricks next to the blast."""

    def __init__(
        self,
        bomb_frames: Iterable[Any] = (),
        burst_frames: Iterable[Any] = (),
        destruction_frames: Iterable[Any] = (),
    ) -> None:
        self.bomb_frames = list(bomb_frames)
        self.burst_frames = list(burst_frames)
        self.destruction_frames = list(destruction_frames)
        self._bomb_counter = -1
        self._burst_counter = -1

    @classmethod
    def from_sheet(cls, sheet: Any, burst_images: Iterable[pygame.Surface]) -> "Bomb":
        """Build a bomb from a sprite sheet and the unscaled blast images."""
        bomb_frames = [sheet.animation_frame(column, BOMB_ROW) for column in BOMB_COLUMNS]
        destruction = [sheet.animation_frame(column, BOMB_ROW) for column in DESTRUCTION_COLUMNS]
        destruction.append(sheet.block(Tile.EMPTY))
        burst = [
            pygame.transform.scale(
                image, (image.get_width() * MAP_SCALE, image.get_height() * MAP_SCALE)
            )
            for image in burst_images
        ]
        return cls(bomb_frames, burst, destruction)

    def bomb_animation(self, actor: Actor) -> None:
        """Show the next frame of the burning fuse, cycling through three frames."""
        self._bomb_counter += 1
        if self._bomb_counter == len(BOMB_COLUMNS):
            self._bomb_counter = 0
        _show(actor, self.bomb_frames, self._bomb_counter)

    def burst_animation(self, actor: Actor) -> None:
        """Show the next blast frame: all four once, then the last two in turn."""
        counter = self._burst_counter
        if counter == 4:
            counter -= 2
            _show(actor, self.burst_frames, counter)
        elif counter <= 3:
            counter += 1
            _show(actor, self.burst_frames, counter)
            if counter == 3:
                counter = 4
        self._burst_counter = counter

    def destruction_animation(self, actor: Actor, counter: int) -> None:
        """Show the given frame of a brick crumbling."""
        _show(actor, self.destruction_frames, counter)

    def ask_up(self, coordinates: Coordinates, pos_x: int, pos_y: int) -> bool:
        """Whether a brick sits in the cell above the given position."""
        return _brick_at(coordinates, cell_index(pos_x), cell_index(pos_y) - 1)

    def ask_down(self, coordinates: Coordinates, pos_x: int, pos_y: int) -> bool:
        """Whether a brick sits in the cell below the given position."""
        return _brick_at(coordinates, cell_index(pos_x), cell_index(pos_y) + 1)

    def ask_left(self, coordinates: Coordinates, pos_x: int, pos_y: int) -> bool:
        """Whether a brick sits in the cell left of the given position."""
        return _brick_at(coordinates, cell_index(pos_x) - 1, cell_index(pos_y))

    def ask_right(self, coordinates: Coordinates, pos_x: int, pos_y: int) -> bool:
        """Whether a brick sits in the cell right of the given position."""
        return _brick_at(coordinates, cell_index(pos_x) + 1, cell_index(pos_y))