"""Sprite sheet access and the grid geometry shared by the game."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from os import PathLike
from typing import Union

import pygame

DIMENSION_BLOCK = 16
MAP_SCALE = 3
TILE_SIZE = DIMENSION_BLOCK * MAP_SCALE

_SOLID_CELL = (3, 3)
_BRICK_CELL = (4, 3)

_PathType = Union[str, "PathLike[str]"]


class Tile(enum.IntEnum):
    """Contents of one map cell."""

    EMPTY = 0
    SOLID = 1
    BRICK = 2


def cell_index(position: float) -> int:
    """Return the grid cell holding a pixel position, truncating toward zero."""
    whole = int(position)
    cells = abs(whole) // TILE_SIZE
    return cells if whole >= 0 else -cells


@dataclass
class SpriteSheet:
    """Cuts scaled tiles out of the character sheet and the background image."""

    sheet: pygame.Surface
    background: pygame.Surface

    @classmethod
    def load(cls, sheet_path: _PathType, background_path: _PathType) -> "SpriteSheet":
        """Build a sheet from two image files."""
        return cls(pygame.image.load(sheet_path), pygame.image.load(background_path))

    def block(self, block_type: int) -> pygame.Surface:
        """Return the scaled tile for a solid block, a brick, or the background."""
        if block_type == Tile.SOLID:
            return self._cut(self.sheet, *_SOLID_CELL)
        if block_type == Tile.BRICK:
            return self._cut(self.sheet, *_BRICK_CELL)
        return self._cut(self.background, 0, 0)

    def animation_frame(self, column: int, row: int) -> pygame.Surface:
        """Return the scaled sheet cell at the given column and row."""
        return self._cut(self.sheet, column, row)

    @staticmethod
    def _cut(source: pygame.Surface, column: int, row: int) -> pygame.Surface:
        rect = pygame.Rect(
            column * DIMENSION_BLOCK, row * DIMENSION_BLOCK, DIMENSION_BLOCK, DIMENSION_BLOCK
        )
        if column < 0 or row < 0 or not source.get_rect().contains(rect):
            raise ValueError(f"cell ({column}, {row}) lies outside the image")
        return pygame.transform.scale(source.subsurface(rect), (TILE_SIZE, TILE_SIZE))