"""The player character: walking, collision checks and blast tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, Tuple

from bomberman.sprites import TILE_SIZE, Tile, cell_index

SPEED = 6

Coordinates = Mapping[Tuple[int, int], int]

LEFT_FRAMES = (0, 2)
DOWN_FRAMES = (3, 5)
RIGHT_FRAMES = (6, 8)
UP_FRAMES = (9, 11)

_BLAST_REACH = TILE_SIZE - 16
_U32 = 0xFFFFFFFF


@dataclass
class Actor:
    """Something drawn on the board: its position, size and current frame."""

    x: float = 0
    y: float = 0
    width: int = TILE_SIZE
    height: int = TILE_SIZE
    frame: int | None = None
    image: Any = None


def _cycle(current: int, bounds: Tuple[int, int]) -> int:
    first, last = bounds
    return first if current == last else current + 1


def _u32(value: float) -> int:
    return int(value) & _U32


def _distance(a: int, b: int) -> int:
    return a - b if a > b else b - a


def _is_free(coordinates: Coordinates, x: float, y: float) -> bool:
    cell = (cell_index(int(x)), cell_index(int(y)))
    return coordinates.get(cell, Tile.EMPTY) == Tile.EMPTY


class Bomberman:
    """Moves an actor around the grid and tells whether a blast reaches it."""

    def __init__(self, frames: Sequence[Any] = ()) -> None:
        self.frames = frames
        self._left_frame = LEFT_FRAMES[0]
        self._up_frame = UP_FRAMES[0]
        self._down_frame = DOWN_FRAMES[0]
        self._right_frame = RIGHT_FRAMES[0]

    def _show(self, actor: Actor, frame: int) -> None:
        actor.frame = frame
        if self.frames:
            actor.image = self.frames[frame]

    def _walk(
        self,
        actor: Actor,
        frame: int,
        allowed: Callable[[Actor, Coordinates], bool],
        coordinates: Coordinates,
        dx: int,
        dy: int,
    ) -> None:
        self._show(actor, frame)
        if allowed(actor, coordinates):
            actor.x += dx
            actor.y += dy

    def up_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Advance the upward walk frame and step up if the way is clear."""
        self._up_frame = _cycle(self._up_frame, UP_FRAMES)
        self._walk(actor, self._up_frame, self.verify_up_movement, coordinates, 0, -SPEED)

    def left_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Advance the leftward walk frame and step left if the way is clear."""
        self._left_frame = _cycle(self._left_frame, LEFT_FRAMES)
        self._walk(actor, self._left_frame, self.verify_left_movement, coordinates, -SPEED, 0)

    def right_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Advance the rightward walk frame and step right if the way is clear."""
        self._right_frame = _cycle(self._right_frame, RIGHT_FRAMES)
        self._walk(actor, self._right_frame, self.verify_right_movement, coordinates, SPEED, 0)

    def down_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Advance the downward walk frame and step down if the way is clear."""
        self._down_frame = _cycle(self._down_frame, DOWN_FRAMES)
        self._walk(actor, self._down_frame, self.verify_down_movement, coordinates, 0, SPEED)

    def dead_animation(self, actor: Actor, counter: int) -> None:
        """Show the given frame of the death sequence."""
        self._show(actor, counter)

    def verify_up_movement(self, actor: Actor, coordinates: Coordinates) -> bool:
        """Whether both top corners stay on empty cells after a step up."""
        left = int(actor.x)
        top = int(actor.y - SPEED)
        right = int(actor.x + actor.width - 1)
        return _is_free(coordinates, left, top) and _is_free(coordinates, right, top)

    def verify_right_movement(self, actor: Actor, coordinates: Coordinates) -> bool:
        """Whether both right corners stay on empty cells after a step right."""
        edge = int(actor.x + actor.width - 1 + SPEED)
        top = int(actor.y)
        bottom = int(actor.y + actor.height - 1)
        return _is_free(coordinates, edge, top) and _is_free(coordinates, edge, bottom)

    def verify_left_movement(self, actor: Actor, coordinates: Coordinates) -> bool:
        """Whether both left corners stay on empty cells after a step left."""
        edge = int(actor.x - SPEED)
        top = int(actor.y)
        bottom = int(actor.y + actor.height - 1)
        return _is_free(coordinates, edge, top) and _is_free(coordinates, edge, bottom)

    def verify_down_movement(self, actor: Actor, coordinates: Coordinates) -> bool:
        """Whether both bottom corners stay on empty cells after a step down."""
        left = int(actor.x)
        # The sprite is square, so its width also gives the bottom edge.
        bottom = int(actor.y + actor.width - 1 + SPEED)
        right = int(actor.x + actor.width - 1)
        return _is_free(coordinates, left, bottom) and _is_free(coordinates, right, bottom)

    def ask_bomberman_up(
        self, pos_y_burst: float, pos_y_bomberman: float, pos_x_burst: float, pos_x_bomberman: float
    ) -> bool:
        """Whether the blast's upper arm reaches the character."""
        burst_y, bomber_y = _u32(pos_y_burst), _u32(pos_y_bomberman)
        offset = _distance(_u32(pos_x_burst), _u32(pos_x_bomberman))
        gap = _u32(burst_y - (bomber_y + TILE_SIZE))
        return gap < _BLAST_REACH and offset < _BLAST_REACH

    def ask_bomberman_down(
        self, pos_y_burst: float, pos_y_bomberman: float, pos_x_burst: float, pos_x_bomberman: float
    ) -> bool:
        """Whether the blast's lower arm reaches the character."""
        burst_y, bomber_y = _u32(pos_y_burst), _u32(pos_y_bomberman)
        offset = _distance(_u32(pos_x_burst), _u32(pos_x_bomberman))
        gap = _u32(bomber_y - (burst_y + TILE_SIZE))
        return gap < _BLAST_REACH and offset < _BLAST_REACH

    def ask_bomberman_right(
        self, pos_x_burst: float, pos_x_bomberman: float, pos_y_burst: float, pos_y_bomberman: float
    ) -> bool:
        """Whether the blast's right arm reaches the character."""
        burst_x, bomber_x = _u32(pos_x_burst), _u32(pos_x_bomberman)
        offset = _distance(_u32(pos_y_burst), _u32(pos_y_bomberman))
        gap = _u32(bomber_x - (burst_x + TILE_SIZE))
        return gap < _BLAST_REACH and offset < _BLAST_REACH

    def ask_bomberman_left(
        self, pos_x_burst: float, pos_x_bomberman: float, pos_y_burst: float, pos_y_bomberman: float
    ) -> bool:
        """Whether the blast's left arm reaches the character."""
        burst_x, bomber_x = _u32(pos_x_burst), _u32(pos_x_bomberman)
        offset = _distance(_u32(pos_y_burst), _u32(pos_y_bomberman))
        far_edge = _u32(bomber_x + TILE_SIZE)
        near = bomber_x if far_edge > burst_x else far_edge
        gap = _u32(burst_x - near)
        return gap < _BLAST_REACH and offset < _BLAST_REACH

    def ask_bomberman_on_fire(
        self, pos_x_burst: float, pos_x_bomberman: float, pos_y_bomberman: float, pos_y_burst: float
    ) -> bool:
        """Whether the character stands in the cell where the bomb went off."""
        same_column = _u32(pos_x_burst) // TILE_SIZE == _u32(pos_x_bomberman) // TILE_SIZE
        same_row = _u32(pos_y_burst) // TILE_SIZE == _u32(pos_y_bomberman) // TILE_SIZE
        return same_column and same_row