"""Enemies: they walk until blocked, then turn, and kill on contact."""

from __future__ import annotations

from typing import Any, Callable, Sequence, Tuple

from bomberman.character import Actor, Bomberman, Coordinates
from bomberman.sprites import TILE_SIZE

AMOUNT_ENEMIES = 10
SPEED_ENEMIES = 6
ENEMY_ROW = 15
ENEMY_FRAME_COUNT = 11
ENEMY_UP_FRAMES = (0, 2)
ENEMY_DOWN_FRAMES = (3, 5)

_KILL_REACH = TILE_SIZE - 16
_U32 = 0xFFFFFFFF


def _u32(value: float) -> int:
    return int(value) & _U32


def _cycle(current: int, bounds: Tuple[int, int]) -> int:
    first, last = bounds
    return first if current == last else current + 1


class Enemy(Bomberman):
    """An enemy that walks one axis and notes when it must turn around."""

    def __init__(self, frames: Sequence[Any] = ()) -> None:
        super().__init__(frames)
        # Upward and rightward walks share one frame counter, downward and leftward the other.
        self._up_right_frame = ENEMY_UP_FRAMES[0]
        self._down_left_frame = ENEMY_DOWN_FRAMES[0]
        self.turn_up = False
        self.turn_down = False
        self.turn_right = False
        self.turn_left = False
        self.move_in_y = False
        self.can_move = True

    @classmethod
    def from_sheet(cls, sheet: Any) -> "Enemy":
        """Build an enemy whose frames come from a sprite sheet."""
        return cls([sheet.animation_frame(column, ENEMY_ROW) for column in range(ENEMY_FRAME_COUNT)])

    def _step(
        self,
        actor: Actor,
        frame: int,
        allowed: Callable[[Actor, Coordinates], bool],
        coordinates: Coordinates,
        dx: int,
        dy: int,
    ) -> bool:
        self._show(actor, frame)
        if not allowed(actor, coordinates):
            return False
        actor.x += dx
        actor.y += dy
        return True

    def up_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Step up; when blocked, mark that the enemy should turn down."""
        self._up_right_frame = _cycle(self._up_right_frame, ENEMY_UP_FRAMES)
        if not self._step(
            actor, self._up_right_frame, self.verify_up_movement, coordinates, 0, -SPEED_ENEMIES
        ):
            self.turn_down = True

    def down_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Step down; when blocked, mark that the enemy should turn up."""
        self._down_left_frame = _cycle(self._down_left_frame, ENEMY_DOWN_FRAMES)
        if not self._step(
            actor, self._down_left_frame, self.verify_down_movement, coordinates, 0, SPEED_ENEMIES
        ):
            self.turn_up = True

    def left_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Step left; when blocked, mark that the enemy should turn right."""
        self._down_left_frame = _cycle(self._down_left_frame, ENEMY_DOWN_FRAMES)
        if not self._step(
            actor, self._down_left_frame, self.verify_left_movement, coordinates, -SPEED_ENEMIES, 0
        ):
            self.turn_right = True

    def right_movement(self, actor: Actor, coordinates: Coordinates) -> None:
        """Step right; when blocked, mark that the enemy should turn left."""
        self._up_right_frame = _cycle(self._up_right_frame, ENEMY_UP_FRAMES)
        if not self._step(
            actor, self._up_right_frame, self.verify_right_movement, coordinates, SPEED_ENEMIES, 0
        ):
            self.turn_left = True

    def dead_animation(self, actor: Actor, counter: int) -> None:
        """Show the given frame of the enemy's death sequence."""
        self._show(actor, counter)

    def kill_bomberman(self, x_bomb: float, y_bomb: float, x_enemy: float, y_enemy: float) -> bool:
        """Whether the player, in line with the enemy, stands close enough to die."""
        xb, yb, xe, ye = _u32(x_bomb), _u32(y_bomb), _u32(x_enemy), _u32(y_enemy)
        if xb == xe and _u32(ye - yb) < _KILL_REACH:
            return True
        if yb == ye and _u32(xb - xe) < _KILL_REACH:
            return True
        if yb == ye and _u32(xe - xb) < _KILL_REACH:
            return True
        return xb == xe and _u32(yb - ye) < _KILL_REACH