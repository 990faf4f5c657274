"""Game state and rules: the board, the player, bombs, enemies and their timers."""

from __future__ import annotations

import random
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from bomberman.bomb import Bomb
from bomberman.character import Actor, Bomberman
from bomberman.enemies import AMOUNT_ENEMIES, Enemy
from bomberman.sprites import TILE_SIZE, Tile, cell_index

SIZE_X = 1550 // TILE_SIZE
SIZE_Y = 810 // TILE_SIZE
START_CELLS = frozenset({(1, 1), (2, 1), (1, 2)})

DIFFICULTY = 0.2
ENEMY_VERTICAL_CHANCE = 0.5
FINISH_CHANCE = 0.1
FINISH_CHANCE_CLEARED = 0.8

TIMER_INTERVALS = {
    "burst": 300,
    "burst_flame": 50,
    "destruction_block": 50,
    "dead_bomberman": 100,
    "move_enemies": 50,
    "dead_enemy": 150,
}

Z_BACKGROUND = 0
Z_DESTRUCTION = 1
Z_ENEMY = 2
Z_BOMB = 3
Z_BURST = 4
Z_DOOR = 4
Z_SOLID = 5
Z_PLAYER = 5

PLAYER_START_FRAME = 4
PLAYER_DEATH_START = 12
PLAYER_DEATH_END = 19
ENEMY_DEATH_START = 5
ENEMY_DEATH_END = 11
FUSE_TICKS = 7
BURST_TICKS = 8
DESTRUCTION_END = 8
DOOR_CELL = (11, 3)

# Blast arms in the order they are resolved each tick.
_DIRECTIONS: Tuple[Tuple[str, int, int], ...] = (
    ("up", 0, -1),
    ("down", 0, 1),
    ("right", 1, 0),
    ("left", -1, 0),
)


class GameEnded(Exception):
    """Raised when the game is over, either by winning or by dying."""

    def __init__(self, won: bool) -> None:
        super().__init__("level cleared" if won else "bomberman died")
        self.won = won


def snap_to_grid(position: float) -> int:
    """Round a pixel position to the nearest tile edge, halves going down."""
    whole = int(position)
    remainder = whole % TILE_SIZE
    if remainder == 0:
        return whole
    if remainder > TILE_SIZE // 2:
        return whole - remainder + TILE_SIZE
    return whole - remainder


def _actor(frames: Sequence[Any], index: int = 0) -> Actor:
    return Actor(frame=index, image=frames[index] if frames else None)


class Game:
    """The whole state of one level, advanced by key presses and timer ticks.

    Active timers live in ``timers`` (handler name to interval in milliseconds);
    ``timer_epoch`` counts how often each was (re)started so a driver can reset
    the time it has accumulated for it.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        sheet: Any = None,
        burst_images: Iterable[Any] = (),
        difficulty: float = DIFFICULTY,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.sheet = sheet
        self.difficulty = difficulty
        self.enemy_vertical_chance = ENEMY_VERTICAL_CHANCE
        self.probability_finish_game = FINISH_CHANCE

        self.bomb = Bomb.from_sheet(sheet, burst_images) if sheet is not None else Bomb()
        self.scene: List[Tuple[int, Actor]] = []
        self.timers: Dict[str, int] = {}
        self.timer_epoch: Dict[str, int] = {}

        self.blocks: List[List[int]] = []
        self.coordinates: Dict[Tuple[int, int], int] = {}
        self.block_actors: Dict[Tuple[int, int], Actor] = {}

        self.character = Bomberman()
        self.bomberman = Actor()
        self.enemies: List[Enemy] = []
        self.enemy_actors: List[Actor] = []
        self.enemies_cont = 0

        self.bomb_actor: Optional[Actor] = None
        self.burst_actor: Optional[Actor] = None
        self.destruction_actors: Dict[str, Actor] = {}
        self.door: Optional[Tuple[int, int]] = None
        self.amount_door = 0

        self.valid_put_bomb = True
        self.valid_key = True
        self.valid_evaluate_dead = False
        self.pos_x_burst = 0
        self.pos_y_burst = 0
        self.pos_x_burst_to_evaluate = -1
        self.pos_y_burst_to_evaluate = -1
        self.pos_x_burst_to_evaluate_enemy = -1
        self.pos_y_burst_to_evaluate_enemy = -1
        self.k = 0

        self._fuse_ticks = FUSE_TICKS
        self._burst_ticks = 0
        self._destruction_counters = {name: -1 for name, _, _ in _DIRECTIONS}
        self._death_counter = PLAYER_DEATH_START
        self._enemy_death_counter = ENEMY_DEATH_START
        self._confirm_aleatory = True

        self.set_map()
        self.place_bomberman()
        self.place_enemies()

    # -- scene and timers -------------------------------------------------

    def _paint(self, x: float, y: float, z: int, actor: Actor) -> None:
        actor.x, actor.y = x, y
        self.scene.append((z, actor))

    def _remove(self, actor: Actor) -> None:
        self.scene = [(z, item) for z, item in self.scene if item is not actor]

    def _start(self, name: str) -> None:
        self.timers[name] = TIMER_INTERVALS[name]
        self.timer_epoch[name] = self.timer_epoch.get(name, 0) + 1

    def _stop(self, name: str) -> None:
        self.timers.pop(name, None)

    def _tile_image(self, tile: int) -> Any:
        return self.sheet.block(tile) if self.sheet is not None else None

    def _frame(self, column: int, row: int) -> Any:
        return self.sheet.animation_frame(column, row) if self.sheet is not None else None

    # -- board ------------------------------------------------------------

    def set_map(self) -> None:
        """Lay out solid walls, a random scatter of bricks and the free start corner."""
        self.blocks = [[int(Tile.EMPTY)] * SIZE_Y for _ in range(SIZE_X)]
        for x in range(SIZE_X):
            for y in range(SIZE_Y):
                if (x, y) in START_CELLS:
                    tile = Tile.EMPTY
                elif x in (0, SIZE_X - 1) or y in (0, SIZE_Y - 1) or (x % 2 == 0 and y % 2 == 0):
                    tile = Tile.SOLID
                elif self.aleatory(self.difficulty):
                    tile = Tile.BRICK
                else:
                    tile = Tile.EMPTY
                self.blocks[x][y] = int(tile)
        self._show_map()

    def _show_map(self) -> None:
        for x in range(SIZE_X):
            for y in range(SIZE_Y):
                tile = Tile.EMPTY if (x, y) in START_CELLS else Tile(self.blocks[x][y])
                actor = Actor(image=self._tile_image(tile))
                self.block_actors[(x, y)] = actor
                self.coordinates[(x, y)] = int(tile)
                z = Z_SOLID if tile == Tile.SOLID else Z_BACKGROUND
                self._paint(TILE_SIZE * x, TILE_SIZE * y, z, actor)

    def aleatory(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.rng.random() < probability

    def place_bomberman(self) -> None:
        """Load the player's frames and put it in the top-left free cell."""
        frames = []
        if self.sheet is not None:
            frames = [self._frame(x, y) for y in range(2) for x in range(6)]
            frames += [self._frame(x, 2) for x in range(7)]
        self.character = Bomberman(frames)
        self.bomberman = _actor(frames, PLAYER_START_FRAME)
        self._paint(TILE_SIZE, TILE_SIZE, Z_PLAYER, self.bomberman)
        self.enemies_cont = AMOUNT_ENEMIES

    def place_enemies(self) -> None:
        """Put every enemy on a random free cell away from the start and set them walking."""
        self.enemies = []
        self.enemy_actors = []
        for _ in range(AMOUNT_ENEMIES):
            enemy = Enemy.from_sheet(self.sheet) if self.sheet is not None else Enemy()
            actor = _actor(enemy.frames)
            while True:
                x = self.rng.randrange(SIZE_X - 1)
                y = self.rng.randrange(SIZE_Y - 1)
                if self.coordinates.get((x, y)) == Tile.EMPTY and (x, y) not in START_CELLS:
                    break
            self.enemies.append(enemy)
            self.enemy_actors.append(actor)
            self._paint(x * TILE_SIZE, y * TILE_SIZE, Z_ENEMY, actor)
        self._start("move_enemies")

    # -- bomb -------------------------------------------------------------

    def put_bomb_on_scene(self) -> None:
        """Drop a bomb on the tile nearest the player and light its fuse."""
        self.valid_put_bomb = True
        actor = _actor(self.bomb.bomb_frames)
        pos_x = snap_to_grid(self.bomberman.x)
        pos_y = snap_to_grid(self.bomberman.y)
        self.coordinates[(cell_index(pos_x), cell_index(pos_y))] = int(Tile.SOLID)
        self._paint(pos_x, pos_y, Z_BOMB, actor)
        self.bomb_actor = actor
        self.valid_put_bomb = False
        self._fuse_ticks = 0
        self._start("burst")

    def burst(self) -> None:
        """Fuse tick: animate the bomb and set off the blast when it runs out."""
        if self.bomb_actor is None:
            return
        self._fuse_ticks += 1
        self.bomb.bomb_animation(self.bomb_actor)
        if self._fuse_ticks == FUSE_TICKS:
            x, y = self.bomb_actor.x, self.bomb_actor.y
            self._remove(self.bomb_actor)
            self.bomb_actor = None
            self._stop("burst")
            self._put_burst_on_scene(int(x), int(y))

    def _put_burst_on_scene(self, pos_x: int, pos_y: int) -> None:
        actor = _actor(self.bomb.burst_frames)
        self._paint(pos_x - TILE_SIZE, pos_y - TILE_SIZE, Z_BURST, actor)
        self.burst_actor = actor
        self._burst_ticks = 0
        self._destruction_counters["up"] = -1
        self.pos_x_burst_to_evaluate = int(actor.x) + TILE_SIZE
        self.pos_y_burst_to_evaluate = int(actor.y) + TILE_SIZE
        self.pos_x_burst_to_evaluate_enemy = self.pos_x_burst_to_evaluate
        self.pos_y_burst_to_evaluate_enemy = self.pos_y_burst_to_evaluate
        self.valid_evaluate_dead = True
        self._start("burst_flame")

    def _in_blast(self, burst_x: int, burst_y: int, actor: Actor) -> bool:
        check = self.character
        return (
            check.ask_bomberman_down(burst_y, actor.y, burst_x, actor.x)
            or check.ask_bomberman_left(burst_x, actor.x, burst_y, actor.y)
            or check.ask_bomberman_right(burst_x, actor.x, burst_y, actor.y)
            or check.ask_bomberman_up(burst_y, actor.y, burst_x, actor.x)
            or check.ask_bomberman_on_fire(burst_x, actor.x, actor.y, burst_y)
        )

    def _on_door(self) -> bool:
        return self.door is not None and (self.bomberman.x, self.bomberman.y) == self.door

    def burst_flame(self) -> None:
        """Blast tick: animate the flames, catch the player, then clear the blast."""
        if self.burst_actor is None:
            return
        self._burst_ticks += 1
        self.bomb.burst_animation(self.burst_actor)

        if self.valid_evaluate_dead:
            if self._in_blast(
                self.pos_x_burst_to_evaluate, self.pos_y_burst_to_evaluate, self.bomberman
            ):
                self._start("dead_bomberman")
            elif self._on_door():
                raise GameEnded(won=True)
            else:
                self.valid_evaluate_dead = False
            self.pos_x_burst_to_evaluate_enemy = -1
            self.pos_y_burst_to_evaluate_enemy = -1

        if self._burst_ticks == BURST_TICKS:
            self.pos_x_burst = int(self.burst_actor.x) + TILE_SIZE
            self.pos_y_burst = int(self.burst_actor.y) + TILE_SIZE
            centre = (cell_index(self.pos_x_burst), cell_index(self.pos_y_burst))
            self.coordinates[centre] = int(Tile.EMPTY)
            self._remove(self.burst_actor)
            self.burst_actor = None
            self._stop("burst_flame")
            self._destruction_counters = {name: -1 for name, _, _ in _DIRECTIONS}
            self.valid_evaluate_dead = False
            self._start("destruction_block")

    # -- bricks -----------------------------------------------------------

    def _brick_check(self, direction: str) -> Callable[[Any, int, int], bool]:
        return {
            "up": self.bomb.ask_up,
            "down": self.bomb.ask_down,
            "right": self.bomb.ask_right,
            "left": self.bomb.ask_left,
        }[direction]

    def destruction_block(self) -> None:
        """Crumble the bricks next to the blast, one frame per tick."""
        for name, dx, dy in _DIRECTIONS:
            counter = self._destruction_counters[name]
            if counter > DESTRUCTION_END:
                continue
            if not self._brick_check(name)(self.coordinates, self.pos_x_burst, self.pos_y_burst):
                continue
            counter += 1
            self._destruction_counters[name] = counter
            target_x = self.pos_x_burst + dx * TILE_SIZE
            target_y = self.pos_y_burst + dy * TILE_SIZE
            if counter == 0:
                actor = _actor(self.bomb.destruction_frames)
                self._paint(target_x, target_y, Z_DESTRUCTION, actor)
                self.destruction_actors[name] = actor
            if counter == DESTRUCTION_END:
                self._open_brick(target_x, target_y)
            else:
                self.bomb.destruction_animation(self.destruction_actors[name], counter)

        if DESTRUCTION_END in self._destruction_counters.values():
            self._stop("destruction_block")
        self.valid_put_bomb = True

    def _open_brick(self, pos_x: int, pos_y: int) -> None:
        if self.aleatory(self.probability_finish_game) and self.amount_door == 0:
            door = Actor(image=self._frame(*DOOR_CELL))
            self._paint(pos_x, pos_y, Z_DOOR, door)
            self.door = (pos_x, pos_y)
            self.amount_door += 1
        cell = (cell_index(pos_x), cell_index(pos_y))
        block = self.block_actors.pop(cell, None)
        if block is not None:
            self._remove(block)
        self.coordinates[cell] = int(Tile.EMPTY)

    # -- enemies ----------------------------------------------------------

    def _enemy_touches_player(self) -> bool:
        return any(
            enemy.kill_bomberman(self.bomberman.x, self.bomberman.y, actor.x, actor.y)
            for enemy, actor in zip(self.enemies, self.enemy_actors)
        )

    def move_enemies(self) -> None:
        """Enemy tick: kill on contact, die in flames, otherwise walk and bounce."""
        for index, (enemy, actor) in enumerate(zip(self.enemies, self.enemy_actors)):
            if self._enemy_touches_player():
                self._start("dead_bomberman")
            if self._in_blast(
                self.pos_x_burst_to_evaluate_enemy, self.pos_y_burst_to_evaluate_enemy, actor
            ):
                self.k = index
                enemy.can_move = False
                self._start("dead_enemy")
            if self._confirm_aleatory:
                enemy.move_in_y = self.aleatory(self.enemy_vertical_chance)
            if not enemy.can_move:
                continue
            if enemy.move_in_y:
                if enemy.turn_down:
                    enemy.down_movement(actor, self.coordinates)
                    if enemy.turn_up:
                        enemy.turn_down = False
                elif enemy.turn_up:
                    enemy.up_movement(actor, self.coordinates)
                    if enemy.turn_down:
                        enemy.turn_up = False
                else:
                    enemy.up_movement(actor, self.coordinates)
            else:
                if enemy.turn_right:
                    enemy.right_movement(actor, self.coordinates)
                    if enemy.turn_left:
                        enemy.turn_right = False
                elif enemy.turn_left:
                    enemy.left_movement(actor, self.coordinates)
                    if enemy.turn_right:
                        enemy.turn_left = False
                else:
                    enemy.left_movement(actor, self.coordinates)
        self._confirm_aleatory = False

    # -- deaths -----------------------------------------------------------

    def dead_bomberman(self) -> None:
        """Death tick for the player; the game ends after the last frame."""
        self._death_counter += 1
        self.valid_key = False
        if self._death_counter == PLAYER_DEATH_END:
            self._stop("dead_bomberman")
            raise GameEnded(won=False)
        self.character.dead_animation(self.bomberman, self._death_counter)

    def dead_enemy(self) -> None:
        """Death tick for the enemy last caught in a blast."""
        self._enemy_death_counter += 1
        actor = self.enemy_actors[self.k]
        if self._enemy_death_counter == ENEMY_DEATH_END:
            self._paint(actor.x, actor.y, Z_DESTRUCTION, Actor(image=self._tile_image(Tile.EMPTY)))
            self._stop("dead_enemy")
            actor.x, actor.y = 0, 0
            self._enemy_death_counter = ENEMY_DEATH_START
            self.enemies_cont -= 1
            if self.enemies_cont == 0:
                self.probability_finish_game = FINISH_CHANCE_CLEARED
        else:
            self.enemies[self.k].dead_animation(actor, self._enemy_death_counter)

    # -- input ------------------------------------------------------------

    def key_press(self, key: str) -> None:
        """Handle 'w', 'a', 's', 'd' to walk and 'space' to drop a bomb."""
        key = key.lower()
        moves = {
            "w": self.character.up_movement,
            "a": self.character.left_movement,
            "s": self.character.down_movement,
            "d": self.character.right_movement,
        }
        move = moves.get(key)
        if move is not None and self.valid_key:
            move(self.bomberman, self.coordinates)
            if self._on_door():
                raise GameEnded(won=True)
        if key == "space" and self.valid_put_bomb:
            self.put_bomb_on_scene()