import random

import pytest

from bomberman.character import SPEED, UP_FRAMES
from bomberman.enemies import AMOUNT_ENEMIES
from bomberman.game import (
    ENEMY_DEATH_END,
    ENEMY_DEATH_START,
    FINISH_CHANCE_CLEARED,
    PLAYER_DEATH_END,
    PLAYER_DEATH_START,
    PLAYER_START_FRAME,
    SIZE_X,
    SIZE_Y,
    START_CELLS,
    TIMER_INTERVALS,
    Game,
    GameEnded,
    snap_to_grid,
)
from bomberman.sprites import TILE_SIZE, Tile


def make_game(seed=1, difficulty=0.0):
    return Game(rng=random.Random(seed), difficulty=difficulty)


def scene_actors(game):
    return [actor for _, actor in game.scene]


def detonate_at(game, column, row, player_column=10):
    game.bomberman.x, game.bomberman.y = column * TILE_SIZE, row * TILE_SIZE
    game.key_press("space")
    game.bomberman.x = player_column * TILE_SIZE
    for _ in range(7):
        game.burst()
    for _ in range(8):
        game.burst_flame()


def test_map_borders_and_pillars_are_solid():
    game = make_game(seed=3, difficulty=0.2)
    for (x, y), tile in game.coordinates.items():
        if (x, y) in START_CELLS:
            assert tile == Tile.EMPTY
        elif x in (0, SIZE_X - 1) or y in (0, SIZE_Y - 1) or (x % 2 == 0 and y % 2 == 0):
            assert tile == Tile.SOLID
        else:
            assert tile in (Tile.EMPTY, Tile.BRICK)


def test_map_covers_every_cell():
    game = make_game()
    assert len(game.coordinates) == SIZE_X * SIZE_Y
    assert max(game.coordinates) == (SIZE_X - 1, SIZE_Y - 1)
    assert len(game.blocks) == SIZE_X
    assert all(len(column) == SIZE_Y for column in game.blocks)


def test_zero_difficulty_places_no_bricks():
    game = make_game(difficulty=0.0)
    assert Tile.BRICK not in game.coordinates.values()


def test_same_seed_gives_same_map():
    first = make_game(seed=7, difficulty=0.3)
    second = make_game(seed=7, difficulty=0.3)
    assert first.coordinates == second.coordinates
    assert [(a.x, a.y) for a in first.enemy_actors] == [(a.x, a.y) for a in second.enemy_actors]


def test_aleatory_limits():
    game = make_game()
    assert all(game.aleatory(1.0) for _ in range(50))
    assert not any(game.aleatory(0.0) for _ in range(50))


def test_bomberman_starts_in_corner():
    game = make_game()
    assert (game.bomberman.x, game.bomberman.y) == (TILE_SIZE, TILE_SIZE)
    assert game.bomberman.frame == PLAYER_START_FRAME
    assert game.enemies_cont == AMOUNT_ENEMIES


def test_enemies_start_on_free_cells():
    game = make_game(seed=5, difficulty=0.2)
    assert len(game.enemies) == AMOUNT_ENEMIES
    for actor in game.enemy_actors:
        assert actor.x % TILE_SIZE == 0 and actor.y % TILE_SIZE == 0
        cell = (int(actor.x) // TILE_SIZE, int(actor.y) // TILE_SIZE)
        assert cell not in START_CELLS
        assert game.coordinates[cell] == Tile.EMPTY
    assert game.timers["move_enemies"] == TIMER_INTERVALS["move_enemies"]


@pytest.mark.parametrize("position,expected", [(0, 0), (48, 48), (72, 48), (73, 96)])
def test_snap_to_grid_values(position, expected):
    assert snap_to_grid(position) == expected


def test_snap_to_grid_invariants():
    for position in range(0, 400):
        snapped = snap_to_grid(position)
        assert snapped % TILE_SIZE == 0
        assert abs(snapped - position) <= TILE_SIZE // 2


def test_space_puts_bomb_once():
    game = make_game()
    game.bomberman.x = 3 * TILE_SIZE + 5
    game.key_press("space")
    assert game.bomb_actor is not None
    assert (game.bomb_actor.x, game.bomb_actor.y) == (3 * TILE_SIZE, TILE_SIZE)
    assert game.coordinates[(3, 1)] == Tile.SOLID
    assert game.valid_put_bomb is False
    assert game.timers["burst"] == TIMER_INTERVALS["burst"]
    count = len(game.scene)
    game.key_press("space")
    assert len(game.scene) == count


def test_fuse_runs_out_into_blast():
    game = make_game()
    game.bomberman.x = 3 * TILE_SIZE
    game.key_press("space")
    bomb = game.bomb_actor
    for _ in range(7):
        game.burst()
    assert bomb not in scene_actors(game)
    assert "burst" not in game.timers
    assert "burst_flame" in game.timers
    assert (game.burst_actor.x, game.burst_actor.y) == (2 * TILE_SIZE, 0)
    assert game.pos_x_burst_to_evaluate == 3 * TILE_SIZE


def test_blast_on_player_starts_death():
    game = make_game()
    game.key_press("space")
    for _ in range(7):
        game.burst()
    game.burst_flame()
    assert "dead_bomberman" in game.timers


def test_blast_far_from_player_is_harmless_and_clears():
    game = make_game()
    detonate_at(game, 3, 1)
    assert "dead_bomberman" not in game.timers
    assert game.valid_evaluate_dead is False
    assert game.burst_actor is None
    assert "burst_flame" not in game.timers
    assert game.coordinates[(3, 1)] == Tile.EMPTY
    assert "destruction_block" in game.timers
    assert (game.pos_x_burst, game.pos_y_burst) == (3 * TILE_SIZE, TILE_SIZE)


def test_brick_next_to_blast_is_destroyed_and_opens_door():
    game = make_game()
    game.coordinates[(3, 2)] = int(Tile.BRICK)
    brick = game.block_actors[(3, 2)]
    game.probability_finish_game = 1.0
    detonate_at(game, 3, 1)
    for _ in range(20):
        if "destruction_block" not in game.timers:
            break
        game.destruction_block()
    assert "destruction_block" not in game.timers
    assert game.coordinates[(3, 2)] == Tile.EMPTY
    assert brick not in scene_actors(game)
    assert (3, 2) not in game.block_actors
    assert game.door == (3 * TILE_SIZE, 2 * TILE_SIZE)
    assert game.amount_door == 1
    assert game.valid_put_bomb is True


def test_destruction_without_bricks_keeps_ticking():
    game = make_game()
    detonate_at(game, 3, 1)
    game.destruction_block()
    assert game.valid_put_bomb is True
    assert "destruction_block" in game.timers


def test_walking_right_moves_by_speed():
    game = make_game()
    game.key_press("d")
    assert game.bomberman.x == TILE_SIZE + SPEED
    assert game.bomberman.y == TILE_SIZE


def test_walking_into_wall_only_animates():
    game = make_game()
    game.key_press("w")
    assert game.bomberman.y == TILE_SIZE
    assert UP_FRAMES[0] <= game.bomberman.frame <= UP_FRAMES[1]


def test_reaching_door_wins():
    game = make_game()
    game.door = (TILE_SIZE + SPEED, TILE_SIZE)
    with pytest.raises(GameEnded) as info:
        game.key_press("d")
    assert info.value.won is True


def test_death_animation_then_game_over():
    game = make_game()
    frames = []
    for _ in range(PLAYER_DEATH_END - PLAYER_DEATH_START - 1):
        game.dead_bomberman()
        frames.append(game.bomberman.frame)
    assert frames == list(range(PLAYER_DEATH_START + 1, PLAYER_DEATH_END))
    assert game.valid_key is False
    x = game.bomberman.x
    game.key_press("d")
    assert game.bomberman.x == x
    with pytest.raises(GameEnded) as info:
        game.dead_bomberman()
    assert info.value.won is False


def test_enemy_death_sequence():
    game = make_game()
    game.k = 0
    game.enemies_cont = 1
    actor = game.enemy_actors[0]
    frames = []
    for _ in range(ENEMY_DEATH_END - ENEMY_DEATH_START - 1):
        game.dead_enemy()
        frames.append(actor.frame)
    assert frames == list(range(ENEMY_DEATH_START + 1, ENEMY_DEATH_END))
    game._start("dead_enemy")
    game.dead_enemy()
    assert (actor.x, actor.y) == (0, 0)
    assert game.enemies_cont == 0
    assert game.probability_finish_game == FINISH_CHANCE_CLEARED
    assert "dead_enemy" not in game.timers


def test_enemy_touching_player_kills():
    game = make_game()
    game.enemy_actors[0].x, game.enemy_actors[0].y = game.bomberman.x, game.bomberman.y
    game.move_enemies()
    assert "dead_bomberman" in game.timers


def test_enemy_in_blast_dies():
    game = make_game()
    actor = game.enemy_actors[2]
    game.pos_x_burst_to_evaluate_enemy = int(actor.x)
    game.pos_y_burst_to_evaluate_enemy = int(actor.y)
    game.move_enemies()
    assert game.enemies[2].can_move is False
    assert game.k == 2
    assert "dead_enemy" in game.timers


def test_enemies_step_along_one_axis():
    game = make_game(seed=11)
    before = [(a.x, a.y) for a in game.enemy_actors]
    game.move_enemies()
    for (x0, y0), actor in zip(before, game.enemy_actors):
        dx, dy = actor.x - x0, actor.y - y0
        assert dx * dy == 0
        assert abs(dx) + abs(dy) in (0, SPEED)


def test_enemy_axis_is_chosen_only_once():
    game = make_game(seed=13)
    game.move_enemies()
    axes = [enemy.move_in_y for enemy in game.enemies]
    for _ in range(5):
        game.move_enemies()
    assert [enemy.move_in_y for enemy in game.enemies] == axes