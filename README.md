# bomberman

A small grid-based arcade game in the spirit of the classic Bomberman.
You walk a maze of solid pillars and breakable bricks, drop bombs to clear
a path, avoid or blow up the wandering enemies, and look for the exit door
that may be hidden behind a destroyed brick.

## Installing

```
pip install .
```

This pulls in `pygame`, which draws the window and reads the keyboard.

## Images

The game draws everything from image files that are not part of this
package. Put them in one directory:

- `bomberma_sprites.png` – the sprite sheet of 16×16 cells (player, bomb,
  bricks, enemies, door)
- `fondo.png` – the background tile
- `explosion1.png` … `explosion4.png` – the four blast frames

Every tile is drawn at three times its size, so a board cell is 48 pixels.

## Playing

```
bomberman [--images DIR] [--seed N] [--difficulty P]
```

- `--images DIR` – directory holding the images above (default `Images`).
- `--seed N` – seed for the random layout and enemy behaviour.
- `--difficulty P` – chance, between 0 and 1, that a free cell holds a
  brick (default 0.2).

If the images cannot be loaded the command prints an error and exits with
status 1.

Controls:

| Key     | Action              |
|---------|---------------------|
| `W`     | move up             |
| `A`     | move left           |
| `S`     | move down           |
| `D`     | move right          |
| `Space` | drop a bomb         |

How a round works:

- The board is framed by solid blocks, with a solid pillar on every cell
  whose coordinates are both even. The other cells are either open floor or,
  at random, breakable bricks. The three cells in the top-left corner where
  the player starts are always clear.
- Ten enemies start on random free cells. Each walks along one axis and
  turns back when it hits a wall.
- A bomb is placed on the cell nearest the player, ticks for a moment and
  then explodes. The blast crumbles any brick directly above, below, left or
  right of it, and kills the player or an enemy caught in the flames.
- An enemy in line with the player and close enough kills the player.
- Each destroyed brick may reveal the exit door. Only one door appears per
  round, and once every enemy is gone the chance that the next brick hides
  it goes up sharply. Reaching the door ends the round.

The window closes when the round ends, won or lost, or when you close it.

## Using the game logic

The rules are kept apart from the window, so they can be driven directly.

- `bomberman.game.Game` holds the board, the player, the enemies and the
  active timers. Its tick methods (`burst`, `burst_flame`,
  `destruction_block`, `move_enemies`, `dead_bomberman`, `dead_enemy`) are
  what a driver calls when a timer in `Game.timers` runs out, and
  `key_press` takes `"w"`, `"a"`, `"s"`, `"d"` or `"space"`. A `Game`
  built without a sprite sheet works without any images, which suits tests.
- When a round ends, `Game` raises `bomberman.game.GameEnded`, whose `won`
  attribute tells whether the door was reached.
- `bomberman.game.snap_to_grid` rounds a pixel position to the nearest cell
  edge, halves going down; that is where bombs are placed.
- `bomberman.app.GameWindow` shows a `Game` in a pygame window; its `run`
  method returns `True` for a win, `False` for a death, and `None` if the
  window was closed.

## What it does not do

There is a single level and nothing more: no score, no lives, no further
rounds after the door, no sound, and no images shipped with the package.

## Running the tests

```
pip install .[test]
pytest
```