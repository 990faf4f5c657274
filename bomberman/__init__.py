"""A grid-based Bomberman arcade game: rules, sprites and a pygame window."""

__version__ = "0.1.0"
__all__ = ["sprites", "character", "bomb", "enemies", "game", "app"]