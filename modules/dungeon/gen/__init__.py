"""Dungeon generation parameter models and randomness helpers."""

from .params import AlgorithmType, DungeonTheme, GenerationParameters, Size2D
from .random import chance, get_rng, rand_choice, rand_int

__all__ = [
    "AlgorithmType",
    "DungeonTheme",
    "GenerationParameters",
    "Size2D",
    "chance",
    "get_rng",
    "rand_choice",
    "rand_int",
]
