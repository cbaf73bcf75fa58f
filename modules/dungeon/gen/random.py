"""Deterministic random utilities dedicated to dungeon generation.

Every generation call owns one :class:`random.Random` (Mersenne Twister,
MT19937) seeded from the integer seed.  The stream is consumed in a fixed
order by the algorithms, so identical parameters reproduce identical layouts.
"""
from __future__ import annotations

import random
from typing import Sequence, TypeVar

_T = TypeVar("_T")


def get_rng(seed: int) -> random.Random:
    """Return a :class:`random.Random` instance seeded with ``seed``."""

    return random.Random(seed)


def rand_choice(rng: random.Random, sequence: Sequence[_T]) -> _T:
    """Return a random element from ``sequence`` using ``rng``."""

    if not sequence:
        raise IndexError("cannot choose from an empty sequence")
    return sequence[rng.randrange(len(sequence))]


def rand_int(rng: random.Random, start: int, stop: int) -> int:
    """Return a random integer ``N`` such that ``start <= N <= stop``."""

    return rng.randint(start, stop)


def chance(rng: random.Random, probability: float) -> bool:
    """Return ``True`` with the given probability, always drawing once."""

    return rng.random() < probability


__all__ = ["get_rng", "rand_choice", "rand_int", "chance"]
