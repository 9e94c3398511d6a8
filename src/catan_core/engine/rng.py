"""Seedable random source shared by the board generator, dice and theft."""

from __future__ import annotations

from typing import MutableSequence, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")


class GameRNG:
    """Wrapper around a numpy ``Generator``.

    Every random draw the engine makes goes through one of these methods, so
    a seeded instance reproduces a game exactly and tests can substitute a
    scripted subclass.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._generator = np.random.default_rng(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer in ``[a, b]``, inclusive."""
        return int(self._generator.integers(a, b + 1))

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(0, len(seq) - 1)]

    def shuffle(self, seq: MutableSequence[T]) -> None:
        """Fisher-Yates shuffle in place."""
        # Draws go through randint so a scripted subclass controls shuffles too.
        for i in range(len(seq) - 1, 0, -1):
            j = self.randint(0, i)
            seq[i], seq[j] = seq[j], seq[i]

    def roll_dice(self) -> Tuple[int, int]:
        return self.randint(1, 6), self.randint(1, 6)

