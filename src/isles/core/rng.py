"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import Sequence, TypeVar

T_co = TypeVar("T_co")


class RNG:
    """Wrapper around random.Random that provides deterministic helpers."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._random = Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def percent(self) -> float:
        """Return a uniform draw in the range [0.0, 100.0)."""
        return self._random.random() * 100

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return self._random.choice(seq)

    def weighted_choice(self, seq: Sequence[T_co], weights: Sequence[int]) -> T_co:
        """Return an element of ``seq`` picked with the given integer weights."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        if len(seq) != len(weights):
            raise ValueError("Weights must match the sequence length.")
        total = sum(weights)
        if total <= 0:
            raise ValueError("Weights must sum to a positive value.")
        roll = self._random.randint(1, total)
        cumulative = 0
        for item, weight in zip(seq, weights):
            cumulative += weight
            if roll <= cumulative:
                return item
        return seq[-1]
