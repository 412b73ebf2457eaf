"""Utilities for creating deterministic instance identifiers."""
from __future__ import annotations

from isles.core.rng import RNG


def make_instance_id(prefix: str, rng: RNG) -> str:
    """Generate a deterministic identifier using the provided RNG."""
    return f"{prefix}_{rng.randint(100000, 999999)}"
