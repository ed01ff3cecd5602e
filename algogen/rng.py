"""
Deterministic RNG utilities for the evolution simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(world_seed, subsystem_name, generation, ...). All randomness uses
numpy.random.Generator(PCG64) for reproducible runs.
"""

import hashlib
import numpy as np
from typing import Any


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Args:
        *components: Seed components (world_seed, "genetic", generation, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        brain_seed = make_seed(world_seed, "brain", generation)
    """
    hash_input = ":".join(str(c) for c in components)

    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    seed = int.from_bytes(hash_bytes[:8], byteorder='big')

    return seed


def make_rng(*components: Any) -> np.random.Generator:
    """Build a PCG64 generator seeded from make_seed(*components)."""
    return np.random.Generator(np.random.PCG64(make_seed(*components)))


def random_world_seed() -> int:
    """Draw a fresh 63-bit world seed from OS entropy."""
    return int(np.random.default_rng().integers(0, 2**63 - 1))
